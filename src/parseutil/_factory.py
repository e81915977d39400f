"""Helpers that grammar semantic actions call back into.

Actions receive an `ActionHelpers` through the parser options. From it they
create node factories bound to the position of the current match, and
unrollers that flatten "first item, then repeated tail" matches.

How nodes are actually built is a pluggable `NodeBuilder`. The default
builds `parseutil.AstNode` values, but any representation can be produced
without touching the grammar actions.
"""

__all__ = [
    "NodeBuilder",
    "DefaultBuilder",
    "CallbackBuilder",
    "ActionHelpers",
    "as_builder",
    "make_ast",
    "make_unroll",
]

from collections.abc import Mapping

import parseutil


class NodeBuilder:
    """Strategy that turns action arguments into a tree node.

    Subclasses implement `build_node`.
    """

    def build_node(self, line, column, offset, args):
        """Build a node for the current match.

        Args:
            line: (int) 1-based line of the match
            column: (int) 1-based column of the match
            offset: (int) 0-based offset of the match
            args: (tuple) Arguments the semantic action passed in

        Returns:
            The constructed node, of any type
        """
        raise NotImplementedError(f"{self.__class__.__name__}.build_node() not implemented")


class DefaultBuilder(NodeBuilder):
    """Build `AstNode` values from positional arguments.

    The first argument is the node type. A mapping as second argument
    becomes the attributes. Everything else is added as children.
    """

    def build_node(self, line, column, offset, args):
        if not args:
            raise parseutil.InvalidArgument("Node type is required")
        node_type, *rest = args
        attributes = None
        if rest and isinstance(rest[0], Mapping):
            attributes = rest.pop(0)
        node = parseutil.AstNode(node_type, attributes)
        if rest:
            node.add_children(*rest)
        return node.set_position(line, column, offset)


class CallbackBuilder(NodeBuilder):
    """Adapt a plain `func(line, column, offset, args)` callable."""

    def __init__(self, func):
        self.func = func

    def build_node(self, line, column, offset, args):
        return self.func(line, column, offset, args)


def as_builder(value):
    """Normalize a builder option into a `NodeBuilder`.

    Accepts None for the default, a builder, any object with a
    `build_node` method, or a plain callable.
    """
    if value is None:
        return DefaultBuilder()
    if isinstance(value, NodeBuilder) or callable(getattr(value, "build_node", None)):
        return value
    if callable(value):
        return CallbackBuilder(value)
    raise parseutil.InvalidArgument(f"Invalid node builder: {value!r}")


def make_ast(location, builder=None):
    """Create a node factory bound to the current match.

    Args:
        location: Callable returning the `Span` of the current match
        builder: Node builder or callable, see `as_builder`

    Returns:
        Callable taking the action arguments and returning a node
    """
    builder = as_builder(builder)

    def factory(*args):
        start = location().start
        return builder.build_node(start.line, start.column, start.offset, args)

    return factory


def make_unroll(location, error_class=None):
    """Create a function flattening "first, then (separator item)*" matches.

    The returned `unroll(first, items, take=None)` keeps `first` (unless it
    is None) ahead of the repeated matches in `items`. With `take` as an
    index, or list of indices, each repeated match contributes only those
    fields and a new list is returned. Without `take`, `first` is inserted
    at the front of `items` itself, which is returned.

    Args:
        location: Callable returning the `Span` of the current match
        error_class: Syntax error type raised for a bad `items` value,
            called with (message, found=, expected=, line=, column=, offset=)
    """
    if error_class is None:
        error_class = parseutil.GrammarError

    def unroll(first, items, take=None):
        if not isinstance(items, list):
            start = location().start
            raise error_class(
                "invalid list argument for unrolling",
                found=type(items).__name__,
                expected="list",
                line=start.line,
                column=start.column,
                offset=start.offset,
            )
        if take is None:
            if first is not None:
                items.insert(0, first)
            return items

        if isinstance(take, int):
            take = [take]
        result = []
        if first is not None:
            result.append(first)
        for item in items:
            for index in take:
                result.append(item[index])
        return result

    return unroll


class ActionHelpers:
    """Helpers handed to semantic actions as the parser "util" option.

    Attributes:
        builder: (NodeBuilder) Strategy used by `make_ast`
        syntax_error: Error type the unroller raises
    """

    syntax_error = parseutil.GrammarError

    def __init__(self, builder=None):
        self.builder = as_builder(builder)

    def make_ast(self, location):
        return make_ast(location, self.builder)

    def make_unroll(self, location):
        return make_unroll(location, self.syntax_error)
