"""Generic ast node built by grammar semantic actions.

An `AstNode` is a type tag, a dict of attributes, an ordered list of child
nodes and the source position it was matched at. Nodes are mutable while the
parse runs so that actions further up the stack can attach operands, rename
the type, or drop children. Once parsing finishes the tree is treated as
read-only.

A parent exclusively owns its children. Adding the same node to two parents
or making a node its own ancestor is a caller error and is not detected.
"""

__all__ = ["AstNode", "Position", "Span", "WALK_PHASES"]

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

import parseutil


WALK_PHASES = ("before", "after", "both")


@dataclass
class Position:
    """Source position of a node.

    Attributes:
        line: 1-based line number, 0 when unknown
        column: 1-based column number, 0 when unknown
        offset: 0-based character offset, 0 when unknown
    """

    line: int = 0
    column: int = 0
    offset: int = 0


@dataclass
class Span:
    """Range of source text matched by a grammar rule."""

    start: Position = field(default_factory=Position)
    end: Position = field(default_factory=Position)


class AstNode:
    """Node of a generic abstract syntax tree.

    Args:
        type: (str) Tag naming the grammar construct, like "BinaryExpr"
        attributes: (Mapping | None) Initial attributes
        children: (list | None) Initial children, see `add_children`

    Attributes:
        type: (str) Tag naming the grammar construct
        attributes: (dict) Semantic payload of the node
        children: (list[AstNode]) Ordered child nodes
        position: (Position) Where the node was matched
    """

    def __init__(self, type, attributes=None, children=None):
        if not isinstance(type, str):
            raise parseutil.InvalidArgument(f"Invalid node type: {type!r}")
        self.type = type
        self.attributes = {}
        self.children = []
        self.position = Position()
        if attributes is not None:
            self.set_attributes(attributes)
        if children is not None:
            self.add_children(children)

    def __repr__(self):
        pos = self.position
        return f"AstNode({self.type!r} *{len(self.children)} [{pos.line}/{pos.column}])"

    def get_type(self) -> str:
        return self.type

    def set_type(self, type) -> "AstNode":
        if not isinstance(type, str):
            raise parseutil.InvalidArgument(f"Invalid node type: {type!r}")
        self.type = type
        return self

    def get_position(self) -> Position:
        return self.position

    def set_position(self, line=0, column=0, offset=0) -> "AstNode":
        """Replace the source position, missing values become 0."""
        self.position = Position(line or 0, column or 0, offset or 0)
        return self

    def set_attributes(self, attributes) -> "AstNode":
        """Merge attributes into the node, other keys are left alone."""
        if not isinstance(attributes, Mapping):
            raise parseutil.InvalidArgument(f"Invalid attributes: {attributes!r}")
        for key, value in attributes.items():
            self.set_attribute(key, value)
        return self

    def set_attribute(self, key, value) -> "AstNode":
        if not isinstance(key, str):
            raise parseutil.InvalidArgument(f"Invalid attribute name: {key!r}")
        self.attributes[key] = value
        return self

    def get_attribute(self, key):
        """Get a single attribute value, or None when it was never set."""
        if not isinstance(key, str):
            raise parseutil.InvalidArgument(f"Invalid attribute name: {key!r}")
        return self.attributes.get(key)

    def get_attributes(self) -> dict:
        """The live attribute dict of this node."""
        return self.attributes

    def get_children(self) -> list["AstNode"]:
        """The live list of child nodes."""
        return self.children

    def add_children(self, *args) -> "AstNode":
        """Append child nodes in order.

        Each argument is a node, a list or tuple of nodes, or None. None
        arguments are skipped so optional grammar parts can be passed
        straight through. Every node is validated before any is appended.

        Raises:
            parseutil.InvalidArgument: If a value is not a well formed node
        """
        if not args:
            raise parseutil.InvalidArgument("add_children: missing argument(s)")
        self.children.extend(_flatten_nodes(args))
        return self

    def remove_children(self, *nodes) -> "AstNode":
        """Remove child nodes by identity.

        Only the first occurrence of each node is removed. Nodes removed
        before a failing one stay removed.

        Raises:
            parseutil.NotFound: If a node is not a child of this node
        """
        if not nodes:
            raise parseutil.InvalidArgument("remove_children: missing argument(s)")
        for node in nodes:
            for index, child in enumerate(self.children):
                if child is node:
                    del self.children[index]
                    break
            else:
                raise parseutil.NotFound(f"Child not found: {node!r}")
        return self

    def walk(self, visitor, when="before") -> "AstNode":
        """Visit every node of the tree depth first.

        Args:
            visitor: Callable receiving (node, depth, phase)
            when: (str) "before" visits a node ahead of its children,
                "after" once all children are done, "both" does each
        """
        if when not in WALK_PHASES:
            raise parseutil.InvalidArgument(f"Invalid walk phase: {when!r}")
        before = when in ("before", "both")
        after = when in ("after", "both")

        def _walk(node, depth):
            if before:
                visitor(node, depth, "before")
            for child in node.children:
                _walk(child, depth + 1)
            if after:
                visitor(node, depth, "after")

        _walk(self, 0)
        return self

    def dump(self) -> str:
        """Render the tree as indented text, one line per node."""
        lines = []

        def _dump(node, depth, phase):
            line = "    " * depth + node.type + " "
            if node.attributes:
                fields = ", ".join(
                    f"{key}: {_format_value(value)}"
                    for key, value in node.attributes.items()
                )
                line += f"({fields}) "
            line += f"[{node.position.line}/{node.position.column}]\n"
            lines.append(line)

        self.walk(_dump, "before")
        return "".join(lines)


def _flatten_nodes(args):
    """Validate and flatten node arguments for add_children."""
    nodes = []
    for arg in args:
        if arg is None:
            continue
        if isinstance(arg, (list, tuple)):
            nodes.extend(_checked_node(item) for item in arg)
        else:
            nodes.append(_checked_node(arg))
    return nodes


def _checked_node(value):
    if not (
        isinstance(value, AstNode)
        and isinstance(value.type, str)
        and isinstance(value.attributes, dict)
        and isinstance(value.children, list)
        and isinstance(value.position, Position)
    ):
        kind = type(value).__name__
        raise parseutil.InvalidArgument(
            f"Invalid ast node: {kind} {getattr(value, 'type', value)!r}"
        )
    return value


def _format_value(value):
    """Format an attribute value for dump output."""
    match value:
        case str():
            text = value.replace("\n", "\\n").replace('"', '\\"')
            return f'"{text}"'
        case re.Pattern():
            return "/" + value.pattern.replace("/", "\\/") + "/"
        case _:
            try:
                return json.dumps(
                    value, separators=(",", ":"), ensure_ascii=False, default=str
                )
            except (TypeError, ValueError):
                # Non-string keys or circular references
                return str(value)
