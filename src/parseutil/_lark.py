"""Adapter running lark grammars through `parseutil.parse`.

Lark builds a parse tree, then a transformer runs the semantic actions over
it. The transformer is created for every parse with the helpers from the
parse options, so actions build nodes through whatever builder the caller
picked.
"""

__all__ = ["LarkParser", "Actions", "GenericActions", "span_from_lark"]

import logging

import lark

import parseutil


logger = logging.getLogger(__name__)


def span_from_lark(item):
    """Create the source span from a lark Tree, Token or Meta value.

    Position details that lark did not record come back as 0.
    """
    if isinstance(item, lark.Tree):
        item = item.meta
    start = parseutil.Position(
        getattr(item, "line", None) or 0,
        getattr(item, "column", None) or 0,
        getattr(item, "start_pos", None) or 0,
    )
    end = parseutil.Position(
        getattr(item, "end_line", None) or start.line,
        getattr(item, "end_column", None) or start.column,
        getattr(item, "end_pos", None) or start.offset,
    )
    return parseutil.Span(start, end)


class Actions(lark.Transformer):
    """Base for transformers holding grammar semantic actions.

    Actions are methods named after grammar rules. Decorate them with
    `lark.v_args(meta=True)` to receive the match position, then build
    nodes through `node` and flatten repetitions through `unroll`. Those
    two names are taken, so grammars using this base cannot have rules
    called node or unroll.

    Attributes:
        util: (ActionHelpers) Helpers from the parse options
    """

    def __init__(self, util):
        super().__init__()
        self.util = util

    def node(self, where, *args):
        """Build a node positioned at a lark tree, token or meta."""
        return self.util.make_ast(lambda: span_from_lark(where))(*args)

    def unroll(self, where, first, items, take=None):
        """Flatten a first item and its repeated tail into one list."""
        return self.util.make_unroll(lambda: span_from_lark(where))(first, items, take)


class GenericActions(Actions):
    """Build one node per grammar rule without any rule specific actions.

    The node type is the rule name. Tokens become attributes, a single
    token is stored as "value", several are keyed by their lower cased
    token type and repeated types collect into a list. Subtrees become
    the children.
    """

    def __default__(self, data, children, meta):
        attributes = {}
        nodes = []
        tokens = [kid for kid in children if isinstance(kid, lark.Token)]
        for kid in children:
            if isinstance(kid, lark.Token):
                continue
            if kid is not None:
                nodes.append(kid)

        if len(tokens) == 1:
            attributes["value"] = str(tokens[0])
        else:
            for token in tokens:
                key = token.type.lower()
                if key not in attributes:
                    attributes[key] = str(token)
                elif isinstance(attributes[key], list):
                    attributes[key].append(str(token))
                else:
                    attributes[key] = [attributes[key], str(token)]

        return self.node(meta, str(data), attributes, nodes)


class LarkParser:
    """Parser object wrapping a lark grammar.

    Args:
        grammar: (str | lark.Lark) Grammar text or an existing lark parser
        actions: (type[Actions] | None) Transformer class run over the
            parse tree, None returns the raw lark tree
        **lark_options: Passed to `lark.Lark` when building from text

    Attributes:
        lark: (lark.Lark) The underlying parser
        syntax_error: Exception type lark raises for rejected input
    """

    syntax_error = lark.exceptions.UnexpectedInput

    def __init__(self, grammar, actions=GenericActions, **lark_options):
        if isinstance(grammar, lark.Lark):
            self.lark = grammar
        else:
            lark_options.setdefault("propagate_positions", True)
            self.lark = lark.Lark(grammar, **lark_options)
        self.actions = actions

    @classmethod
    def open(cls, path, actions=GenericActions, **lark_options):
        """Load the grammar from a .lark file."""
        lark_options.setdefault("propagate_positions", True)
        return cls(lark.Lark.open(path, **lark_options), actions)

    def parse(self, text, options):
        start = options.get("start_rule")
        tree = self.lark.parse(text, start=start)
        if self.actions is None:
            return tree

        util = options.get("util") or parseutil.ActionHelpers()
        logger.debug("running %s over %r", self.actions.__name__, tree.data)
        try:
            return self.actions(util).transform(tree)
        except lark.exceptions.VisitError as e:
            # Report failures from the action itself, not the lark wrapper
            raise e.orig_exc from e
