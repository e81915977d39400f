"""Normalizing parser success and failure."""

import pytest

import parseutil
from parsetest import RaisingParser, ValueParser


TEXT = "abcdefghij"


def test_parse_success():
    parser = ValueParser({"answer": 42})
    result = parseutil.parse(parser, TEXT)
    assert result.ast == {"answer": 42}
    assert result.error is None
    assert result.ok


def test_parse_passes_options():
    parser = ValueParser(None)
    parseutil.parse(parser, TEXT, {"start_rule": "expr", "extra": 1})
    text, options = parser.calls[0]
    assert text == TEXT
    assert options["start_rule"] == "expr"
    assert options["extra"] == 1
    assert isinstance(options["util"], parseutil.ActionHelpers)


def test_parse_does_not_modify_options():
    options = {"start_rule": "expr"}
    parseutil.parse(ValueParser(1), TEXT, options)
    assert options == {"start_rule": "expr"}


def test_parse_make_ast_option():
    class BuildingParser:
        def parse(self, text, options):
            factory = options["util"].make_ast(lambda: parseutil.Span(parseutil.Position(1, 2, 1)))
            return factory("Root", {"text": text})

    result = parseutil.parse(BuildingParser(), TEXT)
    assert result.ast.dump() == 'Root (text: "abcdefghij") [1/2]\n'

    custom = parseutil.parse(
        BuildingParser(), TEXT, {"make_ast": lambda line, col, off, args: args}
    )
    assert custom.ast == ("Root", {"text": TEXT})


def test_parse_grammar_error():
    error = parseutil.GrammarError(
        "Expected digit", found="f", expected="digit", line=1, column=6, offset=5
    )
    result = parseutil.parse(RaisingParser(error), TEXT)
    assert result.ast is None
    assert not result.ok
    failure = result.error
    assert failure.message == "Expected digit"
    assert (failure.line, failure.column, failure.offset) == (1, 6, 5)
    assert failure.found == "f"
    assert failure.expected == "digit"
    assert failure.location.token == "f"
    assert failure.location.prolog == "abcde"
    assert failure.location.epilog == "ghij"


def test_parse_grammar_error_defaults():
    result = parseutil.parse(RaisingParser(parseutil.GrammarError("bad")), TEXT)
    failure = result.error
    assert (failure.line, failure.column, failure.offset) == (0, 0, 0)
    assert failure.found == ""
    assert failure.expected == ""
    assert failure.location == parseutil.Excerpt("", "a", "bcdefghij")


class LarkStyleError(Exception):
    """Syntax error shaped like the ones lark raises."""

    def __init__(self, line, column, pos_in_stream, allowed):
        super().__init__("No terminal matches\n\nat line 1")
        self.line = line
        self.column = column
        self.pos_in_stream = pos_in_stream
        self.allowed = allowed
        self.char = "d"


def test_parse_advertised_syntax_error():
    error = LarkStyleError(1, 4, 3, {"NUMBER", "LPAR"})
    result = parseutil.parse(RaisingParser(error, syntax_error=LarkStyleError), TEXT)
    failure = result.error
    assert failure.message == "No terminal matches"
    assert (failure.line, failure.column, failure.offset) == (1, 4, 3)
    assert failure.found == "d"
    assert failure.expected == "LPAR, NUMBER"
    assert failure.location.token == "d"


def test_parse_unknown_positions_default_to_zero():
    error = LarkStyleError("?", -1, -1, set())
    result = parseutil.parse(RaisingParser(error, syntax_error=(LarkStyleError,)), TEXT)
    failure = result.error
    assert (failure.line, failure.column, failure.offset) == (0, 0, 0)
    assert failure.expected == ""


def test_parse_location_structure():
    class LocatedError(Exception):
        pass

    error = LocatedError("Expected end of input")
    error.location = parseutil.Span(parseutil.Position(2, 3, 7))
    error.found = "h"
    result = parseutil.parse(RaisingParser(error, syntax_error=LocatedError), TEXT)
    failure = result.error
    assert (failure.line, failure.column, failure.offset) == (2, 3, 7)
    assert failure.message == "Expected end of input"
    assert failure.location.prolog == "abcdefg"
    assert failure.location.token == "h"


def test_parse_unexpected_failure():
    result = parseutil.parse(RaisingParser(RuntimeError("action crashed")), TEXT)
    assert result.ast is None
    failure = result.error
    assert failure.message == "action crashed"
    assert (failure.line, failure.column) == (0, 0)
    assert failure.found == ""
    assert failure.expected == ""
    assert failure.location == parseutil.Excerpt("", "", "")


def test_parse_unadvertised_error_is_unexpected():
    error = LarkStyleError(1, 4, 3, {"NUMBER"})
    result = parseutil.parse(RaisingParser(error), TEXT)
    assert result.error.line == 0
    assert result.error.location == parseutil.Excerpt("", "", "")


@pytest.mark.parametrize(
    "error", [parseutil.InvalidArgument("bad node"), parseutil.NotFound("no kid")]
)
def test_parse_programmer_errors_propagate(error):
    with pytest.raises(type(error)):
        parseutil.parse(RaisingParser(error), TEXT)


@pytest.mark.parametrize(
    "parser, text, options",
    [
        (None, TEXT, None),
        (object(), TEXT, None),
        (ValueParser(1), 42, None),
        (ValueParser(1), TEXT, ["start_rule"]),
        (ValueParser(1), TEXT, {"start_rule": 5}),
    ],
    ids=["none", "noparse", "text", "options", "startrule"],
)
def test_parse_invalid_arguments(parser, text, options):
    with pytest.raises(parseutil.InvalidArgument):
        parseutil.parse(parser, text, options)


def test_parse_result_exclusive():
    with pytest.raises(parseutil.InvalidArgument):
        parseutil.ParseResult(ast=1, error=parseutil.NormalizedError("x"))


class TrailingColonError(Exception):
    """Syntax error whose first line ends before listing the expectations."""

    def __init__(self, expected):
        super().__init__("Unexpected end-of-input. Expected one of: \n\t* RPAR\n")
        self.expected = expected


@pytest.mark.parametrize(
    "expected, message",
    [
        (["RPAR", "ADDOP"], "Unexpected end-of-input. Expected one of: ADDOP, RPAR"),
        ([], "Unexpected end-of-input. Expected one of"),
    ],
    ids=["listed", "empty"],
)
def test_parse_message_completes_expected(expected, message):
    parser = RaisingParser(TrailingColonError(expected), syntax_error=TrailingColonError)
    result = parseutil.parse(parser, TEXT)
    assert result.error.message == message
