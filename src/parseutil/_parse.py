"""Run a parser once and normalize its outcome.

The parser is any object with a `parse(text, options)` method. It either
returns a value, which becomes the ast of the result, or raises. Raised
grammar failures are turned into a `NormalizedError` with an escaped excerpt
of the source around the failure. Any other failure is degraded into an
error that only keeps its message.

Parsers advertise their own syntax error type(s) through a `syntax_error`
attribute. `parseutil.GrammarError` is always recognized.
"""

__all__ = [
    "parse",
    "error_message",
    "ParseResult",
    "NormalizedError",
    "Success",
    "GrammarFailure",
    "OtherFailure",
]

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import parseutil


logger = logging.getLogger(__name__)


@dataclass
class Success:
    """Parser returned a value."""

    value: object


@dataclass
class GrammarFailure:
    """Parser rejected the input with its own syntax error."""

    message: str
    line: int = 0
    column: int = 0
    offset: int = 0
    found: str = ""
    expected: str = ""


@dataclass
class OtherFailure:
    """Parser failed for a reason unrelated to the grammar."""

    message: str


@dataclass
class NormalizedError:
    """Parse failure details in a parser independent shape.

    Attributes:
        line: (int) 1-based line of the failure, 0 when unknown
        column: (int) 1-based column of the failure, 0 when unknown
        offset: (int) 0-based offset of the failure, 0 when unknown
        message: (str) Description from the parser
        found: (str) What was found at the failure
        expected: (str) What the grammar expected
        location: (Excerpt) Escaped source around the failure
    """

    message: str
    line: int = 0
    column: int = 0
    offset: int = 0
    found: str = ""
    expected: str = ""
    location: "parseutil.Excerpt" = field(default_factory=lambda: parseutil.Excerpt())


@dataclass
class ParseResult:
    """Outcome of `parse`, exactly one of ast and error is set.

    A parser may legitimately return None as its ast, so success is
    decided by `error` alone.
    """

    ast: object = None
    error: NormalizedError | None = None

    def __post_init__(self):
        if self.error is not None and self.ast is not None:
            raise parseutil.InvalidArgument("ParseResult cannot have both ast and error")

    @property
    def ok(self) -> bool:
        return self.error is None


def parse(parser, text, options=None):
    """Parse text once and normalize the result.

    Args:
        parser: Object with a `parse(text, options)` method
        text: (str) Source text to parse
        options: (Mapping | None) "start_rule" names the grammar entry
            point, "make_ast" is the node builder for semantic actions,
            other keys are passed through to the parser

    Returns:
        (ParseResult) ast on success, error on failure

    Raises:
        parseutil.InvalidArgument: If the arguments are malformed, or a
            semantic action misused the node api
    """
    if parser is None:
        raise parseutil.InvalidArgument("invalid parser object (not an object)")
    if not callable(getattr(parser, "parse", None)):
        raise parseutil.InvalidArgument('invalid parser object (no "parse" function)')
    if not isinstance(text, str):
        raise parseutil.InvalidArgument("invalid input text (not a string)")
    if options is not None and not isinstance(options, Mapping):
        raise parseutil.InvalidArgument("invalid options (not a mapping)")

    options = dict(options or {})
    start_rule = options.get("start_rule")
    if start_rule is not None and not isinstance(start_rule, str):
        raise parseutil.InvalidArgument(f"invalid start rule: {start_rule!r}")
    options["util"] = parseutil.ActionHelpers(options.get("make_ast"))

    outcome = _attempt(parser, text, options)
    match outcome:
        case Success(value=value):
            return ParseResult(ast=value)
        case GrammarFailure():
            error = NormalizedError(
                message=outcome.message,
                line=outcome.line,
                column=outcome.column,
                offset=outcome.offset,
                found=outcome.found,
                expected=outcome.expected,
                location=parseutil.excerpt(text, outcome.offset),
            )
            return ParseResult(error=error)
        case OtherFailure(message=message):
            error = NormalizedError(message=message, location=parseutil.excerpt("", 0))
            return ParseResult(error=error)


def _attempt(parser, text, options):
    """Call the parser and classify what happened."""
    recognized = _syntax_errors(parser)
    logger.debug("parsing %d characters (start rule %s)", len(text), options.get("start_rule"))
    try:
        value = parser.parse(text, options)
    except (parseutil.InvalidArgument, parseutil.NotFound):
        raise
    except recognized as e:
        failure = _grammar_failure(e)
        logger.debug("grammar failure at %d:%d: %s", failure.line, failure.column, failure.message)
        return failure
    except Exception as e:
        logger.debug("unexpected parser failure", exc_info=True)
        return OtherFailure(str(e))
    return Success(value)


def _syntax_errors(parser):
    """Exception types counted as grammar failures for a parser."""
    advertised = getattr(parser, "syntax_error", None)
    if advertised is None:
        return (parseutil.GrammarError,)
    if isinstance(advertised, type):
        advertised = (advertised,)
    return (parseutil.GrammarError, *advertised)


def _grammar_failure(error):
    """Extract failure details from a syntax error.

    Positions come from a `location.start` structure when the error has
    one, otherwise from attributes on the error itself.
    """
    start = getattr(getattr(error, "location", None), "start", None)
    source = start if start is not None else error
    offset = getattr(source, "offset", None)
    if offset is None:
        offset = getattr(source, "pos_in_stream", None)

    found = getattr(error, "found", None)
    if found is None:
        found = _lark_found(error)
    expected = getattr(error, "expected", None)
    if expected is None:
        expected = getattr(error, "allowed", None)
    expected = _diagnostic_text(expected)

    message = getattr(error, "message", None)
    if not isinstance(message, str):
        message = str(error).strip().split("\n")[0].rstrip()
        # Lark lists the expected terminals on the following lines
        if message.endswith(":"):
            message = f"{message} {expected}" if expected else message[:-1]

    return GrammarFailure(
        message=message,
        line=_position_or_zero(getattr(source, "line", None)),
        column=_position_or_zero(getattr(source, "column", None)),
        offset=_position_or_zero(offset),
        found=_diagnostic_text(found),
        expected=expected,
    )


def _lark_found(error):
    token = getattr(error, "token", None)
    if token is not None:
        return str(token)
    return getattr(error, "char", None)


def _position_or_zero(value):
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return 0


def _diagnostic_text(value):
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (set, frozenset, list, tuple)):
        return ", ".join(sorted(str(item) for item in value))
    return str(value)


def error_message(error, no_final_newline=False):
    """Render a normalized error for display.

    The first line shows the position and the source excerpt, the second
    line points a caret at the failing character, and the error message
    follows.

    Args:
        error: (NormalizedError) Error from a failed `parse`
        no_final_newline: (bool) Leave off the trailing newline

    Returns:
        (str) Multi-line diagnostic text
    """
    loc = error.location
    prefix = f"line {error.line} (column {error.column}): "
    pointer = "-" * (len(prefix) + len(loc.prolog))
    text = (
        f"{prefix}{loc.prolog}{loc.token}{loc.epilog}\n"
        f"{pointer}^\n"
        f"{error.message}"
    )
    if not no_final_newline:
        text += "\n"
    return text
