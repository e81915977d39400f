"""Error classes and helpers"""

__all__ = ["InvalidArgument", "NotFound", "GrammarError"]


class InvalidArgument(ValueError):
    """Malformed call into the parseutil api."""


class NotFound(LookupError):
    """Requested child node is not part of the tree."""


class GrammarError(Exception):
    """Structured syntax error raised while parsing.

    Semantic actions and hand written parsers raise this to report a
    failure that `parseutil.parse` turns into a normalized error.

    Args:
        message: (str) Error description
        found: (str) What was found at the failure position
        expected: (str) What the grammar expected instead
        line: (int) 1-based line of the failure
        column: (int) 1-based column of the failure
        offset: (int) 0-based character offset of the failure
    """

    def __init__(self, message, found="", expected="", line=0, column=0, offset=0):
        self.message = message
        self.found = found
        self.expected = expected
        self.line = line
        self.column = column
        self.offset = offset
        super().__init__(message)
