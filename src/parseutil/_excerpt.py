"""Escaped source excerpts around an offset."""

__all__ = ["Excerpt", "excerpt", "EXCERPT_WIDTH"]

from dataclasses import dataclass


EXCERPT_WIDTH = 20

_SIMPLE_ESCAPES = {
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


@dataclass
class Excerpt:
    """Escaped text before, at, and after an offset."""

    prolog: str = ""
    token: str = ""
    epilog: str = ""


def excerpt(text, offset):
    """Cut an escaped window of source text around an offset.

    The window reaches up to `EXCERPT_WIDTH` characters on either side
    of the offset and is clamped to the text.

    Args:
        text: (str) Full source text
        offset: (int) 0-based offset of the character to point at

    Returns:
        (Excerpt) Escaped prolog, token and epilog
    """
    offset = max(offset, 0)
    begin = max(offset - EXCERPT_WIDTH, 0)
    end = min(offset + 1 + EXCERPT_WIDTH, len(text))
    return Excerpt(
        prolog=_escape(text[begin:offset]),
        token=_escape(text[offset:offset + 1]),
        epilog=_escape(text[offset + 1:end]),
    )


def _escape(text):
    """Escape control and non-ascii characters for single line display."""
    return "".join(_escape_char(ch) for ch in text)


def _escape_char(ch):
    simple = _SIMPLE_ESCAPES.get(ch)
    if simple is not None:
        return simple
    code = ord(ch)
    if code < 0x20 or 0x80 <= code <= 0xFF:
        return f"\\x{code:02X}"
    if code <= 0x7F:
        return ch
    if code <= 0xFFFF:
        return f"\\u{code:04X}"
    # Outside the basic plane, written as a utf-16 surrogate pair
    code -= 0x10000
    high = 0xD800 + (code >> 10)
    low = 0xDC00 + (code & 0x3FF)
    return f"\\u{high:04X}\\u{low:04X}"
