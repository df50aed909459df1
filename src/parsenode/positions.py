"""
Byte-offset helpers shared by the tracker and the planner.

All functions here work on the raw document bytes so that offsets are exact
byte positions regardless of the characters a document contains.
"""

import re
from bisect import bisect_right

from .constants import DEFAULT_NEWLINE

_LINE_BREAK_RE = re.compile(rb"\r\n|\r|\n")
_INDENT_RE = re.compile(rb"[ \t]*")


class LineIndex:
    """Maps byte offsets to 1-based line numbers.

    The line-start table is built once per document; each lookup is a binary
    search over it, so reporting many elements never rescans the buffer.

    Example:
        >>> index = LineIndex(b"<a>\\n  <b/>\\n</a>")
        >>> index.line_of(6)
        2
    """

    def __init__(self, buffer: bytes) -> None:
        self._starts = [0]
        self._starts.extend(match.end() for match in _LINE_BREAK_RE.finditer(buffer))

    def __len__(self) -> int:
        return len(self._starts)

    def line_of(self, offset: int) -> int:
        """Return the 1-based line containing ``offset``."""
        return bisect_right(self._starts, max(offset, 0))

    def line_start(self, line: int) -> int:
        """Return the offset of the first byte of a 1-based line."""
        return self._starts[line - 1]


def line_indent(buffer: bytes, offset: int) -> bytes:
    """Return the leading whitespace of the line holding ``offset``.

    Only whitespace that precedes ``offset`` on that line is returned, so an
    offset in the middle of an indented line yields the line's indentation.

    Args:
        buffer: Document bytes
        offset: Any byte position within the line

    Returns:
        The run of spaces and tabs at the start of the line (possibly empty)
    """
    line_start = max(buffer.rfind(b"\n", 0, offset), buffer.rfind(b"\r", 0, offset)) + 1
    match = _INDENT_RE.match(buffer, line_start, offset)
    return match.group(0) if match else b""


def detect_newline(buffer: bytes) -> bytes:
    """Return the first line terminator used by the document.

    Documents without any line break fall back to ``\\n``.
    """
    match = _LINE_BREAK_RE.search(buffer)
    return match.group(0) if match else DEFAULT_NEWLINE


def newline_styles(buffer: bytes) -> set[bytes]:
    """Return every distinct line terminator present in the document."""
    return {match.group(0) for match in _LINE_BREAK_RE.finditer(buffer)}
