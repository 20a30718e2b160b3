# File: classgen/writer.py
"""
ClassGen - Auto-Indenting Line Writer
======================================
A small text sink that indents C-style source by counting brace markers.

Every line is classified into a ``LineKind`` and the rule table below
decides how the nesting depth moves around it:

    kind    before   after    matches
    OPEN      0       +1      the line is exactly "{"
    CLOSE    -1        0      the line starts with "}"
    TEXT      0        0      anything else
    BLANK     0        0      empty line (written without indentation)

Depth never goes below zero.  Braces embedded inside other text
(``{ get; set; }``, interpolated strings) are not structural and are left
alone; callers write bare ``{`` / ``}`` lines to open and close blocks.
"""

from __future__ import annotations

import io
import logging
from enum import Enum
from typing import Dict, List, Tuple

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("classgen.writer")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

OPEN_BRACE: str = "{"
CLOSE_BRACE: str = "}"
INDENT_SIZE: int = 4


class LineKind(str, Enum):
    """Structural classification of one output line."""

    OPEN = "open"
    CLOSE = "close"
    TEXT = "text"
    BLANK = "blank"


# (depth change before writing, depth change after writing)
_DEPTH_RULES: Dict[LineKind, Tuple[int, int]] = {
    LineKind.OPEN: (0, 1),
    LineKind.CLOSE: (-1, 0),
    LineKind.TEXT: (0, 0),
    LineKind.BLANK: (0, 0),
}


def classify_line(line: str) -> LineKind:
    """Return the structural kind of *line*."""
    if not line:
        return LineKind.BLANK
    if line == OPEN_BRACE:
        return LineKind.OPEN
    if line.startswith(CLOSE_BRACE):
        return LineKind.CLOSE
    return LineKind.TEXT


class LineWriter:
    """
    Buffered writer that prefixes each line with ``depth × indent_size``
    spaces.

    Usage::

        w = LineWriter()
        w.write_line("class A")
        w.write_line("{")
        w.write_line("public {0} {1} {{ get; set; }}", "Int32", "ID")
        w.write_line("}")
        print(w.getvalue())
    """

    __slots__ = ("_buffer", "_depth", "_indent_size", "_newline")

    def __init__(self, indent_size: int = INDENT_SIZE, newline: str = "\n") -> None:
        self._buffer: io.StringIO = io.StringIO()
        self._depth: int = 0
        self._indent_size: int = indent_size
        self._newline: str = newline

    @property
    def depth(self) -> int:
        return self._depth

    def write_line(self, line: str = "", *args: object) -> None:
        """
        Write one line.

        With *args*, *line* is a ``str.format`` pattern (literal braces
        doubled); the rendered text is what gets classified.
        """
        text: str = line.format(*args) if args else line
        kind: LineKind = classify_line(text)
        before, after = _DEPTH_RULES[kind]

        self._depth = max(0, self._depth + before)
        if kind is not LineKind.BLANK:
            self._buffer.write(" " * (self._depth * self._indent_size))
            self._buffer.write(text)
        self._buffer.write(self._newline)
        self._depth = max(0, self._depth + after)

    def write_lines(self, lines: List[str]) -> None:
        for line in lines:
            self.write_line(line)

    def clear(self) -> None:
        """Discard buffered text and reset the depth to zero."""
        self._buffer = io.StringIO()
        self._depth = 0

    def getvalue(self) -> str:
        return self._buffer.getvalue()

    def __str__(self) -> str:
        return self.getvalue()

    def __repr__(self) -> str:
        return f"<LineWriter depth={self._depth} chars={len(self.getvalue())}>"


__all__: List[str] = [
    "LineKind",
    "LineWriter",
    "classify_line",
]
