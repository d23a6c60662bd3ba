#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mhtml2html/parsers/scanner.py
"""Line cursor over raw MHTML text."""

from __future__ import annotations


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and bare CR line endings to LF.

    Examples
    --------
    >>> normalize_line_endings("a\\r\\nb\\rc\\n")
    'a\\nb\\nc\\n'

    """
    return text.replace("\r\n", "\n").replace("\r", "\n")


class Scanner:
    """Cursor over a text buffer that hands out one line at a time.

    The scanner owns both the source text and the read position, so each parse
    works on its own cursor and nothing is shared between calls. Line endings
    are normalized to ``\\n`` on construction.

    Parameters
    ----------
    text : str
        The source text

    """

    def __init__(self, text: str):
        self._text = normalize_line_endings(text)
        self._pos = 0
        self._line = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def line_number(self) -> int:
        """Number of lines consumed so far (1-based index of the last line read)."""
        return self._line

    def at_end(self) -> bool:
        return self._pos >= len(self._text)

    def next_line(self) -> str:
        """Return the next line including its trailing newline.

        The final line of the buffer may lack a newline. At the end of input an
        empty string is returned.
        """
        if self.at_end():
            return ""
        end = self._text.find("\n", self._pos)
        end = len(self._text) if end == -1 else end + 1
        line = self._text[self._pos : end]
        self._pos = end
        self._line += 1
        return line

    def skip_whitespace(self) -> None:
        """Advance past any whitespace, counting the newlines skipped."""
        text = self._text
        pos = self._pos
        while pos < len(text) and text[pos].isspace():
            if text[pos] == "\n":
                self._line += 1
            pos += 1
        self._pos = pos
