"""
Source Cursor
=============

A read position over an immutable source text. The cursor advances one
character at a time and keeps the line/column bookkeeping used for token
positions and error messages.

Reading at or past the end of the text yields the terminator character
``"\\0"``, so callers never index out of range. A literal NUL inside the
text also ends the input.
"""

TERMINATOR = "\0"


class Cursor:
    """
    Tracks row, column and absolute offset into a source text.

    Attributes:
        row: Current line number (1-based)
        col: Current column number (1-based)
        point: Offset of the next unread character (0-based)
    """

    def __init__(self, source: str):
        self._source = source
        self.row = 1
        self.col = 1
        self.point = 0

    def __repr__(self) -> str:
        return f"Cursor({self.row}:{self.col} @{self.point})"

    @property
    def source(self) -> str:
        return self._source

    def peek(self) -> str:
        """Return the character under the cursor without consuming it."""
        if self.point >= len(self._source):
            return TERMINATOR
        return self._source[self.point]

    def is_at_end(self) -> bool:
        """True when the next character is the terminator."""
        return self.peek() == TERMINATOR

    def advance(self) -> str:
        """
        Consume the current character and return it.

        A newline moves to column 1 of the next row; any other character
        moves one column to the right. At the end of input nothing is
        consumed and the terminator is returned.
        """
        if self.is_at_end():
            return TERMINATOR

        char = self._source[self.point]
        if char == "\n":
            self.row += 1
            self.col = 1
        else:
            self.col += 1
        self.point += 1
        return char

    def line_text(self, row: int) -> str:
        """Return the text of a 1-based source line, without its newline."""
        lines = self._source.split("\n")
        if 0 < row <= len(lines):
            return lines[row - 1]
        return ""
