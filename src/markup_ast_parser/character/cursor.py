"""Character cursor over markup input.

The cursor is a position-addressable view over an in-memory string, so
``peek`` and ``step_back`` are constant time and never ambiguous. The parsers
never look more than one character past the current decision point.
"""

from bisect import bisect_right
from typing import List, Optional

from markup_ast_parser.shared.errors import SourcePosition


class CharacterCursor:
    """Index-based cursor with one character of lookahead and rewind.

    Examples:
        >>> cursor = CharacterCursor("<a/>")
        >>> cursor.advance()
        '<'
        >>> cursor.peek()
        'a'
        >>> cursor.step_back()
        >>> cursor.advance()
        '<'
    """

    def __init__(self, text: str) -> None:
        if not isinstance(text, str):
            raise TypeError(f"Cursor input must be str, got {type(text).__name__}")
        self.text = text
        self._offset = 0
        self._line_starts: Optional[List[int]] = None

    def __len__(self) -> int:
        return len(self.text)

    @property
    def offset(self) -> int:
        """Index of the next character to be returned by ``advance``."""
        return self._offset

    @property
    def at_end(self) -> bool:
        return self._offset >= len(self.text)

    def advance(self) -> Optional[str]:
        """Return the next character and move forward, or None at end of input."""
        if self._offset >= len(self.text):
            return None
        char = self.text[self._offset]
        self._offset += 1
        return char

    def peek(self) -> Optional[str]:
        """Return the next character without moving, or None at end of input."""
        if self._offset >= len(self.text):
            return None
        return self.text[self._offset]

    def step_back(self) -> None:
        """Move the read position back by exactly one character."""
        if self._offset == 0:
            raise ValueError("Cannot step back before the start of input")
        self._offset -= 1

    def remaining(self) -> str:
        """Return the unread part of the input."""
        return self.text[self._offset:]

    def position(self, offset: Optional[int] = None) -> SourcePosition:
        """Get the source position of a character.

        Args:
            offset: Character index; defaults to the last consumed character

        Returns:
            SourcePosition with 1-based line and column
        """
        if offset is None:
            offset = max(self._offset - 1, 0)
        if self._line_starts is None:
            self._line_starts = [0]
            self._line_starts.extend(
                index + 1 for index, char in enumerate(self.text) if char == "\n"
            )
        line_index = bisect_right(self._line_starts, offset) - 1
        column = offset - self._line_starts[line_index] + 1
        return SourcePosition(line=line_index + 1, column=column, offset=offset)
