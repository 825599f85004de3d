"""Tests for the character cursor."""

import pytest

from markup_ast_parser.character import CharacterCursor
from markup_ast_parser.shared.errors import SourcePosition


class TestCharacterCursor:
    """Test advance, peek and step_back."""

    def test_advance_returns_characters_in_order(self):
        """Test that advance walks the input one character at a time."""
        cursor = CharacterCursor("ab")

        assert cursor.advance() == "a"
        assert cursor.advance() == "b"
        assert cursor.advance() is None

    def test_advance_at_end_keeps_returning_none(self):
        """Test that advancing past the end is harmless."""
        cursor = CharacterCursor("")

        assert cursor.advance() is None
        assert cursor.advance() is None
        assert cursor.offset == 0
        assert cursor.at_end

    def test_peek_does_not_move(self):
        """Test that peek returns the next character without consuming it."""
        cursor = CharacterCursor("xy")

        assert cursor.peek() == "x"
        assert cursor.peek() == "x"
        assert cursor.offset == 0
        cursor.advance()
        assert cursor.peek() == "y"

    def test_peek_at_end_returns_none(self):
        """Test peek at end of input."""
        cursor = CharacterCursor("x")
        cursor.advance()

        assert cursor.peek() is None

    def test_step_back_rewinds_one_character(self):
        """Test that step_back re-includes the last consumed character."""
        cursor = CharacterCursor("<a")
        cursor.advance()
        cursor.advance()

        cursor.step_back()

        assert cursor.offset == 1
        assert cursor.advance() == "a"

    def test_step_back_at_start_raises(self):
        """Test that stepping back before the start is an error."""
        cursor = CharacterCursor("abc")

        with pytest.raises(ValueError, match="Cannot step back"):
            cursor.step_back()

    def test_remaining(self):
        """Test the unread part of the input."""
        cursor = CharacterCursor("<a/> tail")
        for _ in range(4):
            cursor.advance()

        assert cursor.remaining() == " tail"

    def test_rejects_non_string_input(self):
        """Test that the cursor only accepts text."""
        with pytest.raises(TypeError, match="must be str"):
            CharacterCursor(b"<a/>")  # type: ignore[arg-type]

    def test_len(self):
        """Test that len reports the input length."""
        assert len(CharacterCursor("abcd")) == 4


class TestCursorPosition:
    """Test line and column reporting."""

    def test_position_of_last_consumed_character(self):
        """Test that position describes the character just returned."""
        cursor = CharacterCursor("abc")
        cursor.advance()
        cursor.advance()

        assert cursor.position() == SourcePosition(line=1, column=2, offset=1)

    def test_position_before_any_advance(self):
        """Test position at the start of input."""
        cursor = CharacterCursor("abc")

        assert cursor.position() == SourcePosition(line=1, column=1, offset=0)

    def test_position_across_lines(self):
        """Test that newlines start a new line at column 1."""
        cursor = CharacterCursor("<a>\n  <b>")
        for _ in range(7):
            cursor.advance()

        position = cursor.position()
        assert position.line == 2
        assert position.column == 3
        assert position.offset == 6

    def test_position_for_explicit_offset(self):
        """Test position lookup for an arbitrary offset."""
        cursor = CharacterCursor("a\nb\nc")

        assert cursor.position(4) == SourcePosition(line=3, column=1, offset=4)

    def test_newline_belongs_to_its_line(self):
        """Test that a newline character is reported on the line it ends."""
        cursor = CharacterCursor("ab\ncd")

        assert cursor.position(2) == SourcePosition(line=1, column=3, offset=2)
