"""Error types raised by the markup parsing engine.

Every error is fatal for the parse that raised it: the engine never recovers
locally and never returns a partial tree. Errors carry enough context (state,
offending character, expected and found names, source position) to build an
actionable message, and can be flattened with ``to_dict`` for result objects
and the CLI.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Kinds of fatal parse errors."""

    UNEXPECTED_CHARACTER = "unexpected_character"
    CLOSING_TAG_MISMATCH = "closing_tag_mismatch"
    UNEXPECTED_END_OF_INPUT = "unexpected_end_of_input"
    ATTRIBUTE_SYNTAX_ERROR = "attribute_syntax_error"
    NESTING_DEPTH_EXCEEDED = "nesting_depth_exceeded"
    INPUT_TOO_LARGE = "input_too_large"


@dataclass(frozen=True)
class SourcePosition:
    """Location of a character in the input.

    ``line`` and ``column`` are 1-based, ``offset`` is the 0-based index into
    the input string.
    """

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    def to_dict(self) -> Dict[str, int]:
        return {"line": self.line, "column": self.column, "offset": self.offset}

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"


class MarkupParseError(Exception):
    """Base class for all fatal markup parse errors."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        position: Optional[SourcePosition] = None,
        state: Optional[str] = None,
    ) -> None:
        self.message = message
        self.position = position
        self.state = state
        super().__init__(self._format())

    def _format(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} at {self.position}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a JSON-friendly dictionary."""
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "message": str(self),
            "state": self.state,
            "position": self.position.to_dict() if self.position else None,
        }
        data.update(self._details())
        return data

    def _details(self) -> Dict[str, Any]:
        return {}


def _describe(character: Optional[str]) -> str:
    if character is None:
        return "end of input"
    return repr(character)


class UnexpectedCharacter(MarkupParseError):
    """A character has no transition in the current tag parser state."""

    kind = ErrorKind.UNEXPECTED_CHARACTER

    def __init__(
        self,
        character: str,
        state: str,
        position: Optional[SourcePosition] = None,
        expected: Optional[str] = None,
    ) -> None:
        self.character = character
        self.expected = expected
        message = f"Unexpected character {_describe(character)} in state {state}"
        if expected:
            message += f" (expected {expected})"
        super().__init__(message, position, state)

    def _details(self) -> Dict[str, Any]:
        return {"character": self.character, "expected": self.expected}


class ClosingTagMismatch(MarkupParseError):
    """The closing tag name differs from the name of the open node."""

    kind = ErrorKind.CLOSING_TAG_MISMATCH

    def __init__(
        self,
        expected: str,
        found: str,
        position: Optional[SourcePosition] = None,
    ) -> None:
        self.expected = expected
        self.found = found
        super().__init__(
            f"Unexpected closing tag: </{found}>. Expected </{expected}>",
            position,
            "CLOSING_TAG",
        )

    def _details(self) -> Dict[str, Any]:
        return {"expected": self.expected, "found": self.found}


class UnexpectedEndOfInput(MarkupParseError):
    """The input ended while a node or attribute was still open."""

    kind = ErrorKind.UNEXPECTED_END_OF_INPUT

    def __init__(
        self,
        state: str,
        position: Optional[SourcePosition] = None,
        open_tag: Optional[str] = None,
    ) -> None:
        self.open_tag = open_tag
        message = f"Unexpected end of input in state {state}"
        if open_tag:
            message += f" while <{open_tag}> is open"
        super().__init__(message, position, state)

    def _details(self) -> Dict[str, Any]:
        return {"open_tag": self.open_tag}


class AttributeSyntaxError(MarkupParseError):
    """An attribute is lexically malformed."""

    kind = ErrorKind.ATTRIBUTE_SYNTAX_ERROR

    def __init__(
        self,
        character: str,
        state: str,
        value_kind: str,
        position: Optional[SourcePosition] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.character = character
        self.value_kind = value_kind
        self.reason = reason
        message = (
            f"Unexpected {_describe(character)} in attribute state {state} "
            f"(value kind {value_kind})"
        )
        if reason:
            message += f": {reason}"
        super().__init__(message, position, state)

    def _details(self) -> Dict[str, Any]:
        return {
            "character": self.character,
            "value_kind": self.value_kind,
            "reason": self.reason,
        }


class NestingDepthExceeded(MarkupParseError):
    """The document nests tags deeper than the configured limit."""

    kind = ErrorKind.NESTING_DEPTH_EXCEEDED

    def __init__(self, max_depth: int, position: Optional[SourcePosition] = None) -> None:
        self.max_depth = max_depth
        super().__init__(
            f"Nesting depth exceeds the configured maximum of {max_depth}",
            position,
            "START",
        )

    def _details(self) -> Dict[str, Any]:
        return {"max_depth": self.max_depth}


class InputTooLarge(MarkupParseError):
    """The input is longer than the configured limit."""

    kind = ErrorKind.INPUT_TOO_LARGE

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(
            f"Input of {length} characters exceeds the limit of {limit}"
        )

    def _details(self) -> Dict[str, Any]:
        return {"length": self.length, "limit": self.limit}
