"""Attribute state machine.

Reads one attribute from the shared cursor: a name, an optional ``=`` and an
optional value that is either a quoted literal or a braced variable reference.
The tag parser consumes the first character of the attribute to decide that an
attribute starts, so the parser steps back over it on entry.
"""

from enum import Enum, auto
from typing import Dict, FrozenSet, List, Optional

from markup_ast_parser.character import CharacterCursor
from markup_ast_parser.shared.errors import AttributeSyntaxError, UnexpectedEndOfInput
from markup_ast_parser.tree.nodes import Attribute, Literal, Value, VariableReference

# Characters that end a name without being consumed
NAME_TERMINATORS = frozenset(">/")
NAME_FORBIDDEN = frozenset('"{}')


class AttributeState(Enum):
    """State machine states for attribute parsing."""

    NAME = auto()   # Reading the attribute name
    EQ = auto()     # After '=', expecting '"' or '{'
    VALUE = auto()  # Inside a literal or variable reference


class ValueKind(Enum):
    """Kind of value being read in the VALUE state."""

    NONE = auto()
    LITERAL = auto()
    VARIABLE_REFERENCE = auto()


OPENING_DELIMITERS: Dict[str, ValueKind] = {
    '"': ValueKind.LITERAL,
    "{": ValueKind.VARIABLE_REFERENCE,
}

CLOSING_DELIMITERS: Dict[ValueKind, str] = {
    ValueKind.LITERAL: '"',
    ValueKind.VARIABLE_REFERENCE: "}",
}

# Delimiters of the wrong kind, and '=' which is only legal after a name
VALUE_FORBIDDEN: Dict[ValueKind, FrozenSet[str]] = {
    ValueKind.LITERAL: frozenset("{}="),
    ValueKind.VARIABLE_REFERENCE: frozenset('"{='),
}


class AttributeParser:
    """Builds one ``Attribute`` from the characters at the cursor.

    Examples:
        >>> cursor = CharacterCursor('x={y}>')
        >>> cursor.advance()
        'x'
        >>> AttributeParser(cursor).parse(0)
        Attribute(id=0, name='x', value=VariableReference(name='y'))
    """

    def __init__(self, cursor: CharacterCursor) -> None:
        self.cursor = cursor
        self._reset_state()

    def _reset_state(self) -> None:
        self.state = AttributeState.NAME
        self.value_kind = ValueKind.NONE
        self._name: List[str] = []
        self._buffer: List[str] = []

    def parse(self, attribute_id: int) -> Attribute:
        """Parse one attribute.

        Args:
            attribute_id: Id of the attribute within its owning node

        Returns:
            The parsed attribute; its value is None when no ``=`` followed
            the name

        Raises:
            AttributeSyntaxError: On a misplaced ``=``, quote or brace
            UnexpectedEndOfInput: When input ends after ``=`` or inside a value
        """
        self._reset_state()
        self.cursor.step_back()

        while True:
            char = self.cursor.peek()
            if char is None:
                if self.state is AttributeState.NAME:
                    break
                raise UnexpectedEndOfInput(
                    f"ATTRIBUTE_{self.state.name}",
                    self.cursor.position(),
                )

            if self.state is AttributeState.NAME:
                if char.isspace() or char in NAME_TERMINATORS:
                    break
                self.cursor.advance()
                self._process_name(char)
            elif self.state is AttributeState.EQ:
                self.cursor.advance()
                self._process_eq(char)
            else:
                self.cursor.advance()
                if self._process_value(char):
                    break

        return Attribute(
            id=attribute_id,
            name="".join(self._name),
            value=self._build_value(),
        )

    def _process_name(self, char: str) -> None:
        if char == "=":
            if not self._name:
                raise self._syntax_error(char, "attribute name is empty")
            self.state = AttributeState.EQ
        elif char in NAME_FORBIDDEN:
            raise self._syntax_error(char, "delimiter outside of a value")
        else:
            self._name.append(char)

    def _process_eq(self, char: str) -> None:
        kind = OPENING_DELIMITERS.get(char)
        if kind is None:
            raise self._syntax_error(char, "'=' must be followed by '\"' or '{'")
        self.value_kind = kind
        self.state = AttributeState.VALUE

    def _process_value(self, char: str) -> bool:
        """Consume one value character; return True when the value closes."""
        if char == CLOSING_DELIMITERS[self.value_kind]:
            self.state = AttributeState.NAME
            return True
        if char in VALUE_FORBIDDEN[self.value_kind]:
            raise self._syntax_error(char, "delimiter does not match the value kind")
        self._buffer.append(char)
        return False

    def _build_value(self) -> Optional[Value]:
        if self.value_kind is ValueKind.LITERAL:
            return Literal("".join(self._buffer))
        if self.value_kind is ValueKind.VARIABLE_REFERENCE:
            return VariableReference("".join(self._buffer))
        return None

    def _syntax_error(self, char: str, reason: str) -> AttributeSyntaxError:
        return AttributeSyntaxError(
            char,
            self.state.name,
            self.value_kind.name,
            self.cursor.position(),
            reason=reason,
        )
