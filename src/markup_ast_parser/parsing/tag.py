"""Tag state machine.

Builds one ``Node`` per call: reads the tag name, delegates attributes to
``AttributeParser``, then reads body content until the matching closing tag,
recursing for every nested tag. All nodes of a document draw their ids from a
single ``NodeIdCounter`` so ids stay unique and increase in the order nodes are
opened, however deep or wide the tree.
"""

from enum import Enum, auto
from typing import List, Optional

from markup_ast_parser.character import CharacterCursor
from markup_ast_parser.shared.config import ParserConfig
from markup_ast_parser.shared.errors import (
    ClosingTagMismatch,
    NestingDepthExceeded,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
)
from markup_ast_parser.shared.logging import get_logger
from markup_ast_parser.tree.nodes import Attribute, Body, Node, Text

from .attribute import AttributeParser


class TagState(Enum):
    """State machine states for tag parsing."""

    START = auto()        # Before the opening '<'
    TAG_NAME = auto()     # Reading the tag name
    ATTRIBUTES = auto()   # Between the name and '>'
    BODY = auto()         # Text and child tags
    CLOSING_TAG = auto()  # Inside '</...>'


class NodeIdCounter:
    """Hands out node ids for one document."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError("Node ids start at 0 or above")
        self._start = start
        self._next = start

    @property
    def next_id(self) -> int:
        return self._next

    @property
    def allocated(self) -> int:
        """Number of ids handed out so far."""
        return self._next - self._start

    def allocate(self) -> int:
        node_id = self._next
        self._next += 1
        return node_id


class TagParser:
    """Recursive-descent parser for one tag and its subtree.

    The cursor and id counter are shared with every nested call; the parser
    itself keeps only per-document statistics.
    """

    def __init__(
        self,
        cursor: CharacterCursor,
        config: Optional[ParserConfig] = None,
        id_counter: Optional[NodeIdCounter] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.cursor = cursor
        self.config = config or ParserConfig()
        self.ids = id_counter or NodeIdCounter()
        self.logger = get_logger(__name__, correlation_id, "tag_parser")
        self._attribute_parser = AttributeParser(cursor)
        self.attributes_created = 0

    @property
    def nodes_created(self) -> int:
        return self.ids.allocated

    def parse(self, parent_id: Optional[int] = None, depth: int = 1) -> Node:
        """Parse one node starting at the cursor.

        Args:
            parent_id: Id of the enclosing node, None for the root
            depth: Nesting level of this node, the root being 1

        Returns:
            The completed node with its whole subtree

        Raises:
            MarkupParseError: On the first lexical or structural error
        """
        if depth > self.config.max_depth:
            raise NestingDepthExceeded(
                self.config.max_depth, self.cursor.position(self.cursor.offset)
            )

        state = TagState.START
        node_id = -1
        name: List[str] = []
        closing_name: List[str] = []
        closing_name_ended = False
        text: List[str] = []
        children: List[Body] = []
        attributes: List[Attribute] = []

        while True:
            char = self.cursor.advance()
            if char is None:
                raise UnexpectedEndOfInput(
                    state.name,
                    self.cursor.position(),
                    open_tag="".join(name) or None,
                )

            if state is TagState.START:
                if char == "<":
                    node_id = self.ids.allocate()
                    state = TagState.TAG_NAME
                elif not char.isspace():
                    raise self._unexpected(char, state, "'<'")

            elif state is TagState.TAG_NAME:
                if char == "<":
                    raise self._unexpected(char, state, "a tag name")
                if char == ">" or char == "/" or char.isspace():
                    if not name:
                        raise self._unexpected(char, state, "a tag name")
                    if char == ">":
                        state = TagState.BODY
                    elif char == "/":
                        self._consume_self_close(state)
                        return self._finish(node_id, parent_id, name, [], attributes, True)
                    else:
                        state = TagState.ATTRIBUTES
                else:
                    name.append(char)

            elif state is TagState.ATTRIBUTES:
                if char.isspace():
                    continue
                if char == ">":
                    state = TagState.BODY
                elif char == "/":
                    self._consume_self_close(state)
                    return self._finish(node_id, parent_id, name, [], attributes, True)
                elif char == "<":
                    raise self._unexpected(char, state, "an attribute, '>' or '/>'")
                else:
                    attributes.append(self._attribute_parser.parse(len(attributes)))
                    self.attributes_created += 1

            elif state is TagState.BODY:
                if char == "<":
                    self._flush_text(text, children)
                    if self.cursor.peek() == "/":
                        self.cursor.advance()
                        state = TagState.CLOSING_TAG
                    else:
                        self.cursor.step_back()
                        children.append(self.parse(node_id, depth + 1))
                elif char == ">":
                    raise self._unexpected(char, state, "text or a tag")
                else:
                    text.append(char)

            else:
                if char == ">":
                    found = "".join(closing_name)
                    expected = "".join(name)
                    if found != expected:
                        raise ClosingTagMismatch(expected, found, self.cursor.position())
                    return self._finish(node_id, parent_id, name, children, attributes, False)
                if char == "<" or char == "/":
                    raise self._unexpected(char, state, "a closing tag name")
                if char.isspace():
                    closing_name_ended = bool(closing_name)
                elif closing_name_ended:
                    raise self._unexpected(char, state, "'>'")
                else:
                    closing_name.append(char)

    def _consume_self_close(self, state: TagState) -> None:
        if self.cursor.peek() != ">":
            raise self._unexpected("/", state, "'>' after '/'")
        self.cursor.advance()

    @staticmethod
    def _flush_text(text: List[str], children: List[Body]) -> None:
        """Move the pending text run into the body, trimmed; drop it if blank."""
        run = "".join(text).strip()
        text.clear()
        if run:
            children.append(Text(run))

    def _finish(
        self,
        node_id: int,
        parent_id: Optional[int],
        name: List[str],
        children: List[Body],
        attributes: List[Attribute],
        self_closing: bool,
    ) -> Node:
        node = Node(
            id=node_id,
            name="".join(name),
            parent_id=parent_id,
            children=tuple(children),
            attributes=tuple(attributes),
            self_closing=self_closing,
        )
        self.logger.debug(
            "Node completed",
            extra={
                "node_id": node.id,
                "node_name": node.name,
                "child_count": len(node.children),
                "attribute_count": len(node.attributes),
                "self_closing": self_closing,
            },
        )
        return node

    def _unexpected(
        self, char: str, state: TagState, expected: Optional[str] = None
    ) -> UnexpectedCharacter:
        return UnexpectedCharacter(char, state.name, self.cursor.position(), expected)
