"""Document-level parsing: wraps the input in a cursor and parses the root."""

from typing import Optional

from markup_ast_parser.character import CharacterCursor
from markup_ast_parser.shared.config import ParserConfig
from markup_ast_parser.shared.errors import InputTooLarge, UnexpectedCharacter
from markup_ast_parser.shared.logging import get_logger
from markup_ast_parser.tree.nodes import Node

from .tag import NodeIdCounter, TagParser

PREVIEW_LENGTH = 40


class DocumentParser:
    """Parses a whole document into its root node.

    One instance may parse many documents in sequence; every call gets a fresh
    cursor and id counter, so the root is always id 0.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "document_parser")
        self.nodes_created = 0
        self.attributes_created = 0

    def parse(self, text: str) -> Node:
        """Parse ``text`` and return the root node.

        Raises:
            MarkupParseError: On the first error; no partial tree is returned
        """
        limit = self.config.max_input_length
        if limit is not None and len(text) > limit:
            raise InputTooLarge(len(text), limit)

        cursor = CharacterCursor(text)
        tag_parser = TagParser(
            cursor,
            config=self.config,
            id_counter=NodeIdCounter(),
            correlation_id=self.correlation_id,
        )
        self.nodes_created = 0
        self.attributes_created = 0

        self.logger.debug(
            "Starting document parse",
            extra={"content_length": len(text), "max_depth": self.config.max_depth},
        )
        try:
            root = tag_parser.parse(parent_id=None, depth=1)
        finally:
            self.nodes_created = tag_parser.nodes_created
            self.attributes_created = tag_parser.attributes_created

        self._check_trailing_content(cursor)
        return root

    def _check_trailing_content(self, cursor: CharacterCursor) -> None:
        trailing = cursor.remaining()
        stripped = trailing.lstrip()
        if not stripped:
            return
        if not self.config.allow_trailing_content:
            offset = cursor.offset + len(trailing) - len(stripped)
            raise UnexpectedCharacter(
                stripped[0], "END", cursor.position(offset), "end of input"
            )
        self.logger.debug(
            "Ignoring content after the root node",
            extra={
                "trailing_length": len(stripped),
                "preview": stripped[:PREVIEW_LENGTH],
            },
        )
