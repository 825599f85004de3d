"""Parsing engine: tag and attribute state machines.

Key Components:
    DocumentParser: Parses a whole document into its root node
    TagParser: Recursive state machine building one node and its subtree
    AttributeParser: State machine building one attribute
    NodeIdCounter: Shared source of node ids for one document
"""

from .attribute import AttributeParser, AttributeState, ValueKind
from .document import DocumentParser
from .tag import NodeIdCounter, TagParser, TagState

__all__ = [
    "AttributeParser",
    "AttributeState",
    "DocumentParser",
    "NodeIdCounter",
    "TagParser",
    "TagState",
    "ValueKind",
]
