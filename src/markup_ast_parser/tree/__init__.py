"""Document tree types and serializers."""

from .nodes import (
    Attribute,
    Body,
    Literal,
    Node,
    Text,
    Value,
    VariableReference,
)
from .serialize import (
    attribute_to_markup,
    dump_json,
    to_json,
    to_markup,
    to_outline,
)

__all__ = [
    "Attribute",
    "Body",
    "Literal",
    "Node",
    "Text",
    "Value",
    "VariableReference",
    "attribute_to_markup",
    "dump_json",
    "to_json",
    "to_markup",
    "to_outline",
]
