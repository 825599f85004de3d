"""Markup AST Parser.

Parses template markup (nested tags, literal ``"..."`` and variable ``{...}``
attribute values, free text) into an immutable tree for downstream code
generation and rendering.

Progressive API Disclosure:
- Level 1: Simple functions - parse_document(), parse_string(), parse_file()
- Level 2: Configured parser - MarkupParser class
"""

__version__ = "0.1.0"
__author__ = "Markup AST Parser Team"

from .api import MarkupParser, parse_document, parse_file, parse_string

from .shared.config import ParserConfig
from .shared.errors import (
    AttributeSyntaxError,
    ClosingTagMismatch,
    ErrorKind,
    InputTooLarge,
    MarkupParseError,
    NestingDepthExceeded,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
)
from .shared.result import ParseResult
from .tree import Attribute, Literal, Node, Text, VariableReference, to_markup

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse_document",
    "parse_string",
    "parse_file",

    # Level 2: Configured parser
    "MarkupParser",
    "ParserConfig",

    # Tree types
    "Node",
    "Text",
    "Attribute",
    "Literal",
    "VariableReference",
    "to_markup",

    # Results and errors
    "ParseResult",
    "ErrorKind",
    "MarkupParseError",
    "UnexpectedCharacter",
    "ClosingTagMismatch",
    "UnexpectedEndOfInput",
    "AttributeSyntaxError",
    "NestingDepthExceeded",
    "InputTooLarge",
]
