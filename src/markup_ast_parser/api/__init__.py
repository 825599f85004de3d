"""Public parsing API."""

from .parser import MarkupParser, parse_document, parse_file, parse_string

__all__ = [
    "MarkupParser",
    "parse_document",
    "parse_file",
    "parse_string",
]
