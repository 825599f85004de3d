"""Shared utilities for markup parsing.

This module provides the configuration object, error types, result types and
logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .errors import (
    AttributeSyntaxError,
    ClosingTagMismatch,
    ErrorKind,
    InputTooLarge,
    MarkupParseError,
    NestingDepthExceeded,
    SourcePosition,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseResult,
    PerformanceMetrics,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "AttributeSyntaxError",
    "ClosingTagMismatch",
    "ErrorKind",
    "InputTooLarge",
    "MarkupParseError",
    "NestingDepthExceeded",
    "SourcePosition",
    "UnexpectedCharacter",
    "UnexpectedEndOfInput",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseResult",
    "PerformanceMetrics",
]
