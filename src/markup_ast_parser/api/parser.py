"""Public parsing API.

Progressive disclosure from simple module-level functions to a reusable,
configured parser object:

- ``parse_document`` returns the root node and raises on the first error.
- ``parse_string`` and ``parse_file`` never raise for markup errors; they
  return a ``ParseResult`` carrying either the tree or the error.
- ``MarkupParser`` holds a configuration and usage statistics across parses.
"""

import os
import time
from pathlib import Path
from typing import Any, Dict, Optional, Union

import psutil

from markup_ast_parser.parsing import DocumentParser
from markup_ast_parser.shared import (
    DiagnosticSeverity,
    MarkupParseError,
    ParseResult,
    ParserConfig,
    get_logger,
)
from markup_ast_parser.tree.nodes import Node

PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000


def _memory_rss() -> int:
    """Resident set size of this process in bytes."""
    return psutil.Process(os.getpid()).memory_info().rss


def parse_document(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> Node:
    """Parse markup text into a tree.

    Args:
        text: Markup document
        config: Parser configuration (defaults to ``ParserConfig()``)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root node; its id is 0 and its parent_id is None

    Raises:
        MarkupParseError: On the first lexical or structural error

    Examples:
        >>> root = parse_document('<div class="a">text</div>')
        >>> root.name, root.texts
        ('div', ['text'])
        >>> parse_document('<a><b/></a>').find('b').parent_id
        0
    """
    return DocumentParser(config, correlation_id).parse(text)


def parse_string(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
    source: Optional[str] = None,
) -> ParseResult:
    """Parse markup text into a result object.

    Args:
        text: Markup document
        config: Parser configuration
        correlation_id: Optional correlation ID for request tracking
        source: Optional label for the input, e.g. a file name

    Returns:
        ParseResult with the tree on success, or the error and a CRITICAL
        diagnostic on failure

    Examples:
        >>> parse_string('<a></b>').error.kind.value
        'closing_tag_mismatch'
    """
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    logger = get_logger(__name__, correlation_id, "parse_string")

    logger.info(
        "Starting string parse operation",
        extra={
            "content_length": len(text),
            "preview": (
                text[:PREVIEW_LENGTH] + "..."
                if len(text) > PREVIEW_LENGTH else text
            ),
        },
    )

    start_time = time.perf_counter()
    memory_before = _memory_rss() if config.track_memory else 0
    parser = DocumentParser(config, correlation_id)

    try:
        root = parser.parse(text)
    except MarkupParseError as e:
        logger.warning(
            "Markup parse failed",
            extra={"error_kind": e.kind.value, "error": str(e), "source": source},
        )
        result = ParseResult.failure(e, "document_parser", correlation_id, source)
    else:
        result = ParseResult(root=root, correlation_id=correlation_id, source=source)

    performance = result.performance
    performance.processing_time_ms = (time.perf_counter() - start_time) * MS_PER_SECOND
    if config.track_memory:
        performance.memory_used_bytes = max(0, _memory_rss() - memory_before)
    performance.characters_processed = len(text)
    performance.nodes_created = parser.nodes_created
    performance.attributes_created = parser.attributes_created

    logger.info(
        "String parse completed",
        extra={
            "success": result.success,
            "node_count": performance.nodes_created,
            "processing_time_ms": performance.processing_time_ms,
        },
    )
    return result


def parse_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None,
) -> ParseResult:
    """Parse a markup file.

    Missing files, directories and undecodable content produce a failed
    result rather than an exception.

    Args:
        file_path: Path to the markup file
        encoding: Text encoding of the file
        config: Parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        ParseResult for the file's content
    """
    start_time = time.perf_counter()
    config = config or ParserConfig()
    correlation_id = correlation_id or config.correlation_id
    path_obj = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file")

    logger.info(
        "Starting file parse operation",
        extra={"file_path": str(path_obj), "encoding": encoding},
    )

    error_message = None
    if not path_obj.exists():
        error_message = f"File not found: {path_obj}"
    elif not path_obj.is_file():
        error_message = f"Path is not a file: {path_obj}"
    else:
        try:
            content = path_obj.read_text(encoding=encoding)
        except UnicodeDecodeError as e:
            error_message = f"Could not decode {path_obj} as {encoding}: {e}"
        except OSError as e:
            error_message = f"Could not read {path_obj}: {e}"

    if error_message:
        logger.warning(error_message, extra={"file_path": str(path_obj)})
        processing_time = (time.perf_counter() - start_time) * MS_PER_SECOND
        return _create_error_result(
            error_message, correlation_id, processing_time, str(path_obj)
        )

    result = parse_string(content, config, correlation_id, source=str(path_obj))
    result.add_diagnostic(
        DiagnosticSeverity.INFO,
        f"File read with encoding: {encoding}",
        "file_parser",
        details={"file_path": str(path_obj), "encoding": encoding},
    )
    return result


def _create_error_result(
    error_message: str,
    correlation_id: Optional[str],
    processing_time: float,
    source: Optional[str] = None,
) -> ParseResult:
    """Create a failed result for problems outside the markup itself."""
    result = ParseResult(success=False, correlation_id=correlation_id, source=source)
    result.performance.processing_time_ms = processing_time
    result.add_diagnostic(
        DiagnosticSeverity.CRITICAL,
        error_message,
        "api_parser",
    )
    return result


class MarkupParser:
    """Configured parser object for repeated use.

    Attributes:
        config: Parser configuration applied to every parse
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> parser = MarkupParser(ParserConfig.strict())
        >>> parser.parse('<a x={y}/>').root.attributes[0].value
        VariableReference(name='y')
        >>> parser.statistics["total_parses"]
        1
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "markup_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.info(
            "MarkupParser initialized",
            extra={"preset": self.config.name, "max_depth": self.config.max_depth},
        )

    def parse(self, text: str, source: Optional[str] = None) -> ParseResult:
        """Parse markup text into a result object."""
        result = parse_string(text, self.config, self.correlation_id, source)
        self._record(result)
        return result

    def parse_file(self, file_path: Union[str, Path], encoding: str = "utf-8") -> ParseResult:
        """Parse a markup file into a result object."""
        result = parse_file(file_path, encoding, self.config, self.correlation_id)
        self._record(result)
        return result

    def parse_document(self, text: str) -> Node:
        """Parse markup text and return the root node, raising on error."""
        start_time = time.perf_counter()
        try:
            root = parse_document(text, self.config, self.correlation_id)
        except MarkupParseError:
            self._parse_count += 1
            self._total_processing_time += (time.perf_counter() - start_time) * MS_PER_SECOND
            raise
        self._parse_count += 1
        self._successful_parses += 1
        self._total_processing_time += (time.perf_counter() - start_time) * MS_PER_SECOND
        return root

    def reconfigure(self, config: ParserConfig) -> None:
        """Replace the configuration used by later parses."""
        self.config = config
        self.logger.info(
            "Parser reconfigured",
            extra={"preset": config.name, "max_depth": config.max_depth},
        )

    def _record(self, result: ParseResult) -> None:
        self._parse_count += 1
        self._total_processing_time += result.performance.processing_time_ms
        if result.success:
            self._successful_parses += 1

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0
        self.logger.info("Parser statistics reset")
