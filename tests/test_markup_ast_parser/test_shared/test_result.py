"""Tests for result and diagnostic types."""

import pytest

from markup_ast_parser.api import parse_string
from markup_ast_parser.shared.config import MAX_SUPPORTED_DEPTH, ParserConfig
from markup_ast_parser.shared.errors import ClosingTagMismatch, SourcePosition
from markup_ast_parser.shared.result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseResult,
    PerformanceMetrics,
)
from markup_ast_parser.tree import Attribute, Literal, Node


def sample_root() -> Node:
    child = Node(
        id=1,
        name="b",
        parent_id=0,
        attributes=(Attribute(0, "x", Literal("1")),),
        self_closing=True,
    )
    return Node(id=0, name="a", children=(child,))


class TestDiagnosticEntry:
    """Test diagnostic validation."""

    def test_empty_message_rejected(self):
        """Test message validation."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "parser")

    def test_empty_component_rejected(self):
        """Test component validation."""
        with pytest.raises(ValueError, match="component cannot be empty"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "hello", "")

    def test_to_dict(self):
        """Test dictionary form."""
        entry = DiagnosticEntry(DiagnosticSeverity.WARNING, "careful", "parser")

        assert entry.to_dict()["severity"] == "WARNING"
        assert entry.to_dict()["component"] == "parser"


class TestPerformanceMetrics:
    """Test performance metrics."""

    def test_characters_per_second(self):
        """Test throughput calculation."""
        metrics = PerformanceMetrics(processing_time_ms=500.0, characters_processed=1000)

        assert metrics.characters_per_second == 2000.0

    def test_characters_per_second_without_time(self):
        """Test that zero time does not divide by zero."""
        assert PerformanceMetrics().characters_per_second == 0.0


class TestParseResult:
    """Test ParseResult behaviour."""

    def test_tree_statistics(self):
        """Test counts derived from the tree."""
        result = ParseResult(root=sample_root())

        assert result.node_count == 2
        assert result.attribute_count == 1
        assert result.max_depth == 2

    def test_empty_result_statistics(self):
        """Test counts without a tree."""
        result = ParseResult(success=False)

        assert result.node_count == 0
        assert result.attribute_count == 0
        assert result.max_depth == 0

    def test_success_cannot_carry_error(self):
        """Test the success invariant."""
        with pytest.raises(ValueError, match="cannot carry an error"):
            ParseResult(error=ClosingTagMismatch("a", "b"))

    def test_failure_cannot_carry_tree(self):
        """Test that failed results never hold a partial tree."""
        with pytest.raises(ValueError, match="cannot carry a tree"):
            ParseResult(root=sample_root(), success=False)

    def test_failure_factory(self):
        """Test building a failed result from an error."""
        error = ClosingTagMismatch("a", "b", SourcePosition(1, 7, 6))

        result = ParseResult.failure(error, "document_parser", "req-1", "page.tpl")

        assert not result.success
        assert result.error is error
        assert result.source == "page.tpl"
        diagnostic = result.diagnostics[0]
        assert diagnostic.severity is DiagnosticSeverity.CRITICAL
        assert diagnostic.position == {"line": 1, "column": 7, "offset": 6}
        assert diagnostic.correlation_id == "req-1"

    def test_diagnostics_by_severity(self):
        """Test filtering diagnostics."""
        result = ParseResult(root=sample_root())
        result.add_diagnostic(DiagnosticSeverity.INFO, "one", "test")
        result.add_diagnostic(DiagnosticSeverity.WARNING, "two", "test")

        assert len(result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)) == 1
        assert not result.has_errors()

        result.add_diagnostic(DiagnosticSeverity.ERROR, "three", "test")
        assert result.has_errors()

    def test_summary(self):
        """Test the compact summary."""
        summary = ParseResult(root=sample_root(), source="x").summary()

        assert summary["root"] == "a"
        assert summary["node_count"] == 2
        assert summary["error"] is None

    def test_to_dict(self):
        """Test the full dictionary form."""
        result = ParseResult.failure(ClosingTagMismatch("a", "b"), "document_parser")

        data = result.to_dict()

        assert data["success"] is False
        assert data["root"] is None
        assert data["error"]["kind"] == "closing_tag_mismatch"
        assert data["diagnostics"][0]["severity"] == "CRITICAL"
        assert "processing_time_ms" in data["performance"]


class TestDeepResult:
    """Test result helpers on a tree nested to the deepest supported level."""

    def test_summary_and_to_dict(self):
        """Test that summaries and dictionaries of deep trees are produced."""
        config = ParserConfig(max_depth=MAX_SUPPORTED_DEPTH, track_memory=False)
        text = "<a>" * MAX_SUPPORTED_DEPTH + "</a>" * MAX_SUPPORTED_DEPTH

        result = parse_string(text, config)

        summary = result.summary()
        assert summary["max_depth"] == MAX_SUPPORTED_DEPTH
        assert summary["node_count"] == MAX_SUPPORTED_DEPTH
        root = result.to_dict()["root"]
        assert root["id"] == 0
        assert root["children"][0]["parent_id"] == 0
