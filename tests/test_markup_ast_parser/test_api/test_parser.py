"""Tests for the public parsing API."""

from unittest.mock import Mock, patch

import pytest

from markup_ast_parser import (
    MarkupParser,
    ParserConfig,
    parse_document,
    parse_file,
    parse_string,
)
from markup_ast_parser.shared import (
    ClosingTagMismatch,
    DiagnosticSeverity,
    ErrorKind,
    UnexpectedEndOfInput,
)
from markup_ast_parser.tree import Literal, Node, Text, VariableReference, to_markup


class TestParseDocument:
    """Test the raising entry point."""

    def test_empty_element(self):
        """Test <div></div>."""
        assert parse_document("<div></div>") == Node(id=0, name="div")

    def test_attribute_and_text(self):
        """Test <div class="a">text</div>."""
        root = parse_document('<div class="a">text</div>')

        assert root.attributes[0].name == "class"
        assert root.attributes[0].value == Literal("a")
        assert root.children == (Text("text"),)

    def test_self_closing(self):
        """Test <br/>."""
        root = parse_document("<br/>")

        assert root.self_closing
        assert root.children == ()

    def test_nested_ids(self):
        """Test <a><b/></a>."""
        root = parse_document("<a><b/></a>")

        assert root.id == 0
        assert root.children[0].id == 1
        assert root.children[0].parent_id == 0

    def test_variable_reference(self):
        """Test <a x={y}/>."""
        root = parse_document("<a x={y}/>")

        assert root.attributes[0].value == VariableReference("y")

    def test_mismatch_raises(self):
        """Test <a></b>."""
        with pytest.raises(ClosingTagMismatch):
            parse_document("<a></b>")

    def test_ids_are_unique_and_pre_order(self):
        """Test id ordering on a wider document."""
        root = parse_document(
            "<r><a><b/>x<c></c></a><d/><e><f><g/></f></e></r>"
        )
        ids = [node.id for node in root.iter_nodes()]

        assert ids == list(range(len(ids)))
        for node in root.iter_nodes():
            for child in node.element_children:
                assert child.parent_id == node.id
                assert child.id > node.id

    def test_round_trip(self):
        """Test that rendered markup parses back to an equal tree."""
        root = parse_document(
            '<form action="/save" data={record}>\n'
            "  <input name=\"title\" required/>\n"
            "  Save changes\n"
            "</form>"
        )

        assert parse_document(to_markup(root)) == root


class TestParseString:
    """Test the result-returning entry point."""

    def test_success(self):
        """Test a successful result."""
        result = parse_string('<a x="1"><b/></a>', source="inline")

        assert result.success
        assert result.error is None
        assert result.root.name == "a"
        assert result.source == "inline"
        assert result.node_count == 2
        assert result.attribute_count == 1
        assert result.performance.characters_processed == 17
        assert result.performance.nodes_created == 2
        assert result.performance.attributes_created == 1
        assert not result.has_errors()

    def test_failure_carries_error(self):
        """Test that markup errors are returned, not raised."""
        result = parse_string("<a>")

        assert not result.success
        assert result.root is None
        assert isinstance(result.error, UnexpectedEndOfInput)
        assert result.error.kind is ErrorKind.UNEXPECTED_END_OF_INPUT
        assert result.has_errors()

        critical = result.get_diagnostics_by_severity(DiagnosticSeverity.CRITICAL)
        assert len(critical) == 1
        assert critical[0].component == "document_parser"
        assert critical[0].details["kind"] == "unexpected_end_of_input"

    def test_correlation_id_from_config(self):
        """Test that the configured correlation id is used."""
        config = ParserConfig(correlation_id="req-1")

        result = parse_string("<a/>", config)

        assert result.correlation_id == "req-1"

    def test_explicit_correlation_id_wins(self):
        """Test that an explicit correlation id overrides the config."""
        config = ParserConfig(correlation_id="req-1")

        result = parse_string("<a/>", config, correlation_id="req-2")

        assert result.correlation_id == "req-2"

    @patch("markup_ast_parser.api.parser.psutil")
    def test_memory_tracking(self, mock_psutil):
        """Test memory sampling with psutil."""
        mock_psutil.Process.return_value.memory_info.side_effect = [
            Mock(rss=1000),
            Mock(rss=5000),
        ]

        result = parse_string("<a/>")

        assert result.performance.memory_used_bytes == 4000
        assert mock_psutil.Process.return_value.memory_info.call_count == 2

    @patch("markup_ast_parser.api.parser.psutil")
    def test_memory_tracking_disabled(self, mock_psutil):
        """Test that psutil is not used when tracking is off."""
        result = parse_string("<a/>", ParserConfig.performance_optimized())

        assert result.success
        assert result.performance.memory_used_bytes == 0
        mock_psutil.Process.assert_not_called()


class TestParseFile:
    """Test file parsing."""

    def test_parse_file(self, tmp_path):
        """Test parsing a file from disk."""
        path = tmp_path / "page.tpl"
        path.write_text('<page title="Home"/>', encoding="utf-8")

        result = parse_file(path)

        assert result.success
        assert result.root.get_attribute("title").value == Literal("Home")
        assert result.source == str(path)
        info = result.get_diagnostics_by_severity(DiagnosticSeverity.INFO)
        assert info[0].message == "File read with encoding: utf-8"

    def test_markup_error_in_file(self, tmp_path):
        """Test a file with malformed markup."""
        path = tmp_path / "broken.tpl"
        path.write_text("<a></b>", encoding="utf-8")

        result = parse_file(str(path))

        assert not result.success
        assert result.error.kind is ErrorKind.CLOSING_TAG_MISMATCH
        assert result.source == str(path)

    def test_missing_file(self, tmp_path):
        """Test that a missing file gives a failed result."""
        result = parse_file(tmp_path / "missing.tpl")

        assert not result.success
        assert result.error is None
        assert "File not found" in result.diagnostics[0].message
        assert result.diagnostics[0].component == "api_parser"

    def test_directory(self, tmp_path):
        """Test that a directory gives a failed result."""
        result = parse_file(tmp_path)

        assert not result.success
        assert "Path is not a file" in result.diagnostics[0].message

    def test_undecodable_file(self, tmp_path):
        """Test content that is not valid in the requested encoding."""
        path = tmp_path / "latin.tpl"
        path.write_bytes(b"<a>\xff</a>")

        result = parse_file(path)

        assert not result.success
        assert "Could not decode" in result.diagnostics[0].message

    def test_explicit_encoding(self, tmp_path):
        """Test reading with a non-default encoding."""
        path = tmp_path / "latin.tpl"
        path.write_bytes(b"<a>caf\xe9</a>")

        result = parse_file(path, encoding="latin-1")

        assert result.root.texts == ["café"]


class TestMarkupParser:
    """Test the configured parser object."""

    def test_statistics(self):
        """Test statistics across successful and failed parses."""
        parser = MarkupParser()
        parser.parse("<a/>")
        parser.parse("<a>")

        stats = parser.statistics
        assert stats["total_parses"] == 2
        assert stats["successful_parses"] == 1
        assert stats["success_rate"] == 0.5

    def test_parse_document_counts_parses(self):
        """Test that the raising variant is counted too."""
        parser = MarkupParser()
        parser.parse_document("<a/>")
        with pytest.raises(ClosingTagMismatch):
            parser.parse_document("<a></b>")

        assert parser.statistics["total_parses"] == 2
        assert parser.statistics["successful_parses"] == 1

    def test_reset_statistics(self):
        """Test clearing statistics."""
        parser = MarkupParser()
        parser.parse("<a/>")

        parser.reset_statistics()

        assert parser.statistics["total_parses"] == 0
        assert parser.statistics["success_rate"] == 0.0
        assert parser.statistics["average_processing_time_ms"] == 0.0

    def test_reconfigure(self):
        """Test switching configuration between parses."""
        parser = MarkupParser()
        assert parser.parse("<a/> tail").success

        parser.reconfigure(ParserConfig.strict())

        assert not parser.parse("<a/> tail").success

    def test_parse_file(self, tmp_path):
        """Test file parsing through the parser object."""
        path = tmp_path / "a.tpl"
        path.write_text("<a/>", encoding="utf-8")
        parser = MarkupParser(correlation_id="batch-7")

        result = parser.parse_file(path)

        assert result.success
        assert result.correlation_id == "batch-7"
        assert parser.statistics["correlation_id"] == "batch-7"
