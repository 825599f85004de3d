"""Main CLI entry point for the markup-ast command-line tool.

Provides ``parse`` (print trees as JSON, an outline or re-serialized markup)
and ``validate`` (report well-formedness) over files and directories.
"""

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from markup_ast_parser import __version__
from markup_ast_parser.api import MarkupParser
from markup_ast_parser.shared.config import PRESET_NAMES, ConfigError, ParserConfig
from markup_ast_parser.shared.logging import configure_logging, get_logger
from markup_ast_parser.shared.result import ParseResult
from markup_ast_parser.tree import dump_json, to_markup, to_outline

MARKUP_EXTENSIONS = {".markup", ".tpl", ".html", ".xml"}
PROGRESS_THRESHOLD = 10  # Show progress only for batches at least this large


class ProgressTracker:
    """Progress tracking for long-running batches."""

    def __init__(self, total: int, description: str = "Processing"):
        self.total = total
        self.completed = 0
        self.description = description
        self.last_update = 0.0

    def update(self, increment: int = 1) -> None:
        """Update progress and display if needed."""
        self.completed += increment
        current_time = time.time()

        # Update every second or on completion
        if current_time - self.last_update >= 1.0 or self.completed >= self.total:
            self._display_progress()
            self.last_update = current_time

    def _display_progress(self) -> None:
        if self.total == 0:
            return

        percentage = (self.completed / self.total) * 100
        progress_bar = "=" * int(percentage // 2)
        progress_bar += " " * (50 - len(progress_bar))

        print(f"\r{self.description}: [{progress_bar}] "
              f"{percentage:.1f}% ({self.completed}/{self.total})",
              end="", file=sys.stderr)

        if self.completed >= self.total:
            print(file=sys.stderr)


class MarkupProcessor:
    """Runs the parser over files for the CLI commands."""

    def __init__(self, config: ParserConfig, show_progress: bool = True):
        self.parser = MarkupParser(config)
        self.show_progress = show_progress
        self.logger = get_logger(__name__, config.correlation_id, "cli_processor")

    def find_markup_files(self, path: Path, recursive: bool = False) -> Iterator[Path]:
        """Yield markup files under ``path``; explicit files are always yielded."""
        if path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file() and candidate.suffix.lower() in MARKUP_EXTENSIONS:
                    yield candidate
        else:
            yield path

    def batch_process(self, paths: List[Path], recursive: bool = False) -> List[ParseResult]:
        """Parse every file found under ``paths``."""
        all_files: List[Path] = []
        for path in paths:
            all_files.extend(self.find_markup_files(path, recursive))

        progress = None
        if self.show_progress and len(all_files) >= PROGRESS_THRESHOLD:
            progress = ProgressTracker(len(all_files), "Parsing markup files")

        results = []
        for file_path in all_files:
            results.append(self.parser.parse_file(file_path))
            if progress:
                progress.update()

        self.logger.info(
            "Batch processed",
            extra={"file_count": len(all_files), **self.parser.statistics},
        )
        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="markup-ast",
        description="Parse template markup into an abstract syntax tree"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse markup files")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Markup files or directories to parse"
    )
    parse_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=["json", "text", "markup"],
        default="json",
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    _add_config_arguments(parse_parser)

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate markup files")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Markup files or directories to validate"
    )
    validate_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Use the strict preset"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )
    _add_config_arguments(validate_parser)

    return parser


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path (JSON)"
    )
    parser.add_argument(
        "--preset",
        choices=list(PRESET_NAMES),
        help="Parser configuration preset"
    )


def load_config(args: argparse.Namespace) -> ParserConfig:
    """Build the parser configuration from command-line arguments.

    ``--strict`` (or else ``--preset``) selects the base preset, taking
    precedence over a ``preset`` key in the configuration file; the file's
    remaining settings are applied on top of it.
    """
    preset = "strict" if getattr(args, "strict", False) else args.preset
    if args.config:
        return ParserConfig.from_file(args.config, preset=preset)
    if preset:
        return ParserConfig.preset(preset)
    return ParserConfig()


def _create_processor(args: argparse.Namespace) -> MarkupProcessor:
    config = load_config(args)
    if not (args.verbose or args.quiet):
        configure_logging(config.logging_level)
    return MarkupProcessor(config, show_progress=not args.quiet)


def _error_line(result: ParseResult) -> str:
    if result.error is not None:
        return str(result.error)
    critical = [d.message for d in result.diagnostics if d.severity.name == "CRITICAL"]
    return critical[0] if critical else "unknown error"


def format_results(results: List[ParseResult], format_type: str) -> str:
    """Format parse results for output."""
    if format_type == "json":
        return dump_json([result.to_dict() for result in results], indent=2)

    lines = []
    for result in results:
        if format_type == "text":
            lines.append(f"# {result.source}")
        if result.root is None:
            lines.append(f"error: {_error_line(result)}")
        elif format_type == "markup":
            lines.append(to_markup(result.root))
        else:
            lines.append(to_outline(result.root))
        if format_type == "text":
            lines.append("")
    return "\n".join(lines)


def format_validation(results: List[ParseResult], format_type: str) -> str:
    """Format validation results for output."""
    entries: List[Dict[str, Any]] = []
    for result in results:
        entry: Dict[str, Any] = {
            "file": result.source,
            "valid": result.success,
            "node_count": result.node_count,
        }
        if not result.success:
            entry["error"] = _error_line(result)
            if result.error is not None:
                entry["kind"] = result.error.kind.value
        entries.append(entry)

    if format_type == "json":
        return json.dumps(entries, indent=2)

    valid_count = sum(1 for entry in entries if entry["valid"])
    lines = [f"Validated {len(entries)} files, {valid_count} valid", "-" * 50]
    for entry in entries:
        status = "✓" if entry["valid"] else "✗"
        lines.append(f"{status} {entry['file']}")
        if not entry["valid"]:
            lines.append(f"   Error: {entry['error']}")
    return "\n".join(lines)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    processor = _create_processor(args)
    results = processor.batch_process(args.paths, args.recursive)
    formatted_output = format_results(results, args.format)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    if not results:
        print("No markup files found", file=sys.stderr)
        return 1
    return 0 if all(result.success for result in results) else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    processor = _create_processor(args)
    results = processor.batch_process(args.paths, args.recursive)
    print(format_validation(results, args.format))

    if not results:
        return 1
    return 0 if all(result.success for result in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        configure_logging("DEBUG")
    elif args.quiet:
        configure_logging("ERROR")

    try:
        if args.command == "parse":
            return cmd_parse(args)
        if args.command == "validate":
            return cmd_validate(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
