"""Result objects and diagnostic types for markup parsing.

``ParseResult`` is the failure-carrying counterpart of ``parse_document``: it
holds either the finished tree or the error that aborted the parse, together
with diagnostics and performance metrics.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from markup_ast_parser.tree.nodes import Node

from .errors import MarkupParseError


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()   # The parse was aborted


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
            "position": self.position,
            "details": self.details,
        }


@dataclass
class PerformanceMetrics:
    """Performance metrics for a parse."""

    processing_time_ms: float = 0.0
    memory_used_bytes: int = 0
    characters_processed: int = 0
    nodes_created: int = 0
    attributes_created: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "processing_time_ms": self.processing_time_ms,
            "memory_used_bytes": self.memory_used_bytes,
            "characters_processed": self.characters_processed,
            "nodes_created": self.nodes_created,
            "attributes_created": self.attributes_created,
        }


@dataclass
class ParseResult:
    """Outcome of parsing one document.

    Exactly one of ``root`` and ``error`` is set: a failed parse never carries
    a partial tree.
    """

    root: Optional[Node] = None
    success: bool = True
    error: Optional[MarkupParseError] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    correlation_id: Optional[str] = None
    source: Optional[str] = None

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("A successful result cannot carry an error")
        if not self.success and self.root is not None:
            raise ValueError("A failed result cannot carry a tree")

    @classmethod
    def failure(
        cls,
        error: MarkupParseError,
        component: str,
        correlation_id: Optional[str] = None,
        source: Optional[str] = None,
    ) -> "ParseResult":
        """Build a failed result with a CRITICAL diagnostic for ``error``."""
        result = cls(
            success=False,
            error=error,
            correlation_id=correlation_id,
            source=source,
        )
        result.add_diagnostic(
            DiagnosticSeverity.CRITICAL,
            str(error),
            component,
            position=error.position.to_dict() if error.position else None,
            details=error.to_dict(),
        )
        return result

    @property
    def node_count(self) -> int:
        """Get total number of nodes in the tree."""
        if self.root is None:
            return 0
        return sum(1 for _ in self.root.iter_nodes())

    @property
    def attribute_count(self) -> int:
        """Get total number of attributes in the tree."""
        if self.root is None:
            return 0
        return sum(len(node.attributes) for node in self.root.iter_nodes())

    @property
    def max_depth(self) -> int:
        """Get the deepest nesting level, the root being level 1."""
        if self.root is None:
            return 0
        return self.root.height

    @property
    def processing_time_ms(self) -> float:
        return self.performance.processing_time_ms

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get a compact summary suitable for reports."""
        return {
            "source": self.source,
            "success": self.success,
            "error": self.error.to_dict() if self.error else None,
            "root": self.root.name if self.root else None,
            "node_count": self.node_count,
            "attribute_count": self.attribute_count,
            "max_depth": self.max_depth,
            "processing_time_ms": self.performance.processing_time_ms,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert the full result, tree included, to a dictionary."""
        return {
            "source": self.source,
            "success": self.success,
            "correlation_id": self.correlation_id,
            "root": self.root.to_dict() if self.root else None,
            "error": self.error.to_dict() if self.error else None,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
            "performance": self.performance.to_dict(),
        }
