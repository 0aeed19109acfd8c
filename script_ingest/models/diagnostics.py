"""
Structured diagnostics for every stage of the ingestion pipeline.

Components never raise on malformed input. Degraded output is reported
through diagnostics so the caller can show it to a human.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional


class DiagnosticSeverity(str, Enum):
    """Severity level of a diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class DiagnosticSource(str, Enum):
    """Pipeline stage that produced a diagnostic."""

    TOKENIZER = "tokenizer"
    GROUPER = "grouper"
    NARRATIVE = "narrative"
    COLUMN_DETECTION = "column-detection"
    ROW_MAPPER = "row-mapper"
    CONTENT_DETECTION = "content-detection"
    VALIDATION = "validation"
    LOADER = "loader"
    ROLE_MATCHING = "role-matching"
    PIPELINE = "pipeline"


_SEVERITY_ORDER = {
    DiagnosticSeverity.ERROR: 0,
    DiagnosticSeverity.WARNING: 1,
    DiagnosticSeverity.INFO: 2,
}


@dataclass(frozen=True)
class ParseDiagnostic:
    """A single diagnostic message."""

    severity: DiagnosticSeverity
    source: DiagnosticSource
    message: str
    line: Optional[int] = None  # 1-based source line or row
    context: Optional[str] = None  # Snippet of the offending content

    def format(self) -> str:
        """Format as a single log-friendly line."""
        loc = f":{self.line}" if self.line else ""
        ctx = f' -> "{self.context}"' if self.context else ""
        return f"[{self.severity.value.upper()}] {self.source.value}{loc}: {self.message}{ctx}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "severity": self.severity.value,
            "source": self.source.value,
            "message": self.message,
            "line": self.line,
            "context": self.context,
        }


class DiagnosticCollector:
    """Accumulates diagnostics across pipeline stages."""

    def __init__(self):
        self._items: List[ParseDiagnostic] = []

    def add(self, diagnostic: ParseDiagnostic):
        self._items.append(diagnostic)

    def add_all(self, diagnostics: Iterable[ParseDiagnostic]):
        self._items.extend(diagnostics)

    def error(self, source: DiagnosticSource, message: str, line: int = None, context: str = None):
        self.add(ParseDiagnostic(DiagnosticSeverity.ERROR, source, message, line, context))

    def warn(self, source: DiagnosticSource, message: str, line: int = None, context: str = None):
        self.add(ParseDiagnostic(DiagnosticSeverity.WARNING, source, message, line, context))

    def info(self, source: DiagnosticSource, message: str, line: int = None, context: str = None):
        self.add(ParseDiagnostic(DiagnosticSeverity.INFO, source, message, line, context))

    def all(self) -> List[ParseDiagnostic]:
        """All diagnostics sorted by severity (error, warning, info)."""
        return sorted(self._items, key=lambda d: _SEVERITY_ORDER[d.severity])

    def errors(self) -> List[ParseDiagnostic]:
        return [d for d in self._items if d.severity == DiagnosticSeverity.ERROR]

    def warnings(self) -> List[ParseDiagnostic]:
        return [d for d in self._items if d.severity == DiagnosticSeverity.WARNING]

    def has_errors(self) -> bool:
        return any(d.severity == DiagnosticSeverity.ERROR for d in self._items)

    def clear(self):
        self._items = []

    def format(self) -> str:
        """Format all diagnostics, one per line."""
        return "\n".join(d.format() for d in self.all())

    def __len__(self) -> int:
        return len(self._items)


def summarize_diagnostics(diagnostics: Iterable[ParseDiagnostic]) -> str:
    """
    Summarize diagnostics for display.

    Returns:
        Short string like "2 errors, 5 warnings", or "no issues"
    """
    counts = {severity: 0 for severity in DiagnosticSeverity}
    for d in diagnostics:
        counts[d.severity] += 1

    parts = []
    for severity, label in (
        (DiagnosticSeverity.ERROR, "error"),
        (DiagnosticSeverity.WARNING, "warning"),
        (DiagnosticSeverity.INFO, "note"),
    ):
        n = counts[severity]
        if n:
            parts.append(f"{n} {label}{'s' if n != 1 else ''}")

    return ", ".join(parts) or "no issues"
