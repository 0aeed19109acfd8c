"""
Validation schemas for data leaving the pipeline.

Best-effort validation: records that fail are collected with their errors,
valid records proceed. Nothing here raises on bad input.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..models import (
    ColumnMapping,
    DiagnosticSeverity,
    DiagnosticSource,
    ParseDiagnostic,
    RecStatus,
    ScriptLineInput,
    Table,
)

TIMECODE_FORMAT = re.compile(r"^\d{1,2}:\d{2}:\d{2}(?::\d{2})?$")


class ScriptLineRecord(BaseModel):
    """Validated script line, as handed to persistence."""

    line_number: int = Field(gt=0, description="Dense 1-based line number")
    role_name: str = Field(min_length=1, description="Speaking role")
    timecode: Optional[str] = Field(default=None, description="HH:MM:SS or HH:MM:SS:FF")
    source_text: Optional[str] = None
    translation: Optional[str] = None
    rec_status: Optional[RecStatus] = None
    notes: Optional[str] = None

    @field_validator("timecode")
    @classmethod
    def check_timecode(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not TIMECODE_FORMAT.match(value):
            raise ValueError("expected HH:MM:SS or HH:MM:SS:FF")
        return value


class ColumnMappingRecord(BaseModel):
    """Validated column mapping."""

    role_name_column: str = Field(min_length=1, description="Role column is required")
    timecode_column: Optional[str] = None
    source_text_column: Optional[str] = None
    translation_column: Optional[str] = None
    rec_status_column: Optional[str] = None
    notes_column: Optional[str] = None
    skip_empty_role: bool = True
    sheet_index: int = Field(default=0, ge=0)


@dataclass
class RejectedLine:
    """A record that failed validation."""

    index: int
    raw: Any
    errors: List[str]


@dataclass
class LineValidationReport:
    """Result of batch validation."""

    success: bool
    data: List[ScriptLineRecord] = field(default_factory=list)
    rejected: List[RejectedLine] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)


def _format_errors(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(p) for p in issue['loc'])}: {issue['msg']}"
        for issue in error.errors()
    ]


def validate_script_lines(lines: Sequence[Any]) -> LineValidationReport:
    """
    Validate script lines with per-record error reporting.

    Args:
        lines: ScriptLineInput objects or plain dicts

    Returns:
        LineValidationReport; rejected lines never stop valid ones
    """
    data: List[ScriptLineRecord] = []
    rejected: List[RejectedLine] = []
    diagnostics: List[ParseDiagnostic] = []

    for index, line in enumerate(lines):
        payload = line.to_dict() if isinstance(line, ScriptLineInput) else line
        try:
            data.append(ScriptLineRecord.model_validate(payload))
        except ValidationError as e:
            errors = _format_errors(e)
            rejected.append(RejectedLine(index=index, raw=line, errors=errors))
            diagnostics.append(
                ParseDiagnostic(
                    DiagnosticSeverity.WARNING,
                    DiagnosticSource.VALIDATION,
                    f"Line {index + 1}: {'; '.join(errors)}",
                    line=index + 1,
                )
            )

    if rejected:
        severity = (
            DiagnosticSeverity.ERROR
            if len(rejected) == len(lines)
            else DiagnosticSeverity.WARNING
        )
        diagnostics.insert(
            0,
            ParseDiagnostic(
                severity,
                DiagnosticSource.VALIDATION,
                f"{len(rejected)} of {len(lines)} lines failed validation",
            ),
        )

    return LineValidationReport(
        success=not rejected,
        data=data,
        rejected=rejected,
        diagnostics=diagnostics,
    )


def validate_table(table: Table) -> List[ParseDiagnostic]:
    """Check a table for missing or duplicate headers."""
    diagnostics: List[ParseDiagnostic] = []

    if not table.headers:
        diagnostics.append(
            ParseDiagnostic(
                DiagnosticSeverity.ERROR,
                DiagnosticSource.VALIDATION,
                "Table must have at least one column",
            )
        )

    seen = set()
    for header in table.headers:
        if header in seen:
            diagnostics.append(
                ParseDiagnostic(
                    DiagnosticSeverity.WARNING,
                    DiagnosticSource.VALIDATION,
                    f'Duplicate header: "{header}"',
                )
            )
        seen.add(header)

    return diagnostics


def validate_column_mapping(
    mapping: ColumnMapping,
    available_headers: Sequence[str],
) -> List[ParseDiagnostic]:
    """
    Check a column mapping against the table headers.

    Returns:
        Error diagnostics for a missing role column or unknown headers
    """
    try:
        ColumnMappingRecord.model_validate(mapping.to_dict())
    except ValidationError as e:
        return [
            ParseDiagnostic(
                DiagnosticSeverity.ERROR,
                DiagnosticSource.VALIDATION,
                f"Invalid mapping: {message}",
            )
            for message in _format_errors(e)
        ]

    headers = set(available_headers)
    diagnostics: List[ParseDiagnostic] = []
    for field_name, header in mapping.mapped_columns().items():
        if header not in headers:
            diagnostics.append(
                ParseDiagnostic(
                    DiagnosticSeverity.ERROR,
                    DiagnosticSource.VALIDATION,
                    f'Column "{header}" for {field_name} not found. '
                    f"Available columns: {', '.join(available_headers)}",
                )
            )
    return diagnostics
