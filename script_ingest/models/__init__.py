"""
Data models for the script ingestion pipeline.

This module provides dataclasses for:
- Tokens: Token, TokenKind, TokenizeResult
- Dialogue: DialogueBlock, DialogueLine
- Script lines: ScriptLineInput, RecStatus
- Tables: Table, TableSource, ColumnMapping, RoleColumnMapping, MappedRole
- Diagnostics: ParseDiagnostic, DiagnosticCollector
"""

from .diagnostics import (
    DiagnosticCollector,
    DiagnosticSeverity,
    DiagnosticSource,
    ParseDiagnostic,
    summarize_diagnostics,
)
from .tokens import (
    CUE_KINDS,
    DialogueBlock,
    DialogueLine,
    Token,
    TokenKind,
    TokenizeResult,
)
from .script_line import (
    REC_STATUS_LABELS,
    CellValue,
    ColumnMapping,
    MappedRole,
    RecStatus,
    RoleColumnMapping,
    ScriptLineInput,
    Table,
    TableInput,
    TableSource,
)

__all__ = [
    # Diagnostics
    "DiagnosticCollector",
    "DiagnosticSeverity",
    "DiagnosticSource",
    "ParseDiagnostic",
    "summarize_diagnostics",
    # Tokens
    "CUE_KINDS",
    "DialogueBlock",
    "DialogueLine",
    "Token",
    "TokenKind",
    "TokenizeResult",
    # Script lines and tables
    "REC_STATUS_LABELS",
    "CellValue",
    "ColumnMapping",
    "MappedRole",
    "RecStatus",
    "RoleColumnMapping",
    "ScriptLineInput",
    "Table",
    "TableInput",
    "TableSource",
]
