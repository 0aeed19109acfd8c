"""Script line, table and column-mapping models."""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union


class RecStatus(str, Enum):
    """Recording status labels. Values must match exactly."""

    RECORDED = "הוקלט"
    OPTIONAL = "Optional"
    NOT_RECORDED = "לא הוקלט"

    @classmethod
    def from_label(cls, label: str) -> Optional["RecStatus"]:
        """Return the status for an exact label, or None."""
        if label in REC_STATUS_LABELS:
            return cls(label)
        return None


REC_STATUS_LABELS = tuple(s.value for s in RecStatus)


@dataclass(frozen=True)
class ScriptLineInput:
    """Canonical ingestion output, identical for every source path."""

    line_number: int  # Dense, 1-based, output order
    role_name: str
    timecode: Optional[str] = None
    source_text: Optional[str] = None
    translation: Optional[str] = None
    rec_status: Optional[RecStatus] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for the persistence layer."""
        return {
            "line_number": self.line_number,
            "timecode": self.timecode,
            "role_name": self.role_name,
            "source_text": self.source_text,
            "translation": self.translation,
            "rec_status": self.rec_status.value if self.rec_status else None,
            "notes": self.notes,
        }


CellValue = Union[str, int, float, None]


class TableSource(str, Enum):
    """Origin of a structured table."""

    EXCEL = "excel"
    PDF_TABLE = "pdf-table"
    DOCX_TABLE = "docx-table"
    TEXT_TABULAR = "text-tabular"
    CSV = "csv"
    JSON = "json"


@dataclass
class Table:
    """Rows of named cells, already decoded by an external reader."""

    headers: List[str]
    rows: List[Dict[str, CellValue]] = field(default_factory=list)
    source: TableSource = TableSource.EXCEL
    sheet_name: Optional[str] = None

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    @property
    def preview(self) -> List[Dict[str, CellValue]]:
        """First rows, for a column-mapping preview."""
        return self.rows[:10]

    def __len__(self) -> int:
        return len(self.rows)


# A single table or a workbook of tables (one per sheet)
TableInput = Union[Table, Sequence[Table]]


@dataclass
class ColumnMapping:
    """Assignment of semantic roles to raw column headers."""

    role_name_column: str = ""  # Required; empty means not found
    timecode_column: Optional[str] = None
    source_text_column: Optional[str] = None
    translation_column: Optional[str] = None
    rec_status_column: Optional[str] = None
    notes_column: Optional[str] = None
    skip_empty_role: bool = True
    sheet_index: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def mapped_columns(self) -> Dict[str, str]:
        """Field name to header for every mapped column."""
        fields = {
            "role_name": self.role_name_column,
            "timecode": self.timecode_column,
            "source_text": self.source_text_column,
            "translation": self.translation_column,
            "rec_status": self.rec_status_column,
            "notes": self.notes_column,
        }
        return {name: header for name, header in fields.items() if header}


@dataclass
class RoleColumnMapping:
    """Column mapping for role-list import."""

    role_name_column: str = ""
    replicas_column: Optional[str] = None
    sheet_index: int = 0


@dataclass(frozen=True)
class MappedRole:
    """A role extracted from a role list."""

    role_name: str
    role_name_normalized: str
    replicas_needed: int = 1
    source: str = "script"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)
