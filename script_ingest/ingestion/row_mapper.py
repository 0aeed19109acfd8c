"""
Structured row mapper: tabular rows to script-line records.

Works with any table already decoded by an external reader (spreadsheet
sheets, PDF or DOCX tables, tab-separated text).
"""

import math
import logging
from typing import List, Optional, Sequence

from ..models import (
    CellValue,
    ColumnMapping,
    MappedRole,
    RecStatus,
    RoleColumnMapping,
    ScriptLineInput,
    Table,
    TableInput,
)

logger = logging.getLogger(__name__)


def select_table(tables: TableInput, sheet_index: int = 0) -> Optional[Table]:
    """Return the table at sheet_index, or None when it does not exist."""
    if isinstance(tables, Table):
        return tables if sheet_index == 0 else None
    if 0 <= sheet_index < len(tables):
        return tables[sheet_index]
    return None


def cell_to_text(value: CellValue) -> str:
    """
    Coerce a cell to trimmed text.

    None becomes "" (never the string "None"); integer-valued floats lose
    their ".0" so 12.0 reads as "12".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def optional_cell(row: dict, column: Optional[str]) -> Optional[str]:
    """Read an optional column: absent, null and blank cells become None."""
    if not column:
        return None
    return cell_to_text(row.get(column)) or None


def normalize_rec_status(value: CellValue) -> Optional[RecStatus]:
    """Accept only exact recording-status labels; everything else is None."""
    if value is None:
        return None
    return RecStatus.from_label(cell_to_text(value))


def map_rows_to_script_lines(tables: TableInput, mapping: ColumnMapping) -> List[ScriptLineInput]:
    """
    Convert table rows to ScriptLineInput records.

    Rows with an empty role name are skipped when mapping.skip_empty_role is
    set, without consuming a line number, so numbering stays dense.

    Args:
        tables: A table, or a workbook of tables selected by sheet_index
        mapping: Confirmed column mapping

    Returns:
        List of ScriptLineInput in row order
    """
    table = select_table(tables, mapping.sheet_index)
    if table is None:
        logger.warning(f"No table at sheet index {mapping.sheet_index}")
        return []

    if not mapping.role_name_column:
        logger.warning("Role column is not set; nothing to map")
        return []

    lines: List[ScriptLineInput] = []
    skipped = 0

    for row in table.rows:
        role_name = cell_to_text(row.get(mapping.role_name_column))

        if mapping.skip_empty_role and not role_name:
            skipped += 1
            continue

        rec_status = (
            normalize_rec_status(row.get(mapping.rec_status_column))
            if mapping.rec_status_column
            else None
        )

        lines.append(
            ScriptLineInput(
                line_number=len(lines) + 1,
                role_name=role_name,
                timecode=optional_cell(row, mapping.timecode_column),
                source_text=optional_cell(row, mapping.source_text_column),
                translation=optional_cell(row, mapping.translation_column),
                rec_status=rec_status,
                notes=optional_cell(row, mapping.notes_column),
            )
        )

    logger.debug(
        f"Mapped {len(lines)} of {table.total_rows} rows "
        f"({skipped} skipped for empty role)"
    )
    return lines


# =============================================================================
# Role-list import
# =============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up."""
    return int(math.floor(value + 0.5))


def parse_replicas(value: CellValue) -> int:
    """
    Parse a replica count.

    Numbers and numeric strings are rounded to the nearest integer; missing,
    non-numeric and non-positive values fall back to 1.
    """
    if value is None or isinstance(value, bool):
        return 1
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except ValueError:
        return 1
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return 1
    count = round_half_up(number)
    return count if count >= 1 else 1


def apply_role_mapping(tables: TableInput, mapping: RoleColumnMapping) -> List[MappedRole]:
    """
    Extract a deduplicated role list from a table.

    Role names are compared upper-cased; the first occurrence wins.

    Args:
        tables: A table, or a workbook of tables selected by sheet_index
        mapping: Role and replica columns

    Returns:
        List of MappedRole in first-occurrence order
    """
    table = select_table(tables, mapping.sheet_index)
    if table is None or not mapping.role_name_column:
        return []

    roles: List[MappedRole] = []
    seen = set()

    for row in table.rows:
        role_name = cell_to_text(row.get(mapping.role_name_column))
        if not role_name:
            continue

        normalized = role_name.upper()
        if normalized in seen:
            continue
        seen.add(normalized)

        replicas = (
            parse_replicas(row.get(mapping.replicas_column))
            if mapping.replicas_column
            else 1
        )
        roles.append(
            MappedRole(
                role_name=role_name,
                role_name_normalized=normalized,
                replicas_needed=replicas,
            )
        )

    logger.debug(f"Extracted {len(roles)} unique roles from {table.total_rows} rows")
    return roles


def headers_of(tables: TableInput, sheet_index: int = 0) -> Sequence[str]:
    """Headers of the selected table, or an empty list."""
    table = select_table(tables, sheet_index)
    return table.headers if table else []
