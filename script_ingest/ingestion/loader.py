"""Input readers for script text and already-decoded tables."""

import csv
import io
import json
import logging
import re
from pathlib import Path
from typing import List, Optional

from ..models import Table, TableSource

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".text", ".fountain"}
TABLE_SUFFIXES = {".csv", ".tsv", ".json"}

# Header-less column text: timecode, speaker, line
DEFAULT_COLUMN_HEADERS = ("Timecode", "Character", "Dialogue")
COLUMN_GAP_PATTERN = re.compile(r"\s{2,}")
LEADING_TIMECODE_PATTERN = re.compile(r"^\d{1,2}:\d{2}:\d{2}")


def read_text_file(file_path: Path) -> str:
    """Read a text file as UTF-8."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise ValueError(f"Input file not found: {file_path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"Input file is not valid UTF-8: {file_path}: {e}") from e

    # Strip a BOM that decoded as a character
    return content.lstrip("\ufeff")


def parse_delimited_text(
    text: str,
    delimiter: str = "\t",
    source: TableSource = TableSource.TEXT_TABULAR,
    sheet_name: Optional[str] = None,
) -> Table:
    """
    Split delimited text into a table; the first non-empty line is the header.

    Short rows are padded with None; extra cells are ignored.
    """
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    records = [record for record in reader if any(cell.strip() for cell in record)]
    if not records:
        return Table(headers=[], rows=[], source=source, sheet_name=sheet_name)

    headers = [h.strip() for h in records[0]]

    rows = []
    for record in records[1:]:
        row = {}
        for index, header in enumerate(headers):
            row[header] = record[index] if index < len(record) else None
        rows.append(row)

    return Table(headers=headers, rows=rows, source=source, sheet_name=sheet_name)


def parse_column_text(text: str, sheet_name: Optional[str] = None) -> Table:
    """
    Split column-aligned text into a table.

    Tab-separated text goes through parse_delimited_text. Otherwise cells are
    separated by runs of two or more spaces, and the last column keeps any
    remaining gaps. When the first row starts with a timecode the text has no
    header row and DEFAULT_COLUMN_HEADERS are used.
    """
    if "\t" in text:
        return parse_delimited_text(text, sheet_name=sheet_name)

    records = [line.strip() for line in text.splitlines() if line.strip()]
    if not records:
        return Table(headers=[], rows=[], source=TableSource.TEXT_TABULAR, sheet_name=sheet_name)

    if LEADING_TIMECODE_PATTERN.match(records[0]):
        headers = list(DEFAULT_COLUMN_HEADERS)
        data = records
    else:
        headers = COLUMN_GAP_PATTERN.split(records[0])
        data = records[1:]

    rows = []
    for record in data:
        cells = COLUMN_GAP_PATTERN.split(record, maxsplit=len(headers) - 1)
        rows.append({
            header: cells[index] if index < len(cells) else None
            for index, header in enumerate(headers)
        })

    return Table(headers=headers, rows=rows, source=TableSource.TEXT_TABULAR, sheet_name=sheet_name)


def _table_from_json(data, index: int) -> Table:
    """Build a table from {"headers": [...], "rows": [...]}."""
    if not isinstance(data, dict):
        raise ValueError(f"Sheet {index + 1} is not an object with headers and rows")
    rows = data.get("rows") or []
    if not all(isinstance(r, dict) for r in rows):
        raise ValueError(f"Sheet {index + 1} rows must be objects keyed by header")
    headers = data.get("headers")
    if headers is None:
        headers = list(rows[0].keys()) if rows else []
    return Table(
        headers=[str(h) for h in headers],
        rows=[dict(r) for r in rows],
        source=TableSource.JSON,
        sheet_name=data.get("name") or data.get("sheet_name") or f"Sheet{index + 1}",
    )


def read_table_file(file_path: Path) -> List[Table]:
    """
    Read a decoded table file.

    Supports:
    - .csv / .tsv: one table, header row first
    - .json: {"headers", "rows"}, {"sheets": [...]} or a list of sheets

    Returns:
        List of tables (one per sheet)
    """
    file_path = Path(file_path)
    suffix = file_path.suffix.lower()
    if suffix not in TABLE_SUFFIXES:
        raise ValueError(f"Unsupported table format: {file_path.suffix}")

    content = read_text_file(file_path)

    if suffix == ".csv":
        return [parse_delimited_text(content, ",", TableSource.CSV, file_path.stem)]
    if suffix == ".tsv":
        return [parse_delimited_text(content, "\t", TableSource.TEXT_TABULAR, file_path.stem)]

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON table file {file_path}: {e}") from e

    if isinstance(data, dict) and "sheets" in data:
        sheets = data["sheets"]
    elif isinstance(data, dict):
        sheets = [data]
    elif isinstance(data, list):
        sheets = data
    else:
        raise ValueError(f"Unexpected JSON table layout in {file_path}")

    tables = [_table_from_json(sheet, i) for i, sheet in enumerate(sheets)]
    # Empty sheets are skipped, as spreadsheet readers do
    tables = [t for t in tables if t.rows]
    logger.debug(f"Read {len(tables)} non-empty tables from {file_path}")
    return tables


def is_table_file(file_path: Path) -> bool:
    """Return True for table file suffixes."""
    return Path(file_path).suffix.lower() in TABLE_SUFFIXES


def is_text_file(file_path: Path) -> bool:
    """Return True for text file suffixes."""
    return Path(file_path).suffix.lower() in TEXT_SUFFIXES
