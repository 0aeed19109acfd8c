"""
Content type detection.

Decides which ingestion path suits an input:
- TABULAR: column-separated lines (tabs, wide gaps, leading timecodes)
- SCREENPLAY: centered or standalone upper-case cues
- HYBRID: both, e.g. a DOCX table next to free-form text

Detection is heuristic and never fails.
"""

import re
import logging
from enum import Enum
from typing import List, Sequence

from ..config import Settings
from .tokenizer import ScreenplayTokenizer, split_lines

logger = logging.getLogger(__name__)


class ContentType(str, Enum):
    """Shape of extracted script content."""

    TABULAR = "tabular"
    SCREENPLAY = "screenplay"
    HYBRID = "hybrid"


class InputKind(str, Enum):
    """Ingestion path for an input."""

    SCREENPLAY = "screenplay"  # Tokenizer + grouper
    TRANSCRIPT = "transcript"  # Narrative extractor
    TABLE = "table"  # Column detector + row mapper


# HH:MM:SS, HH:MM:SS:FF
TIMECODE_PATTERN = re.compile(r"\b\d{1,2}:\d{2}:\d{2}(?::\d{2})?\b")
LEADING_TIMECODE_PATTERN = re.compile(r"^\d{1,2}:\d{2}:\d{2}")
COLUMN_GAP_PATTERN = re.compile(r"\S[ ]{3,}\S")
UPPER_START_PATTERN = re.compile(r"^[A-Z]")


def looks_like_timecode(value: str) -> bool:
    """Return True if the value contains a timecode."""
    return bool(TIMECODE_PATTERN.search(value.strip()))


def _non_empty(lines: Sequence[str]) -> List[str]:
    return [line for line in lines if line.strip()]


def is_text_tabular(lines: Sequence[str], settings: Settings = None) -> bool:
    """
    Return True if most non-empty lines look like table rows.

    A line is tabular when it contains a tab, a gap of 3+ spaces between
    non-space characters (not leading indentation), or starts with a timecode.
    """
    settings = settings or Settings()
    non_empty = _non_empty(lines)
    if len(non_empty) < settings.TABULAR_MIN_LINES:
        return False

    tabular = 0
    for line in non_empty:
        if "\t" in line.strip() or COLUMN_GAP_PATTERN.search(line):
            tabular += 1
        elif LEADING_TIMECODE_PATTERN.match(line.strip()):
            tabular += 1

    return tabular / len(non_empty) > settings.TABULAR_LINE_RATIO


def _is_caps_line(trimmed: str) -> bool:
    return (
        0 < len(trimmed) <= 50
        and trimmed == trimmed.upper()
        and bool(UPPER_START_PATTERN.match(trimmed))
    )


def has_screenplay_features(lines: Sequence[str], settings: Settings = None) -> bool:
    """Return True if centered or standalone upper-case cues are common."""
    settings = settings or Settings()
    non_empty = _non_empty(lines)
    if not non_empty:
        return False

    centered = sum(1 for line in non_empty if line.startswith(" ") and _is_caps_line(line.strip()))
    standalone = sum(
        1 for line in non_empty
        if len(line.strip()) >= 2 and _is_caps_line(line.strip())
    )

    return (
        centered / len(non_empty) > settings.SCREENPLAY_CENTERED_RATIO
        or standalone / len(non_empty) > settings.SCREENPLAY_CAPS_RATIO
    )


def detect_content_type(
    text_lines: Sequence[str] = (),
    pdf_aligned_columns: int = 0,
    pdf_row_count: int = 0,
    docx_has_tables: bool = False,
    docx_table_row_count: int = 0,
) -> ContentType:
    """
    Determine the content type of an extracted script.

    Args:
        text_lines: Lines of extracted text
        pdf_aligned_columns: Aligned PDF columns found by the reader
        pdf_row_count: Rows in the strongest PDF column alignment
        docx_has_tables: Whether the DOCX has at least one table
        docx_table_row_count: Data rows in the DOCX table(s)

    Returns:
        ContentType
    """
    is_tabular = (
        (docx_has_tables and docx_table_row_count >= 5)
        or (pdf_aligned_columns >= 3 and pdf_row_count >= 10)
        or is_text_tabular(text_lines)
    )
    is_screenplay = has_screenplay_features(text_lines)

    if is_tabular and is_screenplay:
        return ContentType.HYBRID
    if is_tabular:
        return ContentType.TABULAR
    return ContentType.SCREENPLAY


def detect_text_kind(text: str) -> InputKind:
    """
    Pick an ingestion path for raw text.

    Tabular or hybrid content goes to the table path. Text with scene
    headings or centered cues goes to the screenplay path. Everything else
    is treated as a transcript.
    """
    lines = split_lines(text)
    non_empty = _non_empty(lines)

    content_type = detect_content_type(text_lines=lines)
    if content_type in (ContentType.TABULAR, ContentType.HYBRID):
        logger.debug(f"Detected text kind: table ({content_type.value} content)")
        return InputKind.TABLE

    tokenizer = ScreenplayTokenizer()
    has_headings = any(
        tokenizer.SCENE_HEADING_PATTERN.match(line.strip()) for line in non_empty
    )
    centered_cues = sum(
        1 for line in non_empty
        if len(line) - len(line.lstrip()) >= tokenizer.cue_min_indent
        and tokenizer.validator.is_cue(line.strip(), centered=True)
    )

    kind = InputKind.SCREENPLAY if has_headings or centered_cues else InputKind.TRANSCRIPT
    logger.debug(f"Detected text kind: {kind.value}")
    return kind
