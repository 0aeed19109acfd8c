"""
Column auto-detection for tabular script input.

Each semantic field has a case-insensitive pattern; the first header (in
column order) whose trimmed text fully matches is selected. The result is
advisory: a human confirms or edits it before rows are mapped.
"""

import re
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..models import ColumnMapping, RoleColumnMapping

logger = logging.getLogger(__name__)


# Ordered (field, pattern) table
SCRIPT_LINE_COLUMN_PATTERNS: List[Tuple[str, re.Pattern]] = [
    (
        "role_name_column",
        re.compile(r"character|char|role(?:[\s_-]?name)?|name|דמות|תפקיד|שם", re.IGNORECASE),
    ),
    (
        "timecode_column",
        re.compile(r"timecode|tc|time[\s_-]?in|in[\s_-]?time", re.IGNORECASE),
    ),
    (
        "source_text_column",
        re.compile(r"dialogue|dialog|text|eng(?:lish)?|source[\s_-]?text|subtitles?", re.IGNORECASE),
    ),
    (
        "translation_column",
        re.compile(r"עברית|heb(?:rew)?|תרגום|translation|target[\s_-]?text", re.IGNORECASE),
    ),
    (
        "rec_status_column",
        re.compile(r"rec(?:ording)?(?:[\s_-]?status)?|status|סטטוס", re.IGNORECASE),
    ),
    (
        "notes_column",
        re.compile(r"notes?|remarks?|comments?|הערות", re.IGNORECASE),
    ),
]

ROLE_LIST_COLUMN_PATTERNS: List[Tuple[str, re.Pattern]] = [
    SCRIPT_LINE_COLUMN_PATTERNS[0],
    (
        "replicas_column",
        re.compile(r"replicas?|lines?|count|רפליקות|שורות|כמות", re.IGNORECASE),
    ),
]


def find_header(headers: Sequence[str], pattern: re.Pattern) -> Optional[str]:
    """Return the first header whose trimmed text fully matches the pattern."""
    for header in headers:
        if header is not None and pattern.fullmatch(str(header).strip()):
            return header
    return None


def detect_fields(
    headers: Sequence[str],
    patterns: List[Tuple[str, re.Pattern]],
) -> Dict[str, Optional[str]]:
    """Match every field of a pattern table against the headers."""
    return {field_name: find_header(headers, pattern) for field_name, pattern in patterns}


def auto_detect_columns(headers: Sequence[str]) -> ColumnMapping:
    """
    Guess the semantic role of each header.

    Args:
        headers: Column headers of one table, in column order

    Returns:
        ColumnMapping; role_name_column is "" when no header matched
    """
    detected = detect_fields(headers, SCRIPT_LINE_COLUMN_PATTERNS)
    mapping = ColumnMapping(
        role_name_column=detected["role_name_column"] or "",
        timecode_column=detected["timecode_column"],
        source_text_column=detected["source_text_column"],
        translation_column=detected["translation_column"],
        rec_status_column=detected["rec_status_column"],
        notes_column=detected["notes_column"],
    )

    if not mapping.role_name_column:
        logger.warning(f"No role column detected among headers: {list(headers)}")
    else:
        logger.debug(f"Detected columns: {mapping.mapped_columns()}")
    return mapping


def detect_role_columns(headers: Sequence[str]) -> RoleColumnMapping:
    """
    Guess role-name and replica-count columns for role-list import.

    Args:
        headers: Column headers of one table

    Returns:
        RoleColumnMapping; role_name_column is "" when no header matched
    """
    detected = detect_fields(headers, ROLE_LIST_COLUMN_PATTERNS)
    return RoleColumnMapping(
        role_name_column=detected["role_name_column"] or "",
        replicas_column=detected["replicas_column"],
    )
