"""Tests for column auto-detection."""

import pytest

from script_ingest.ingestion import auto_detect_columns, detect_role_columns
from script_ingest.ingestion.column_detector import (
    SCRIPT_LINE_COLUMN_PATTERNS,
    find_header,
)


class TestAutoDetectColumns:
    """Test script-line column detection."""

    def test_basic_headers(self):
        """Upper-case headers resolve to their fields."""
        mapping = auto_detect_columns(["TIMECODE", "ROLE", "DIALOGUE"])

        assert mapping.timecode_column == "TIMECODE"
        assert mapping.role_name_column == "ROLE"
        assert mapping.source_text_column == "DIALOGUE"
        assert mapping.translation_column is None

    def test_case_insensitive(self):
        """Header case does not matter."""
        mapping = auto_detect_columns(["timecode", "Role", "dialogue"])

        assert mapping.role_name_column == "Role"
        assert mapping.timecode_column == "timecode"

    def test_full_export(self, script_table):
        """Every column of a typical export is mapped."""
        mapping = auto_detect_columns(script_table.headers)

        assert mapping.mapped_columns() == {
            "role_name": "Character",
            "timecode": "Timecode",
            "source_text": "English",
            "translation": "Hebrew",
            "rec_status": "Status",
            "notes": "Notes",
        }

    def test_hebrew_headers(self):
        """Hebrew headers are recognised."""
        mapping = auto_detect_columns(["דמות", "עברית", "הערות", "סטטוס"])

        assert mapping.role_name_column == "דמות"
        assert mapping.translation_column == "עברית"
        assert mapping.notes_column == "הערות"
        assert mapping.rec_status_column == "סטטוס"

    def test_headers_are_trimmed(self):
        """Surrounding whitespace in headers is ignored for matching."""
        mapping = auto_detect_columns([" Character "])

        assert mapping.role_name_column == " Character "

    def test_first_matching_column_wins(self):
        """Column order decides between two candidates."""
        mapping = auto_detect_columns(["Name", "Character"])

        assert mapping.role_name_column == "Name"

    def test_partial_words_do_not_match(self):
        """Patterns match whole headers only."""
        mapping = auto_detect_columns(["Character Description", "Context"])

        assert mapping.role_name_column == ""
        assert mapping.source_text_column is None

    def test_no_role_column(self):
        """Missing role column leaves an empty string."""
        mapping = auto_detect_columns(["A", "B"])

        assert mapping.role_name_column == ""
        assert mapping.mapped_columns() == {}

    def test_deterministic(self, script_table):
        """Same headers, same mapping."""
        assert auto_detect_columns(script_table.headers) == auto_detect_columns(script_table.headers)

    def test_defaults(self):
        """Detected mappings skip empty roles on the first sheet."""
        mapping = auto_detect_columns(["ROLE"])

        assert mapping.skip_empty_role is True
        assert mapping.sheet_index == 0


class TestPatternTable:
    """Test individual rules of the pattern table."""

    @pytest.mark.parametrize("field_name,header", [
        ("role_name_column", "Char"),
        ("role_name_column", "role_name"),
        ("timecode_column", "TC"),
        ("timecode_column", "Time In"),
        ("source_text_column", "Source Text"),
        ("source_text_column", "Subtitles"),
        ("translation_column", "Translation"),
        ("rec_status_column", "Recording Status"),
        ("rec_status_column", "REC"),
        ("notes_column", "Remarks"),
    ])
    def test_rule(self, field_name, header):
        """Each header variant matches its field."""
        pattern = dict(SCRIPT_LINE_COLUMN_PATTERNS)[field_name]

        assert find_header([header], pattern) == header

    def test_none_headers_are_skipped(self):
        """Missing header cells never match."""
        pattern = dict(SCRIPT_LINE_COLUMN_PATTERNS)["role_name_column"]

        assert find_header([None, "Role"], pattern) == "Role"


class TestDetectRoleColumns:
    """Test role-list column detection."""

    def test_role_and_replicas(self, role_table):
        """Role and replica columns are found."""
        mapping = detect_role_columns(role_table.headers)

        assert mapping.role_name_column == "Role"
        assert mapping.replicas_column == "Replicas"

    def test_hebrew_replicas(self):
        """Hebrew replica header is recognised."""
        mapping = detect_role_columns(["תפקיד", "רפליקות"])

        assert mapping.role_name_column == "תפקיד"
        assert mapping.replicas_column == "רפליקות"

    def test_missing_replicas(self):
        """Replica column is optional."""
        mapping = detect_role_columns(["Character"])

        assert mapping.replicas_column is None
