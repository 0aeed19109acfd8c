"""Tests for record, table and mapping validation."""

import pytest

from script_ingest.ingestion import (
    ScriptLineRecord,
    validate_column_mapping,
    validate_script_lines,
    validate_table,
)
from script_ingest.models import (
    ColumnMapping,
    DiagnosticSeverity,
    RecStatus,
    ScriptLineInput,
    Table,
)


class TestValidateScriptLines:
    """Test best-effort line validation."""

    def test_valid_lines(self):
        """Valid lines pass with no diagnostics."""
        report = validate_script_lines([
            ScriptLineInput(1, "JOHN", timecode="00:00:01", source_text="Hello."),
            ScriptLineInput(2, "MARY", timecode="00:00:02:05", rec_status=RecStatus.OPTIONAL),
        ])

        assert report.success
        assert len(report.data) == 2
        assert report.data[1].rec_status == RecStatus.OPTIONAL
        assert report.diagnostics == []

    def test_dict_input(self):
        """Plain dicts are accepted, with status given by label."""
        report = validate_script_lines([
            {"line_number": 1, "role_name": "JOHN", "rec_status": "הוקלט"},
        ])

        assert report.success
        assert report.data[0].rec_status == RecStatus.RECORDED

    @pytest.mark.parametrize("line", [
        ScriptLineInput(0, "JOHN"),
        ScriptLineInput(1, ""),
        ScriptLineInput(1, "JOHN", timecode="01:02"),
        ScriptLineInput(1, "JOHN", timecode="soon"),
    ])
    def test_invalid_line(self, line):
        """Bad numbers, empty roles and malformed timecodes are rejected."""
        report = validate_script_lines([line])

        assert not report.success
        assert len(report.rejected) == 1
        assert report.rejected[0].errors

    def test_partial_failure(self):
        """Valid lines survive next to rejected ones."""
        report = validate_script_lines([
            ScriptLineInput(1, "JOHN"),
            ScriptLineInput(2, ""),
        ])

        assert not report.success
        assert [r.role_name for r in report.data] == ["JOHN"]
        assert report.rejected[0].index == 1
        assert report.diagnostics[0].severity == DiagnosticSeverity.WARNING
        assert report.diagnostics[0].message == "1 of 2 lines failed validation"

    def test_all_rejected_is_error(self):
        """A batch with no valid line reports an error."""
        report = validate_script_lines([ScriptLineInput(1, ""), ScriptLineInput(0, "JOHN")])

        assert report.diagnostics[0].severity == DiagnosticSeverity.ERROR
        assert len(report.diagnostics) == 3

    def test_empty_batch(self):
        """No lines is a successful, empty report."""
        report = validate_script_lines([])

        assert report.success
        assert report.data == []

    def test_record_model(self):
        """The record model can be used directly."""
        record = ScriptLineRecord(line_number=3, role_name="JOHN", timecode="10:00:00:00")

        assert record.model_dump()["timecode"] == "10:00:00:00"


class TestValidateTable:
    """Test table shape checks."""

    def test_valid_table(self, script_table):
        """A well-formed table has no diagnostics."""
        assert validate_table(script_table) == []

    def test_no_headers(self):
        """A table needs at least one column."""
        diagnostics = validate_table(Table(headers=[]))

        assert diagnostics[0].severity == DiagnosticSeverity.ERROR

    def test_duplicate_headers(self):
        """Duplicate headers are warnings."""
        diagnostics = validate_table(Table(headers=["Role", "Text", "Role"]))

        assert len(diagnostics) == 1
        assert diagnostics[0].severity == DiagnosticSeverity.WARNING
        assert "Role" in diagnostics[0].message


class TestValidateColumnMapping:
    """Test mapping checks against headers."""

    def test_valid_mapping(self, script_table):
        """A mapping of existing headers is valid."""
        mapping = ColumnMapping(role_name_column="Character", source_text_column="English")

        assert validate_column_mapping(mapping, script_table.headers) == []

    def test_missing_role_column(self, script_table):
        """The role column is required."""
        diagnostics = validate_column_mapping(ColumnMapping(), script_table.headers)

        assert len(diagnostics) == 1
        assert diagnostics[0].severity == DiagnosticSeverity.ERROR
        assert "role_name_column" in diagnostics[0].message

    def test_unknown_column(self, script_table):
        """Mapped columns must exist in the table."""
        mapping = ColumnMapping(role_name_column="Character", notes_column="Comments")

        diagnostics = validate_column_mapping(mapping, script_table.headers)

        assert len(diagnostics) == 1
        assert '"Comments"' in diagnostics[0].message

    def test_negative_sheet_index(self, script_table):
        """Sheet index cannot be negative."""
        mapping = ColumnMapping(role_name_column="Character", sheet_index=-1)

        assert validate_column_mapping(mapping, script_table.headers)
