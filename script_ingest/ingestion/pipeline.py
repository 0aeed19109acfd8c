"""Ingestion pipeline orchestrator."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from ..config import Settings
from ..models import (
    ColumnMapping,
    DiagnosticCollector,
    DiagnosticSource,
    DialogueBlock,
    DialogueLine,
    MappedRole,
    ParseDiagnostic,
    RoleColumnMapping,
    ScriptLineInput,
    TableInput,
)
from .column_detector import auto_detect_columns, detect_role_columns
from .content_detector import InputKind, detect_text_kind
from .cue_validator import summarize_roles
from .grouper import blocks_to_script_lines, group_dialogue_blocks
from .loader import (
    is_table_file,
    is_text_file,
    parse_column_text,
    read_table_file,
    read_text_file,
)
from .narrative import NarrativeDialogueExtractor
from .role_matcher import RoleGroup, SimilarityMatch, find_similar_roles, group_similar_roles
from .row_mapper import apply_role_mapping, headers_of, map_rows_to_script_lines, select_table
from .schemas import validate_column_mapping, validate_script_lines, validate_table
from .tokenizer import ScreenplayTokenizer

logger = logging.getLogger(__name__)


@dataclass
class IngestionStats:
    """Statistics from one ingestion run."""

    input_units: int = 0  # Lines of text or table rows
    dialogue_blocks: int = 0
    records_emitted: int = 0
    records_skipped: int = 0
    records_rejected: int = 0

    def to_dict(self) -> dict:
        return {
            "input_units": self.input_units,
            "dialogue_blocks": self.dialogue_blocks,
            "records_emitted": self.records_emitted,
            "records_skipped": self.records_skipped,
            "records_rejected": self.records_rejected,
        }


@dataclass
class IngestionResult:
    """Script lines produced from one input, with what went wrong."""

    lines: List[ScriptLineInput]
    kind: InputKind
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)
    stats: IngestionStats = field(default_factory=IngestionStats)
    mapping: Optional[ColumnMapping] = None
    source: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "kind": self.kind.value,
            "mapping": self.mapping.to_dict() if self.mapping else None,
            "stats": self.stats.to_dict(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass
class RoleExtractionResult:
    """Role list for casting, with possible duplicates flagged."""

    roles: List[MappedRole]
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)
    similar: List[SimilarityMatch] = field(default_factory=list)
    groups: List[RoleGroup] = field(default_factory=list)
    source: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "source": self.source,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "similar": [m.to_dict() for m in self.similar],
            "groups": [g.to_dict() for g in self.groups],
            "roles": [r.to_dict() for r in self.roles],
        }


class ScriptIngestionPipeline:
    """Route an input to the matching parser and collect diagnostics."""

    def __init__(
        self,
        tokenizer: ScreenplayTokenizer = None,
        extractor: NarrativeDialogueExtractor = None,
        validate: bool = False,
    ):
        """
        Initialize the pipeline.

        Args:
            tokenizer: Screenplay tokenizer (default settings when omitted)
            extractor: Transcript extractor (default settings when omitted)
            validate: Run record validation on every result
        """
        self.tokenizer = tokenizer or ScreenplayTokenizer()
        self.extractor = extractor or NarrativeDialogueExtractor()
        self.validate = validate

    def ingest_text(self, text: str, kind: InputKind = None) -> IngestionResult:
        """
        Ingest raw text.

        Args:
            text: Screenplay, transcript or tab-separated text
            kind: Force an ingestion path; detected when omitted

        Returns:
            IngestionResult
        """
        if kind is None:
            kind = detect_text_kind(text)
            logger.info(f"Detected input kind: {kind.value}")

        if kind == InputKind.TABLE:
            return self.ingest_table(parse_column_text(text))

        diagnostics = DiagnosticCollector()
        stats = IngestionStats()

        if kind == InputKind.SCREENPLAY:
            tokenized = self.tokenizer.tokenize(text)
            diagnostics.add_all(tokenized.diagnostics)
            blocks = group_dialogue_blocks(tokenized.tokens)
            lines = blocks_to_script_lines(blocks)
            stats.input_units = tokenized.line_count
            stats.dialogue_blocks = len(blocks)
        else:
            lines = self.extractor.extract(text)
            stats.input_units = len(text.split("\n"))
            stats.dialogue_blocks = len(lines)

        if not lines and text.strip():
            diagnostics.warn(
                DiagnosticSource.PIPELINE,
                f"No dialogue found in {kind.value} input",
            )

        stats.records_emitted = len(lines)
        return self._finish(IngestionResult(lines, kind, stats=stats), diagnostics)

    def ingest_table(
        self,
        tables: TableInput,
        mapping: ColumnMapping = None,
    ) -> IngestionResult:
        """
        Ingest an already-decoded table or workbook.

        Args:
            tables: A table, or a list of sheets
            mapping: Confirmed column mapping; auto-detected when omitted

        Returns:
            IngestionResult carrying the mapping that was applied
        """
        diagnostics = DiagnosticCollector()
        stats = IngestionStats()
        sheet_index = mapping.sheet_index if mapping else 0

        table = select_table(tables, sheet_index)
        if table is None:
            logger.warning(f"No table at sheet index {sheet_index}")
            diagnostics.warn(DiagnosticSource.ROW_MAPPER, f"No table at sheet index {sheet_index}")
            return self._finish(
                IngestionResult([], InputKind.TABLE, stats=stats, mapping=mapping),
                diagnostics,
            )

        stats.input_units = table.total_rows
        diagnostics.add_all(validate_table(table))

        if mapping is None:
            mapping = auto_detect_columns(table.headers)
            if mapping.role_name_column:
                diagnostics.info(
                    DiagnosticSource.COLUMN_DETECTION,
                    f"Detected columns: {mapping.mapped_columns()}",
                )

        if not mapping.role_name_column:
            diagnostics.warn(
                DiagnosticSource.COLUMN_DETECTION,
                "Role column is not set; no rows mapped",
                context=", ".join(table.headers),
            )
            return self._finish(
                IngestionResult([], InputKind.TABLE, stats=stats, mapping=mapping),
                diagnostics,
            )

        diagnostics.add_all(validate_column_mapping(mapping, table.headers))

        lines = map_rows_to_script_lines(tables, mapping)
        stats.records_emitted = len(lines)
        stats.records_skipped = table.total_rows - len(lines)
        if not table.rows:
            diagnostics.warn(DiagnosticSource.ROW_MAPPER, "Table has no data rows")

        return self._finish(
            IngestionResult(lines, InputKind.TABLE, stats=stats, mapping=mapping),
            diagnostics,
        )

    def ingest_file(
        self,
        file_path: Path,
        kind: InputKind = None,
        mapping: ColumnMapping = None,
    ) -> IngestionResult:
        """
        Ingest a text or table file.

        Raises:
            ValueError: If the file is missing or its format is unsupported
        """
        file_path = Path(file_path)

        if is_table_file(file_path):
            result = self.ingest_table(read_table_file(file_path), mapping)
        elif is_text_file(file_path):
            result = self.ingest_text(read_text_file(file_path), kind)
        else:
            raise ValueError(f"Unsupported file type: {file_path.suffix}")

        result.source = str(file_path)
        return result

    def extract_roles_from_text(self, text: str, kind: InputKind = None) -> RoleExtractionResult:
        """
        Build a role list from script text, counting one replica per line.

        Near-duplicate names are reported as warnings for review.

        Returns:
            RoleExtractionResult with roles sorted by replica count, then
            first appearance
        """
        kind = kind or detect_text_kind(text)
        if kind == InputKind.TABLE:
            return self.extract_roles_from_table(parse_column_text(text))

        if kind == InputKind.SCREENPLAY:
            blocks = group_dialogue_blocks(self.tokenizer.tokenize(text).tokens)
        else:
            blocks = [
                DialogueBlock(
                    character_name=line.role_name,
                    character_line=line.line_number,
                    dialogue_lines=[DialogueLine(line.source_text or "", line.line_number)],
                )
                for line in self.extractor.extract(text)
            ]

        roles = [role.to_mapped_role() for role in summarize_roles(blocks)]
        return self._review_roles(roles, DiagnosticCollector())

    def extract_roles_from_table(
        self,
        tables: TableInput,
        mapping: RoleColumnMapping = None,
    ) -> RoleExtractionResult:
        """Build a role list from a role table; columns detected when omitted."""
        diagnostics = DiagnosticCollector()
        if mapping is None:
            mapping = detect_role_columns(headers_of(tables))
        if not mapping.role_name_column:
            logger.warning("No role column found for role-list import")
            diagnostics.warn(
                DiagnosticSource.COLUMN_DETECTION,
                "Role column is not set; no roles imported",
            )
            return RoleExtractionResult([], diagnostics.all())
        return self._review_roles(apply_role_mapping(tables, mapping), diagnostics)

    def _review_roles(
        self,
        roles: List[MappedRole],
        diagnostics: DiagnosticCollector,
    ) -> RoleExtractionResult:
        """Flag near-duplicate role names and group variants."""
        matches = find_similar_roles([role.role_name_normalized for role in roles])
        for match in matches:
            diagnostics.warn(
                DiagnosticSource.ROLE_MATCHING,
                match.message,
                context=f"{match.role1}, {match.role2}",
            )
        return RoleExtractionResult(
            roles=roles,
            diagnostics=diagnostics.all(),
            similar=matches,
            groups=group_similar_roles(roles),
        )

    def _finish(self, result: IngestionResult, diagnostics: DiagnosticCollector) -> IngestionResult:
        """Run optional validation and attach sorted diagnostics."""
        if self.validate and result.lines:
            report = validate_script_lines(result.lines)
            diagnostics.add_all(report.diagnostics)
            result.stats.records_rejected = len(report.rejected)

        result.diagnostics = diagnostics.all()
        logger.debug(
            f"{result.kind.value}: {result.stats.records_emitted} records, "
            f"{len(result.diagnostics)} diagnostics"
        )
        return result


def batched(lines: Sequence[ScriptLineInput], batch_size: int = None) -> Iterator[List[ScriptLineInput]]:
    """
    Yield lines in fixed-size chunks for persistence.

    Args:
        lines: Script lines in order
        batch_size: Chunk size (PERSIST_BATCH_SIZE when omitted)
    """
    batch_size = batch_size or Settings().PERSIST_BATCH_SIZE
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    for start in range(0, len(lines), batch_size):
        yield list(lines[start:start + batch_size])


# Convenience function
def ingest_text(text: str, kind: InputKind = None) -> IngestionResult:
    """
    Ingest text with default settings.

    Args:
        text: Raw input text
        kind: Optional forced ingestion path

    Returns:
        IngestionResult
    """
    pipeline = ScriptIngestionPipeline()
    return pipeline.ingest_text(text, kind)
