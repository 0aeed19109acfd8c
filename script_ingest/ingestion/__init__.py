"""
Ingestion components for script text and tables.

Screenplay path:
- ScreenplayTokenizer: Classify each physical line into a typed token
- group_dialogue_blocks: Fold tokens into per-cue dialogue blocks
- blocks_to_script_lines: Flatten blocks into script-line records

Transcript path:
- NarrativeDialogueExtractor: "NAME: text" lines and name-then-indent blocks

Table path:
- auto_detect_columns: Guess the column mapping from headers
- map_rows_to_script_lines: Apply a confirmed mapping to table rows
- apply_role_mapping: Deduplicated role list with replica counts
- find_similar_roles: Flag near-duplicate role names for review

Shared:
- CueValidator: Plausibility checks for character cues
- detect_content_type / detect_text_kind: Route inputs to a path
- validate_script_lines: Pydantic validation before persistence
- ScriptIngestionPipeline: Orchestrate the full pipeline
"""

from .cue_validator import (
    CueValidationResult,
    CueValidator,
    InvalidCueReason,
    RoleSummary,
    normalize_role_name,
    summarize_roles,
    validate_cue,
)
from .tokenizer import ScreenplayTokenizer, split_lines, tokenize
from .grouper import blocks_to_script_lines, group_dialogue_blocks
from .narrative import NarrativeDialogueExtractor, extract_dialogue_lines
from .column_detector import auto_detect_columns, detect_role_columns
from .row_mapper import (
    apply_role_mapping,
    map_rows_to_script_lines,
    normalize_rec_status,
    parse_replicas,
)
from .content_detector import (
    ContentType,
    InputKind,
    detect_content_type,
    detect_text_kind,
)
from .loader import (
    parse_column_text,
    parse_delimited_text,
    read_table_file,
    read_text_file,
)
from .role_matcher import (
    RoleGroup,
    SimilarityMatch,
    SimilarityReason,
    find_similar_roles,
    group_similar_roles,
)
from .schemas import (
    LineValidationReport,
    ScriptLineRecord,
    validate_column_mapping,
    validate_script_lines,
    validate_table,
)
from .pipeline import (
    IngestionResult,
    IngestionStats,
    RoleExtractionResult,
    ScriptIngestionPipeline,
    batched,
    ingest_text,
)

__all__ = [
    # Cue validation
    "CueValidationResult",
    "CueValidator",
    "InvalidCueReason",
    "RoleSummary",
    "normalize_role_name",
    "summarize_roles",
    "validate_cue",
    # Screenplay path
    "ScreenplayTokenizer",
    "split_lines",
    "tokenize",
    "blocks_to_script_lines",
    "group_dialogue_blocks",
    # Transcript path
    "NarrativeDialogueExtractor",
    "extract_dialogue_lines",
    # Table path
    "auto_detect_columns",
    "detect_role_columns",
    "apply_role_mapping",
    "map_rows_to_script_lines",
    "normalize_rec_status",
    "parse_replicas",
    # Routing
    "ContentType",
    "InputKind",
    "detect_content_type",
    "detect_text_kind",
    # Loading
    "parse_column_text",
    "parse_delimited_text",
    "read_table_file",
    "read_text_file",
    # Role review
    "RoleGroup",
    "SimilarityMatch",
    "SimilarityReason",
    "find_similar_roles",
    "group_similar_roles",
    # Validation
    "LineValidationReport",
    "ScriptLineRecord",
    "validate_column_mapping",
    "validate_script_lines",
    "validate_table",
    # Pipeline
    "IngestionResult",
    "IngestionStats",
    "RoleExtractionResult",
    "ScriptIngestionPipeline",
    "batched",
    "ingest_text",
]
