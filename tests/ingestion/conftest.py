"""Shared fixtures for ingestion tests."""

import pytest

from script_ingest.ingestion import (
    CueValidator,
    NarrativeDialogueExtractor,
    ScreenplayTokenizer,
    ScriptIngestionPipeline,
)
from script_ingest.models import Table, TableSource


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def tokenizer():
    """Tokenizer with default indentation thresholds."""
    return ScreenplayTokenizer(cue_min_indent=5, dialogue_min_indent=1)


@pytest.fixture
def validator():
    """Cue validator with default max length."""
    return CueValidator(max_length=40)


@pytest.fixture
def extractor():
    """Narrative extractor with default name length."""
    return NarrativeDialogueExtractor(max_name_length=50)


@pytest.fixture
def pipeline(tokenizer, extractor):
    """Pipeline wired to the default components."""
    return ScriptIngestionPipeline(tokenizer=tokenizer, extractor=extractor)


# =============================================================================
# Sample Text Fixtures
# =============================================================================


@pytest.fixture
def sample_screenplay():
    """Short screenplay scene with two cues, a parenthetical and a transition."""
    return "\n".join([
        "INT. KITCHEN - NIGHT",
        "",
        "John enters, shaking off the rain.",
        "",
        "          JOHN",
        "     Where is everyone?",
        "",
        "          MARY (V.O.)",
        "     (whispering)",
        "     Upstairs.",
        "     Keep your voice down.",
        "",
        "CUT TO:",
    ])


@pytest.fixture
def sample_transcript():
    """Transcript mixing colon lines and name-then-indent blocks."""
    return "\n".join([
        "JOHN: Hello.",
        "MARY",
        "    How are you?",
        "",
        "He says: this is narration, not a speaker.",
        "JOHN: Fine, thanks.",
    ])


# =============================================================================
# Sample Table Fixtures
# =============================================================================


@pytest.fixture
def script_table():
    """Spreadsheet export with every column mapped."""
    return Table(
        headers=["Timecode", "Character", "English", "Hebrew", "Status", "Notes"],
        rows=[
            {
                "Timecode": "00:00:01:00",
                "Character": "JOHN",
                "English": "Hello.",
                "Hebrew": "שלום.",
                "Status": "הוקלט",
                "Notes": None,
            },
            {
                "Timecode": "00:00:03:12",
                "Character": "",
                "English": "(music)",
                "Hebrew": None,
                "Status": None,
                "Notes": "no speaker",
            },
            {
                "Timecode": "00:00:05:00",
                "Character": "  MARY ",
                "English": " Hi there. ",
                "Hebrew": "היי.",
                "Status": "invalid",
                "Notes": "",
            },
        ],
        source=TableSource.EXCEL,
        sheet_name="Episode 1",
    )


@pytest.fixture
def role_table():
    """Role list with replica counts and a duplicate role."""
    return Table(
        headers=["Role", "Replicas"],
        rows=[
            {"Role": "John", "Replicas": 12},
            {"Role": "MARY", "Replicas": "7.5"},
            {"Role": "JOHN", "Replicas": 99},
            {"Role": "", "Replicas": 3},
            {"Role": "GUARD", "Replicas": -2},
            {"Role": "NARRATOR", "Replicas": "many"},
        ],
    )
