"""Tests for dialogue extraction from plain-text transcripts."""

import pytest

from script_ingest.ingestion import NarrativeDialogueExtractor, extract_dialogue_lines


class TestColonFormat:
    """Test NAME: dialogue lines."""

    def test_colon_lines(self, extractor):
        """Each colon line is one record."""
        lines = extractor.extract("JOHN: Hello.\nMARY: Hi.")

        assert [(l.role_name, l.source_text) for l in lines] == [
            ("JOHN", "Hello."),
            ("MARY", "Hi."),
        ]

    def test_narration_with_colon_is_ignored(self, extractor):
        """Sentence text before a colon is not a speaker name."""
        assert extractor.extract("He says: hello there") == []

    def test_hebrew_speaker(self, extractor):
        """Hebrew names have no case and are accepted."""
        lines = extractor.extract("דני: שלום")

        assert lines[0].role_name == "דני"
        assert lines[0].source_text == "שלום"

    def test_extension_is_stripped(self, extractor):
        """Cue extensions are removed from the role name."""
        lines = extractor.extract("MARY (O.S.): Over here.")

        assert lines[0].role_name == "MARY"


class TestIndentedFormat:
    """Test name lines followed by indented dialogue."""

    def test_name_then_indented_lines(self, extractor):
        """Indented lines are joined into one record."""
        lines = extractor.extract("MARY\n    How are you?\n    It's been ages.")

        assert len(lines) == 1
        assert lines[0].role_name == "MARY"
        assert lines[0].source_text == "How are you? It's been ages."

    def test_blank_ends_dialogue(self, extractor):
        """A blank line ends the indented run."""
        lines = extractor.extract("MARY\n    How are you?\n\n    Still there?")

        assert [l.source_text for l in lines] == ["How are you?"]

    def test_blank_before_dialogue_is_skipped(self, extractor):
        """Blank lines between the name and its first indented line are skipped."""
        lines = extractor.extract("MARY\n\n    How are you?")

        assert [(l.role_name, l.source_text) for l in lines] == [("MARY", "How are you?")]

    def test_both_formats_use_bare_name(self, extractor):
        """Both formats use the bare role name."""
        indented = extractor.extract("MARY (O.S.)\n    Over here.")
        colon = extractor.extract("MARY (O.S.): Over here.")

        assert indented[0].role_name == colon[0].role_name == "MARY"

    def test_name_without_dialogue_is_dropped(self, extractor):
        """A name line with no indented follower yields nothing."""
        assert extractor.extract("MARY\nHow are you?") == []

    @pytest.mark.parametrize("line", ["THE END.", "Mary", "WAIT!"])
    def test_non_name_lines(self, extractor, line):
        """Sentences and mixed case never open a block."""
        assert extractor.extract(f"{line}\n    Hello.") == []


class TestMixedFormat:
    """Test both formats in one transcript."""

    def test_mixed_text(self, extractor):
        """Colon and indented formats share one line counter."""
        lines = extractor.extract("JOHN: Hello.\nMARY\n    How are you?")

        assert [l.role_name for l in lines] == ["JOHN", "MARY"]
        assert [l.line_number for l in lines] == [1, 2]

    def test_sample_transcript(self, extractor, sample_transcript):
        """Narration lines are skipped without gaps in numbering."""
        lines = extractor.extract(sample_transcript)

        assert [l.role_name for l in lines] == ["JOHN", "MARY", "JOHN"]
        assert [l.line_number for l in lines] == [1, 2, 3]
        assert lines[2].source_text == "Fine, thanks."

    def test_only_role_and_text_populated(self, extractor):
        """Transcripts carry no timecode, status or notes."""
        line = extractor.extract("JOHN: Hello.")[0]

        assert line.timecode is None
        assert line.rec_status is None
        assert line.notes is None

    def test_convenience_function(self):
        """extract_dialogue_lines uses default settings."""
        assert len(extract_dialogue_lines("JOHN: Hello.")) == 1

    def test_max_name_length(self):
        """Names longer than the limit are rejected."""
        short = NarrativeDialogueExtractor(max_name_length=3)

        assert short.extract("JOHN: Hello.") == []
        assert len(short.extract("AL: Hello.")) == 1
