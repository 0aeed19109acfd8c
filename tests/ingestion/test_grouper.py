"""Tests for dialogue block grouping and conversion to script lines."""

from script_ingest.ingestion import blocks_to_script_lines, group_dialogue_blocks
from script_ingest.models import Token, TokenKind


def group(tokenizer, text):
    return group_dialogue_blocks(tokenizer.tokenize(text).tokens)


class TestBlockGrouping:
    """Test folding of tokens into blocks."""

    def test_speaker_colon_lines(self, tokenizer):
        """Each speaker line is its own one-line block."""
        blocks = group(tokenizer, "JOHN: Hello.\nMARY: Hi.")

        assert [b.character_name for b in blocks] == ["JOHN", "MARY"]
        assert [b.text for b in blocks] == ["Hello.", "Hi."]
        assert all(len(b.dialogue_lines) == 1 for b in blocks)

    def test_one_block_per_cue_in_order(self, tokenizer, sample_screenplay):
        """Blocks follow cue order and are never empty."""
        blocks = group(tokenizer, sample_screenplay)

        assert [b.character_name for b in blocks] == ["JOHN", "MARY"]
        assert [b.character_line for b in blocks] == [5, 8]
        assert all(b.dialogue_lines for b in blocks)

    def test_adjacent_dialogue_is_joined(self, tokenizer, sample_screenplay):
        """Consecutive dialogue lines form one logical line."""
        mary = group(tokenizer, sample_screenplay)[1]

        assert len(mary.dialogue_lines) == 1
        assert mary.dialogue_lines[0].text == "Upstairs. Keep your voice down."
        assert mary.dialogue_lines[0].line == 10

    def test_parentheticals_kept_apart(self, tokenizer, sample_screenplay):
        """Parentheticals are recorded but not spoken."""
        mary = group(tokenizer, sample_screenplay)[1]

        assert [p.text for p in mary.parentheticals] == ["(whispering)"]
        assert "(whispering)" not in mary.text

    def test_parenthetical_breaks_join(self, tokenizer):
        """Dialogue after a mid-speech parenthetical starts a new line."""
        text = "          JOHN\n     Wait.\n     (beat)\n     Go on."
        block = group(tokenizer, text)[0]

        assert [d.text for d in block.dialogue_lines] == ["Wait.", "Go on."]

    def test_shouted_word_stays_with_speaker(self, tokenizer):
        """Upper-case speech under a bare cue belongs to that cue."""
        blocks = group(tokenizer, "JOHN\n    STOP\n    Please.")

        assert [(b.character_name, b.text) for b in blocks] == [("JOHN", "STOP Please.")]

    def test_blank_line_does_not_close_block(self):
        """Dialogue after a blank line stays in the block as a new line."""
        tokens = [
            Token(TokenKind.CHARACTER, 1, "JOHN", character_name="JOHN"),
            Token(TokenKind.DIALOGUE, 2, "First."),
            Token(TokenKind.BLANK, 3, ""),
            Token(TokenKind.DIALOGUE, 4, "Second."),
        ]
        blocks = group_dialogue_blocks(tokens)

        assert len(blocks) == 1
        assert [d.text for d in blocks[0].dialogue_lines] == ["First.", "Second."]

    def test_action_closes_block(self):
        """Dialogue after action has no owner and is dropped."""
        tokens = [
            Token(TokenKind.CHARACTER, 1, "JOHN", character_name="JOHN"),
            Token(TokenKind.DIALOGUE, 2, "First."),
            Token(TokenKind.ACTION, 3, "He leaves."),
            Token(TokenKind.DIALOGUE, 4, "Orphan."),
        ]
        blocks = group_dialogue_blocks(tokens)

        assert len(blocks) == 1
        assert blocks[0].text == "First."

    def test_cue_without_dialogue_is_dropped(self):
        """A CHARACTER token with no dialogue never yields a block."""
        tokens = [
            Token(TokenKind.CHARACTER, 1, "JOHN", character_name="JOHN"),
            Token(TokenKind.PARENTHETICAL, 2, "(silent)"),
            Token(TokenKind.CHARACTER, 3, "MARY", character_name="MARY"),
            Token(TokenKind.DIALOGUE, 4, "Well?"),
        ]
        blocks = group_dialogue_blocks(tokens)

        assert [b.character_name for b in blocks] == ["MARY"]

    def test_empty_stream(self):
        """No tokens, no blocks."""
        assert group_dialogue_blocks([]) == []


class TestTimecodes:
    """Test timecode attachment."""

    def test_timecode_attaches_to_next_block(self, tokenizer):
        """A timecode line applies to the following cue."""
        blocks = group(tokenizer, "00:01:02\nJOHN: Hello.\nMARY: Hi.")

        assert blocks[0].timecode == "00:01:02"
        assert blocks[1].timecode is None

    def test_scene_heading_clears_timecode(self, tokenizer):
        """A scene heading between timecode and cue discards the timecode."""
        blocks = group(tokenizer, "00:01:02\nINT. HOUSE - DAY\nJOHN: Hello.")

        assert blocks[0].timecode is None


class TestBlocksToScriptLines:
    """Test flattening blocks into script lines."""

    def test_dense_line_numbers(self, tokenizer, sample_screenplay):
        """Every logical line gets the next line number."""
        lines = blocks_to_script_lines(group(tokenizer, sample_screenplay))

        assert [line.line_number for line in lines] == [1, 2]
        assert [line.role_name for line in lines] == ["JOHN", "MARY"]
        assert lines[1].source_text == "Upstairs. Keep your voice down."

    def test_parentheticals_become_notes(self, tokenizer, sample_screenplay):
        """Parentheticals are carried as notes on the first line."""
        lines = blocks_to_script_lines(group(tokenizer, sample_screenplay))

        assert lines[0].notes is None
        assert lines[1].notes == "(whispering)"

    def test_timecode_on_first_line_only(self, tokenizer):
        """A block split into several lines keeps its timecode once."""
        text = "00:00:10:00\n          JOHN\n     Wait.\n     (beat)\n     Go on."
        lines = blocks_to_script_lines(group(tokenizer, text))

        assert [line.timecode for line in lines] == ["00:00:10:00", None]
        assert [line.source_text for line in lines] == ["Wait.", "Go on."]
