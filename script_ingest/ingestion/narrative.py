"""
Narrative dialogue extractor for plain-text transcripts.

Supports two conventions, which may be mixed in one input:

    Format A (colon):
        JOHN: Hello, how are you?
        MARY: Fine, thanks.

    Format B (name line, then indented dialogue):
        JOHN
            Hello, how are you?

        MARY
            Fine, thanks.
"""

import re
import logging
from typing import List, Optional

from ..config import Settings
from ..models import ScriptLineInput
from .cue_validator import CueValidator
from .tokenizer import split_lines

logger = logging.getLogger(__name__)


class NarrativeDialogueExtractor:
    """Extract script lines from transcript text without screenplay layout."""

    SPEAKER_COLON_PATTERN = re.compile(r"^(?P<name>[^:]+?)\s*:\s+(?P<text>\S.*)$")
    SENTENCE_END_PATTERN = re.compile(r"[.!?]$")

    def __init__(self, max_name_length: int = None, validator: CueValidator = None):
        """Initialize extractor."""
        self.max_name_length = max_name_length or Settings().MAX_NARRATIVE_NAME_LENGTH
        self.validator = validator or CueValidator(max_length=self.max_name_length)

    def extract(self, text: str) -> List[ScriptLineInput]:
        """
        Extract dialogue lines.

        Returns:
            ScriptLineInput list with role_name and source_text populated
        """
        raw_lines = split_lines(text)
        lines: List[ScriptLineInput] = []
        dropped_names = 0
        i = 0

        while i < len(raw_lines):
            trimmed = raw_lines[i].strip()

            if not trimmed:
                i += 1
                continue

            # Format A: NAME: dialogue
            speaker = self._match_speaker(trimmed)
            if speaker:
                name, speech = speaker
                lines.append(
                    ScriptLineInput(
                        line_number=len(lines) + 1,
                        role_name=name,
                        source_text=speech,
                    )
                )
                i += 1
                continue

            # Format B: bare name followed by indented lines
            name = self._match_name(trimmed)
            if name:
                parts, next_index = self._collect_indented(raw_lines, i + 1)
                if parts:
                    lines.append(
                        ScriptLineInput(
                            line_number=len(lines) + 1,
                            role_name=name,
                            source_text=" ".join(parts),
                        )
                    )
                    i = next_index
                    continue
                dropped_names += 1

            i += 1

        if dropped_names:
            logger.debug(f"Dropped {dropped_names} name lines without dialogue")
        logger.debug(f"Extracted {len(lines)} dialogue lines from transcript")
        return lines

    def _match_speaker(self, trimmed: str):
        """Return (name, speech) for a NAME: dialogue line, else None."""
        match = self.SPEAKER_COLON_PATTERN.match(trimmed)
        if not match:
            return None
        result = self.validator.validate(match.group("name"), centered=True)
        if not result.is_valid:
            return None
        return result.name, match.group("text").strip()

    def _match_name(self, trimmed: str) -> Optional[str]:
        """Return the bare name of an upper-case name line, else None."""
        if len(trimmed) < 2 or len(trimmed) > self.max_name_length:
            return None
        if self.SENTENCE_END_PATTERN.search(trimmed):
            return None
        result = self.validator.validate(trimmed, centered=True)
        return result.name if result.is_valid else None

    @staticmethod
    def _collect_indented(raw_lines: List[str], start: int):
        """
        Collect indented lines following a name line.

        Blank lines before the first indented line are skipped; after it,
        a blank or un-indented line ends the run.
        """
        parts = []
        j = start
        while j < len(raw_lines):
            raw = raw_lines[j]
            if not raw.strip():
                if parts:
                    break
                j += 1
                continue
            if not raw[0].isspace():
                break
            parts.append(raw.strip())
            j += 1
        return parts, j


# Convenience function
def extract_dialogue_lines(text: str) -> List[ScriptLineInput]:
    """
    Extract dialogue lines from transcript text with default settings.

    Args:
        text: Raw transcript

    Returns:
        List of ScriptLineInput
    """
    extractor = NarrativeDialogueExtractor()
    return extractor.extract(text)
