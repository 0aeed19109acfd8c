"""
Screenplay tokenizer.

Classifies every physical line of raw text into a typed token. Rules are
tried in priority order and the first match wins:

1. BLANK          empty or whitespace-only
2. SCENE_HEADING  INT. / EXT. / INT./EXT. prefix
3. TRANSITION     CUT TO:, FADE OUT., DISSOLVE TO:, ...
4. TIMECODE       MM:SS, HH:MM:SS or HH:MM:SS:FF on its own line
5. SPEAKER_COLON  NAME: dialogue
6. CHARACTER      indented (or bare) upper-case cue followed by dialogue
7. PARENTHETICAL  (direction) right after a cue or dialogue
8. DIALOGUE       indented line right after a cue, parenthetical or dialogue
9. ACTION         everything else

A cue is only kept as CHARACTER when the next physical line is
dialogue-shaped or parenthetical-shaped. The lookahead is resolved in a
backward pass over the materialised line list before classification runs.
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..config import Settings
from ..models import (
    DiagnosticCollector,
    DiagnosticSource,
    Token,
    TokenKind,
    TokenizeResult,
)
from .cue_validator import CueValidationResult, CueValidator

logger = logging.getLogger(__name__)


class _Shape(Enum):
    """Context-free shape of a line, before lookahead and state."""

    BLANK = "blank"
    SCENE_HEADING = "scene_heading"
    TRANSITION = "transition"
    TIMECODE = "timecode"
    SPEAKER_COLON = "speaker_colon"
    CUE = "cue"
    OTHER = "other"


@dataclass
class _Line:
    """A raw line with its context-free classification."""

    number: int
    trimmed: str
    indent: int
    shape: _Shape
    is_parenthetical: bool = False
    cue: Optional[CueValidationResult] = None
    speaker: Optional[str] = None
    speech: Optional[str] = None


# Token kinds after which a parenthetical may appear
_PARENTHETICAL_CONTEXT = frozenset({
    TokenKind.CHARACTER,
    TokenKind.SPEAKER_COLON,
    TokenKind.PARENTHETICAL,
    TokenKind.DIALOGUE,
})

# Token kinds after which an indented line is dialogue
_DIALOGUE_CONTEXT = frozenset({
    TokenKind.CHARACTER,
    TokenKind.PARENTHETICAL,
    TokenKind.DIALOGUE,
})


class ScreenplayTokenizer:
    """Line classifier for screenplay-formatted and transcript text."""

    SCENE_HEADING_PATTERN = re.compile(
        r"^(?:INT\.?\s*/\s*EXT|EXT\.?\s*/\s*INT|I/E|INT|EXT)\.?(?:\s+.*|\s*[-–—].*)?$",
        re.IGNORECASE,
    )

    # Fixed transition vocabulary
    TRANSITIONS = (
        "SMASH CUT TO",
        "MATCH CUT TO",
        "JUMP CUT TO",
        "CUT TO",
        "DISSOLVE TO",
        "WIPE TO",
        "FADE TO BLACK",
        "FADE IN",
        "FADE OUT",
        "TIME CUT",
    )
    TRANSITION_PATTERN = re.compile(
        r"^(?:" + "|".join(TRANSITIONS) + r")\s*[:.]?$",
        re.IGNORECASE,
    )

    TIMECODE_PATTERN = re.compile(r"^\d{1,2}:\d{2}(?::\d{2}){0,2}$")
    SPEAKER_COLON_PATTERN = re.compile(r"^(?P<name>[^:]+?)\s*:\s+(?P<text>\S.*)$")
    PARENTHETICAL_PATTERN = re.compile(r"^\(.*\)$")

    def __init__(
        self,
        cue_min_indent: int = None,
        dialogue_min_indent: int = None,
        validator: CueValidator = None,
    ):
        """Initialize tokenizer with indentation thresholds."""
        settings = Settings()
        self.cue_min_indent = (
            cue_min_indent if cue_min_indent is not None else settings.CUE_MIN_INDENT
        )
        self.dialogue_min_indent = (
            dialogue_min_indent
            if dialogue_min_indent is not None
            else settings.DIALOGUE_MIN_INDENT
        )
        self.validator = validator or CueValidator()

    def tokenize(self, text: str) -> TokenizeResult:
        """
        Tokenize text into one token per physical line.

        Args:
            text: Raw text using \\n as line separator

        Returns:
            TokenizeResult with tokens, line count and diagnostics
        """
        lines = [self._shape_line(i + 1, raw) for i, raw in enumerate(split_lines(text))]
        final_cues = self._resolve_cues(lines)

        diagnostics = DiagnosticCollector()
        tokens: List[Token] = []
        previous: Optional[TokenKind] = None

        for line, is_final_cue in zip(lines, final_cues):
            token = self._classify(line, is_final_cue, previous, diagnostics)
            tokens.append(token)
            previous = token.kind

        logger.debug(
            f"Tokenized {len(lines)} lines: "
            f"{sum(1 for t in tokens if t.kind == TokenKind.CHARACTER)} cues, "
            f"{sum(1 for t in tokens if t.kind == TokenKind.SPEAKER_COLON)} speaker lines"
        )
        return TokenizeResult(
            tokens=tokens,
            line_count=len(lines),
            diagnostics=diagnostics.all(),
        )

    def _shape_line(self, number: int, raw: str) -> _Line:
        """First pass: classify a line without looking at its neighbours."""
        trimmed = raw.strip()
        indent = len(raw) - len(raw.lstrip())

        if not trimmed:
            return _Line(number, "", 0, _Shape.BLANK)

        line = _Line(
            number,
            trimmed,
            indent,
            _Shape.OTHER,
            is_parenthetical=bool(self.PARENTHETICAL_PATTERN.match(trimmed)),
        )

        if self.SCENE_HEADING_PATTERN.match(trimmed):
            line.shape = _Shape.SCENE_HEADING
            return line

        if self.TRANSITION_PATTERN.match(trimmed):
            line.shape = _Shape.TRANSITION
            return line

        if self.TIMECODE_PATTERN.match(trimmed):
            line.shape = _Shape.TIMECODE
            return line

        colon_match = self.SPEAKER_COLON_PATTERN.match(trimmed)
        if colon_match:
            result = self.validator.validate(colon_match.group("name"), centered=True)
            if result.is_valid:
                line.shape = _Shape.SPEAKER_COLON
                line.speaker = result.name
                line.speech = colon_match.group("text").strip()
                return line

        # Centered cue, or bare upper-case name on an un-indented line.
        # Lines indented less than a cue are never cue candidates.
        centered = indent >= self.cue_min_indent
        result = self.validator.validate(trimmed, centered=centered)
        if result.is_valid and (centered or (indent == 0 and len(result.name) >= 2)):
            line.shape = _Shape.CUE
            line.cue = result

        return line

    def _resolve_cues(self, lines: List[_Line]) -> List[bool]:
        """
        Second pass (backward): decide which cue candidates are real cues.

        A cue is final when the next physical line is a parenthetical, or an
        indented line that is not itself a heading, transition, timecode,
        speaker line or final cue.
        """
        final = [False] * len(lines)

        for i in range(len(lines) - 1, -1, -1):
            if lines[i].shape != _Shape.CUE:
                continue
            if i + 1 >= len(lines):
                continue

            follower = lines[i + 1]
            if follower.shape == _Shape.BLANK:
                continue
            if follower.is_parenthetical:
                final[i] = True
            elif follower.shape == _Shape.OTHER:
                final[i] = follower.indent >= self.dialogue_min_indent
            elif follower.shape == _Shape.CUE:
                final[i] = (
                    follower.indent >= self.dialogue_min_indent and not final[i + 1]
                )

        return final

    def _classify(
        self,
        line: _Line,
        is_final_cue: bool,
        previous: Optional[TokenKind],
        diagnostics: DiagnosticCollector,
    ) -> Token:
        """Third pass: classify a line using the previous token kind."""
        if line.shape == _Shape.BLANK:
            return Token(TokenKind.BLANK, line.number, "")

        if line.shape == _Shape.SCENE_HEADING:
            return Token(TokenKind.SCENE_HEADING, line.number, line.trimmed, indent=line.indent)

        if line.shape == _Shape.TRANSITION:
            return Token(TokenKind.TRANSITION, line.number, line.trimmed, indent=line.indent)

        if line.shape == _Shape.TIMECODE:
            return Token(TokenKind.TIMECODE, line.number, line.trimmed, indent=line.indent)

        if line.shape == _Shape.SPEAKER_COLON:
            return Token(
                TokenKind.SPEAKER_COLON,
                line.number,
                line.speech,
                character_name=line.speaker,
                indent=line.indent,
            )

        if line.shape == _Shape.CUE:
            if is_final_cue:
                return Token(
                    TokenKind.CHARACTER,
                    line.number,
                    line.trimmed,
                    character_name=line.cue.name,
                    indent=line.indent,
                )
            diagnostics.info(
                DiagnosticSource.TOKENIZER,
                "Cue without following dialogue",
                line=line.number,
                context=line.trimmed,
            )

        if line.is_parenthetical and previous in _PARENTHETICAL_CONTEXT:
            return Token(TokenKind.PARENTHETICAL, line.number, line.trimmed, indent=line.indent)

        if line.indent >= self.dialogue_min_indent and previous in _DIALOGUE_CONTEXT:
            return Token(TokenKind.DIALOGUE, line.number, line.trimmed, indent=line.indent)

        return Token(TokenKind.ACTION, line.number, line.trimmed, indent=line.indent)


def split_lines(text: str) -> List[str]:
    """Split text on \\n, dropping a trailing \\r from each line."""
    return [raw[:-1] if raw.endswith("\r") else raw for raw in text.split("\n")]


# Convenience function
def tokenize(text: str) -> TokenizeResult:
    """
    Tokenize screenplay text with default settings.

    Args:
        text: Raw text

    Returns:
        TokenizeResult
    """
    tokenizer = ScreenplayTokenizer()
    return tokenizer.tokenize(text)
