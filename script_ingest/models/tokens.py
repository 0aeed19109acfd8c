"""Token and dialogue block models for screenplay text."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .diagnostics import ParseDiagnostic


class TokenKind(str, Enum):
    """Classification of a single physical line."""

    BLANK = "BLANK"
    SCENE_HEADING = "SCENE_HEADING"  # INT. KITCHEN - DAY
    TRANSITION = "TRANSITION"  # CUT TO:
    TIMECODE = "TIMECODE"  # 00:01:23:10
    SPEAKER_COLON = "SPEAKER_COLON"  # JOHN: Hello.
    CHARACTER = "CHARACTER"  # Cue line above dialogue
    PARENTHETICAL = "PARENTHETICAL"  # (whispering)
    DIALOGUE = "DIALOGUE"
    ACTION = "ACTION"


# Kinds that name a speaker
CUE_KINDS = frozenset({TokenKind.CHARACTER, TokenKind.SPEAKER_COLON})


@dataclass(frozen=True)
class Token:
    """One classified line of input."""

    kind: TokenKind
    line: int  # 1-based source line
    text: str  # Trimmed payload, empty for BLANK
    character_name: Optional[str] = None  # CHARACTER / SPEAKER_COLON only
    indent: int = 0  # Leading whitespace of the raw line

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "line": self.line,
            "text": self.text,
            "character_name": self.character_name,
            "indent": self.indent,
        }


@dataclass
class TokenizeResult:
    """Token stream for one input text."""

    tokens: List[Token]
    line_count: int
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)

    def __len__(self) -> int:
        """Return number of tokens."""
        return len(self.tokens)

    def of_kind(self, kind: TokenKind) -> List[Token]:
        """Return tokens of a single kind, in source order."""
        return [t for t in self.tokens if t.kind == kind]


@dataclass(frozen=True)
class DialogueLine:
    """A logical line of speech (or a parenthetical) with its source line."""

    text: str
    line: int


@dataclass
class DialogueBlock:
    """One character's contiguous utterance."""

    character_name: str
    character_line: int
    dialogue_lines: List[DialogueLine] = field(default_factory=list)
    parentheticals: List[DialogueLine] = field(default_factory=list)
    timecode: Optional[str] = None

    @property
    def text(self) -> str:
        """Speakable text of the whole block."""
        return " ".join(d.text for d in self.dialogue_lines)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "character_name": self.character_name,
            "character_line": self.character_line,
            "dialogue_lines": [
                {"text": d.text, "line": d.line} for d in self.dialogue_lines
            ],
            "parentheticals": [
                {"text": p.text, "line": p.line} for p in self.parentheticals
            ],
            "timecode": self.timecode,
        }
