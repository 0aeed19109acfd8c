"""
Character cue validation and role-name normalization.

Decides whether a line of text is a plausible speaker cue:
- Upper-case names (Hebrew names have no case and always pass)
- Optional trailing extension such as (V.O.) or (CONT'D)
- No sentence punctuation at the end
- Not a camera or scene direction (ANGLE ON, CONTINUOUS)
- Not a lone common word unless centered on the page
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from ..config import Settings
from ..models import DialogueBlock, MappedRole


class InvalidCueReason(Enum):
    """Reasons why a line is not a speaker cue."""

    EMPTY = "empty"
    TOO_LONG = "too_long"
    NUMERIC = "numeric"  # 42, #3
    NOT_UPPERCASE = "not_uppercase"  # John walks in
    INVALID_CHARACTERS = "invalid_characters"  # (beat), JOHN!!
    SENTENCE_PUNCTUATION = "sentence_punctuation"  # THE END.
    SCENE_DIRECTION = "scene_direction"  # ANGLE ON, CONTINUOUS
    COMMON_WORD = "common_word"  # THE, AND


@dataclass
class CueValidationResult:
    """Result of cue validation."""

    is_valid: bool
    name: str
    reason: Optional[InvalidCueReason] = None
    normalized_name: Optional[str] = None
    extension: Optional[str] = None  # (V.O.), (CONT'D)


class CueValidator:
    """
    Validates speaker cues found in screenplay and transcript text.

    The same rules back the tokenizer's CHARACTER / SPEAKER_COLON detection
    and the narrative extractor's name lines, so both paths agree on what a
    speaker name looks like.
    """

    # Name with an optional trailing extension: JOHN (V.O.)
    EXTENSION_PATTERN = re.compile(r"^(?P<name>.+?)\s*(?P<ext>\([^()]*\))$")

    # Upper-case Latin or Hebrew name characters
    NAME_PATTERN = re.compile(r"^[A-Zא-ת][A-Z0-9 \-'’.#&/א-ת]*$")

    NUMERIC_PATTERN = re.compile(r"^[\d\s#.\-]+$")
    SENTENCE_END_PATTERN = re.compile(r"[.!?]$")

    # Camera and scene directions that look like cues
    SCENE_DIRECTIONS = (
        "ANGLE ON",
        "CLOSE ON",
        "WIDE ON",
        "BACK TO",
        "LATER",
        "CONTINUOUS",
        "CONTINUED",
        "MORNING",
        "EVENING",
        "NIGHT",
        "INSERT",
        "SUPER",
        "THE END",
        "MORE",
    )

    # Short words rejected on un-indented lines
    COMMON_WORDS = {
        "THE", "AND", "BUT", "FOR", "NOT", "YOU", "ALL", "CAN", "HAD",
        "HER", "WAS", "ONE", "OUR", "OUT", "END", "DAY", "MAN", "BOY",
    }

    def __init__(self, max_length: int = None):
        """
        Initialize the validator.

        Args:
            max_length: Longest accepted cue name (default from settings)
        """
        self.max_length = max_length or Settings().MAX_CUE_LENGTH

    def split_extension(self, text: str) -> tuple:
        """Split "JOHN (V.O.)" into ("JOHN", "(V.O.)")."""
        text = text.strip()
        match = self.EXTENSION_PATTERN.match(text)
        if match:
            return match.group("name").strip(), match.group("ext")
        return text, None

    def validate(self, text: str, centered: bool = False) -> CueValidationResult:
        """
        Validate a candidate cue.

        Args:
            text: Trimmed line content
            centered: Whether the line is indented like a screenplay cue

        Returns:
            CueValidationResult with the bare name and extension if valid
        """
        text = text.strip()
        if not text:
            return CueValidationResult(False, text, InvalidCueReason.EMPTY)

        name, extension = self.split_extension(text)

        if len(name) > self.max_length:
            return CueValidationResult(False, name, InvalidCueReason.TOO_LONG)

        if self.NUMERIC_PATTERN.match(name):
            return CueValidationResult(False, name, InvalidCueReason.NUMERIC)

        if name != name.upper():
            return CueValidationResult(False, name, InvalidCueReason.NOT_UPPERCASE)

        if not self.NAME_PATTERN.match(name):
            return CueValidationResult(False, name, InvalidCueReason.INVALID_CHARACTERS)

        if self.SENTENCE_END_PATTERN.search(name):
            return CueValidationResult(False, name, InvalidCueReason.SENTENCE_PUNCTUATION)

        for direction in self.SCENE_DIRECTIONS:
            if name == direction or name.startswith(direction + " "):
                return CueValidationResult(False, name, InvalidCueReason.SCENE_DIRECTION)

        if not centered and name in self.COMMON_WORDS:
            return CueValidationResult(False, name, InvalidCueReason.COMMON_WORD)

        return CueValidationResult(
            True,
            name,
            normalized_name=normalize_role_name(text),
            extension=extension,
        )

    def is_cue(self, text: str, centered: bool = False) -> bool:
        """Return True if text is a plausible speaker cue."""
        return self.validate(text, centered=centered).is_valid


# =============================================================================
# Role-name normalization
# =============================================================================

# Extensions stripped when comparing role names
EXTENSION_PATTERNS = [
    re.compile(r"\s*\(V\.?O\.?\)", re.IGNORECASE),  # Voice over
    re.compile(r"\s*\(O\.?S\.?\)", re.IGNORECASE),  # Off screen
    re.compile(r"\s*\(O\.?C\.?\)", re.IGNORECASE),  # Off camera
    re.compile(r"\s*\(CONT['’]?D\)", re.IGNORECASE),
    re.compile(r"\s*\(CONT\)", re.IGNORECASE),
    re.compile(r"\s*\(CONTINUING\)", re.IGNORECASE),
    re.compile(r"\s*\(SUBTITLED\)", re.IGNORECASE),
    re.compile(r"\s*\(FILTERED\)", re.IGNORECASE),
    re.compile(r"\s*\(ON (?:TV|RADIO|PHONE|SCREEN)\)", re.IGNORECASE),
    re.compile(r"\s*\(PRE-?LAP\)", re.IGNORECASE),
    re.compile(r"\s*\(WHISPER(?:ING|S)?\)", re.IGNORECASE),
    re.compile(r"\s*\(SINGING\)", re.IGNORECASE),
]

# Crowd cues rather than individual characters
GROUP_PATTERNS = [
    re.compile(
        r"^(ALL|EVERYONE|CROWD|GROUP|CHORUS|SOLDIERS|GUARDS|CHILDREN|KIDS|PEOPLE|VOICES?|OTHERS?)$",
        re.IGNORECASE,
    ),
    re.compile(r"\((?:ALL|GROUP|CHORUS|TOGETHER|IN UNISON)\)", re.IGNORECASE),
    re.compile(r"\d+\s*(?:SOLDIERS|GUARDS|PEOPLE|VOICES)", re.IGNORECASE),
]

# Variants of one character: YOUNG JOHN -> JOHN
VARIANT_PATTERNS = [
    (re.compile(r"^(YOUNG|OLD|OLDER|YOUNGER|LITTLE|ADULT|TEEN|TEENAGE?)\s+(.+)$", re.IGNORECASE), 2),
    (re.compile(r"^(.+)\s+\((?:YOUNG|OLD|OLDER|YOUNGER|CHILD|ADULT|TEEN|AGE \d+)\)$", re.IGNORECASE), 1),
    (re.compile(r"^(.+?)\s*['’]S\s+VOICE$", re.IGNORECASE), 1),
]


def normalize_role_name(name: str) -> str:
    """
    Normalize a role name for comparison.

    Handles:
    - Case: John -> JOHN
    - Extensions: JOHN (V.O.) -> JOHN
    - Numbering: GUARD #2 -> GUARD
    - Possessive: JOHN'S -> JOHN
    """
    normalized = name.strip().upper()

    for pattern in EXTENSION_PATTERNS:
        normalized = pattern.sub("", normalized)

    normalized = re.sub(r"\s*#\d+$", "", normalized)
    normalized = re.sub(r"\s+\d+$", "", normalized)
    normalized = re.sub(r"['’]S$", "", normalized)

    return normalized.strip()


def is_group_role(name: str) -> bool:
    """Return True if the cue names a group rather than one character."""
    return any(pattern.search(name) for pattern in GROUP_PATTERNS)


def find_base_role(name: str) -> Optional[str]:
    """Return the base role for a variant (YOUNG JOHN -> JOHN), or None."""
    for pattern, base_index in VARIANT_PATTERNS:
        match = pattern.match(name)
        if match and match.group(base_index):
            return normalize_role_name(match.group(base_index))
    return None


# =============================================================================
# Role summary (role-list import from screenplay text)
# =============================================================================


@dataclass
class RoleSummary:
    """Speaking role found in dialogue blocks."""

    name: str  # First spelling seen
    normalized_name: str
    replica_count: int = 0
    first_appearance: int = 0  # Line of the first cue
    variants: List[str] = field(default_factory=list)
    possible_group: bool = False
    parent_name: Optional[str] = None

    def to_mapped_role(self) -> MappedRole:
        """Convert to a role-list entry."""
        return MappedRole(
            role_name=self.name,
            role_name_normalized=self.normalized_name,
            replicas_needed=max(1, self.replica_count),
        )


def summarize_roles(blocks: Iterable[DialogueBlock]) -> List[RoleSummary]:
    """
    Count replicas per normalized role.

    Args:
        blocks: Dialogue blocks in source order

    Returns:
        Roles sorted by replica count (descending), then first appearance
    """
    roles = {}

    for block in blocks:
        normalized = normalize_role_name(block.character_name)
        if not normalized:
            continue

        role = roles.get(normalized)
        if role is None:
            role = RoleSummary(
                name=block.character_name,
                normalized_name=normalized,
                first_appearance=block.character_line,
                possible_group=is_group_role(normalized),
                parent_name=find_base_role(normalized),
            )
            roles[normalized] = role

        role.replica_count += 1
        if block.character_name not in role.variants:
            role.variants.append(block.character_name)

    return sorted(roles.values(), key=lambda r: (-r.replica_count, r.first_appearance))


# Convenience function
def validate_cue(text: str, centered: bool = False) -> CueValidationResult:
    """
    Validate a single cue.

    Args:
        text: Candidate cue text
        centered: Whether the line is indented like a screenplay cue

    Returns:
        CueValidationResult
    """
    validator = CueValidator()
    return validator.validate(text, centered=centered)
