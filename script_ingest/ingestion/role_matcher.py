"""
Near-duplicate role detection.

Flags role names that are probably the same character spelled differently,
so a human can merge them before casting. Variants of one character
(YOUNG JOHN, JOHN'S VOICE) are grouped under their base role instead.
"""

import re
import difflib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from ..config import Settings
from ..models import MappedRole
from .cue_validator import find_base_role

logger = logging.getLogger(__name__)


class SimilarityReason(str, Enum):
    """Why two role names were matched."""

    SPELLING = "spelling"  # JOHN / JON
    CONTAINS = "contains"  # MARY / MARY ANN
    TITLE_VARIANT = "title_variant"  # DR HOOK / CAPTAIN HOOK


@dataclass
class SimilarityMatch:
    """Two role names that may be one character."""

    role1: str
    role2: str
    similarity: float
    reason: SimilarityReason

    @property
    def message(self) -> str:
        if self.reason == SimilarityReason.SPELLING:
            return (
                f'"{self.role1}" and "{self.role2}" are very similar '
                f"({round(self.similarity * 100)}% match)"
            )
        if self.reason == SimilarityReason.CONTAINS:
            return f'"{self.role1}" may be the same as "{self.role2}"'
        return f'"{self.role1}" and "{self.role2}" may be the same character with different titles'

    def to_dict(self) -> dict:
        return {
            "role1": self.role1,
            "role2": self.role2,
            "similarity": round(self.similarity, 3),
            "reason": self.reason.value,
        }


@dataclass
class RoleGroup:
    """A base role and its variants."""

    primary_name: str
    members: List[str] = field(default_factory=list)
    total_replicas: int = 0

    def to_dict(self) -> dict:
        return {
            "primary_name": self.primary_name,
            "members": list(self.members),
            "total_replicas": self.total_replicas,
        }


# Honorifics ignored when comparing names
TITLES = {
    "MR", "MRS", "MS", "MISS", "DR", "PROF", "SIR", "LADY", "LORD",
    "CAPTAIN", "CAPT", "LT", "SGT", "CPL",
}

# Shorter name must cover this share of the longer one to count as contained
MIN_CONTAINED_RATIO = 0.5

_WORD_SPLIT = re.compile(r"[\s.]+")


def similarity_ratio(name1: str, name2: str) -> float:
    """Similarity of two names between 0 and 1."""
    if not name1 and not name2:
        return 1.0
    return difflib.SequenceMatcher(None, name1, name2).ratio()


def _contains_name(name1: str, name2: str) -> bool:
    """Every word of the shorter name appears in the longer one."""
    words1, words2 = name1.split(), name2.split()
    shorter, longer = (words1, words2) if len(words1) <= len(words2) else (words2, words1)
    return all(word in longer for word in shorter)


def remove_titles(name: str) -> str:
    """Drop honorifics: DR. JONES -> JONES."""
    words = [w for w in _WORD_SPLIT.split(name) if w and w.upper() not in TITLES]
    return " ".join(words)


def _compare(name1: str, name2: str, threshold: float) -> Optional[SimilarityMatch]:
    similarity = similarity_ratio(name1, name2)
    if similarity >= threshold:
        return SimilarityMatch(name1, name2, similarity, SimilarityReason.SPELLING)

    if _contains_name(name1, name2):
        coverage = min(len(name1), len(name2)) / max(len(name1), len(name2))
        if coverage >= MIN_CONTAINED_RATIO:
            return SimilarityMatch(name1, name2, coverage, SimilarityReason.CONTAINS)

    bare1, bare2 = remove_titles(name1), remove_titles(name2)
    if bare1 and bare2 and bare1 != name1 and bare2 != name2:
        title_similarity = similarity_ratio(bare1, bare2)
        if title_similarity >= threshold:
            return SimilarityMatch(name1, name2, title_similarity, SimilarityReason.TITLE_VARIANT)

    return None


def find_similar_roles(names: Sequence[str], threshold: float = None) -> List[SimilarityMatch]:
    """
    Find pairs of normalized role names that may be the same character.

    Checks, in order: overall spelling similarity, one name containing the
    other, and similarity once titles are removed. Pairs where one name is
    a variant of the other (YOUNG JOHN / JOHN) are skipped.

    Args:
        names: Normalized role names, each listed once
        threshold: Minimum similarity (ROLE_SIMILARITY_THRESHOLD when omitted)

    Returns:
        Matches sorted by similarity, highest first
    """
    if threshold is None:
        threshold = Settings().ROLE_SIMILARITY_THRESHOLD

    matches = []
    for i, name1 in enumerate(names):
        for name2 in names[i + 1:]:
            if find_base_role(name1) == name2 or find_base_role(name2) == name1:
                continue
            match = _compare(name1, name2, threshold)
            if match:
                matches.append(match)

    logger.debug(f"Found {len(matches)} similar role pairs among {len(names)} roles")
    return sorted(matches, key=lambda m: -m.similarity)


def group_similar_roles(roles: Sequence[MappedRole]) -> List[RoleGroup]:
    """
    Group variant roles under their base role.

    Every role lands in exactly one group; roles without a base role present
    form single-member groups.

    Returns:
        Groups sorted by total replicas, highest first
    """
    by_name = {role.role_name_normalized: role for role in roles}
    assigned = set()
    groups = []

    for role in roles:
        name = role.role_name_normalized
        if name in assigned:
            continue
        parent = find_base_role(name)
        if not parent or parent not in by_name or parent in assigned:
            continue

        members = [parent] + [
            r.role_name_normalized for r in roles
            if r.role_name_normalized not in assigned
            and r.role_name_normalized != parent
            and find_base_role(r.role_name_normalized) == parent
        ]
        assigned.update(members)
        groups.append(RoleGroup(
            primary_name=parent,
            members=members,
            total_replicas=sum(by_name[m].replicas_needed for m in members),
        ))

    for role in roles:
        if role.role_name_normalized not in assigned:
            assigned.add(role.role_name_normalized)
            groups.append(RoleGroup(
                primary_name=role.role_name_normalized,
                members=[role.role_name_normalized],
                total_replicas=role.replicas_needed,
            ))

    return sorted(groups, key=lambda g: -g.total_replicas)
