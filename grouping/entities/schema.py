"""
Data structures for people, pair preferences and groups.

Ratings use a 1-5 scale:
1 = Bad Match
2 = Poor Match
3 = Neutral (used for every unrated pair)
4 = Good Match
5 = Great Match

A pair is always unordered: (A, B) and (B, A) describe the same pair.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

MIN_RATING = 1
MAX_RATING = 5
NEUTRAL_RATING = 3

RATING_LABELS = {
    1: "Bad Match",
    2: "Poor Match",
    3: "Neutral",
    4: "Good Match",
    5: "Great Match",
}


class ConstraintKind(Enum):
    """Hard pairing constraint kinds."""
    MUST_PAIR = "must-pair"
    CANNOT_PAIR = "cannot-pair"


@dataclass(frozen=True)
class Person:
    """
    One participant to be grouped.

    Attributes:
        id: Unique identifier
        name: Display name (non-empty)
        description: Optional free-text note
    """
    id: str
    name: str
    description: str = ""

    def __post_init__(self):
        """Validate identity and name."""
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Person id must be a non-empty string, got {self.id!r}")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"Person name must be a non-empty string, got {self.name!r}")
        if self.description is None:
            object.__setattr__(self, "description", "")

    def to_dict(self) -> Dict[str, str]:
        """Convert to dictionary."""
        return {"id": self.id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class PairRating:
    """
    Affinity rating for an unordered pair of people.

    The rating must be an integer. Whether it lies inside the configured
    scale is checked by the store and the loaders, which know the scale.
    """
    person1_id: str
    person2_id: str
    rating: int

    def __post_init__(self):
        if isinstance(self.rating, bool) or not isinstance(self.rating, int):
            raise ValueError(f"rating must be an integer, got {self.rating!r}")

    @property
    def key(self) -> Tuple[str, str]:
        return pair_key(self.person1_id, self.person2_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "person1_id": self.person1_id,
            "person2_id": self.person2_id,
            "rating": self.rating,
        }


@dataclass(frozen=True)
class PairConstraint:
    """
    Must-pair or cannot-pair constraint on an unordered pair.

    Attributes:
        id: Unique constraint identifier
        person1_id: First person of the pair
        person2_id: Second person of the pair
        kind: ConstraintKind (strings such as "must-pair" are accepted)
    """
    id: str
    person1_id: str
    person2_id: str
    kind: ConstraintKind

    def __post_init__(self):
        """Convert string kinds to the enum."""
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", ConstraintKind(self.kind))
        elif not isinstance(self.kind, ConstraintKind):
            raise ValueError(f"kind must be a ConstraintKind, got {self.kind!r}")

    @property
    def key(self) -> Tuple[str, str]:
        return pair_key(self.person1_id, self.person2_id)

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "person1_id": self.person1_id,
            "person2_id": self.person2_id,
            "kind": self.kind.value,
        }


@dataclass
class Group:
    """
    One group of an assignment.

    Attributes:
        id: Group identifier (e.g. "group-0")
        members: People placed in this group
        total_score: Sum of pairwise ratings among members
    """
    id: str
    members: List[Person] = field(default_factory=list)
    total_score: int = 0

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def member_ids(self) -> List[str]:
        return [m.id for m in self.members]

    @property
    def pair_count(self) -> int:
        return self.size * (self.size - 1) // 2

    @property
    def average_rating(self) -> Optional[float]:
        """Mean rating per member pair, or None for groups with fewer than 2 members."""
        if self.pair_count == 0:
            return None
        return self.total_score / self.pair_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "members": [m.to_dict() for m in self.members],
            "total_score": self.total_score,
        }


@dataclass(frozen=True)
class GroupingInputs:
    """
    Immutable snapshot of everything the assignment engine consumes.

    Produced by ``PreferenceStore.snapshot()`` so that later edits to the
    store never leak into a run in progress.
    """
    people: Tuple[Person, ...] = ()
    ratings: Tuple[PairRating, ...] = ()
    constraints: Tuple[PairConstraint, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "people", tuple(self.people))
        object.__setattr__(self, "ratings", tuple(self.ratings))
        object.__setattr__(self, "constraints", tuple(self.constraints))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "people": [p.to_dict() for p in self.people],
            "ratings": [r.to_dict() for r in self.ratings],
            "constraints": [c.to_dict() for c in self.constraints],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupingInputs":
        """Create from dictionary."""
        return cls(
            people=[Person(**p) for p in data.get("people", [])],
            ratings=[PairRating(**r) for r in data.get("ratings", [])],
            constraints=[PairConstraint(**c) for c in data.get("constraints", [])],
        )


def pair_key(a: str, b: str) -> Tuple[str, str]:
    """Canonical key for an unordered pair: the two ids in sorted order."""
    return (a, b) if a <= b else (b, a)
