"""People, pair preferences and groups."""

from .schema import (
    ConstraintKind,
    Group,
    GroupingInputs,
    MAX_RATING,
    MIN_RATING,
    NEUTRAL_RATING,
    PairConstraint,
    PairRating,
    Person,
    pair_key,
)
from .store import PreferenceStore

__all__ = [
    "ConstraintKind",
    "Group",
    "GroupingInputs",
    "MAX_RATING",
    "MIN_RATING",
    "NEUTRAL_RATING",
    "PairConstraint",
    "PairRating",
    "Person",
    "PreferenceStore",
    "pair_key",
]
