"""
Pair enumeration and symmetric pair lookup.

This module derives the unordered pairs of a roster and indexes ratings and
constraints by pair so that either ordering of a pair finds the same entry.

Key Design Decisions:
- Pairs are unordered: (A, B) and (B, A) are considered the same pair
- Self-pairs are excluded: (A, A) is never generated
- Entries are keyed by the sorted id tuple, so lookup is a dict access
- Unrated pairs return the neutral default rating
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..entities.schema import (
    ConstraintKind,
    NEUTRAL_RATING,
    PairConstraint,
    PairRating,
    Person,
    pair_key,
)

logger = logging.getLogger(__name__)


def generate_pairs(people: Sequence[Person]) -> List[Tuple[Person, Person]]:
    """
    Enumerate all unordered pairs of a roster.

    Args:
        people: Roster in input order

    Returns:
        List of (person_i, person_j) tuples with i < j, in row-major order
    """
    pairs = []
    for i in range(len(people)):
        for j in range(i + 1, len(people)):
            pairs.append((people[i], people[j]))
    return pairs


class PairIndex:
    """
    Symmetric lookup of ratings and constraints by unordered pair.

    If the same unordered pair appears more than once in the input, the first
    entry wins and later ones are ignored.

    Attributes:
        default_rating: Rating returned for pairs without a stored rating
    """

    def __init__(
        self,
        ratings: Iterable[PairRating] = (),
        constraints: Iterable[PairConstraint] = (),
        default_rating: int = NEUTRAL_RATING
    ):
        self.default_rating = default_rating
        self._ratings: Dict[Tuple[str, str], int] = {}
        self._constraints: Dict[Tuple[str, str], ConstraintKind] = {}

        for rating in ratings:
            key = pair_key(rating.person1_id, rating.person2_id)
            if key in self._ratings:
                logger.debug(f"Duplicate rating for pair {key} ignored")
                continue
            self._ratings[key] = rating.rating

        for constraint in constraints:
            key = pair_key(constraint.person1_id, constraint.person2_id)
            if key in self._constraints:
                logger.debug(f"Duplicate constraint for pair {key} ignored")
                continue
            self._constraints[key] = constraint.kind

    @property
    def ratings(self) -> Dict[Tuple[str, str], int]:
        return dict(self._ratings)

    @property
    def constraints(self) -> Dict[Tuple[str, str], ConstraintKind]:
        return dict(self._constraints)

    def lookup_score(self, person1_id: str, person2_id: str) -> int:
        return self._ratings.get(pair_key(person1_id, person2_id), self.default_rating)

    def lookup_constraint(self, person1_id: str, person2_id: str) -> Optional[ConstraintKind]:
        return self._constraints.get(pair_key(person1_id, person2_id))

    def score_matrix(self, person_ids: Sequence[str]) -> np.ndarray:
        """
        Dense symmetric rating matrix for the given ids.

        Args:
            person_ids: Ids defining row/column order

        Returns:
            (n, n) integer array; entry [i, j] is lookup_score(ids[i], ids[j])
            and the diagonal is 0
        """
        n = len(person_ids)
        matrix = np.zeros((n, n), dtype=np.int64)
        rows, cols = np.triu_indices(n, k=1)
        for i, j in zip(rows, cols):
            score = self.lookup_score(person_ids[i], person_ids[j])
            matrix[i, j] = score
            matrix[j, i] = score
        return matrix
