"""
Editable preference store.

Holds the roster, the pair ratings and the pair constraints while they are
being entered, and hands an immutable ``GroupingInputs`` snapshot to the
assignment engine.

Key Design Decisions:
- One rating per unordered pair: later writes replace earlier ones
- One constraint per unordered pair: a new kind replaces the old one and
  ``None`` removes it
- A constrained pair is not rated: setting a constraint discards the pair's
  rating and ratings are refused while a constraint is active
- Removing a person removes every rating and constraint that mentions them
"""

import itertools
import logging
from typing import Dict, Iterable, List, Optional, Tuple

from .schema import (
    ConstraintKind,
    GroupingInputs,
    MAX_RATING,
    MIN_RATING,
    NEUTRAL_RATING,
    PairConstraint,
    PairRating,
    Person,
    pair_key,
)

logger = logging.getLogger(__name__)


class PreferenceStore:
    """
    In-memory store of people and their pairwise preferences.

    Attributes:
        min_rating: Lowest accepted rating
        max_rating: Highest accepted rating
        neutral_rating: Rating reported for unrated pairs
    """

    def __init__(
        self,
        people: Optional[Iterable[Person]] = None,
        min_rating: int = MIN_RATING,
        max_rating: int = MAX_RATING,
        neutral_rating: int = NEUTRAL_RATING
    ):
        if not min_rating <= neutral_rating <= max_rating:
            raise ValueError(
                f"Rating scale must satisfy min <= neutral <= max, "
                f"got {min_rating}, {neutral_rating}, {max_rating}"
            )
        self.min_rating = min_rating
        self.max_rating = max_rating
        self.neutral_rating = neutral_rating

        self._people: Dict[str, Person] = {}
        self._ratings: Dict[Tuple[str, str], PairRating] = {}
        self._constraints: Dict[Tuple[str, str], PairConstraint] = {}
        self._person_ids = itertools.count(1)
        self._constraint_ids = itertools.count(1)

        for person in people or []:
            self.add(person)

    # ------------------------------------------------------------------
    # People
    # ------------------------------------------------------------------

    @property
    def people(self) -> List[Person]:
        return list(self._people.values())

    def add(self, person: Person) -> Person:
        """Add an existing Person; its id must not be taken."""
        if person.id in self._people:
            raise ValueError(f"Duplicate person id: {person.id}")
        self._people[person.id] = person
        return person

    def add_person(self, name: str, description: str = "") -> Person:
        """Create a person with a fresh id and add it to the roster."""
        person_id = self._next_id("person", self._person_ids, self._people)
        return self.add(Person(id=person_id, name=name.strip(), description=description.strip()))

    def remove_person(self, person_id: str) -> None:
        """Remove a person together with all of their ratings and constraints."""
        if person_id not in self._people:
            raise KeyError(f"Unknown person id: {person_id}")
        del self._people[person_id]
        self._ratings = {k: r for k, r in self._ratings.items() if person_id not in k}
        self._constraints = {k: c for k, c in self._constraints.items() if person_id not in k}
        logger.debug(f"Removed person {person_id} and their pair preferences")

    # ------------------------------------------------------------------
    # Ratings
    # ------------------------------------------------------------------

    @property
    def ratings(self) -> List[PairRating]:
        return list(self._ratings.values())

    def set_rating(self, person1_id: str, person2_id: str, rating: int) -> Optional[PairRating]:
        """
        Store the rating for an unordered pair, replacing any earlier one.

        Args:
            person1_id: First person of the pair
            person2_id: Second person of the pair
            rating: Integer rating inside [min_rating, max_rating]

        Returns:
            The stored PairRating, or None if the pair carries a constraint

        Raises:
            ValueError: If the rating is outside the scale or the pair is invalid
        """
        self._check_pair(person1_id, person2_id)
        if isinstance(rating, bool) or not isinstance(rating, int) \
                or not self.min_rating <= rating <= self.max_rating:
            raise ValueError(
                f"rating must be an integer between {self.min_rating} and "
                f"{self.max_rating}, got {rating!r}"
            )

        key = pair_key(person1_id, person2_id)
        if key in self._constraints:
            logger.info(f"Ignoring rating for constrained pair {key}")
            return None

        stored = PairRating(person1_id, person2_id, rating)
        self._ratings[key] = stored
        return stored

    def get_rating(self, person1_id: str, person2_id: str) -> int:
        """Rating for the pair, or the neutral rating if unrated."""
        stored = self._ratings.get(pair_key(person1_id, person2_id))
        return stored.rating if stored is not None else self.neutral_rating

    # ------------------------------------------------------------------
    # Constraints
    # ------------------------------------------------------------------

    @property
    def constraints(self) -> List[PairConstraint]:
        return list(self._constraints.values())

    def set_constraint(
        self,
        person1_id: str,
        person2_id: str,
        kind: Optional[ConstraintKind]
    ) -> Optional[PairConstraint]:
        """
        Set, replace or remove the constraint on an unordered pair.

        A replaced constraint keeps its id. Passing ``None`` removes it.
        """
        self._check_pair(person1_id, person2_id)
        key = pair_key(person1_id, person2_id)

        if kind is None:
            self._constraints.pop(key, None)
            return None

        kind = ConstraintKind(kind)
        existing = self._constraints.get(key)
        constraint_id = existing.id if existing is not None else self._next_id(
            "constraint", self._constraint_ids, {c.id for c in self._constraints.values()}
        )
        constraint = PairConstraint(constraint_id, person1_id, person2_id, kind)
        self._constraints[key] = constraint

        if self._ratings.pop(key, None) is not None:
            logger.debug(f"Dropped rating for {key}, pair is now {kind.value}")
        return constraint

    def toggle_constraint(
        self,
        person1_id: str,
        person2_id: str,
        kind: ConstraintKind
    ) -> Optional[PairConstraint]:
        """Set ``kind`` on the pair, or clear it if it is already the active kind."""
        kind = ConstraintKind(kind)
        if self.get_constraint(person1_id, person2_id) is kind:
            return self.set_constraint(person1_id, person2_id, None)
        return self.set_constraint(person1_id, person2_id, kind)

    def get_constraint(self, person1_id: str, person2_id: str) -> Optional[ConstraintKind]:
        stored = self._constraints.get(pair_key(person1_id, person2_id))
        return stored.kind if stored is not None else None

    # ------------------------------------------------------------------

    def progress(self) -> Tuple[int, int]:
        """(pairs with a rating or constraint, total pairs)."""
        n = len(self._people)
        return len(self._ratings) + len(self._constraints), n * (n - 1) // 2

    def snapshot(self) -> GroupingInputs:
        """Freeze the current state for one optimization run."""
        return GroupingInputs(
            people=self.people,
            ratings=self.ratings,
            constraints=self.constraints,
        )

    def _check_pair(self, person1_id: str, person2_id: str) -> None:
        if person1_id == person2_id:
            raise ValueError(f"A pair needs two different people, got {person1_id} twice")
        for person_id in (person1_id, person2_id):
            if person_id not in self._people:
                raise KeyError(f"Unknown person id: {person_id}")

    @staticmethod
    def _next_id(prefix: str, counter, taken) -> str:
        for n in counter:
            candidate = f"{prefix}-{n}"
            if candidate not in taken:
                return candidate
