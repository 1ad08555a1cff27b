"""
Constraint classification.

Splits the constraint list into must-pair and cannot-pair subsets. Order
within each subset follows the input, because the assignment engine seeds
must-pair clusters in that order.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

from ..entities.schema import ConstraintKind, PairConstraint, pair_key

logger = logging.getLogger(__name__)


@dataclass
class ConstraintSets:
    """Constraints grouped by kind, each list in input order."""
    must_pair: List[PairConstraint] = field(default_factory=list)
    cannot_pair: List[PairConstraint] = field(default_factory=list)

    def __post_init__(self):
        self._partners: Dict[str, Set[str]] = {}
        for constraint in self.cannot_pair:
            self._partners.setdefault(constraint.person1_id, set()).add(constraint.person2_id)
            self._partners.setdefault(constraint.person2_id, set()).add(constraint.person1_id)

    def cannot_pair_partners(self, person_id: str) -> Set[str]:
        """Ids that ``person_id`` must not share a group with."""
        return set(self._partners.get(person_id, ()))


def classify_constraints(constraints: Iterable[PairConstraint]) -> ConstraintSets:
    """
    Partition constraints into must-pair and cannot-pair lists.

    Args:
        constraints: Constraint collection in caller order

    Returns:
        ConstraintSets with order preserved inside each kind

    Raises:
        ValueError: If one unordered pair carries both a must-pair and a
            cannot-pair constraint
    """
    must_pair: List[PairConstraint] = []
    cannot_pair: List[PairConstraint] = []
    seen: Dict[Tuple[str, str], ConstraintKind] = {}

    for constraint in constraints:
        if constraint.person1_id == constraint.person2_id:
            logger.warning(
                f"Constraint {constraint.id} pairs {constraint.person1_id} with "
                f"itself and is ignored"
            )
            continue

        key = pair_key(constraint.person1_id, constraint.person2_id)
        previous = seen.get(key)
        if previous is not None and previous is not constraint.kind:
            raise ValueError(
                f"Conflicting constraints for pair {key}: both "
                f"{previous.value} and {constraint.kind.value}"
            )
        seen[key] = constraint.kind

        if constraint.kind is ConstraintKind.MUST_PAIR:
            must_pair.append(constraint)
        else:
            cannot_pair.append(constraint)

    logger.debug(f"Classified {len(must_pair)} must-pair and {len(cannot_pair)} cannot-pair constraints")
    return ConstraintSets(must_pair=must_pair, cannot_pair=cannot_pair)
