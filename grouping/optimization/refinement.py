"""
Swap-based local search applied after greedy assignment.

Repeatedly exchanges two people between two groups when the exchange
strictly raises the summed group score. Group sizes never change. A swap is
rejected when it would put cannot-pair partners together or move someone
away from a must-pair partner they currently share a group with.

For a swap of x (in group A) with y (in group B) the score change is:
    delta = (S[x, B] - s(x, y)) + (S[y, A] - s(x, y)) - S[x, A] - S[y, B]
where S[p, G] is the sum of p's ratings with the members of G.
"""

import logging
from typing import Dict, List, Set

import numpy as np

from ..constraints.classifier import ConstraintSets
from ..entities.schema import Person
from ..pair_generation.generator import PairIndex

logger = logging.getLogger(__name__)


def _must_partners(sets: ConstraintSets) -> Dict[str, Set[str]]:
    partners: Dict[str, Set[str]] = {}
    for constraint in sets.must_pair:
        partners.setdefault(constraint.person1_id, set()).add(constraint.person2_id)
        partners.setdefault(constraint.person2_id, set()).add(constraint.person1_id)
    return partners


def refine_by_swaps(
    buckets: List[List[Person]],
    index: PairIndex,
    sets: ConstraintSets,
    max_passes: int = 10
) -> int:
    """
    Improve an assignment in place by pairwise swaps.

    Args:
        buckets: Group member lists, modified in place
        index: PairIndex providing ratings
        sets: Classified constraints
        max_passes: Stop after this many passes over all candidate swaps

    Returns:
        Number of swaps applied
    """
    ids = [p.id for members in buckets for p in members]
    position = {person_id: i for i, person_id in enumerate(ids)}
    matrix = index.score_matrix(ids)
    must = _must_partners(sets)

    def group_positions(members: List[Person]) -> np.ndarray:
        return np.array([position[m.id] for m in members], dtype=np.int64)

    def pinned(person: Person, members: List[Person]) -> bool:
        partners = must.get(person.id)
        return bool(partners) and any(m.id in partners for m in members if m.id != person.id)

    def blocked(person: Person, members: List[Person], leaving: Person) -> bool:
        partners = sets.cannot_pair_partners(person.id)
        return any(m.id in partners for m in members if m.id != leaving.id)

    swaps = 0
    passes = 0
    while passes < max_passes:
        passes += 1
        improved = False
        for ga in range(len(buckets)):
            for gb in range(ga + 1, len(buckets)):
                for xi in range(len(buckets[ga])):
                    for yi in range(len(buckets[gb])):
                        group_a, group_b = buckets[ga], buckets[gb]
                        x, y = group_a[xi], group_b[yi]
                        if pinned(x, group_a) or pinned(y, group_b):
                            continue
                        if blocked(x, group_b, y) or blocked(y, group_a, x):
                            continue

                        px, py = position[x.id], position[y.id]
                        pos_a, pos_b = group_positions(group_a), group_positions(group_b)
                        pair = matrix[px, py]
                        delta = (
                            matrix[px, pos_b].sum() - pair
                            + matrix[py, pos_a].sum() - pair
                            - matrix[px, pos_a].sum()
                            - matrix[py, pos_b].sum()
                        )
                        if delta > 0:
                            group_a[xi], group_b[yi] = y, x
                            swaps += 1
                            improved = True
                            logger.debug(f"Swapped {x.id} and {y.id} (+{delta})")
        if not improved:
            break

    logger.info(f"Refinement applied {swaps} swaps in {passes} passes")
    return swaps
