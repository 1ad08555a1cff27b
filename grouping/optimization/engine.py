"""
Greedy group assignment under must-pair / cannot-pair constraints.

Algorithm:
    1. num_groups = ceil(n / group_size) empty groups, each capped at group_size
    2. Must-pair phase: for each must-pair constraint (input order) whose two
       people are both unassigned, put both into the least-populated group if
       it has room for two; otherwise record an unhonored-must-pair warning
       and leave them to the greedy phase
    3. Greedy phase: place each remaining person (input order) into the
       eligible group with the highest incremental score; a group is eligible
       if it has room and holds none of the person's cannot-pair partners;
       ties go to the first eligible group
    4. Fallback: with no eligible group, use the least-populated group,
       ignoring capacity and constraints
    5. Score every group; drop empty groups

The result is not globally optimal. Everything the engine could not honor is
reported as an AssignmentWarning instead of raising.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple

from ..constraints.classifier import ConstraintSets, classify_constraints
from ..entities.schema import (
    Group,
    GroupingInputs,
    MAX_RATING,
    NEUTRAL_RATING,
    PairConstraint,
    PairRating,
    Person,
)
from ..evaluation.metrics import efficiency, max_possible_score, total_score
from ..pair_generation.generator import PairIndex
from ..scoring.group_scorer import incremental_score, score_group
from .config import GroupingConfig
from .refinement import refine_by_swaps

logger = logging.getLogger(__name__)

FALLBACK_PLACEMENT = "fallback-placement"
CANNOT_PAIR_VIOLATED = "cannot-pair-violated"
MUST_PAIR_SEPARATED = "must-pair-separated"
UNHONORED_MUST_PAIR = "unhonored-must-pair"


@dataclass
class AssignmentWarning:
    """
    Soft-correctness issue found while assigning groups.

    Attributes:
        kind: FALLBACK_PLACEMENT, CANNOT_PAIR_VIOLATED, MUST_PAIR_SEPARATED
            or UNHONORED_MUST_PAIR
        message: Human-readable description
        person_ids: People involved
        group_id: Group concerned, if any
    """
    kind: str
    message: str
    person_ids: Tuple[str, ...] = ()
    group_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "person_ids": list(self.person_ids),
            "group_id": self.group_id
        }


@dataclass
class GroupAssignment:
    """
    Output of one optimization run: non-empty scored groups plus warnings.
    """
    groups: List[Group]
    group_size: int
    warnings: List[AssignmentWarning] = field(default_factory=list)

    def __iter__(self) -> Iterator[Group]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    def __getitem__(self, i: int) -> Group:
        return self.groups[i]

    @property
    def total_score(self) -> int:
        return total_score(self.groups)

    def max_possible_score(self, max_rating: int = MAX_RATING) -> int:
        return max_possible_score(self.groups, max_rating)

    def efficiency(self, max_rating: int = MAX_RATING) -> float:
        return efficiency(self.groups, max_rating)

    @property
    def has_violations(self) -> bool:
        return any(w.kind == CANNOT_PAIR_VIOLATED for w in self.warnings)

    def assignment_of(self, person_id: str) -> Optional[Group]:
        """Group containing ``person_id``, or None."""
        for group in self.groups:
            if person_id in group.member_ids:
                return group
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "group_size": self.group_size,
            "total_score": self.total_score,
            "groups": [g.to_dict() for g in self.groups],
            "warnings": [w.to_dict() for w in self.warnings]
        }


def _least_populated(buckets: List[List[Person]]) -> int:
    """Index of the group with the fewest members; first one on ties."""
    best = 0
    for i in range(1, len(buckets)):
        if len(buckets[i]) < len(buckets[best]):
            best = i
    return best


def _validate_group_size(group_size: Any) -> None:
    if isinstance(group_size, bool) or not isinstance(group_size, int) or group_size < 1:
        raise ValueError(f"group_size must be a positive integer, got {group_size!r}")


def optimize_groups(
    people: Sequence[Person],
    ratings: Sequence[PairRating],
    constraints: Sequence[PairConstraint],
    group_size: int,
    *,
    default_rating: int = NEUTRAL_RATING,
    refine: bool = False,
    max_refine_passes: int = 10
) -> GroupAssignment:
    """
    Partition people into groups of at most ``group_size`` members.

    Args:
        people: Roster; input order drives greedy placement order
        ratings: Pair ratings (unordered pairs, first entry per pair wins)
        constraints: Must-pair / cannot-pair constraints; order drives
            must-pair seeding
        group_size: Target group size, at least 1
        default_rating: Rating assumed for unrated pairs
        refine: Run swap refinement after the greedy pass
        max_refine_passes: Upper bound on refinement passes

    Returns:
        GroupAssignment with non-empty groups and any warnings

    Raises:
        ValueError: If group_size is not a positive integer, or a pair
            carries both constraint kinds
    """
    _validate_group_size(group_size)

    index = PairIndex(ratings, constraints, default_rating=default_rating)
    sets = classify_constraints(constraints)

    n = len(people)
    if n == 0:
        logger.info("No people to group")
        return GroupAssignment(groups=[], group_size=group_size)

    num_groups = math.ceil(n / group_size)
    buckets: List[List[Person]] = [[] for _ in range(num_groups)]
    warnings: List[AssignmentWarning] = []
    logger.info(f"Assigning {n} people into {num_groups} groups of up to {group_size}")

    people_by_id: Dict[str, Person] = {}
    for person in people:
        people_by_id.setdefault(person.id, person)

    assigned: Set[str] = set()
    fallbacks: List[Person] = []

    # Must-pair seeding
    for constraint in sets.must_pair:
        if constraint.person1_id in assigned or constraint.person2_id in assigned:
            continue
        person1 = people_by_id.get(constraint.person1_id)
        person2 = people_by_id.get(constraint.person2_id)
        if person1 is None or person2 is None:
            logger.debug(f"Constraint {constraint.id} references an unknown person, skipped")
            continue

        target = _least_populated(buckets)
        if len(buckets[target]) + 2 <= group_size:
            buckets[target].extend([person1, person2])
            assigned.update((person1.id, person2.id))
            logger.debug(f"Seeded group-{target} with must-pair {person1.id}, {person2.id}")
        else:
            warnings.append(AssignmentWarning(
                kind=UNHONORED_MUST_PAIR,
                message=(
                    f"No group had room for must-pair {person1.name} and "
                    f"{person2.name}; placing them individually"
                ),
                person_ids=(person1.id, person2.id)
            ))

    # Greedy placement
    for person in people:
        if person.id in assigned:
            continue
        partners = sets.cannot_pair_partners(person.id)

        best_index = None
        best_gain = None
        for gi, members in enumerate(buckets):
            if len(members) >= group_size:
                continue
            if any(m.id in partners for m in members):
                continue
            gain = incremental_score(person, members, index)
            if best_gain is None or gain > best_gain:
                best_index, best_gain = gi, gain

        if best_index is None:
            best_index = _least_populated(buckets)
            fallbacks.append(person)

        buckets[best_index].append(person)
        assigned.add(person.id)

    if refine:
        refine_by_swaps(buckets, index, sets, max_passes=max_refine_passes)

    groups = [
        Group(id=f"group-{i}", members=list(members), total_score=score_group(members, index))
        for i, members in enumerate(buckets)
    ]
    non_empty = [g for g in groups if g.members]
    if len(non_empty) < len(groups):
        logger.info(f"Dropped {len(groups) - len(non_empty)} empty groups")

    # Group ids are read after refinement, which may have moved people
    group_of = {pid: g.id for g in non_empty for pid in g.member_ids}
    for person in fallbacks:
        warnings.append(AssignmentWarning(
            kind=FALLBACK_PLACEMENT,
            message=(
                f"{person.name} had no eligible group and was placed in "
                f"{group_of[person.id]} ignoring capacity and constraints"
            ),
            person_ids=(person.id,),
            group_id=group_of[person.id]
        ))
    warnings.extend(_constraint_warnings(non_empty, sets, people_by_id))
    for warning in warnings:
        logger.warning(warning.message)

    assignment = GroupAssignment(groups=non_empty, group_size=group_size, warnings=warnings)
    logger.info(f"Created {len(assignment)} groups, total score {assignment.total_score}")
    return assignment


def run_assignment(inputs: GroupingInputs, config: GroupingConfig) -> GroupAssignment:
    """Run ``optimize_groups`` on a snapshot with settings from ``config``."""
    config.validate()
    return optimize_groups(
        inputs.people,
        inputs.ratings,
        inputs.constraints,
        config.resolve_group_size(len(inputs.people)),
        default_rating=config.neutral_rating,
        refine=config.refine,
        max_refine_passes=config.max_refine_passes
    )


def _constraint_warnings(
    groups: List[Group],
    sets: ConstraintSets,
    people_by_id: Dict[str, Person]
) -> List[AssignmentWarning]:
    """Report cannot-pair couples that share a group and must-pair couples that do not."""
    group_of: Dict[str, str] = {}
    for group in groups:
        for member_id in group.member_ids:
            group_of[member_id] = group.id

    warnings = []
    for constraint in sets.cannot_pair:
        a, b = constraint.person1_id, constraint.person2_id
        if a in group_of and group_of.get(a) == group_of.get(b):
            warnings.append(AssignmentWarning(
                kind=CANNOT_PAIR_VIOLATED,
                message=(
                    f"{people_by_id[a].name} and {people_by_id[b].name} cannot pair "
                    f"but share {group_of[a]}"
                ),
                person_ids=(a, b),
                group_id=group_of[a]
            ))

    for constraint in sets.must_pair:
        a, b = constraint.person1_id, constraint.person2_id
        if a in group_of and b in group_of and group_of[a] != group_of[b]:
            warnings.append(AssignmentWarning(
                kind=MUST_PAIR_SEPARATED,
                message=(
                    f"{people_by_id[a].name} and {people_by_id[b].name} must pair "
                    f"but were placed in {group_of[a]} and {group_of[b]}"
                ),
                person_ids=(a, b)
            ))

    return warnings
