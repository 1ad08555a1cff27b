"""
Group scoring.

The score of a group is the sum of the ratings of every unordered pair of
its members, with unrated pairs counted at the neutral default. Groups with
fewer than two members score 0.
"""

from typing import Sequence, Union

from ..entities.schema import Person
from ..pair_generation.generator import PairIndex

Member = Union[Person, str]


def _member_id(member: Member) -> str:
    return member.id if isinstance(member, Person) else member


def score_group(members: Sequence[Member], index: PairIndex) -> int:
    """
    Total affinity of a group.

    Args:
        members: People (or their ids) in the group
        index: PairIndex providing pair ratings

    Returns:
        Sum of lookup_score over all member pairs
    """
    ids = [_member_id(m) for m in members]
    total = 0
    for i in range(len(ids)):
        for j in range(i + 1, len(ids)):
            total += index.lookup_score(ids[i], ids[j])
    return total


def incremental_score(person: Member, members: Sequence[Member], index: PairIndex) -> int:
    """Score gained by adding ``person`` to a group with ``members``."""
    person_id = _member_id(person)
    return sum(index.lookup_score(person_id, _member_id(m)) for m in members)
