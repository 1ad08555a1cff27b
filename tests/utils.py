"""Builders shared by the grouping tests."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Set

from grouping.entities import ConstraintKind, Group, PairConstraint, PairRating, Person


def make_people(*names: str) -> List[Person]:
    """People whose id equals their name, which keeps assertions readable."""
    return [Person(id=name, name=name) for name in names]


def rating(a: str, b: str, value: int) -> PairRating:
    return PairRating(a, b, value)


def must(a: str, b: str, cid: str | None = None) -> PairConstraint:
    return PairConstraint(cid or f"must-{a}-{b}", a, b, ConstraintKind.MUST_PAIR)


def cannot(a: str, b: str, cid: str | None = None) -> PairConstraint:
    return PairConstraint(cid or f"cannot-{a}-{b}", a, b, ConstraintKind.CANNOT_PAIR)


def member_sets(groups: Iterable[Group]) -> List[Set[str]]:
    return [set(g.member_ids) for g in groups]


def same_group(groups: Iterable[Group], a: str, b: str) -> bool:
    return any(a in ids and b in ids for ids in member_sets(groups))


def write_lines(path: Path, lines: Sequence[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
