"""
CSV export of assignments and pair preferences.

Two formats:
- Group assignment: one ``Group,Person`` row per member, groups labelled
  ``Group 1``, ``Group 2``, ... in output order
- Pair matrix: ``Person,<names...>`` grid where each cell holds the pair's
  rating, 100 for must-pair, -1 for cannot-pair and ``N/A`` when unset;
  the diagonal is left blank
"""

import logging
from pathlib import Path
from typing import Iterable, Sequence

import pandas as pd

from ..entities.schema import ConstraintKind, Group, Person, pair_key
from ..pair_generation.generator import PairIndex

logger = logging.getLogger(__name__)

MUST_PAIR_CODE = 100
CANNOT_PAIR_CODE = -1
UNSET_CODE = "N/A"


def groups_to_frame(groups: Iterable[Group]) -> pd.DataFrame:
    rows = [
        {"Group": f"Group {i}", "Person": member.name}
        for i, group in enumerate(groups, start=1)
        for member in group.members
    ]
    return pd.DataFrame(rows, columns=["Group", "Person"])


def export_groups_csv(groups: Iterable[Group], filepath: str) -> Path:
    """Write the ``Group,Person`` assignment table."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = groups_to_frame(groups)
    df.to_csv(path, index=False)
    logger.info(f"Saved {len(df)} group assignments to {path}")
    return path


def rating_matrix(people: Sequence[Person], index: PairIndex) -> pd.DataFrame:
    """
    Full pair matrix for export.

    Unlike PairIndex.lookup_score, unrated pairs show as ``N/A`` rather than
    the neutral default, so the export tells rated and unrated pairs apart.

    Args:
        people: Roster defining row and column order
        index: PairIndex holding ratings and constraints

    Returns:
        DataFrame with a ``Person`` column followed by one column per name
    """
    ratings = index.ratings
    rows = []
    for row_person in people:
        row = [row_person.name]
        for col_person in people:
            if col_person.id == row_person.id:
                row.append("")
                continue
            kind = index.lookup_constraint(row_person.id, col_person.id)
            if kind is ConstraintKind.MUST_PAIR:
                row.append(MUST_PAIR_CODE)
            elif kind is ConstraintKind.CANNOT_PAIR:
                row.append(CANNOT_PAIR_CODE)
            else:
                row.append(ratings.get(pair_key(row_person.id, col_person.id), UNSET_CODE))
        rows.append(row)

    return pd.DataFrame(rows, columns=["Person"] + [p.name for p in people])


def export_rating_matrix_csv(
    people: Sequence[Person],
    index: PairIndex,
    filepath: str
) -> Path:
    """Write the ``Person,<names...>`` pair matrix."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    rating_matrix(people, index).to_csv(path, index=False)
    logger.info(f"Saved {len(people)}x{len(people)} pair matrix to {path}")
    return path
