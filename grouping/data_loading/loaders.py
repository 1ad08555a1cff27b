"""
Data loading functions for the grouping pipeline.

This module reads the roster, pair ratings and pair constraints from text or
CSV files. Nothing here runs the assignment - that's handled by the
optimization module.

Roster format (two columns, header row):
    Name,Description
    Alice,Backend developer
    Bob,

Every data line is split on commas; fields are trimmed and double quotes are
removed. Lines with a blank name are skipped.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from ..entities.schema import (
    ConstraintKind,
    MAX_RATING,
    MIN_RATING,
    PairConstraint,
    PairRating,
    Person,
    pair_key,
)

logger = logging.getLogger(__name__)

RATING_COLUMNS = ["person1", "person2", "rating"]
CONSTRAINT_COLUMNS = ["person1", "person2", "type"]


def parse_people_csv(csv_text: str) -> List[Person]:
    """
    Parse roster text with a ``Name,Description`` header.

    Args:
        csv_text: Full text of the roster file

    Returns:
        People in file order, with ids ``person-<line>`` where line is the
        1-based data line number
    """
    lines = csv_text.strip().split("\n")
    people: List[Person] = []

    for i, line in enumerate(lines[1:], start=1):
        fields = [f.strip().replace('"', "") for f in line.split(",")]
        name = fields[0] if fields else ""
        description = fields[1] if len(fields) > 1 else ""
        if not name:
            continue
        people.append(Person(id=f"person-{i}", name=name, description=description))

    logger.info(f"Parsed {len(people)} people from {max(len(lines) - 1, 0)} data lines")
    return people


def load_people(filepath: str) -> List[Person]:
    """
    Load the roster from a ``Name,Description`` CSV file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file contains no people
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"People file not found: {filepath}")

    logger.info(f"Loading people from {filepath}")
    people = parse_people_csv(path.read_text(encoding="utf-8-sig"))
    if not people:
        raise ValueError(f"People file has no valid rows: {filepath}")
    return people


def _read_table(filepath: str, required: List[str], label: str) -> pd.DataFrame:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"{label} file not found: {filepath}")

    logger.info(f"Loading {label.lower()} from {filepath}")
    df = pd.read_csv(path, dtype=str, keep_default_na=False, skipinitialspace=True)
    df = df.rename(columns={c: c.strip().lower() for c in df.columns})

    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"{label} file {filepath} is missing columns: {missing}")
    return df


def _person_lookup(people: Iterable[Person]) -> Dict[str, str]:
    """Map both ids and names to ids; ids take precedence."""
    lookup: Dict[str, str] = {}
    for person in people:
        lookup.setdefault(person.name, person.id)
    for person in people:
        lookup[person.id] = person.id
    return lookup


def _resolve(value: str, lookup: Optional[Dict[str, str]]) -> str:
    value = value.strip()
    if lookup is None:
        return value
    return lookup.get(value, value)


def load_ratings(
    filepath: str,
    people: Optional[List[Person]] = None,
    min_rating: int = MIN_RATING,
    max_rating: int = MAX_RATING
) -> List[PairRating]:
    """
    Load pair ratings from a ``Person1,Person2,Rating`` CSV file.

    Person columns may hold ids or names; names are resolved to ids when
    ``people`` is given. A later row for the same pair replaces an earlier one.

    Args:
        filepath: Path to the ratings CSV
        people: Roster used to resolve names
        min_rating: Lowest accepted rating
        max_rating: Highest accepted rating

    Returns:
        List of PairRating, one per unordered pair

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a row has a non-integer or out-of-range rating
    """
    df = _read_table(filepath, RATING_COLUMNS, "Ratings")
    lookup = _person_lookup(people) if people is not None else None

    by_pair: Dict[Tuple[str, str], PairRating] = {}
    for row_number, record in enumerate(df.to_dict("records"), start=2):
        a = _resolve(record["person1"], lookup)
        b = _resolve(record["person2"], lookup)
        if not a or not b:
            logger.warning(f"Ratings row {row_number} has an empty person, skipped")
            continue
        try:
            value = int(record["rating"].strip())
        except ValueError:
            raise ValueError(
                f"Ratings row {row_number}: rating must be an integer, got {record['rating']!r}"
            ) from None
        if not min_rating <= value <= max_rating:
            raise ValueError(
                f"Ratings row {row_number}: rating {value} outside [{min_rating}, {max_rating}]"
            )
        rating = PairRating(a, b, value)
        by_pair[rating.key] = rating

    logger.info(f"Loaded {len(by_pair)} pair ratings")
    return list(by_pair.values())


def load_constraints(
    filepath: str,
    people: Optional[List[Person]] = None
) -> List[PairConstraint]:
    """
    Load pair constraints from a ``Person1,Person2,Type[,Id]`` CSV file.

    Type is ``must-pair`` or ``cannot-pair``; an empty type removes any
    earlier constraint on the pair. Rows without an Id get ``constraint-<row>``.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If a row has an unknown constraint type
    """
    df = _read_table(filepath, CONSTRAINT_COLUMNS, "Constraints")
    lookup = _person_lookup(people) if people is not None else None
    has_id = "id" in df.columns

    by_pair: Dict[Tuple[str, str], PairConstraint] = {}
    for row_number, record in enumerate(df.to_dict("records"), start=2):
        a = _resolve(record["person1"], lookup)
        b = _resolve(record["person2"], lookup)
        if not a or not b:
            logger.warning(f"Constraints row {row_number} has an empty person, skipped")
            continue

        kind_text = record["type"].strip().lower()
        constraint_id = (record["id"].strip() if has_id else "") or f"constraint-{row_number - 1}"
        if not kind_text:
            by_pair.pop(pair_key(a, b), None)
            continue
        try:
            kind = ConstraintKind(kind_text)
        except ValueError:
            raise ValueError(
                f"Constraints row {row_number}: unknown constraint type {record['type']!r}"
            ) from None
        constraint = PairConstraint(constraint_id, a, b, kind)
        by_pair[constraint.key] = constraint

    logger.info(f"Loaded {len(by_pair)} pair constraints")
    return list(by_pair.values())
