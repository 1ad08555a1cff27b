"""Data loading module for rosters, ratings and constraints."""

from .loaders import load_constraints, load_people, load_ratings, parse_people_csv

__all__ = ["load_constraints", "load_people", "load_ratings", "parse_people_csv"]
