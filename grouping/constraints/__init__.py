"""Constraint classification into must-pair and cannot-pair sets."""

from .classifier import ConstraintSets, classify_constraints

__all__ = ["ConstraintSets", "classify_constraints"]
