"""Group assignment engine."""

from .config import GroupingConfig
from .engine import (
    CANNOT_PAIR_VIOLATED,
    FALLBACK_PLACEMENT,
    MUST_PAIR_SEPARATED,
    UNHONORED_MUST_PAIR,
    AssignmentWarning,
    GroupAssignment,
    optimize_groups,
    run_assignment,
)
from .refinement import refine_by_swaps

__all__ = [
    "CANNOT_PAIR_VIOLATED",
    "FALLBACK_PLACEMENT",
    "MUST_PAIR_SEPARATED",
    "UNHONORED_MUST_PAIR",
    "AssignmentWarning",
    "GroupAssignment",
    "GroupingConfig",
    "optimize_groups",
    "refine_by_swaps",
    "run_assignment",
]
