"""
Configuration for the assignment engine.

Group size can be given directly or derived from a requested number of
groups:
    group_size = ceil(n_people / num_groups)
"""

import json
import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from ..entities.schema import MAX_RATING, MIN_RATING, NEUTRAL_RATING

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class GroupingConfig:
    """
    Configuration for one grouping run.

    Attributes:
        group_size: Target (maximum) members per group
        num_groups: If set, overrides group_size via ceil(n / num_groups)
        min_rating: Lowest rating on the scale
        max_rating: Highest rating on the scale (used for efficiency)
        neutral_rating: Rating assumed for unrated pairs
        refine: Run swap refinement after the greedy pass
        max_refine_passes: Upper bound on refinement passes
    """
    group_size: Optional[int] = 4
    num_groups: Optional[int] = None
    min_rating: int = MIN_RATING
    max_rating: int = MAX_RATING
    neutral_rating: int = NEUTRAL_RATING
    refine: bool = False
    max_refine_passes: int = 10

    def validate(self) -> None:
        """Validate configuration values."""
        if self.num_groups is not None:
            if not _is_int(self.num_groups) or self.num_groups < 1:
                raise ValueError(f"num_groups must be a positive integer, got {self.num_groups!r}")
        elif not _is_int(self.group_size) or self.group_size < 1:
            raise ValueError(f"group_size must be a positive integer, got {self.group_size!r}")
        if not all(_is_int(v) for v in (self.min_rating, self.neutral_rating, self.max_rating)):
            raise ValueError("Rating scale values must be integers")
        if not self.min_rating <= self.neutral_rating <= self.max_rating:
            raise ValueError(
                f"Rating scale must satisfy min <= neutral <= max, got "
                f"{self.min_rating}, {self.neutral_rating}, {self.max_rating}"
            )
        if not _is_int(self.max_refine_passes) or self.max_refine_passes < 1:
            raise ValueError(f"max_refine_passes must be >= 1, got {self.max_refine_passes!r}")

    def resolve_group_size(self, n_people: int) -> int:
        """Effective group size for a roster of ``n_people``."""
        self.validate()
        if self.num_groups is not None:
            return max(1, math.ceil(n_people / self.num_groups))
        return self.group_size

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GroupingConfig":
        """Create from dictionary."""
        return cls(**d)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "GroupingConfig":
        """Create from main config dictionary."""
        grouping_config = config.get("grouping", {}) or {}
        rating_config = config.get("rating", {}) or {}

        return cls(
            group_size=grouping_config.get("group_size", 4),
            num_groups=grouping_config.get("num_groups"),
            min_rating=rating_config.get("min", MIN_RATING),
            max_rating=rating_config.get("max", MAX_RATING),
            neutral_rating=rating_config.get("neutral", NEUTRAL_RATING),
            refine=bool(grouping_config.get("refine", False)),
            max_refine_passes=grouping_config.get("max_refine_passes", 10)
        )

    def save(self, filepath: str) -> None:
        """Save to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved grouping config to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "GroupingConfig":
        """Load from JSON file."""
        with open(filepath, "r") as f:
            d = json.load(f)
        return cls.from_dict(d)
