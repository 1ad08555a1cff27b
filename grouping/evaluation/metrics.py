"""
Reporting metrics for group assignments.

These values are derived for presentation only; the assignment engine does
not use them to make decisions.

    total      = sum of group scores
    maximum    = sum over groups of C(size, 2) * max_rating
    efficiency = total / maximum   (0 when maximum is 0)
"""

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

import numpy as np

from ..entities.schema import Group, MAX_RATING, RATING_LABELS
from ..pair_generation.generator import PairIndex

if TYPE_CHECKING:
    from ..optimization.engine import GroupAssignment

logger = logging.getLogger(__name__)


def total_score(groups: Iterable[Group]) -> int:
    return sum(group.total_score for group in groups)


def max_possible_score(groups: Iterable[Group], max_rating: int = MAX_RATING) -> int:
    """Score the groups would reach if every member pair had the top rating."""
    return sum(group.pair_count * max_rating for group in groups)


def efficiency(groups: Iterable[Group], max_rating: int = MAX_RATING) -> float:
    """Ratio of achieved to theoretical maximum score, 0.0 when the maximum is 0."""
    groups = list(groups)
    maximum = max_possible_score(groups, max_rating)
    if maximum == 0:
        return 0.0
    return total_score(groups) / maximum


@dataclass
class ScoreDistributionStats:
    """Statistics about the ratings of pairs that share a group."""
    n_pairs: int
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 2.0, "p50": 3.0, "p90": 5.0}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_pairs": int(self.n_pairs),
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


def compute_score_distribution_stats(
    scores: np.ndarray,
    quantiles: Optional[List[float]] = None
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for pair ratings.

    Args:
        scores: Array of ratings
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance (all zeros for an empty array)
    """
    if quantiles is None:
        quantiles = [0.1, 0.25, 0.5, 0.75, 0.9]
    scores = np.asarray(scores, dtype=float)

    if scores.size == 0:
        return ScoreDistributionStats(
            n_pairs=0, mean=0.0, std=0.0, min=0.0, max=0.0,
            quantiles={f"p{int(q * 100)}": 0.0 for q in quantiles}
        )

    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        n_pairs=int(scores.size),
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def within_group_pair_scores(groups: Iterable[Group], index: PairIndex) -> np.ndarray:
    """Ratings of every pair of people that share a group, as one flat array."""
    collected = []
    for group in groups:
        ids = group.member_ids
        if len(ids) < 2:
            continue
        matrix = index.score_matrix(ids)
        rows, cols = np.triu_indices(len(ids), k=1)
        collected.append(matrix[rows, cols])
    if not collected:
        return np.zeros(0, dtype=np.int64)
    return np.concatenate(collected)


@dataclass
class GroupingReport:
    """
    Summary of one assignment: scores, per-group detail and warnings.
    """
    n_people: int
    n_groups: int
    group_size: int
    total_score: int
    max_possible_score: int
    efficiency: float
    distribution_stats: ScoreDistributionStats
    groups: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_people": self.n_people,
            "n_groups": self.n_groups,
            "group_size": self.group_size,
            "total_score": self.total_score,
            "max_possible_score": self.max_possible_score,
            "efficiency": float(self.efficiency),
            "distribution_stats": self.distribution_stats.to_dict(),
            "groups": self.groups,
            "warnings": self.warnings
        }

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved grouping report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        lines = [
            "Grouping Report",
            "=" * 50,
            f"  People: {self.n_people}",
            f"  Groups: {self.n_groups} (target size {self.group_size})",
            f"  Total score: {self.total_score}",
            f"  Max possible: {self.max_possible_score}",
            f"  Efficiency: {self.efficiency:.1%}",
        ]

        for i, group in enumerate(self.groups, start=1):
            avg = group["average_rating"]
            if avg is None:
                avg_text = "N/A"
            else:
                label = RATING_LABELS.get(int(round(avg)))
                avg_text = f"{avg:.1f} ({label})" if label else f"{avg:.1f}"
            names = ", ".join(group["members"])
            lines.append(
                f"  Group {i}: score {group['total_score']}, "
                f"avg rating {avg_text} - {names}"
            )

        if self.warnings:
            lines.extend(["", f"Warnings ({len(self.warnings)}):"])
            for warning in self.warnings:
                lines.append(f"  [{warning['kind']}] {warning['message']}")

        return "\n".join(lines)


def create_grouping_report(
    assignment: "GroupAssignment",
    index: PairIndex,
    max_rating: int = MAX_RATING,
    quantiles: Optional[List[float]] = None
) -> GroupingReport:
    """
    Create a complete report for an assignment.

    Args:
        assignment: Result of optimize_groups
        index: PairIndex the assignment was scored with
        max_rating: Top of the rating scale, for the theoretical maximum
        quantiles: Quantiles for the within-group rating distribution

    Returns:
        GroupingReport instance
    """
    groups = list(assignment.groups)
    pair_scores = within_group_pair_scores(groups, index)

    return GroupingReport(
        n_people=sum(g.size for g in groups),
        n_groups=len(groups),
        group_size=assignment.group_size,
        total_score=total_score(groups),
        max_possible_score=max_possible_score(groups, max_rating),
        efficiency=efficiency(groups, max_rating),
        distribution_stats=compute_score_distribution_stats(pair_scores, quantiles),
        groups=[
            {
                "id": g.id,
                "members": [m.name for m in g.members],
                "size": g.size,
                "total_score": g.total_score,
                "average_rating": g.average_rating,
            }
            for g in groups
        ],
        warnings=[w.to_dict() for w in assignment.warnings]
    )
