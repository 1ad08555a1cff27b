"""Reporting metrics for group assignments."""

from .metrics import (
    GroupingReport,
    ScoreDistributionStats,
    compute_score_distribution_stats,
    create_grouping_report,
    efficiency,
    max_possible_score,
    total_score,
    within_group_pair_scores
)

__all__ = [
    "GroupingReport",
    "ScoreDistributionStats",
    "compute_score_distribution_stats",
    "create_grouping_report",
    "efficiency",
    "max_possible_score",
    "total_score",
    "within_group_pair_scores"
]
