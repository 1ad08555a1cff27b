"""Group scoring from pairwise ratings."""

from .group_scorer import incremental_score, score_group

__all__ = ["incremental_score", "score_group"]
