"""
Constrained Affinity Grouping

This package partitions a roster of people into fixed-size groups so that
the total pairwise affinity inside the groups is as high as a greedy
heuristic can make it, while honoring must-pair / cannot-pair constraints.

Key Design Decisions:
- Pairs are unordered and keyed canonically as (min_id, max_id)
- Unrated pairs count as neutral (3 on the default 1-5 scale)
- The engine never fails on soft conflicts; it places everyone and reports
  what it could not honor as warnings on the result
- All runs are deterministic for identical inputs
"""

__version__ = "1.0.0"
