"""Pair enumeration and symmetric pair lookup."""

from ..entities.schema import pair_key
from .generator import PairIndex, generate_pairs

__all__ = ["PairIndex", "generate_pairs", "pair_key"]
