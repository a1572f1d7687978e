"""Take-rank classification."""

from .classifier import TakeRank, TakeRanking, classify

__all__ = ["TakeRank", "TakeRanking", "classify"]
