"""
Score-combining aggregators (max, sum, average).
"""

from __future__ import annotations

import math
from typing import Hashable, List, Optional, Sequence

from ...model import Correspondence
from .base import CorrespondenceAggregator, canonical_key


class _ScoreAggregator(CorrespondenceAggregator):
    """Combine the scores of a group into one derived correspondence.

    Parameters
    ----------
    threshold : float, optional
        Minimum combined score of the output correspondence.
    """

    def __init__(self, threshold: Optional[float] = None) -> None:
        super().__init__()
        self.threshold = threshold

    def combine(self, scores: List[float]) -> float:
        raise NotImplementedError

    def aggregate(self, key: Hashable, correspondences: Sequence[Correspondence]) -> List[Correspondence]:
        if not correspondences:
            return []
        ordered = sorted(correspondences, key=canonical_key)
        score = self.combine(sorted(c.score for c in ordered))
        if self.threshold is not None and score < self.threshold:
            return []
        representative = ordered[0]
        return [
            Correspondence(
                representative.first,
                representative.second,
                score,
                provenance=tuple(ordered),
            )
        ]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(threshold={self.threshold})"


class MaxScoreAggregator(_ScoreAggregator):
    """Keep the highest score of the group."""

    def combine(self, scores: List[float]) -> float:
        return max(scores)


class SumScoreAggregator(_ScoreAggregator):
    """Sum the scores of the group (exactly rounded, so independent of order)."""

    def combine(self, scores: List[float]) -> float:
        return math.fsum(scores)


class AverageScoreAggregator(_ScoreAggregator):
    """Average the scores of the group."""

    def combine(self, scores: List[float]) -> float:
        return math.fsum(scores) / len(scores)


__all__ = ["AverageScoreAggregator", "MaxScoreAggregator", "SumScoreAggregator"]
