"""
Voting aggregation: turn votes into final correspondences.
"""

from __future__ import annotations

import math
from typing import Dict, Hashable, List, Optional, Sequence

from ...model import Correspondence
from .base import CorrespondenceAggregator, canonical_key, cause_key


class VotingAggregator(CorrespondenceAggregator):
    """Count the votes for each element pair and emit pairs with enough support.

    Votes are grouped by element pair. Several votes from the same cause (the
    same instance pair or the same value) count once. The vote total is the
    number of distinct votes, or the sum of their scores if ``weighted``.

    Parameters
    ----------
    weighted : bool, optional
        Sum vote scores instead of counting votes. Default is False.
    min_votes : float, optional
        Minimum vote total for a correspondence. Default is 1.
    normalization : float, optional
        If given, the output score is ``total / normalization`` (a vote share,
        e.g. normalised by the number of instance correspondences); otherwise
        the score is the vote total.
    threshold : float, optional
        Minimum output score. Default is 0.0.

    Example
    -------
    >>> aggregator = VotingAggregator(min_votes=2, normalization=len(duplicates), threshold=0.5)
    """

    def __init__(
        self,
        weighted: bool = False,
        min_votes: float = 1.0,
        normalization: Optional[float] = None,
        threshold: float = 0.0,
    ) -> None:
        super().__init__()
        if min_votes < 0:
            raise ValueError("min_votes must be >= 0")
        if normalization is not None and normalization <= 0:
            raise ValueError("normalization must be > 0")
        self.weighted = weighted
        self.min_votes = float(min_votes)
        self.normalization = float(normalization) if normalization is not None else None
        self.threshold = float(threshold)

    @staticmethod
    def _distinct_votes(votes: Sequence[Correspondence]) -> List[Correspondence]:
        """Keep the best-scoring vote per cause, in canonical order."""
        best: Dict[tuple, Correspondence] = {}
        for vote in sorted(votes, key=canonical_key):
            best.setdefault(cause_key(vote), vote)
        return sorted(best.values(), key=canonical_key)

    def aggregate(self, key: Hashable, correspondences: Sequence[Correspondence]) -> List[Correspondence]:
        votes = self._distinct_votes(correspondences)
        if not votes:
            return []

        if self.weighted:
            total = math.fsum(sorted(v.score for v in votes))
        else:
            total = float(len(votes))

        if total < self.min_votes:
            return []

        score = total / self.normalization if self.normalization else total
        if score < self.threshold:
            return []

        representative = votes[0]
        self.logger.debug(
            f"Voting: {representative.first_id} <-> {representative.second_id} "
            f"({len(votes)} votes, score={score:.4f})"
        )
        return [
            Correspondence(
                representative.first,
                representative.second,
                score,
                provenance=tuple(votes),
                notes=f"votes={len(votes)}",
            )
        ]

    def __repr__(self) -> str:
        return (
            f"VotingAggregator(weighted={self.weighted}, min_votes={self.min_votes}, "
            f"normalization={self.normalization}, threshold={self.threshold})"
        )


__all__ = ["VotingAggregator"]
