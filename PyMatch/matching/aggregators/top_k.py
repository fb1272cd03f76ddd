"""
Top-k selection: vote filtering and final top-k correspondence selection.
"""

from __future__ import annotations

from typing import Hashable, List, Sequence

from ...model import Correspondence
from .base import CorrespondenceAggregator, canonical_key, cause_key, first_key


def _top_k(correspondences: Sequence[Correspondence], k: int) -> List[Correspondence]:
    return sorted(correspondences, key=canonical_key)[:k]


def _check_k(k: int) -> int:
    if int(k) != k or k < 1:
        raise ValueError(f"k must be a positive integer, got {k}")
    return int(k)


class TopKVotesAggregator(CorrespondenceAggregator):
    """Keep only the k best votes cast by each source.

    Votes are grouped by their cause (for duplicate-based schema matching: the
    instance correspondence that cast them), so one instance pair cannot cast
    more than ``k`` votes. Ties at the cut-off are broken by ascending
    ``(first_id, second_id)``. The surviving votes are returned unchanged.

    Parameters
    ----------
    k : int
        Maximum number of votes per source.
    """

    def __init__(self, k: int) -> None:
        super().__init__()
        self.k = _check_k(k)

    def group_key(self, correspondence: Correspondence) -> Hashable:
        return cause_key(correspondence)

    def aggregate(self, key: Hashable, correspondences: Sequence[Correspondence]) -> List[Correspondence]:
        return _top_k(correspondences, self.k)

    def __repr__(self) -> str:
        return f"TopKVotesAggregator(k={self.k})"


class TopKCorrespondencesAggregator(CorrespondenceAggregator):
    """Keep the k highest-scored correspondences of every first element.

    Correspondences below ``threshold`` are dropped before selection. The
    result is flat: the selected correspondences themselves, not a derived
    correspondence per group. Works for instance and schema correspondences
    alike.

    Parameters
    ----------
    k : int
        Maximum number of correspondences per first element.
    threshold : float, optional
        Minimum score (inclusive). Default is 0.0.
    """

    def __init__(self, k: int, threshold: float = 0.0) -> None:
        super().__init__()
        self.k = _check_k(k)
        self.threshold = float(threshold)

    def group_key(self, correspondence: Correspondence) -> Hashable:
        return first_key(correspondence)

    def aggregate(self, key: Hashable, correspondences: Sequence[Correspondence]) -> List[Correspondence]:
        eligible = [c for c in correspondences if c.score >= self.threshold]
        return _top_k(eligible, self.k)

    def __repr__(self) -> str:
        return f"TopKCorrespondencesAggregator(k={self.k}, threshold={self.threshold})"


__all__ = ["TopKCorrespondencesAggregator", "TopKVotesAggregator"]
