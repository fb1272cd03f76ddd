"""
Base class and grouping keys for correspondence aggregators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Hashable, List, Sequence, Tuple

from ...model import Correspondence


def pair_key(correspondence: Correspondence) -> Tuple[str, str]:
    """Group by the identifiers of both elements."""
    return correspondence.key


def first_key(correspondence: Correspondence) -> str:
    """Group by the identifier of the first element."""
    return correspondence.first_id


def cause_key(correspondence: Correspondence) -> Tuple[Tuple[str, str], ...]:
    """Group by the correspondences that caused this one, e.g. the instance pair behind a vote."""
    return tuple(sorted(cause.key for cause in correspondence.provenance))


def ranking_key(correspondence: Correspondence) -> Tuple[float, str, str]:
    """Descending score, ties broken by ascending ``(first_id, second_id)``."""
    return -correspondence.score, correspondence.first_id, correspondence.second_id


def canonical_key(correspondence: Correspondence) -> tuple:
    """Total order over correspondences: :func:`ranking_key`, then the causes."""
    return ranking_key(correspondence), cause_key(correspondence)


class CorrespondenceAggregator(ABC):
    """Abstract base class for aggregators.

    An aggregator partitions a correspondence stream by :meth:`group_key` and
    reduces every group to 0..k correspondences with :meth:`aggregate`. Each
    group is reduced exactly once, after all of its correspondences are known.
    Implementations must not depend on the order of a group, so results are
    the same for any degree of parallelism.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def group_key(self, correspondence: Correspondence) -> Hashable:
        """Grouping key of a correspondence. Defaults to the element pair."""
        return pair_key(correspondence)

    @abstractmethod
    def aggregate(self, key: Hashable, correspondences: Sequence[Correspondence]) -> List[Correspondence]:
        """Reduce one group of correspondences.

        Parameters
        ----------
        key : Hashable
            The group's key.
        correspondences : Sequence[Correspondence]
            All correspondences sharing the key, in arbitrary order.

        Returns
        -------
        List[Correspondence]
            0..k output correspondences.
        """
        raise NotImplementedError

    def __call__(self, key: Hashable, correspondences: Sequence[Correspondence]) -> List[Correspondence]:
        return self.aggregate(key, correspondences)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


__all__ = [
    "CorrespondenceAggregator",
    "canonical_key",
    "cause_key",
    "first_key",
    "pair_key",
    "ranking_key",
]
