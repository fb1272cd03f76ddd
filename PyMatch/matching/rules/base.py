"""
Base classes for comparators and matching rules.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any, Iterable, Iterator, Optional

from ...model import Correspondence
from ..blocking.base import CandidatePair


class BaseComparator:
    """Base class for comparators.

    Comparators compute the similarity of two elements. A comparator may be
    restricted by a correspondence telling it which sub-elements to compare,
    e.g. a schema correspondence naming the attributes of both records.
    """

    def __init__(self, name: str):
        """Initialize the comparator.

        Parameters
        ----------
        name : str
            Name of this comparator for debugging and logging.
        """
        self.name = name

    def compare(
        self,
        first: Any,
        second: Any,
        correspondence: Optional[Correspondence] = None,
    ) -> Optional[float]:
        """Compare two elements and return a similarity score.

        Parameters
        ----------
        first, second : Any
            The elements to compare.
        correspondence : Correspondence, optional
            Restricts the comparison to the sub-elements it links.

        Returns
        -------
        float or None
            Similarity in [0, 1], or None if it is undefined for this pair
            (e.g. because a value is missing).
        """
        raise NotImplementedError

    def is_restricted_by(self, correspondence: Correspondence) -> bool:
        """Whether ``correspondence`` tells this comparator what to compare."""
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class MatchingRule(ABC):
    """Abstract base class for matching rules.

    A matching rule scores a candidate pair and decides acceptance via an
    inclusive threshold: a correspondence is emitted iff ``score >= threshold``.
    Below the threshold nothing is emitted.

    Parameters
    ----------
    threshold : float
        Minimum score of emitted correspondences.
    """

    def __init__(self, threshold: float) -> None:
        self.threshold = float(threshold)
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def is_match(self, score: Optional[float]) -> bool:
        return score is not None and score >= self.threshold

    def validate(self) -> None:
        """Check the rule is fully configured. Raises ValueError otherwise."""

    @abstractmethod
    def evaluate(
        self,
        candidate: CandidatePair,
        correspondences: Optional[Iterable[Correspondence]] = None,
    ) -> Iterator[Correspondence]:
        """Yield the 0..n correspondences derived from a candidate pair.

        Parameters
        ----------
        candidate : CandidatePair
            The pair to score.
        correspondences : Iterable[Correspondence], optional
            Auxiliary correspondences relevant to the pair. Defaults to the
            candidate's causes.
        """
        raise NotImplementedError

    def __call__(self, candidate: CandidatePair) -> Iterator[Correspondence]:
        return self.evaluate(candidate)


__all__ = ["BaseComparator", "MatchingRule"]
