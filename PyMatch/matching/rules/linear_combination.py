"""
Rule-based matching using a weighted linear combination of comparators.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ...model import Correspondence, get_identifier
from ..aggregators.base import ranking_key
from ..blocking.base import CandidatePair
from .base import BaseComparator, MatchingRule

ComparatorLike = Union[BaseComparator, Callable[..., Optional[float]]]


def _comparator_name(comparator: ComparatorLike) -> str:
    if isinstance(comparator, BaseComparator):
        return comparator.name
    return getattr(comparator, "__name__", str(comparator))


class LinearCombinationMatchingRule(MatchingRule):
    """Matching rule scoring a pair by the weighted sum of comparator similarities.

    ``score = offset + sum(weight_i * similarity_i)`` over all comparators whose
    similarity is defined for the pair. Weights need not sum to 1. Comparators
    returning ``None`` (undefined, e.g. a missing value) are left out of the sum
    instead of counting as 0; if every comparator is undefined the rule emits
    nothing. A correspondence is emitted iff ``score >= threshold``.

    Parameters
    ----------
    threshold : float
        Minimum score of emitted correspondences (inclusive).
    offset : float, optional
        Constant added to the weighted sum. Default is 0.0.

    Example
    -------
    >>> rule = LinearCombinationMatchingRule(threshold=0.7)
    >>> rule.add_comparator(AttributeValueComparator("title"), 0.6)
    >>> rule.add_comparator(NumericComparator("year", max_difference=2), 0.4)
    """

    def __init__(self, threshold: float, offset: float = 0.0) -> None:
        super().__init__(threshold)
        self.offset = float(offset)
        self._comparators: List[Tuple[ComparatorLike, float]] = []

    @property
    def comparators(self) -> List[Tuple[ComparatorLike, float]]:
        return list(self._comparators)

    def add_comparator(self, comparator: ComparatorLike, weight: float) -> "LinearCombinationMatchingRule":
        """Append a comparator with its weight.

        Parameters
        ----------
        comparator : BaseComparator or callable
            A comparator object, or a function ``(first, second[, correspondence])``
            returning a similarity or None.
        weight : float
            Weight of the comparator. Must be > 0.0.

        Raises
        ------
        ValueError
            If the weight is not positive.
        TypeError
            If the comparator is neither a BaseComparator nor callable.
        """
        if not isinstance(comparator, BaseComparator) and not callable(comparator):
            raise TypeError(f"Comparator must be a BaseComparator or callable, got {type(comparator).__name__}")
        if weight <= 0.0:
            raise ValueError(f"Weight for comparator '{_comparator_name(comparator)}' must be > 0.0")
        self._comparators.append((comparator, float(weight)))
        return self

    def validate(self) -> None:
        if not self._comparators:
            raise ValueError("LinearCombinationMatchingRule has no comparators")

    def _restricting_correspondence(
        self,
        comparator: ComparatorLike,
        correspondences: Sequence[Correspondence],
    ) -> Optional[Correspondence]:
        """The best matching auxiliary correspondence: highest score, then smallest ids."""
        if not isinstance(comparator, BaseComparator):
            return None
        matching = [c for c in correspondences if comparator.is_restricted_by(c)]
        return min(matching, key=ranking_key) if matching else None

    @staticmethod
    def _call(comparator: ComparatorLike, first: Any, second: Any, correspondence: Optional[Correspondence]):
        if isinstance(comparator, BaseComparator):
            return comparator.compare(first, second, correspondence)
        if correspondence is None:
            return comparator(first, second)
        return comparator(first, second, correspondence)

    def compute_similarity(
        self,
        first: Any,
        second: Any,
        correspondences: Sequence[Correspondence] = (),
    ) -> Tuple[Optional[float], List[Tuple[str, Optional[float]]]]:
        """Compute the combined score and the per-comparator similarities.

        Returns
        -------
        Tuple[float or None, List[Tuple[str, float or None]]]
            The score (None if every comparator was undefined) and the
            ``(comparator name, similarity)`` evidence.
        """
        terms = []
        evidence = []
        for comparator, weight in self._comparators:
            correspondence = self._restricting_correspondence(comparator, correspondences)
            similarity = self._call(comparator, first, second, correspondence)
            evidence.append((_comparator_name(comparator), similarity))
            if similarity is not None:
                terms.append(weight * float(similarity))

        if not terms:
            return None, evidence
        return self.offset + sum(terms), evidence

    def apply(
        self,
        first: Any,
        second: Any,
        correspondences: Optional[Iterable[Correspondence]] = None,
    ) -> Optional[Correspondence]:
        """Score one pair; return a correspondence or None if it is not a match."""
        correspondences = tuple(correspondences) if correspondences is not None else ()
        score, evidence = self.compute_similarity(first, second, correspondences)
        if not self.is_match(score):
            return None

        notes = ";".join(
            f"{name}={'undefined' if sim is None else f'{sim:.4f}'}" for name, sim in evidence
        )
        self.logger.debug(f"Match: {get_identifier(first)} <-> {get_identifier(second)} ({score:.4f}) [{notes}]")
        return Correspondence(first, second, score, notes=notes)

    def evaluate(
        self,
        candidate: CandidatePair,
        correspondences: Optional[Iterable[Correspondence]] = None,
    ) -> Iterator[Correspondence]:
        if correspondences is None:
            correspondences = candidate.causes
        correspondence = self.apply(candidate.first, candidate.second, correspondences)
        if correspondence is not None:
            yield correspondence

    def __repr__(self) -> str:
        comparators = ", ".join(f"{_comparator_name(c)}*{w}" for c, w in self._comparators)
        return f"LinearCombinationMatchingRule(threshold={self.threshold}, comparators=[{comparators}])"


__all__ = ["LinearCombinationMatchingRule"]
