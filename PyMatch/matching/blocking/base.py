"""
Base interfaces for blockers, which generate candidate pairs lazily.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any, Callable, Iterable, Iterator, NamedTuple, Optional, Tuple

from ...model import Correspondence, Dataset, get_identifier
from ...processing import Processable


class CandidatePair(NamedTuple):
    """An unscored pair of elements proposed for comparison.

    ``causes`` holds the auxiliary correspondences relevant to the pair, e.g.
    schema correspondences in identity resolution, instance correspondences
    in schema matching, or value correspondences in value-overlap blocking.
    """

    first: Any
    second: Any
    causes: Tuple[Correspondence, ...] = ()

    def to_correspondence(self, score: float = 1.0) -> Correspondence:
        """Turn the pair into a correspondence whose provenance is ``causes``."""
        return Correspondence(self.first, self.second, score, provenance=self.causes)


class CandidatePairs(Processable[CandidatePair]):
    """The candidate pairs of one blocking run.

    Counts the pairs emitted by its latest complete iteration, so runs sharing
    a blocker report their own numbers.
    """

    def __init__(
        self,
        generate: Callable[[], Iterable[Any]],
        causes: Tuple[Correspondence, ...] = (),
        name: str = "Blocker",
    ) -> None:
        self._generate = generate
        self._causes = causes
        self._name = name
        self._pairs_emitted = 0
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")
        super().__init__(self._iterate)

    def _iterate(self) -> Iterator[CandidatePair]:
        pairs_emitted = 0
        for pair in self._generate():
            if not isinstance(pair, CandidatePair):
                pair = CandidatePair(pair[0], pair[1], self._causes)
            pairs_emitted += 1
            yield pair
        self._pairs_emitted = pairs_emitted
        self.logger.debug(f"{self._name} emitted {pairs_emitted} candidate pairs")

    def stats(self) -> dict:
        return {"pairs_emitted": self._pairs_emitted}


class BaseBlocker(ABC):
    """Abstract base class for blockers.

    Contract:
    - Never looks at similarity scores.
    - Treats input datasets as read-only.
    - Returns lazy :class:`CandidatePairs`; iterating them again re-runs blocking.
    - Empty input yields no candidates.

    Blockers implement :class:`SingleDataSetBlocker`,
    :class:`CrossDataSetBlocker` or both; :meth:`generate_candidates` picks the
    mode from the number of datasets passed.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def generate_candidates(
        self,
        dataset1: Dataset,
        dataset2: Optional[Dataset] = None,
        correspondences: Optional[Iterable[Correspondence]] = None,
        symmetric: bool = False,
    ) -> CandidatePairs:
        """Generate candidate pairs within one dataset or across two.

        Parameters
        ----------
        dataset1 : Dataset
            Provides the first element of each pair.
        dataset2 : Dataset, optional
            Provides the second element. If None, pairs ``(a, b)`` with
            ``a != b`` are drawn from ``dataset1`` alone.
        correspondences : Iterable[Correspondence], optional
            Auxiliary correspondences (schema correspondences for identity
            resolution, instance correspondences for schema matching). Unless
            the blocker selects causes itself, all of them are attached to
            every candidate pair. Two datasets only.
        symmetric : bool, optional
            Single dataset only. If True, the caller asserts
            ``score(a, b) == score(b, a)`` and every unordered pair is emitted
            exactly once, ordered by identifier. Otherwise both orderings are
            emitted.

        Returns
        -------
        CandidatePairs

        Raises
        ------
        TypeError
            If the blocker does not support the requested mode.
        ValueError
            If ``correspondences`` or ``symmetric`` do not apply to the mode.
        """
        name = self.__class__.__name__
        if dataset2 is None:
            if not isinstance(self, SingleDataSetBlocker):
                raise TypeError(f"{name} cannot block within a single dataset")
            if correspondences is not None:
                raise ValueError("Auxiliary correspondences require two datasets")
            return CandidatePairs(lambda: self._block_single(dataset1, symmetric), name=name)

        if not isinstance(self, CrossDataSetBlocker):
            raise TypeError(f"{name} cannot block across two datasets")
        if symmetric:
            raise ValueError("Symmetric blocking requires a single dataset")
        causes = tuple(correspondences) if correspondences is not None else ()
        return CandidatePairs(lambda: self._block_cross(dataset1, dataset2, causes), causes, name=name)

    @staticmethod
    def _pairs_within(elements: Iterable[Any], symmetric: bool) -> Iterator[Tuple[Any, Any]]:
        """All ordered pairs of distinct elements, or one per unordered pair if ``symmetric``.

        In symmetric mode the pair is emitted as ``(a, b)`` with
        ``id(a) < id(b)`` in identifier order.
        """
        elements = sorted(elements, key=get_identifier)
        for i, a in enumerate(elements):
            id_a = get_identifier(a)
            others = elements[i + 1:] if symmetric else elements
            for b in others:
                if get_identifier(b) != id_a:
                    yield a, b

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class SingleDataSetBlocker(BaseBlocker):
    """Blocker generating candidate pairs within one dataset (duplicate detection)."""

    @abstractmethod
    def _block_single(self, dataset: Dataset, symmetric: bool) -> Iterator[Any]:
        """Yield candidate pairs as ``(first, second)`` tuples or :class:`CandidatePair`."""


class CrossDataSetBlocker(BaseBlocker):
    """Blocker generating candidate pairs from ``dataset1 x dataset2``."""

    @abstractmethod
    def _block_cross(
        self,
        dataset1: Dataset,
        dataset2: Dataset,
        correspondences: Tuple[Correspondence, ...],
    ) -> Iterator[Any]:
        """Yield candidate pairs as ``(first, second)`` tuples or :class:`CandidatePair`."""


__all__ = [
    "BaseBlocker",
    "CandidatePair",
    "CandidatePairs",
    "CrossDataSetBlocker",
    "SingleDataSetBlocker",
]
