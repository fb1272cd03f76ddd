"""
NoBlocker: emits all pairs (full Cartesian product) lazily.
"""

from __future__ import annotations

from typing import Iterator, Tuple

from ...model import Correspondence, Dataset
from .base import CrossDataSetBlocker, SingleDataSetBlocker


class NoBlocker(SingleDataSetBlocker, CrossDataSetBlocker):
    """Generate all pairs without any reduction.

    Suitable for small datasets or as a baseline. For n=|L|, m=|R| this yields
    n*m pairs across datasets, and n*(n-1) pairs (n*(n-1)/2 in symmetric mode)
    within a dataset.
    """

    def estimate_pairs(self, dataset1: Dataset, dataset2: Dataset = None) -> int:
        if dataset2 is None:
            return len(dataset1) * max(len(dataset1) - 1, 0)
        return len(dataset1) * len(dataset2)

    def _block_single(self, dataset: Dataset, symmetric: bool) -> Iterator:
        return self._pairs_within(dataset, symmetric)

    def _block_cross(
        self,
        dataset1: Dataset,
        dataset2: Dataset,
        correspondences: Tuple[Correspondence, ...],
    ) -> Iterator:
        if len(dataset1) == 0 or len(dataset2) == 0:
            return
        right = list(dataset2)
        for first in dataset1:
            for second in right:
                yield first, second


class NoSchemaBlocker(NoBlocker):
    """Pair every attribute of one schema with every attribute of the other.

    Used for schema matching when no reduction is possible. Each candidate
    attribute pair carries all instance correspondences as causes, so a voting
    rule can check every known duplicate for agreement on that pair.
    """


__all__ = ["NoBlocker", "NoSchemaBlocker"]
