"""
Standard (equality) blocking on a blocking key.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ...model import Correspondence, Dataset, get_identifier, is_missing
from .base import CrossDataSetBlocker, SingleDataSetBlocker


class StandardBlocker(SingleDataSetBlocker, CrossDataSetBlocker):
    """Equality-based blocking on one or more key attributes.

    Pairs elements whose blocking keys are equal. The key is either the
    concatenation of the values in the ``on`` attributes, or the result of a
    ``blocking_key`` function, which may return a single key or an iterable of
    keys. A pair sharing several keys is emitted once, in the block of its
    smallest shared key.

    Parameters
    ----------
    on : List[str], optional
        Attribute names whose values form the blocking key.
    blocking_key : callable, optional
        Function mapping an element to a key or an iterable of keys.
        Elements with a missing key are not blocked with anything.

    Example
    -------
    >>> blocker = StandardBlocker(on=["year"])
    >>> blocker = StandardBlocker(blocking_key=lambda r: r.get("title", "")[:3].lower())
    """

    def __init__(
        self,
        on: Optional[List[str]] = None,
        blocking_key: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        super().__init__()
        if (on is None) == (blocking_key is None):
            raise ValueError("StandardBlocker requires exactly one of 'on' or 'blocking_key'")
        if on is not None and not on:
            raise ValueError("StandardBlocker requires at least one column in 'on'")
        self.on = list(on) if on is not None else None
        self.blocking_key = blocking_key

    def _keys(self, element: Any) -> List[str]:
        if self.on is not None:
            values = [element.get(col) for col in self.on]
            if any(is_missing(v) for v in values):
                return []
            return ["||".join(str(v) for v in values)]

        key = self.blocking_key(element)
        if is_missing(key):
            return []
        if isinstance(key, Iterable) and not isinstance(key, str):
            return sorted({str(k) for k in key if not is_missing(k)})
        return [str(key)]

    def _build_blocks(self, dataset: Dataset) -> Tuple[Dict[str, List[Any]], Dict[str, List[str]]]:
        blocks: Dict[str, List[Any]] = {}
        keys_by_id: Dict[str, List[str]] = {}
        for element in dataset:
            keys = self._keys(element)
            keys_by_id[get_identifier(element)] = keys
            for key in keys:
                blocks.setdefault(key, []).append(element)
        return blocks, keys_by_id

    @staticmethod
    def _first_shared_key(keys1: List[str], keys2: List[str]) -> Optional[str]:
        shared = set(keys1) & set(keys2)
        return min(shared) if shared else None

    def _block_single(self, dataset: Dataset, symmetric: bool) -> Iterator:
        blocks, keys_by_id = self._build_blocks(dataset)
        self.logger.info(f"Created {len(blocks)} blocks from {len(dataset)} elements")
        for key in sorted(blocks):
            for first, second in self._pairs_within(blocks[key], symmetric):
                shared = self._first_shared_key(
                    keys_by_id[get_identifier(first)], keys_by_id[get_identifier(second)]
                )
                if shared == key:
                    yield first, second

    def _block_cross(
        self,
        dataset1: Dataset,
        dataset2: Dataset,
        correspondences: Tuple[Correspondence, ...],
    ) -> Iterator:
        left_blocks, left_keys = self._build_blocks(dataset1)
        right_blocks, right_keys = self._build_blocks(dataset2)

        # Intersect non-empty keys only
        common_keys = sorted(k for k in left_blocks if k in right_blocks)
        self.logger.info(
            f"Created {len(left_blocks)} x {len(right_blocks)} blocks; {len(common_keys)} shared"
        )
        for key in common_keys:
            for first in left_blocks[key]:
                for second in right_blocks[key]:
                    shared = self._first_shared_key(
                        left_keys[get_identifier(first)], right_keys[get_identifier(second)]
                    )
                    if shared == key:
                        yield first, second

    def __repr__(self) -> str:
        if self.on is not None:
            return f"StandardBlocker(on={self.on})"
        return f"StandardBlocker(blocking_key={getattr(self.blocking_key, '__name__', self.blocking_key)})"


__all__ = ["StandardBlocker"]
