"""
Execution strategies for the processing stages of a matching pipeline.

Both strategies expose the same ``flat_map`` primitive. The parallel strategy
partitions its input into chunks, maps every chunk in a worker thread and
yields the chunk results in input order, so the output sequence is identical
to the sequential one.
"""

from __future__ import annotations

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from itertools import islice
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")
R = TypeVar("R")


def _chunked(items: Iterable[T], size: int) -> Iterator[List[T]]:
    iterator = iter(items)
    while True:
        chunk = list(islice(iterator, size))
        if not chunk:
            return
        yield chunk


class SequentialExecution:
    """Run every stage in the calling thread."""

    def flat_map(self, fn: Callable[[T], Iterable[R]], items: Iterable[T]) -> Iterator[R]:
        for item in items:
            yield from fn(item)

    def __repr__(self) -> str:
        return "SequentialExecution()"


class ParallelExecution:
    """Partition-map execution on a thread pool.

    Parameters
    ----------
    max_workers : int, optional
        Number of worker threads. ``None`` lets ``ThreadPoolExecutor`` decide.
    chunk_size : int, optional
        Number of input items handed to a worker at once. Default is 1000.
    max_pending : int, optional
        Maximum number of chunks in flight. Bounds memory use for long inputs.
        Defaults to twice the number of workers (or 8).
    """

    def __init__(
        self,
        max_workers: Optional[int] = None,
        chunk_size: int = 1000,
        max_pending: Optional[int] = None,
    ) -> None:
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self.max_workers = max_workers
        self.chunk_size = int(chunk_size)
        self.max_pending = int(max_pending) if max_pending else 2 * (max_workers or 4)
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def flat_map(self, fn: Callable[[T], Iterable[R]], items: Iterable[T]) -> Iterator[R]:
        def run_chunk(chunk: List[T]) -> List[R]:
            results: List[R] = []
            for item in chunk:
                results.extend(fn(item))
            return results

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            pending = deque()
            for chunk in _chunked(items, self.chunk_size):
                pending.append(executor.submit(run_chunk, chunk))
                if len(pending) >= self.max_pending:
                    yield from pending.popleft().result()
            while pending:
                yield from pending.popleft().result()

    def __repr__(self) -> str:
        return (
            f"ParallelExecution(max_workers={self.max_workers}, "
            f"chunk_size={self.chunk_size})"
        )


__all__ = ["ParallelExecution", "SequentialExecution"]
