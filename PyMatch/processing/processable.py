"""
Lazy, re-iterable sequences with map, shuffle and reduce stages.
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Generic,
    Hashable,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
    Union,
)

from .execution import SequentialExecution

T = TypeVar("T")
R = TypeVar("R")
K = TypeVar("K", bound=Hashable)


class _OneShot:
    """Guard around an iterator that may only be consumed once."""

    def __init__(self, iterator: Iterator[T]) -> None:
        self._iterator = iterator
        self._consumed = False

    def __call__(self) -> Iterator[T]:
        if self._consumed:
            raise RuntimeError(
                "Processable was built from a one-shot iterator and has already been consumed; "
                "pass a list or a factory function to iterate more than once"
            )
        self._consumed = True
        return self._iterator


class Processable(Generic[T]):
    """A lazily evaluated sequence of items.

    Every stage returns a new ``Processable``; nothing is computed until the
    sequence is iterated. Iterating twice recomputes all stages.

    Parameters
    ----------
    source : Iterable or callable, optional
        A re-iterable collection, a zero-argument function returning a fresh
        iterable, or a one-shot iterator (which can then be iterated once).
    execution : SequentialExecution or ParallelExecution, optional
        Strategy used for map and reduce stages. Default is sequential.

    Example
    -------
    >>> Processable([1, 2, 3]).map(lambda x: x * 2).to_list()
    [2, 4, 6]
    """

    def __init__(
        self,
        source: Union[Iterable[T], Callable[[], Iterable[T]]] = (),
        execution: Optional[Any] = None,
    ) -> None:
        self.execution = execution or SequentialExecution()
        if isinstance(source, Iterator):
            self._factory = _OneShot(source)
        elif callable(source) and not isinstance(source, Iterable):
            self._factory = source
        else:
            self._factory = lambda: source

    def __iter__(self) -> Iterator[T]:
        return iter(self._factory())

    def _derive(self, factory: Callable[[], Iterable[R]]) -> "Processable[R]":
        return Processable(factory, execution=self.execution)

    def with_execution(self, execution: Any) -> "Processable[T]":
        return Processable(self._factory, execution=execution)

    # Map stages

    def flat_map(self, fn: Callable[[T], Iterable[R]]) -> "Processable[R]":
        """Apply ``fn`` to every item and concatenate the resulting iterables."""
        return self._derive(lambda: self.execution.flat_map(fn, self))

    def map(self, fn: Callable[[T], R]) -> "Processable[R]":
        return self.flat_map(lambda item: (fn(item),))

    def filter(self, predicate: Callable[[T], bool]) -> "Processable[T]":
        return self.flat_map(lambda item: (item,) if predicate(item) else ())

    # Shuffle and reduce stages

    def group_by(self, key: Callable[[T], K]) -> "Processable[Tuple[K, List[T]]]":
        """Group items by key.

        This is the shuffle step: the input is consumed completely before the
        first group is emitted. Groups are emitted in ascending key order and
        items keep their input order inside a group.
        """

        def shuffle() -> Iterator[Tuple[K, List[T]]]:
            groups: dict = {}
            for item in self:
                groups.setdefault(key(item), []).append(item)
            return iter(sorted(groups.items(), key=lambda kv: kv[0]))

        return self._derive(shuffle)

    def aggregate(
        self,
        key: Callable[[T], K],
        reducer: Callable[[K, List[T]], Iterable[R]],
    ) -> "Processable[R]":
        """Group items by key and reduce every group independently.

        The reducer receives the key and the complete group and returns 0..n
        output items. Groups are reduced through the execution strategy.
        """
        return self.group_by(key).flat_map(lambda group: reducer(group[0], group[1]))

    # Terminal operations

    def sorted(self, key: Optional[Callable[[T], Any]] = None) -> List[T]:
        return sorted(self, key=key)

    def to_list(self) -> List[T]:
        return list(self)

    def count(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"Processable(execution={self.execution!r})"


__all__ = ["Processable"]
