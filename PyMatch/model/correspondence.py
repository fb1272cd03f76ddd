"""
Correspondences: scored, provenance-carrying links between two elements.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Generic, Iterable, List, Optional, Tuple, TypeVar

import pandas as pd

A = TypeVar("A")
B = TypeVar("B")

# Core data structures
CorrespondenceSet = pd.DataFrame

CORRESPONDENCE_COLUMNS = ["id1", "id2", "score", "notes"]


def get_identifier(element: Any) -> str:
    """Return the global identifier of a matchable element.

    Parameters
    ----------
    element : Any
        A record, attribute, value or any object exposing an ``identifier``
        attribute. Plain strings are their own identifier.

    Returns
    -------
    str
        The identifier.

    Raises
    ------
    TypeError
        If the element has no identifier.
    """
    identifier = getattr(element, "identifier", None)
    if identifier is not None:
        return str(identifier)
    if isinstance(element, str):
        return element
    raise TypeError(f"{type(element).__name__} does not provide an identifier")


@dataclass(frozen=True)
class Correspondence(Generic[A, B]):
    """A scored link between two elements.

    A correspondence without provenance is a *base* correspondence, e.g. the
    direct output of a matching rule. A correspondence with provenance is
    *derived*: it was produced by an aggregator and ``provenance`` holds the
    correspondences it was computed from.

    Parameters
    ----------
    first : A
        The left-hand element.
    second : B
        The right-hand element.
    score : float, optional
        Similarity score, conventionally in [0, 1]. Default is 1.0.
    provenance : tuple of Correspondence, optional
        The causal inputs of this correspondence.
    notes : str, optional
        Free-form evidence, e.g. comparator-level similarities.
    """

    first: A
    second: B
    score: float = 1.0
    provenance: Tuple["Correspondence", ...] = field(default=(), compare=False)
    notes: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.first is None or self.second is None:
            raise ValueError("Correspondence elements must not be None")
        if not isinstance(self.provenance, tuple):
            object.__setattr__(self, "provenance", tuple(self.provenance))
        object.__setattr__(self, "score", float(self.score))

    @property
    def first_id(self) -> str:
        return get_identifier(self.first)

    @property
    def second_id(self) -> str:
        return get_identifier(self.second)

    @property
    def key(self) -> Tuple[str, str]:
        """Identifier pair ``(first_id, second_id)``."""
        return self.first_id, self.second_id

    @property
    def is_derived(self) -> bool:
        return len(self.provenance) > 0

    def sort_key(self) -> Tuple[str, str, float]:
        """Deterministic ordering: by identifiers, then by descending score."""
        return self.first_id, self.second_id, -self.score

    def with_score(self, score: float) -> "Correspondence[A, B]":
        return replace(self, score=score)

    def invert(self) -> "Correspondence[B, A]":
        """Return a copy with ``first`` and ``second`` swapped.

        Provenance is inverted as well so that the causal chain stays aligned.
        """
        return Correspondence(
            first=self.second,
            second=self.first,
            score=self.score,
            provenance=tuple(cause.invert() for cause in self.provenance),
            notes=self.notes,
        )

    def __repr__(self) -> str:
        return (
            f"Correspondence({self.first_id!r}, {self.second_id!r}, "
            f"score={self.score:.4f}, provenance={len(self.provenance)})"
        )

    @staticmethod
    def simplify(
        correspondences: Optional[Iterable["Correspondence"]],
    ) -> List["Correspondence"]:
        """Strip provenance so correspondences can be passed on as auxiliary input.

        Parameters
        ----------
        correspondences : Iterable[Correspondence] or None
            Correspondences of any shape, e.g. the output of an aggregator.

        Returns
        -------
        List[Correspondence]
            Plain correspondences with the same elements, scores and notes.
        """
        if correspondences is None:
            return []
        return [
            Correspondence(c.first, c.second, c.score, notes=c.notes)
            for c in correspondences
        ]

    @staticmethod
    def to_frame(correspondences: Iterable["Correspondence"]) -> CorrespondenceSet:
        """Convert correspondences to a DataFrame with columns id1, id2, score, notes."""
        rows = [
            {
                "id1": c.first_id,
                "id2": c.second_id,
                "score": c.score,
                "notes": c.notes if c.notes is not None else "",
            }
            for c in correspondences
        ]
        if not rows:
            return pd.DataFrame(columns=CORRESPONDENCE_COLUMNS)
        return pd.DataFrame(rows, columns=CORRESPONDENCE_COLUMNS)

    @staticmethod
    def from_frame(df: CorrespondenceSet, dataset1, dataset2) -> List["Correspondence"]:
        """Resolve a DataFrame of id pairs against two datasets.

        Parameters
        ----------
        df : pandas.DataFrame
            Correspondences with columns id1, id2 and optionally score, notes.
        dataset1, dataset2 : Dataset
            Datasets holding the elements referenced by id1 and id2.

        Returns
        -------
        List[Correspondence]

        Raises
        ------
        ValueError
            If required columns are missing or an identifier is unknown.
        """
        for col in ("id1", "id2"):
            if col not in df.columns:
                raise ValueError(f"Correspondence set missing required column: {col}")

        result = []
        for row in df.itertuples(index=False):
            row = row._asdict()
            first = dataset1.get(str(row["id1"]))
            second = dataset2.get(str(row["id2"]))
            if first is None or second is None:
                raise ValueError(f"Unknown record in correspondence: {row['id1']} <-> {row['id2']}")
            notes = row.get("notes")
            result.append(
                Correspondence(
                    first,
                    second,
                    score=row.get("score", 1.0),
                    notes=notes if isinstance(notes, str) and notes else None,
                )
            )
        return result


__all__ = [
    "Correspondence",
    "CorrespondenceSet",
    "get_identifier",
]
