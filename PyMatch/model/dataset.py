"""
Records, schema elements and datasets consumed by the matching engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

import numpy as np
import pandas as pd

T = TypeVar("T")


def is_missing(value: Any) -> bool:
    """Check if a value is missing (None, NaN, empty string or empty list)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    if isinstance(value, np.ndarray):
        return value.size == 0
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def value_to_string(value: Any) -> str:
    """String form of a value for literal comparison.

    Integral floats drop their fraction, so a year read from a pandas column
    that also holds NaN (``1999.0``) equals the integer ``1999``.
    """
    if isinstance(value, (float, np.floating)) and np.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Attribute:
    """A schema element, matched like a record in schema matching.

    Parameters
    ----------
    identifier : str
        Globally unique identifier, e.g. ``movies.title``.
    name : str
        The attribute label as it appears in the source data.
    dataset_name : str
        Name of the dataset the attribute belongs to.
    """

    identifier: str
    name: str
    dataset_name: str = ""

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Record:
    """A data record with a global identifier and attribute values."""

    identifier: str
    dataset_name: str = ""
    values: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def get(self, attribute: Any, default: Any = None) -> Any:
        """Return the value of an attribute (given as name or :class:`Attribute`)."""
        name = attribute.name if isinstance(attribute, Attribute) else attribute
        value = self.values.get(name, default)
        return default if is_missing(value) else value

    def has_value(self, attribute: Any) -> bool:
        return self.get(attribute) is not None


@dataclass(frozen=True)
class MatchableValue:
    """A single attribute value of a record.

    Used as the causal element of value-overlap blocking: two value instances
    with the same (normalised) value link the records or attributes holding them.
    """

    value: str
    record_id: str
    attribute_id: str

    @property
    def identifier(self) -> str:
        return self.value


class Dataset(Generic[T]):
    """Read-only collection of matchable elements keyed by identifier.

    Parameters
    ----------
    elements : Iterable
        Records or attributes. Each element must expose ``identifier``.
    name : str, optional
        Dataset name, used in logs.
    schema : Dataset, optional
        The attributes describing the records of this dataset.

    Raises
    ------
    ValueError
        If two elements share the same identifier.
    """

    def __init__(
        self,
        elements: Iterable[T] = (),
        name: Optional[str] = None,
        schema: Optional["Dataset[Attribute]"] = None,
    ) -> None:
        self.name = name or "dataset"
        self.schema = schema
        self._elements: Dict[str, T] = {}
        for element in elements:
            identifier = str(element.identifier)
            if identifier in self._elements:
                raise ValueError(f"Duplicate identifier '{identifier}' in dataset '{self.name}'")
            self._elements[identifier] = element

    def __iter__(self) -> Iterator[T]:
        return iter(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._elements

    def get(self, identifier: str) -> Optional[T]:
        return self._elements.get(identifier)

    def identifiers(self) -> List[str]:
        return list(self._elements.keys())

    def __repr__(self) -> str:
        return f"Dataset(name='{self.name}', size={len(self)})"

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        id_column: Optional[str] = None,
    ) -> "Dataset[Record]":
        """Build a record dataset from a DataFrame.

        The dataset name is taken from ``df.attrs["dataset_name"]``. If no
        ``id_column`` is given, the ``_id`` column is used, and when that is
        missing as well, identifiers of the form ``{dataset_name}_{i:06d}``
        are generated.

        Parameters
        ----------
        df : pandas.DataFrame
            Source data. Must have ``dataset_name`` in ``df.attrs``.
        id_column : str, optional
            Column holding record identifiers.

        Returns
        -------
        Dataset[Record]
            Records plus a schema dataset describing the columns.
        """
        dataset_name = df.attrs.get("dataset_name")
        if not dataset_name:
            raise ValueError("DataFrame must have 'dataset_name' in df.attrs")

        if id_column is None:
            id_column = "_id"
            if id_column not in df.columns:
                df = df.copy()
                df[id_column] = [f"{dataset_name}_{i:06d}" for i in range(len(df))]
        elif id_column not in df.columns:
            raise ValueError(f"Dataset '{dataset_name}' missing required ID column: '{id_column}'")

        value_columns = [col for col in df.columns if col != id_column]
        records = [
            Record(
                identifier=str(row[id_column]),
                dataset_name=dataset_name,
                values={col: row[col] for col in value_columns},
            )
            for row in df.to_dict(orient="records")
        ]
        schema = cls.schema_from_dataframe(df, exclude=[id_column])
        logging.debug(f"Loaded {len(records)} records from '{dataset_name}'")
        return cls(records, name=dataset_name, schema=schema)

    @classmethod
    def schema_from_dataframe(
        cls,
        df: pd.DataFrame,
        exclude: Optional[List[str]] = None,
    ) -> "Dataset[Attribute]":
        """Build a dataset of :class:`Attribute` elements from DataFrame columns.

        Identifier columns (``_id``, ``{dataset_name}_id`` and anything in
        ``exclude``) are not part of the schema.
        """
        dataset_name = df.attrs.get("dataset_name", "dataset")
        excluded = set(exclude or []) | {"_id", f"{dataset_name}_id"}
        attributes = [
            Attribute(identifier=f"{dataset_name}.{col}", name=str(col), dataset_name=dataset_name)
            for col in df.columns
            if col not in excluded
        ]
        return cls(attributes, name=dataset_name)


__all__ = [
    "Attribute",
    "Dataset",
    "MatchableValue",
    "Record",
    "is_missing",
    "value_to_string",
]
