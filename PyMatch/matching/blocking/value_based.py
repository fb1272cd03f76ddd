"""
Value-overlap blockers: pair records or attributes that share a literal value.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ...model import Attribute, Correspondence, Dataset, MatchableValue, is_missing, value_to_string
from .base import CandidatePair, CrossDataSetBlocker


def _schema_of(dataset: Dataset) -> List[Attribute]:
    """Return the dataset's attributes, deriving them from record values if no schema is set."""
    if dataset.schema is not None:
        return list(dataset.schema)
    names: Dict[str, None] = {}
    for record in dataset:
        for name in record.values:
            names.setdefault(name, None)
    return [
        Attribute(identifier=f"{dataset.name}.{name}", name=str(name), dataset_name=dataset.name)
        for name in names
    ]


class _ValueOverlapBlocker(CrossDataSetBlocker):
    """Shared value index for the value-overlap blockers.

    Parameters
    ----------
    preprocess : callable, optional
        Applied to the string form of each value after lowercasing and
        stripping whitespace.
    """

    def __init__(self, preprocess: Optional[Callable[[str], str]] = None) -> None:
        super().__init__()
        self.preprocess = preprocess

    def _normalize_value(self, value: Any) -> str:
        str_val = value_to_string(value).strip().lower()
        if self.preprocess:
            str_val = self.preprocess(str_val)
        return str_val

    def _values(self, value: Any) -> List[str]:
        if is_missing(value):
            return []
        if isinstance(value, (list, tuple, set)):
            items = value
        else:
            items = [value]
        normalized = (self._normalize_value(v) for v in items if not is_missing(v))
        return [v for v in normalized if v]

    def _build_index(self, dataset: Dataset) -> Dict[str, List[Tuple[Any, Attribute]]]:
        """Map every normalised value to the (record, attribute) occurrences holding it."""
        attributes = _schema_of(dataset)
        index: Dict[str, List[Tuple[Any, Attribute]]] = {}
        for record in dataset:
            for attribute in attributes:
                for value in self._values(record.get(attribute)):
                    index.setdefault(value, []).append((record, attribute))
        return index

    def _shared_values(self, dataset1: Dataset, dataset2: Dataset):
        index1 = self._build_index(dataset1)
        index2 = self._build_index(dataset2)
        shared = sorted(index1.keys() & index2.keys())
        self.logger.info(
            f"Indexed {len(index1)} x {len(index2)} distinct values; {len(shared)} shared"
        )
        for value in shared:
            yield value, index1[value], index2[value]

    @staticmethod
    def _cause(value: str, record1, attribute1: Attribute, record2, attribute2: Attribute) -> Correspondence:
        return Correspondence(
            MatchableValue(value, record1.identifier, attribute1.identifier),
            MatchableValue(value, record2.identifier, attribute2.identifier),
            1.0,
        )


class InstanceBasedSchemaBlocker(_ValueOverlapBlocker):
    """Propose attribute pairs from literally matching instance values.

    Takes two instance datasets and emits one candidate attribute pair for every
    distinct value shared by an attribute of the first and an attribute of the
    second dataset. Each candidate is caused by the value correspondence, so a
    :class:`VotingAggregator` grouping by attribute pair measures value overlap.
    """

    def _block_cross(
        self,
        dataset1: Dataset,
        dataset2: Dataset,
        correspondences: Tuple[Correspondence, ...],
    ) -> Iterator[CandidatePair]:
        for value, occurrences1, occurrences2 in self._shared_values(dataset1, dataset2):
            # One occurrence per attribute and value
            attributes1 = {}
            for record, attribute in occurrences1:
                attributes1.setdefault(attribute.identifier, (record, attribute))
            attributes2 = {}
            for record, attribute in occurrences2:
                attributes2.setdefault(attribute.identifier, (record, attribute))

            for record1, attribute1 in attributes1.values():
                for record2, attribute2 in attributes2.values():
                    cause = self._cause(value, record1, attribute1, record2, attribute2)
                    yield CandidatePair(attribute1, attribute2, (cause,))


class ValueBasedBlocker(_ValueOverlapBlocker):
    """Propose record pairs from literally matching attribute values.

    Ignores the schema: two records become a candidate for every distinct value
    they share in any attribute. Each candidate is caused by the value
    correspondence, so a :class:`VotingAggregator` grouping by record pair
    counts the shared values.
    """

    def _block_cross(
        self,
        dataset1: Dataset,
        dataset2: Dataset,
        correspondences: Tuple[Correspondence, ...],
    ) -> Iterator[CandidatePair]:
        for value, occurrences1, occurrences2 in self._shared_values(dataset1, dataset2):
            # One occurrence per record and value
            records1 = {}
            for record, attribute in occurrences1:
                records1.setdefault(record.identifier, (record, attribute))
            records2 = {}
            for record, attribute in occurrences2:
                records2.setdefault(record.identifier, (record, attribute))

            for record1, attribute1 in records1.values():
                for record2, attribute2 in records2.values():
                    cause = self._cause(value, record1, attribute1, record2, attribute2)
                    yield CandidatePair(record1, record2, (cause,))


__all__ = ["InstanceBasedSchemaBlocker", "ValueBasedBlocker"]
