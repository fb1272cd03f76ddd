"""
Voting rule for duplicate-based schema matching.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Iterator, Optional

from ...model import Correspondence, is_missing, value_to_string
from ...utils import SimilarityRegistry
from ..blocking.base import CandidatePair
from .base import MatchingRule

_ZERO_VALUES = {"", "0", "0.0", "nan", "null", "none"}


class VotingMatchingRule(MatchingRule):
    """Cast votes for attribute pairs from known duplicate records.

    For a candidate attribute pair ``(a1, a2)`` and an instance correspondence
    ``(r1, r2)`` (a known duplicate), the rule compares ``r1[a1]`` with
    ``r2[a2]``. If the values agree, it emits a vote: a correspondence between
    ``a1`` and ``a2`` whose provenance is the instance correspondence.

    Parameters
    ----------
    threshold : float, optional
        Minimum value similarity for a vote. Default is 1.0 (only agreeing
        values vote under exact comparison).
    value_comparison : str, optional
        "exact", "normalized" (punctuation and extra whitespace removed) or
        "fuzzy" (similarity function). Default is "exact".
    similarity_function : str, optional
        SimilarityRegistry function for fuzzy comparison.
    ignore_zero_values : bool, optional
        Whether empty or zero-like values ("0", "null", ...) never vote.
        Default is True.
    """

    def __init__(
        self,
        threshold: float = 1.0,
        value_comparison: str = "exact",
        similarity_function: Optional[str] = None,
        ignore_zero_values: bool = True,
    ) -> None:
        super().__init__(threshold)
        if value_comparison not in ["exact", "normalized", "fuzzy"]:
            raise ValueError(f"Unsupported value comparison: {value_comparison}")
        if value_comparison == "fuzzy" and similarity_function is None:
            raise ValueError("similarity_function must be specified when using fuzzy value comparison")

        self.value_comparison = value_comparison
        self.similarity_function = similarity_function
        self.ignore_zero_values = ignore_zero_values
        self._sim_func = SimilarityRegistry.get_function(similarity_function) if similarity_function else None

    def _normalize_value(self, value: Any) -> str:
        if is_missing(value):
            return ""

        str_val = value_to_string(value).strip().lower()

        if self.value_comparison == "normalized":
            str_val = re.sub(r'[^\w\s]', '', str_val)
            str_val = ' '.join(str_val.split())

        return str_val

    def compare_values(self, value1: Any, value2: Any) -> float:
        """Similarity of two attribute values according to the comparison method."""
        norm_val1 = self._normalize_value(value1)
        norm_val2 = self._normalize_value(value2)

        if self.ignore_zero_values and (norm_val1 in _ZERO_VALUES or norm_val2 in _ZERO_VALUES):
            return 0.0

        if self.value_comparison == "fuzzy":
            if not norm_val1 or not norm_val2:
                return 0.0
            return float(self._sim_func(norm_val1, norm_val2))

        return 1.0 if norm_val1 == norm_val2 else 0.0

    @staticmethod
    def _orient(attribute1: Any, instance_correspondence: Correspondence) -> Correspondence:
        """Align the instance correspondence with the schema side of ``attribute1``."""
        schema_name = getattr(attribute1, "dataset_name", "")
        first_name = getattr(instance_correspondence.first, "dataset_name", "")
        second_name = getattr(instance_correspondence.second, "dataset_name", "")
        if schema_name and first_name != schema_name and second_name == schema_name:
            return instance_correspondence.invert()
        return instance_correspondence

    def apply(
        self,
        attribute1: Any,
        attribute2: Any,
        instance_correspondence: Correspondence,
    ) -> Optional[Correspondence]:
        """Return the vote of one instance correspondence for an attribute pair, if any."""
        oriented = self._orient(attribute1, instance_correspondence)
        similarity = self.compare_values(
            oriented.first.get(attribute1), oriented.second.get(attribute2)
        )
        if not self.is_match(similarity) or similarity <= 0.0:
            return None
        return Correspondence(attribute1, attribute2, similarity, provenance=(instance_correspondence,))

    def evaluate(
        self,
        candidate: CandidatePair,
        correspondences: Optional[Iterable[Correspondence]] = None,
    ) -> Iterator[Correspondence]:
        """Yield one vote per instance correspondence agreeing on the candidate attribute pair."""
        if correspondences is None:
            correspondences = candidate.causes
        for instance_correspondence in correspondences:
            vote = self.apply(candidate.first, candidate.second, instance_correspondence)
            if vote is not None:
                yield vote

    def __repr__(self) -> str:
        return (
            f"VotingMatchingRule(threshold={self.threshold}, "
            f"value_comparison='{self.value_comparison}')"
        )


__all__ = ["VotingMatchingRule"]
