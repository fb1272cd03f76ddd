"""
Comparator classes for schema elements and records.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

from ...model import Attribute, Correspondence, is_missing
from ...utils import SimilarityRegistry
from .base import BaseComparator


def _label(element: Any) -> str:
    return str(getattr(element, "name", element))


class LabelComparator(BaseComparator):
    """Compare the labels of two schema elements with a string similarity.

    Parameters
    ----------
    similarity_function : str, optional
        Name of a textdistance function from the SimilarityRegistry.
        Default is "levenshtein".
    lowercase : bool, optional
        Whether to lowercase labels before comparison. Default is True.
    preprocess : callable, optional
        Additional function applied to each label, after lowercasing.
    tokenization : str, optional
        Tokenization for token-based functions. Default is "word" for
        token-based functions and "char" otherwise.
    """

    def __init__(
        self,
        similarity_function: str = "levenshtein",
        lowercase: bool = True,
        preprocess: Optional[Callable[[str], str]] = None,
        tokenization: Optional[str] = None,
    ) -> None:
        super().__init__(f"LabelComparator({similarity_function})")
        self.similarity_function = similarity_function
        self.lowercase = lowercase
        self.preprocess = preprocess
        if tokenization is None:
            tokenization = "word" if SimilarityRegistry.is_tokenizable(similarity_function) else "char"
        self.tokenization = tokenization
        self._sim_func = SimilarityRegistry.get_function(similarity_function, tokenization)

    def _prepare(self, label: str) -> str:
        if self.lowercase:
            label = label.lower()
        if self.preprocess:
            label = self.preprocess(label)
        return label

    def compare(
        self,
        first: Any,
        second: Any,
        correspondence: Optional[Correspondence] = None,
    ) -> Optional[float]:
        label1 = self._prepare(_label(first))
        label2 = self._prepare(_label(second))
        if not label1 or not label2:
            return None
        return float(self._sim_func(label1, label2))


class AttributeValueComparator(BaseComparator):
    """Compare the values of an attribute in two records with a string similarity.

    If a schema correspondence for ``attribute`` is passed to :meth:`compare`,
    the values of the two attributes it links are compared instead, which lets
    records with different schemata be matched.

    Parameters
    ----------
    attribute : str
        Attribute name in the first record.
    similarity_function : str, optional
        Name of a textdistance function. Default is "jaro_winkler".
    second_attribute : str, optional
        Attribute name in the second record. Defaults to ``attribute``.
    preprocess : callable, optional
        Function applied to both values (as strings) before comparison.
    tokenization : str, optional
        Tokenization for token-based functions.

    Notes
    -----
    Missing values make the similarity undefined (``None``). For list values
    the best matching pair of elements is used.
    """

    def __init__(
        self,
        attribute: str,
        similarity_function: str = "jaro_winkler",
        second_attribute: Optional[str] = None,
        preprocess: Optional[Callable[[str], str]] = None,
        tokenization: Optional[str] = None,
    ) -> None:
        super().__init__(f"AttributeValueComparator({attribute}, {similarity_function})")
        self.attribute = attribute
        self.second_attribute = second_attribute or attribute
        self.similarity_function = similarity_function
        self.preprocess = preprocess
        if tokenization is None:
            tokenization = "word" if SimilarityRegistry.is_tokenizable(similarity_function) else "char"
        self.tokenization = tokenization
        self._sim_func = SimilarityRegistry.get_function(similarity_function, tokenization)

    def is_restricted_by(self, correspondence: Correspondence) -> bool:
        first = correspondence.first
        if isinstance(first, Attribute):
            return first.name == self.attribute or first.identifier == self.attribute
        return str(first) == self.attribute

    def _attributes(self, correspondence: Optional[Correspondence]) -> Tuple[Any, Any]:
        if correspondence is not None and self.is_restricted_by(correspondence):
            return correspondence.first, correspondence.second
        return self.attribute, self.second_attribute

    def _strings(self, value: Any) -> List[str]:
        items = value if isinstance(value, (list, tuple, set)) else [value]
        strings = []
        for item in items:
            if is_missing(item):
                continue
            text = str(item)
            if self.preprocess:
                text = self.preprocess(text)
            strings.append(text)
        return strings

    def compare(
        self,
        first: Any,
        second: Any,
        correspondence: Optional[Correspondence] = None,
    ) -> Optional[float]:
        attribute1, attribute2 = self._attributes(correspondence)
        values1 = self._strings(first.get(attribute1))
        values2 = self._strings(second.get(attribute2))
        if not values1 or not values2:
            return None
        return max(float(self._sim_func(v1, v2)) for v1 in values1 for v2 in values2)


class NumericComparator(BaseComparator):
    """Compare numeric attribute values by absolute difference.

    Similarity is ``max(0, 1 - |a - b| / max_difference)``. Values that are
    missing or cannot be parsed as numbers give an undefined similarity.

    Parameters
    ----------
    attribute : str
        Attribute name in both records.
    max_difference : float
        Difference at which the similarity reaches 0. Must be > 0.
    """

    def __init__(self, attribute: str, max_difference: float) -> None:
        super().__init__(f"NumericComparator({attribute}, max_difference={max_difference})")
        if max_difference <= 0:
            raise ValueError("max_difference must be > 0")
        self.attribute = attribute
        self.max_difference = float(max_difference)

    def is_restricted_by(self, correspondence: Correspondence) -> bool:
        return _label(correspondence.first) == self.attribute

    @staticmethod
    def _number(value: Any) -> Optional[float]:
        if is_missing(value):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    def compare(
        self,
        first: Any,
        second: Any,
        correspondence: Optional[Correspondence] = None,
    ) -> Optional[float]:
        attribute1 = attribute2 = self.attribute
        if correspondence is not None and self.is_restricted_by(correspondence):
            attribute1, attribute2 = correspondence.first, correspondence.second
        num1 = self._number(first.get(attribute1))
        num2 = self._number(second.get(attribute2))
        if num1 is None or num2 is None:
            return None
        return max(0.0, 1.0 - abs(num1 - num2) / self.max_difference)


__all__ = ["AttributeValueComparator", "LabelComparator", "NumericComparator"]
