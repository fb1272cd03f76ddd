"""
Data model for PyMatch: records, schema elements, datasets and correspondences.
"""

from .correspondence import Correspondence, CorrespondenceSet, get_identifier
from .dataset import Attribute, Dataset, MatchableValue, Record, is_missing, value_to_string

__all__ = [
    "Attribute",
    "Correspondence",
    "CorrespondenceSet",
    "Dataset",
    "MatchableValue",
    "Record",
    "get_identifier",
    "is_missing",
    "value_to_string",
]
