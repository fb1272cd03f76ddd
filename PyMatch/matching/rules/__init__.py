"""
Matching rules and comparators.
"""

from .base import BaseComparator, MatchingRule
from .comparators import AttributeValueComparator, LabelComparator, NumericComparator
from .linear_combination import LinearCombinationMatchingRule
from .voting import VotingMatchingRule

__all__ = [
    "AttributeValueComparator",
    "BaseComparator",
    "LabelComparator",
    "LinearCombinationMatchingRule",
    "MatchingRule",
    "NumericComparator",
    "VotingMatchingRule",
]
