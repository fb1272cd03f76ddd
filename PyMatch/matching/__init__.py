"""
Blocking, matching rules, aggregation and the matching engine for PyMatch.
"""

# Blocking strategies (subpackage)
from .blocking import (
    BaseBlocker,
    CandidatePair,
    CandidatePairs,
    CrossDataSetBlocker,
    InstanceBasedSchemaBlocker,
    NoBlocker,
    NoSchemaBlocker,
    SingleDataSetBlocker,
    StandardBlocker,
    ValueBasedBlocker,
)

# Matching rules and comparators (subpackage)
from .rules import (
    AttributeValueComparator,
    BaseComparator,
    LabelComparator,
    LinearCombinationMatchingRule,
    MatchingRule,
    NumericComparator,
    VotingMatchingRule,
)

# Aggregators (subpackage)
from .aggregators import (
    AverageScoreAggregator,
    CorrespondenceAggregator,
    MaxScoreAggregator,
    SumScoreAggregator,
    TopKCorrespondencesAggregator,
    TopKVotesAggregator,
    VotingAggregator,
)

from .pipeline import run_pipeline
from .engine import MatchingEngine

__all__ = [
    "AttributeValueComparator",
    "AverageScoreAggregator",
    "BaseBlocker",
    "BaseComparator",
    "CandidatePair",
    "CandidatePairs",
    "CorrespondenceAggregator",
    "CrossDataSetBlocker",
    "InstanceBasedSchemaBlocker",
    "LabelComparator",
    "LinearCombinationMatchingRule",
    "MatchingEngine",
    "MatchingRule",
    "MaxScoreAggregator",
    "NoBlocker",
    "NoSchemaBlocker",
    "NumericComparator",
    "SingleDataSetBlocker",
    "StandardBlocker",
    "SumScoreAggregator",
    "TopKCorrespondencesAggregator",
    "TopKVotesAggregator",
    "ValueBasedBlocker",
    "VotingAggregator",
    "VotingMatchingRule",
    "run_pipeline",
]
