"""
Aggregators reducing grouped correspondences to final correspondences.
"""

from .base import CorrespondenceAggregator, cause_key, first_key, pair_key
from .simple import AverageScoreAggregator, MaxScoreAggregator, SumScoreAggregator
from .top_k import TopKCorrespondencesAggregator, TopKVotesAggregator
from .voting import VotingAggregator

__all__ = [
    "AverageScoreAggregator",
    "CorrespondenceAggregator",
    "MaxScoreAggregator",
    "SumScoreAggregator",
    "TopKCorrespondencesAggregator",
    "TopKVotesAggregator",
    "VotingAggregator",
    "cause_key",
    "first_key",
    "pair_key",
]
