"""
Blocking subpackage: base interfaces and blocking strategies.
"""

from .base import BaseBlocker, CandidatePair, CandidatePairs, CrossDataSetBlocker, SingleDataSetBlocker
from .noblocking import NoBlocker, NoSchemaBlocker
from .standard import StandardBlocker
from .value_based import InstanceBasedSchemaBlocker, ValueBasedBlocker

__all__ = [
    "BaseBlocker",
    "CandidatePair",
    "CandidatePairs",
    "CrossDataSetBlocker",
    "InstanceBasedSchemaBlocker",
    "NoBlocker",
    "NoSchemaBlocker",
    "SingleDataSetBlocker",
    "StandardBlocker",
    "ValueBasedBlocker",
]
