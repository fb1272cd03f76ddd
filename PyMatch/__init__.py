"""
PyMatch: Entity Resolution and Schema Matching Engine
=====================================================

This package finds correspondences between records (identity resolution,
duplicate detection) and between attributes (schema matching). Datasets can
be built from pandas DataFrames and results converted back to
``CorrespondenceSet`` DataFrames.

Subpackages
-----------

``model``
    Correspondences, records, attributes and datasets.
``processing``
    Lazy processables and sequential/parallel execution strategies.
``matching``
    Blockers, matching rules, aggregators and the ``MatchingEngine``.
``evaluation``
    Precision, recall and F1 against a gold standard.
``utils``
    Similarity function registry and string helpers.
"""

__version__ = "0.1.0"

__all__ = [
    "model",
    "processing",
    "matching",
    "evaluation",
    "utils",
]
