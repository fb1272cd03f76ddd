"""
Generic matching pipeline: blocking, rule evaluation and aggregation.

Every orchestrator of :class:`~PyMatch.matching.engine.MatchingEngine` is a
call to :func:`run_pipeline` with a different choice of datasets, auxiliary
correspondences and components.
"""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Any, Iterable, List, Optional, Sequence

import pandas as pd

from ..model import Correspondence, Dataset
from ..processing import Processable
from .aggregators.base import CorrespondenceAggregator
from .blocking.base import BaseBlocker, CandidatePair, CrossDataSetBlocker, SingleDataSetBlocker
from .rules.base import MatchingRule

logger = logging.getLogger(__name__)


def as_dataset(data: Any) -> Dataset:
    """Accept a :class:`Dataset`, a DataFrame or an iterable of elements."""
    if isinstance(data, Dataset):
        return data
    if isinstance(data, pd.DataFrame):
        return Dataset.from_dataframe(data)
    if data is None:
        raise ValueError("Dataset must not be None")
    return Dataset(list(data))


def validate_components(
    blocker: Any,
    rule: Optional[Any] = None,
    aggregators: Sequence[Any] = (),
    single: bool = False,
) -> None:
    """Check a component combination before any candidate pair is processed.

    Raises
    ------
    TypeError
        If a component has the wrong kind for its position.
    ValueError
        If a rule is incompletely configured.
    """
    if not isinstance(blocker, BaseBlocker):
        raise TypeError(f"Expected a blocker, got {type(blocker).__name__}")
    if single and not isinstance(blocker, SingleDataSetBlocker):
        raise TypeError(f"{type(blocker).__name__} cannot block within a single dataset")
    if not single and not isinstance(blocker, CrossDataSetBlocker):
        raise TypeError(f"{type(blocker).__name__} cannot block across two datasets")

    if rule is not None:
        if not isinstance(rule, MatchingRule):
            raise TypeError(f"Expected a MatchingRule, got {type(rule).__name__}")
        rule.validate()

    for aggregator in aggregators:
        if not isinstance(aggregator, CorrespondenceAggregator):
            raise TypeError(f"Expected a CorrespondenceAggregator, got {type(aggregator).__name__}")


def _possible_pairs(dataset_a: Dataset, dataset_b: Optional[Dataset], symmetric: bool) -> int:
    if dataset_b is None:
        n = len(dataset_a)
        return n * (n - 1) // 2 if symmetric else n * (n - 1)
    return len(dataset_a) * len(dataset_b)


def run_pipeline(
    dataset_a: Any,
    dataset_b: Optional[Any],
    blocker: BaseBlocker,
    rule: Optional[MatchingRule] = None,
    aggregators: Sequence[CorrespondenceAggregator] = (),
    correspondences: Optional[Iterable[Correspondence]] = None,
    symmetric: bool = False,
    execution: Optional[Any] = None,
    task_name: str = "Matching",
) -> List[Correspondence]:
    """Block, score and aggregate two datasets (or one dataset with itself).

    Parameters
    ----------
    dataset_a : Dataset
        Provides the first element of every correspondence.
    dataset_b : Dataset or None
        Provides the second element. ``None`` matches ``dataset_a`` against
        itself and requires a :class:`SingleDataSetBlocker`.
    blocker : BaseBlocker
        Generates the candidate pairs.
    rule : MatchingRule, optional
        Scores candidate pairs. Without a rule every candidate becomes a
        correspondence of score 1.0 caused by the candidate's causes, so the
        aggregators alone decide (e.g. by counting votes).
    aggregators : Sequence[CorrespondenceAggregator], optional
        Applied in order; each groups the previous stage's output by its
        ``group_key`` and reduces every group.
    correspondences : Iterable[Correspondence], optional
        Auxiliary correspondences handed to the blocker (cross-dataset only).
    symmetric : bool, optional
        Emit each unordered pair once (single dataset only).
    execution : SequentialExecution or ParallelExecution, optional
        Execution strategy for rule evaluation and aggregation.
    task_name : str, optional
        Name used in log messages.

    Returns
    -------
    List[Correspondence]
        Result correspondences sorted by :meth:`Correspondence.sort_key`.

    Raises
    ------
    TypeError, ValueError
        On an invalid component combination, before any pair is processed.
    """
    aggregators = list(aggregators)
    single = dataset_b is None
    validate_components(blocker, rule, aggregators, single=single)
    if single and correspondences is not None:
        raise ValueError("Auxiliary correspondences require two datasets")

    dataset_a = as_dataset(dataset_a)
    dataset_b = None if single else as_dataset(dataset_b)

    logger.info(f"Starting {task_name}")
    start_time = time.time()

    if single:
        logger.info(f"Blocking {len(dataset_a)} x {len(dataset_a)} elements")
        candidates = blocker.generate_candidates(dataset_a, symmetric=symmetric)
    else:
        logger.info(f"Blocking {len(dataset_a)} x {len(dataset_b)} elements")
        candidates = blocker.generate_candidates(
            dataset_a,
            dataset_b,
            Correspondence.simplify(correspondences) if correspondences is not None else None,
        )

    stream: Processable = candidates.with_execution(execution) if execution is not None else candidates
    if rule is not None:
        stream = stream.flat_map(rule.evaluate)
    else:
        stream = stream.map(CandidatePair.to_correspondence)

    for aggregator in aggregators:
        stream = stream.aggregate(aggregator.group_key, aggregator.aggregate)

    results = stream.sorted(key=Correspondence.sort_key)

    blocked_pairs = candidates.stats()["pairs_emitted"]
    possible_pairs = _possible_pairs(dataset_a, dataset_b, symmetric)
    reduction_ratio = 1 - (blocked_pairs / possible_pairs) if possible_pairs > 0 else 0
    total_time = timedelta(seconds=time.time() - start_time)
    logger.info(
        f"Matched {blocked_pairs} blocked pairs (reduction ratio: {reduction_ratio})"
    )
    logger.info(f"{task_name} finished after {total_time}; found {len(results)} correspondences.")
    return results


__all__ = ["as_dataset", "run_pipeline", "validate_components"]
