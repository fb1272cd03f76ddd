"""
Matching engine: the standard matching pipelines for identity resolution and
schema matching.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Union

import pandas as pd

from ..model import Correspondence, Dataset
from ..processing import Processable
from .aggregators import (
    CorrespondenceAggregator,
    TopKCorrespondencesAggregator,
    TopKVotesAggregator,
    VotingAggregator,
)
from .blocking import (
    CrossDataSetBlocker,
    InstanceBasedSchemaBlocker,
    NoSchemaBlocker,
    SingleDataSetBlocker,
)
from .pipeline import run_pipeline
from .rules import BaseComparator, LinearCombinationMatchingRule, MatchingRule, VotingMatchingRule


def as_schema(schema: Any) -> Dataset:
    """Accept a schema :class:`Dataset` or a DataFrame whose columns form the schema."""
    if isinstance(schema, pd.DataFrame):
        return Dataset.schema_from_dataframe(schema)
    if isinstance(schema, Dataset):
        return schema
    raise TypeError(f"Expected a Dataset or DataFrame as schema, got {type(schema).__name__}")


class MatchingEngine:
    """Runs the standard matching pipelines.

    Each method is a fixed composition of a blocker, a matching rule and/or
    aggregators run by :func:`~PyMatch.matching.pipeline.run_pipeline`.
    Identity resolution and schema matching are the same algorithm applied to
    different datasets: in schema matching the attributes are the elements to
    match and instance correspondences play the role schema correspondences
    play in identity resolution.

    Parameters
    ----------
    execution : SequentialExecution or ParallelExecution, optional
        Execution strategy for all pipelines. Default is sequential. The
        result does not depend on the strategy.

    Example
    -------
    >>> engine = MatchingEngine()
    >>> rule = LinearCombinationMatchingRule(threshold=0.7)
    >>> rule.add_comparator(AttributeValueComparator("title"), 1.0)
    >>> matches = engine.run_identity_resolution(movies_a, movies_b, None, rule, StandardBlocker(on=["year"]))
    """

    def __init__(self, execution: Optional[Any] = None) -> None:
        self.execution = execution
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def run_duplicate_detection(
        self,
        dataset: Union[Dataset, pd.DataFrame],
        symmetric: bool,
        rule: MatchingRule,
        blocker: SingleDataSetBlocker,
    ) -> List[Correspondence]:
        """Find duplicates within one dataset.

        Parameters
        ----------
        dataset : Dataset or pandas.DataFrame
            The dataset to deduplicate.
        symmetric : bool
            Whether the rule is symmetric (``score(a, b) == score(b, a)``). If
            True, each unordered pair is compared once and reported with the
            smaller identifier first. Most similarity functions are symmetric.
        rule : MatchingRule
            Compares the records.
        blocker : SingleDataSetBlocker
            Generates the record pairs checked by the rule.

        Returns
        -------
        List[Correspondence]
        """
        return run_pipeline(
            dataset,
            None,
            blocker,
            rule=rule,
            symmetric=symmetric,
            execution=self.execution,
            task_name="Duplicate Detection",
        )

    def run_identity_resolution(
        self,
        dataset1: Union[Dataset, pd.DataFrame],
        dataset2: Union[Dataset, pd.DataFrame],
        schema_correspondences: Optional[Iterable[Correspondence]],
        rule: MatchingRule,
        blocker: CrossDataSetBlocker,
    ) -> List[Correspondence]:
        """Find records of ``dataset1`` and ``dataset2`` describing the same entity.

        Parameters
        ----------
        dataset1, dataset2 : Dataset or pandas.DataFrame
            The datasets to match.
        schema_correspondences : Iterable[Correspondence], optional
            Attribute correspondences telling the rule's comparators which
            attributes to compare. Simplified before use.
        rule : MatchingRule
            Compares the records.
        blocker : CrossDataSetBlocker
            Generates the record pairs checked by the rule.

        Returns
        -------
        List[Correspondence]
        """
        return run_pipeline(
            dataset1,
            dataset2,
            blocker,
            rule=rule,
            correspondences=schema_correspondences,
            execution=self.execution,
            task_name="Identity Resolution",
        )

    def run_simple_identity_resolution(
        self,
        dataset1: Union[Dataset, pd.DataFrame],
        dataset2: Union[Dataset, pd.DataFrame],
        blocker: CrossDataSetBlocker,
        aggregator: CorrespondenceAggregator,
    ) -> List[Correspondence]:
        """Match records by value overlap, ignoring their schema.

        Use a :class:`ValueBasedBlocker` to pair records sharing values and a
        :class:`VotingAggregator` to count the shared values.
        """
        return run_pipeline(
            dataset1,
            dataset2,
            blocker,
            aggregators=[aggregator],
            execution=self.execution,
            task_name="Identity Resolution",
        )

    def run_schema_matching(
        self,
        schema1: Union[Dataset, pd.DataFrame],
        schema2: Union[Dataset, pd.DataFrame],
        instance_correspondences: Optional[Iterable[Correspondence]],
        rule: MatchingRule,
        blocker: CrossDataSetBlocker,
    ) -> List[Correspondence]:
        """Match the attributes of two schemas with a matching rule.

        Parameters
        ----------
        schema1, schema2 : Dataset or pandas.DataFrame
            Datasets of attributes, or DataFrames whose columns are matched.
        instance_correspondences : Iterable[Correspondence], optional
            Record correspondences telling the rule which instance values to
            compare. Simplified before use.
        rule : MatchingRule
            Compares the attributes.
        blocker : CrossDataSetBlocker
            Generates the attribute pairs checked by the rule.

        Returns
        -------
        List[Correspondence]
        """
        return run_pipeline(
            as_schema(schema1),
            as_schema(schema2),
            blocker,
            rule=rule,
            correspondences=instance_correspondences,
            execution=self.execution,
            task_name="Schema Matching",
        )

    def run_label_based_schema_matching(
        self,
        schema1: Union[Dataset, pd.DataFrame],
        schema2: Union[Dataset, pd.DataFrame],
        label_comparator: Union[BaseComparator, Callable],
        similarity_threshold: float,
    ) -> List[Correspondence]:
        """Match attributes by comparing their labels.

        Every attribute of ``schema1`` is compared with every attribute of
        ``schema2`` by a one-comparator rule (weight 1.0).

        Parameters
        ----------
        schema1, schema2 : Dataset or pandas.DataFrame
            The schemas to match.
        label_comparator : BaseComparator or callable
            Compares the labels of two attributes, e.g. :class:`LabelComparator`.
        similarity_threshold : float
            Minimum label similarity (inclusive).

        Returns
        -------
        List[Correspondence]
        """
        rule = LinearCombinationMatchingRule(similarity_threshold)
        rule.add_comparator(label_comparator, 1.0)
        return run_pipeline(
            as_schema(schema1),
            as_schema(schema2),
            NoSchemaBlocker(),
            rule=rule,
            execution=self.execution,
            task_name="Schema Matching",
        )

    def run_instance_based_schema_matching(
        self,
        dataset1: Union[Dataset, pd.DataFrame],
        dataset2: Union[Dataset, pd.DataFrame],
        blocker: Optional[CrossDataSetBlocker] = None,
        aggregator: Optional[CorrespondenceAggregator] = None,
    ) -> List[Correspondence]:
        """Match attributes by the overlap of their instance values.

        The blocker proposes an attribute pair for every value both attributes
        contain; the aggregator turns these into schema correspondences.

        Parameters
        ----------
        dataset1, dataset2 : Dataset or pandas.DataFrame
            Instance datasets (records with values, not attributes).
        blocker : CrossDataSetBlocker, optional
            Defaults to :class:`InstanceBasedSchemaBlocker`.
        aggregator : CorrespondenceAggregator, optional
            Defaults to a :class:`VotingAggregator` counting shared values.

        Returns
        -------
        List[Correspondence]
        """
        return run_pipeline(
            dataset1,
            dataset2,
            blocker if blocker is not None else InstanceBasedSchemaBlocker(),
            aggregators=[aggregator if aggregator is not None else VotingAggregator()],
            execution=self.execution,
            task_name="Schema Matching",
        )

    def run_duplicate_based_schema_matching(
        self,
        schema1: Union[Dataset, pd.DataFrame],
        schema2: Union[Dataset, pd.DataFrame],
        instance_correspondences: Iterable[Correspondence],
        rule: VotingMatchingRule,
        vote_filter: Optional[TopKVotesAggregator],
        vote_aggregator: CorrespondenceAggregator,
        schema_blocker: Optional[CrossDataSetBlocker] = None,
    ) -> List[Correspondence]:
        """Match attributes using known duplicates.

        First the voting rule casts votes for attribute pairs from every
        instance correspondence. Optionally, the vote filter limits the votes
        each instance correspondence can cast. Finally the vote aggregator
        combines the votes into schema correspondences.

        Parameters
        ----------
        schema1, schema2 : Dataset or pandas.DataFrame
            The schemas to match.
        instance_correspondences : Iterable[Correspondence]
            Record correspondences (duplicates) between the two datasets.
        rule : VotingMatchingRule
            Casts votes from instance correspondences.
        vote_filter : TopKVotesAggregator, optional
            Limits the number of votes per instance correspondence.
        vote_aggregator : CorrespondenceAggregator
            Combines votes into final correspondences, e.g. :class:`VotingAggregator`.
        schema_blocker : CrossDataSetBlocker, optional
            Generates candidate attribute pairs. Defaults to
            :class:`NoSchemaBlocker` (all combinations).

        Returns
        -------
        List[Correspondence]
        """
        if not isinstance(rule, VotingMatchingRule):
            raise TypeError(f"Duplicate-based schema matching requires a VotingMatchingRule, got {type(rule).__name__}")
        if vote_filter is not None and not isinstance(vote_filter, TopKVotesAggregator):
            raise TypeError(f"vote_filter must be a TopKVotesAggregator, got {type(vote_filter).__name__}")
        if instance_correspondences is None:
            raise ValueError("Duplicate-based schema matching requires instance correspondences")

        aggregators = [vote_filter] if vote_filter is not None else []
        aggregators.append(vote_aggregator)
        return run_pipeline(
            as_schema(schema1),
            as_schema(schema2),
            schema_blocker if schema_blocker is not None else NoSchemaBlocker(),
            rule=rule,
            aggregators=aggregators,
            correspondences=instance_correspondences,
            execution=self.execution,
            task_name="Schema Matching",
        )

    def _top_k(
        self,
        correspondences: Iterable[Correspondence],
        k: int,
        similarity_threshold: float,
    ) -> List[Correspondence]:
        aggregator = TopKCorrespondencesAggregator(k, threshold=similarity_threshold)
        result = (
            Processable(list(correspondences), execution=self.execution)
            .aggregate(aggregator.group_key, aggregator.aggregate)
            .sorted(key=Correspondence.sort_key)
        )
        self.logger.info(f"Selected {len(result)} top-{k} correspondences")
        return result

    def get_top_k_instance_correspondences(
        self,
        correspondences: Iterable[Correspondence],
        k: int,
        similarity_threshold: float,
    ) -> List[Correspondence]:
        """Keep the k highest-scored correspondences of each record on the left-hand side.

        Only correspondences with ``score >= similarity_threshold`` are kept.
        Ties are broken by ascending identifiers.
        """
        return self._top_k(correspondences, k, similarity_threshold)

    def get_top_k_schema_correspondences(
        self,
        correspondences: Iterable[Correspondence],
        k: int,
        similarity_threshold: float,
    ) -> List[Correspondence]:
        """Keep the k highest-scored correspondences of each attribute on the left-hand side."""
        return self._top_k(correspondences, k, similarity_threshold)

    def __repr__(self) -> str:
        return f"MatchingEngine(execution={self.execution!r})"


__all__ = ["MatchingEngine", "as_schema"]
