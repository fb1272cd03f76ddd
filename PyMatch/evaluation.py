"""
Evaluation of matching results against a gold standard.

Works for instance correspondences (duplicate detection, identity resolution)
and schema correspondences alike: both are compared as unordered id pairs.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Set, Tuple, Union

import pandas as pd

from .model import Correspondence, CorrespondenceSet

Pairs = Union[CorrespondenceSet, Iterable[Correspondence]]


class MatchingEvaluator:
    """Static methods computing precision, recall and F1 of correspondences."""

    @staticmethod
    def _as_frame(pairs: Pairs) -> pd.DataFrame:
        if isinstance(pairs, pd.DataFrame):
            return pairs
        return Correspondence.to_frame(pairs)

    @staticmethod
    def _normalize_pairs(pairs_df: pd.DataFrame) -> Set[Tuple[str, str]]:
        """Normalize pairs to ensure consistent comparison (id1 <= id2)."""
        normalized = set()
        for id1, id2 in zip(pairs_df["id1"].astype(str), pairs_df["id2"].astype(str)):
            normalized.add((id1, id2) if id1 <= id2 else (id2, id1))
        return normalized

    @staticmethod
    def evaluate(
        correspondences: Pairs,
        gold_standard: Pairs,
        *,
        threshold: Optional[float] = None,
        out_dir: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Evaluate correspondences against a gold standard.

        Parameters
        ----------
        correspondences : CorrespondenceSet or Iterable[Correspondence]
            The matching result.
        gold_standard : pandas.DataFrame or Iterable[Correspondence]
            Ground truth pairs with columns id1, id2 and optionally ``label``
            (1 for positive, 0 for negative). Without a label column all pairs
            are positives.
        threshold : float, optional
            Minimum score of correspondences to evaluate. If None, all are used.
        out_dir : str, optional
            Directory to write the evaluation summary (JSON) and the evaluated
            correspondences (CSV) to.

        Returns
        -------
        Dict[str, Any]
            precision, recall, f1, accuracy (None without negatives),
            true_positives, false_positives, false_negatives, true_negatives,
            threshold_used, total_correspondences, filtered_correspondences,
            evaluation_timestamp.

        Raises
        ------
        ValueError
            If the gold standard is empty or required columns are missing.
        """
        corr = MatchingEvaluator._as_frame(correspondences)
        test_pairs = MatchingEvaluator._as_frame(gold_standard)

        if corr.empty:
            logging.warning("Empty correspondence set provided")
        if test_pairs.empty:
            raise ValueError("Empty gold standard provided")

        for col in ["id1", "id2", "score"]:
            if col not in corr.columns:
                raise ValueError(f"Correspondence set missing required column: {col}")
        for col in ["id1", "id2"]:
            if col not in test_pairs.columns:
                raise ValueError(f"Gold standard missing required column: {col}")

        original_corr_count = len(corr)
        if threshold is not None:
            corr = corr[corr["score"] >= threshold]
            logging.info(f"Applied threshold {threshold}: {original_corr_count} -> {len(corr)} correspondences")
        else:
            threshold = 0.0

        predicted_set = MatchingEvaluator._normalize_pairs(corr)

        has_labels = "label" in test_pairs.columns
        if has_labels:
            positive_set = MatchingEvaluator._normalize_pairs(test_pairs[test_pairs["label"] == 1])
            negative_set = MatchingEvaluator._normalize_pairs(test_pairs[test_pairs["label"] == 0])
        else:
            positive_set = MatchingEvaluator._normalize_pairs(test_pairs)
            negative_set = set()

        true_positives = len(predicted_set & positive_set)
        false_positives = len(predicted_set - positive_set)
        false_negatives = len(positive_set - predicted_set)
        true_negatives = len(negative_set - predicted_set) if has_labels else 0

        precision = true_positives / max(true_positives + false_positives, 1)
        recall = true_positives / max(true_positives + false_negatives, 1)
        f1 = (2 * precision * recall) / max(precision + recall, 1e-10)
        if has_labels:
            accuracy = (true_positives + true_negatives) / max(
                true_positives + false_positives + false_negatives + true_negatives, 1
            )
        else:
            accuracy = None

        results = {
            "precision": precision,
            "recall": recall,
            "f1": f1,
            "accuracy": accuracy,
            "true_positives": true_positives,
            "false_positives": false_positives,
            "false_negatives": false_negatives,
            "true_negatives": true_negatives,
            "threshold_used": threshold,
            "total_correspondences": original_corr_count,
            "filtered_correspondences": len(corr),
            "evaluation_timestamp": datetime.now().isoformat(),
        }

        if out_dir is not None:
            results["output_files"] = MatchingEvaluator._write_evaluation_results(results, corr, out_dir)

        logging.info(f"Evaluation complete: P={precision:.4f} R={recall:.4f} F1={f1:.4f}")
        return results

    @staticmethod
    def _write_evaluation_results(
        results: Dict[str, Any],
        correspondences: pd.DataFrame,
        out_dir: str,
    ) -> list:
        os.makedirs(out_dir, exist_ok=True)

        json_path = os.path.join(out_dir, "evaluation_summary.json")
        with open(json_path, "w") as f:
            json.dump(results, f, indent=2, default=str)

        csv_path = os.path.join(out_dir, "evaluated_correspondences.csv")
        correspondences.to_csv(csv_path, index=False)
        return [json_path, csv_path]


__all__ = ["MatchingEvaluator"]
