"""Decision-threshold scoring for binary classifiers.

``ThresholdOptimizer`` is the contract the binary evaluator consumes:
score a fixed set of predicted labels, or search for the threshold that
maximizes a named criterion. ``ConfusionMatrixOptimizer`` is the default
implementation: it tries every distinct predicted probability as a
candidate threshold.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np
import pandas as pd
import structlog
from numpy.typing import ArrayLike
from sklearn.metrics import confusion_matrix  # type: ignore[import-untyped]

from modeleval.core.enums import ThresholdCriterion
from modeleval.evaluation.models import ConfusionScore

logger = structlog.get_logger(__name__)


class ThresholdOptimizer(ABC):
    """Scores binary predictions at a fixed or optimized threshold."""

    @abstractmethod
    def fixed_threshold_score(
        self,
        actual: Sequence[bool] | ArrayLike,
        predicted: Sequence[bool] | ArrayLike,
    ) -> ConfusionScore | pd.DataFrame:
        """Score already-thresholded predicted labels against actual labels."""

    @abstractmethod
    def optimize_threshold(
        self,
        actual: Sequence[bool] | ArrayLike,
        prob: Sequence[float] | ArrayLike,
        criterion: str,
    ) -> ConfusionScore | pd.DataFrame:
        """Score at the threshold that maximizes ``criterion``.

        The returned score must record the chosen threshold.
        """


def _ratio(numerator: int, denominator: int) -> float:
    return numerator / denominator if denominator > 0 else 0.0


class ConfusionMatrixOptimizer(ThresholdOptimizer):
    """Exhaustive search over the observed probabilities.

    Each distinct non-missing probability is a candidate threshold
    (predicted positive when ``prob >= candidate``). Candidates are
    tried in ascending order and the first one reaching the best
    criterion value wins, so the search is deterministic.
    """

    def fixed_threshold_score(
        self,
        actual: Sequence[bool] | ArrayLike,
        predicted: Sequence[bool] | ArrayLike,
    ) -> ConfusionScore:
        """Compute confusion-matrix metrics for predicted labels.

        Args:
            actual: Ground-truth labels.
            predicted: Predicted labels.

        Returns:
            ConfusionScore with ``threshold`` left as NaN.
        """
        actual_arr = np.asarray(actual, dtype=bool)
        predicted_arr = np.asarray(predicted, dtype=bool)
        # Fixed labels keep the matrix 2x2 even for single-class input.
        tn, fp, fn, tp = (
            int(x)
            for x in confusion_matrix(
                actual_arr, predicted_arr, labels=[False, True]
            ).ravel()
        )
        n_total = tp + fp + tn + fn

        precision = _ratio(tp, tp + fp)
        recall = _ratio(tp, tp + fn)
        f_score = (
            2.0 * precision * recall / (precision + recall)
            if (precision + recall) > 0
            else 0.0
        )
        accuracy = _ratio(tp + tn, n_total)

        return ConfusionScore(
            f_score=f_score,
            accuracy_rate=accuracy,
            misclassification_rate=1.0 - accuracy if n_total > 0 else 0.0,
            precision=precision,
            recall=recall,
            specificity=_ratio(tn, tn + fp),
            true_positive=tp,
            false_positive=fp,
            true_negative=tn,
            false_negative=fn,
        )

    def optimize_threshold(
        self,
        actual: Sequence[bool] | ArrayLike,
        prob: Sequence[float] | ArrayLike,
        criterion: str,
    ) -> ConfusionScore:
        """Search candidate thresholds for the best ``criterion`` value.

        Args:
            actual: Ground-truth labels.
            prob: Predicted probabilities, parallel to ``actual``.
            criterion: A ``ThresholdCriterion`` value.

        Returns:
            ConfusionScore at the winning threshold.

        Raises:
            ValueError: If ``criterion`` is unknown or no probability is
                available to threshold.
        """
        metric = ThresholdCriterion(criterion).value
        actual_arr = np.asarray(actual, dtype=bool)
        prob_arr = np.asarray(prob, dtype=np.float64)

        candidates = np.unique(prob_arr[~np.isnan(prob_arr)])
        if len(candidates) == 0:
            msg = "No predicted probabilities to choose a threshold from"
            raise ValueError(msg)

        best: ConfusionScore | None = None
        best_value = -np.inf
        for candidate in candidates:
            score = self.fixed_threshold_score(actual_arr, prob_arr >= candidate)
            value = getattr(score, metric)
            if value > best_value:
                best_value = value
                best = score.model_copy(update={"threshold": float(candidate)})

        assert best is not None  # noqa: S101
        logger.debug(
            "threshold_optimized",
            criterion=metric,
            threshold=best.threshold,
            value=round(best_value, 4),
            n_candidates=len(candidates),
        )
        return best
