"""Binary-classification evaluation: AUC plus thresholded scores."""
from __future__ import annotations

import math
import numbers
from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd
import structlog
from pandas.core.groupby import DataFrameGroupBy

from modeleval.core.enums import ThresholdCriterion
from modeleval.core.exceptions import EmptyDataError, InvalidThresholdError
from modeleval.evaluation.grouping import (
    DEFAULT_SUFFIX,
    apply_per_group,
    avoid_conflict,
    require_columns,
    resolve_grouping,
)
from modeleval.evaluation.labels import to_logical
from modeleval.evaluation.models import ConfusionScore
from modeleval.evaluation.roc import build_roc
from modeleval.evaluation.threshold_optimizer import (
    ConfusionMatrixOptimizer,
    ThresholdOptimizer,
)

logger = structlog.get_logger(__name__)

AUC_COL = "auc"


def compute_auc(curve: pd.DataFrame) -> float:
    """Area under an ROC curve from ``build_roc``.

    Right Riemann sum along the FPR axis: each step from point i - 1 to
    point i contributes ``(fpr[i] - fpr[i - 1]) * tpr[i]``. The first
    point has no preceding interval.

    Args:
        curve: Column 0 = true positive rate, column 1 = false positive
            rate (positional, so renamed columns work).

    Returns:
        AUC in [0, 1].
    """
    tpr = curve.iloc[:, 0].to_numpy(dtype=np.float64)
    fpr = curve.iloc[:, 1].to_numpy(dtype=np.float64)
    return float(np.sum(np.diff(fpr) * tpr[1:]))


def validate_threshold(threshold: Any) -> float | ThresholdCriterion:
    """Normalize a threshold argument.

    Args:
        threshold: A number in [0, 1] or a ``ThresholdCriterion`` name.

    Returns:
        The numeric threshold as float, or the criterion.

    Raises:
        InvalidThresholdError: For anything else.
    """
    criteria = [c.value for c in ThresholdCriterion]
    if isinstance(threshold, bool):
        raise InvalidThresholdError(threshold, criteria)
    if isinstance(threshold, numbers.Real):
        value = float(threshold)
        if math.isfinite(value) and 0.0 <= value <= 1.0:
            return value
        raise InvalidThresholdError(threshold, criteria)
    if isinstance(threshold, str):
        try:
            return ThresholdCriterion(threshold)
        except ValueError as exc:
            raise InvalidThresholdError(threshold, criteria) from exc
    raise InvalidThresholdError(threshold, criteria)


def _score_frame(score: ConfusionScore | pd.DataFrame) -> pd.DataFrame:
    if isinstance(score, pd.DataFrame):
        return score.reset_index(drop=True)
    return pd.DataFrame([score.model_dump()])


def evaluate_binary_each(
    df: pd.DataFrame,
    prob_col: str,
    actual_col: str,
    threshold: float | ThresholdCriterion,
    optimizer: ThresholdOptimizer,
    positive_label: Any = None,
    suffix: str = DEFAULT_SUFFIX,
) -> pd.DataFrame:
    """Evaluate one group: AUC followed by the confusion-matrix score.

    Rows with a missing label or probability are left out of the
    thresholded score. The ROC curve behind the AUC only drops rows
    with a missing label.

    Args:
        df: One group's rows.
        prob_col: Predicted-probability column.
        actual_col: Actual-label column.
        threshold: Validated numeric threshold or criterion.
        optimizer: Threshold scoring collaborator.
        positive_label: Explicit positive-class value, if any.
        suffix: Appended to ``auc`` if the score already has that column.

    Returns:
        One row per score row returned by ``optimizer`` (normally one),
        with ``auc`` as the first column.

    Raises:
        EmptyDataError: If no row has both a label and a probability.
    """
    actual = to_logical(df[actual_col], positive_label)
    prob = df[prob_col].to_numpy(dtype=np.float64, na_value=np.nan)
    usable = actual.notna().to_numpy() & ~np.isnan(prob)
    if not usable.any():
        msg = (
            f"No rows with both '{actual_col}' and '{prob_col}' present"
        )
        raise EmptyDataError(msg)

    actual_val = actual[usable].to_numpy(dtype=bool)
    prob_val = prob[usable]

    if isinstance(threshold, ThresholdCriterion):
        ret = _score_frame(
            optimizer.optimize_threshold(actual_val, prob_val, threshold.value)
        )
    else:
        pred_label = prob_val >= threshold
        ret = _score_frame(optimizer.fixed_threshold_score(actual_val, pred_label))
        ret["threshold"] = threshold

    roc = build_roc(df, prob_col, actual_col, positive_label=positive_label)
    ret.insert(0, avoid_conflict(ret.columns, AUC_COL, suffix), compute_auc(roc))
    return ret


def evaluate_binary(
    data: pd.DataFrame | DataFrameGroupBy,
    prob_col: str,
    actual_col: str,
    threshold: float | str = ThresholdCriterion.F_SCORE,
    group_by: str | Sequence[str] | None = None,
    positive_label: Any = None,
    optimizer: ThresholdOptimizer | None = None,
    max_workers: int = 1,
    suffix: str = DEFAULT_SUFFIX,
) -> pd.DataFrame:
    """Calculate binary-classification evaluation for every group.

    Args:
        data: Prediction table, optionally pre-grouped.
        prob_col: Predicted-probability column.
        actual_col: Actual-label column.
        threshold: Fixed decision threshold in [0, 1], or the name of
            the metric to maximize when choosing one.
        group_by: Key column(s) when ``data`` is a plain DataFrame.
        positive_label: Explicit positive-class value, if any.
        optimizer: Threshold scoring collaborator; defaults to
            ``ConfusionMatrixOptimizer``.
        max_workers: Thread pool size for per-group evaluation.
        suffix: Disambiguating suffix for output column names.

    Returns:
        Group key columns, ``auc``, then the confusion-matrix score
        columns including ``threshold``.

    Raises:
        InvalidThresholdError: Before any group runs, for a bad threshold.
        ColumnNotFoundError: If a referenced column is missing.
        GroupComputationError: If any group fails.
    """
    checked = validate_threshold(threshold)
    df, group_cols = resolve_grouping(data, group_by)
    require_columns(df, [prob_col, actual_col])
    scorer = optimizer if optimizer is not None else ConfusionMatrixOptimizer()

    def evaluate_binary_each_group(sub: pd.DataFrame) -> pd.DataFrame:
        return evaluate_binary_each(
            sub,
            prob_col,
            actual_col,
            threshold=checked,
            optimizer=scorer,
            positive_label=positive_label,
            suffix=suffix,
        )

    ret = apply_per_group(
        df, group_cols, evaluate_binary_each_group,
        max_workers=max_workers, suffix=suffix,
        columns=[AUC_COL, *ConfusionScore.model_fields],
    )
    logger.info(
        "binary_evaluation_complete",
        group_by=group_cols,
        n_rows=len(ret),
        threshold=str(checked),
    )
    return ret
