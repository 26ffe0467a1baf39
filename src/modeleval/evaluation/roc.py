"""ROC curve construction, per group and over grouped tables."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
import pandas as pd
import structlog
from numpy.typing import NDArray
from pandas.core.groupby import DataFrameGroupBy

from modeleval.core.exceptions import EmptyDataError
from modeleval.evaluation.grouping import (
    DEFAULT_SUFFIX,
    apply_per_group,
    avoid_conflict,
    require_columns,
    resolve_grouping,
)
from modeleval.evaluation.labels import to_logical
from modeleval.evaluation.models import ROCPoint

logger = structlog.get_logger(__name__)

TPR_COL = "true_positive_rate"
FPR_COL = "false_positive_rate"


def _ranked_labels(
    df: pd.DataFrame,
    prob_col: str,
    label_col: str,
    positive_label: Any = None,
) -> NDArray[np.bool_]:
    """Labels ordered by descending probability, missing labels dropped.

    Ties keep input row order; missing probabilities sort last.
    """
    probs = df[prob_col].to_numpy(dtype=np.float64, na_value=np.nan)
    order = np.argsort(-probs, kind="stable")
    labels = to_logical(df[label_col], positive_label).take(order)
    return labels.dropna().to_numpy(dtype=bool)


def _cumulative_rate(flags: NDArray[np.bool_], total: int) -> NDArray[np.float64]:
    """0 followed by the running share of ``flags`` among ``total``.

    With no flagged rows at all the rate is flat at 0 and a terminal 1
    is appended so the curve can still be traversed.
    """
    if total == 0:
        return np.append(np.zeros(len(flags) + 1), 1.0)
    return np.concatenate(([0.0], np.cumsum(flags) / total))


def build_roc(
    df: pd.DataFrame,
    prob_col: str,
    label_col: str,
    positive_label: Any = None,
    tpr_col: str = TPR_COL,
    fpr_col: str = FPR_COL,
) -> pd.DataFrame:
    """Build the ROC curve of one group.

    For n labelled rows the curve has n + 1 points starting at (0, 0).
    When one class is absent, its axis is flat at 0 with a synthetic
    terminal 1, and the other axis repeats its final value, giving
    n + 2 points.

    Args:
        df: One group's rows.
        prob_col: Predicted-probability column.
        label_col: Actual-label column (see ``to_logical``).
        positive_label: Explicit positive-class value, if any.
        tpr_col: Output name of the true-positive-rate column.
        fpr_col: Output name of the false-positive-rate column.

    Returns:
        DataFrame with columns ``tpr_col`` then ``fpr_col``.

    Raises:
        EmptyDataError: If no row has a non-missing label.
    """
    val = _ranked_labels(df, prob_col, label_col, positive_label)
    if len(val) == 0:
        msg = f"No non-missing values in label column '{label_col}'"
        raise EmptyDataError(msg)

    n_pos = int(val.sum())
    tpr = _cumulative_rate(val, n_pos)
    fpr = _cumulative_rate(~val, len(val) - n_pos)

    # A degenerate axis carries one extra point; hold the other at its end.
    if len(tpr) > len(fpr):
        fpr = np.append(fpr, fpr[-1])
    elif len(fpr) > len(tpr):
        tpr = np.append(tpr, tpr[-1])

    return pd.DataFrame({tpr_col: tpr, fpr_col: fpr})


def do_roc(
    data: pd.DataFrame | DataFrameGroupBy,
    prob_col: str,
    actual_col: str,
    group_by: str | Sequence[str] | None = None,
    positive_label: Any = None,
    max_workers: int = 1,
    suffix: str = DEFAULT_SUFFIX,
) -> pd.DataFrame:
    """Return ROC curve coordinates for every group.

    Args:
        data: Prediction table, optionally pre-grouped.
        prob_col: Predicted-probability column.
        actual_col: Actual-label column.
        group_by: Key column(s) when ``data`` is a plain DataFrame.
        positive_label: Explicit positive-class value, if any.
        max_workers: Thread pool size for per-group evaluation.
        suffix: Disambiguating suffix for output column names.

    Returns:
        Group key columns, then true_positive_rate and
        false_positive_rate (renamed if they clash with a key column).

    Raises:
        ColumnNotFoundError: If a referenced column is missing.
        GroupComputationError: If any group has no usable labels.
    """
    df, group_cols = resolve_grouping(data, group_by)
    require_columns(df, [prob_col, actual_col])

    tpr_col = avoid_conflict(group_cols, TPR_COL, suffix)
    fpr_col = avoid_conflict(group_cols, FPR_COL, suffix)

    def do_roc_each(sub: pd.DataFrame) -> pd.DataFrame:
        return build_roc(
            sub,
            prob_col,
            actual_col,
            positive_label=positive_label,
            tpr_col=tpr_col,
            fpr_col=fpr_col,
        )

    ret = apply_per_group(
        df, group_cols, do_roc_each,
        max_workers=max_workers, suffix=suffix, columns=[tpr_col, fpr_col],
    )
    logger.info("roc_computed", group_by=group_cols, n_points=len(ret))
    return ret


def as_points(curve: pd.DataFrame) -> list[ROCPoint]:
    """Convert a single curve from ``build_roc`` to ROCPoint records.

    Uses column positions (0 = TPR, 1 = FPR) so renamed columns work.
    """
    return [
        ROCPoint(true_positive_rate=float(tpr), false_positive_rate=float(fpr))
        for tpr, fpr in zip(curve.iloc[:, 0], curve.iloc[:, 1], strict=True)
    ]
