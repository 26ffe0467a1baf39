"""Continuous-regression evaluation per group."""
from __future__ import annotations

from collections.abc import Sequence

import numpy as np
import pandas as pd
import structlog
from pandas.core.groupby import DataFrameGroupBy

from modeleval.evaluation.grouping import (
    DEFAULT_SUFFIX,
    apply_per_group,
    require_columns,
    resolve_grouping,
)
from modeleval.evaluation.models import RegressionScore

logger = structlog.get_logger(__name__)


def compute_regression_score(
    pred: pd.Series,
    actual: pd.Series,
) -> RegressionScore:
    """Compute regression error statistics, ignoring missing values.

    Each statistic is computed independently: a NaN or infinite value
    in one never short-circuits another. R squared and explained
    variance are non-finite when ``actual`` is constant; MAPE only uses
    rows where ``actual`` is non-zero and is NaN when there are none.

    Args:
        pred: Predicted values.
        actual: Actual values, parallel to ``pred``.

    Returns:
        RegressionScore for the pair.
    """
    fitted_val = pd.Series(pred.to_numpy(dtype=np.float64, na_value=np.nan))
    actual_val = pd.Series(actual.to_numpy(dtype=np.float64, na_value=np.nan))

    diff = actual_val - fitted_val
    abs_diff = diff.abs()
    diff_sq = diff**2

    with np.errstate(divide="ignore", invalid="ignore"):
        # zero actual values would make the ratio infinite
        not_zero = actual_val != 0
        mean_absolute_percentage_error = (
            100 * (diff[not_zero] / actual_val[not_zero]).abs().mean()
            if not_zero.any()
            else np.nan
        )

        mean_square_error = diff_sq.mean()
        root_mean_square_error = np.sqrt(mean_square_error)
        mean_absolute_error = abs_diff.mean()

        total_sq = ((actual_val - actual_val.mean()) ** 2).sum()
        r_squared = 1 - np.float64(diff_sq.sum()) / np.float64(total_sq)
        explained_variance = 1 - np.float64(diff.var()) / np.float64(actual_val.var())

    return RegressionScore(
        r_squared=float(r_squared),
        explained_variance=float(explained_variance),
        mean_square_error=float(mean_square_error),
        root_mean_square_error=float(root_mean_square_error),
        mean_absolute_error=float(mean_absolute_error),
        mean_absolute_percentage_error=float(mean_absolute_percentage_error),
    )


def evaluate_regression_each(
    df: pd.DataFrame,
    pred_col: str,
    actual_col: str,
) -> pd.DataFrame:
    """Evaluate one group as a single-row table."""
    score = compute_regression_score(df[pred_col], df[actual_col])
    return pd.DataFrame([score.model_dump()])


def evaluate_regression(
    data: pd.DataFrame | DataFrameGroupBy,
    pred_col: str,
    actual_col: str,
    group_by: str | Sequence[str] | None = None,
    max_workers: int = 1,
    suffix: str = DEFAULT_SUFFIX,
) -> pd.DataFrame:
    """Calculate continuous regression evaluation for every group.

    Args:
        data: Prediction table, optionally pre-grouped.
        pred_col: Predicted-value column.
        actual_col: Actual-value column.
        group_by: Key column(s) when ``data`` is a plain DataFrame.
        max_workers: Thread pool size for per-group evaluation.
        suffix: Disambiguating suffix for output column names.

    Returns:
        Group key columns, then r_squared, explained_variance,
        mean_square_error, root_mean_square_error, mean_absolute_error
        and mean_absolute_percentage_error; one row per group.

    Raises:
        ColumnNotFoundError: If a referenced column is missing.
        GroupComputationError: If any group fails (for example a
            non-numeric column).
    """
    df, group_cols = resolve_grouping(data, group_by)
    require_columns(df, [pred_col, actual_col])

    def evaluate_regression_each_group(sub: pd.DataFrame) -> pd.DataFrame:
        return evaluate_regression_each(sub, pred_col, actual_col)

    ret = apply_per_group(
        df, group_cols, evaluate_regression_each_group,
        max_workers=max_workers, suffix=suffix,
        columns=list(RegressionScore.model_fields),
    )
    logger.info(
        "regression_evaluation_complete", group_by=group_cols, n_rows=len(ret)
    )
    return ret
