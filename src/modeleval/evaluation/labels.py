"""Coerce actual-label columns to nullable booleans.

Binary labels arrive as booleans, numeric 0/1, two-level categoricals,
or TRUE/FALSE strings. Every consumer of a label column goes through
``to_logical`` so the mapping is identical for ROC curves and
thresholded scores.

Caller contract for categoricals: without ``positive_label``, the FIRST
category level maps to False and the SECOND to True. A categorical whose
levels are ordered the other way round silently inverts the results;
pass ``positive_label`` to make the mapping explicit.
"""
from __future__ import annotations

import numbers
from typing import Any

import numpy as np
import pandas as pd
import structlog
from pandas.api.types import (
    is_bool_dtype,
    is_numeric_dtype,
)

from modeleval.core.exceptions import InvalidLabelError

logger = structlog.get_logger(__name__)

_TRUE_STRINGS = frozenset({"TRUE", "True", "true", "T"})
_FALSE_STRINGS = frozenset({"FALSE", "False", "false", "F"})


def to_logical(labels: pd.Series, positive_label: Any = None) -> pd.Series:
    """Map a label column to a pandas ``boolean`` Series.

    Missing values stay missing (``pd.NA``).

    Args:
        labels: Actual-label column.
        positive_label: Value that denotes the positive class. When
            given, ``labels == positive_label`` is the mapping.

    Returns:
        Series of dtype ``boolean`` aligned with ``labels``.

    Raises:
        InvalidLabelError: If the column has more than two category
            levels or holds values that are not recognizably boolean.
    """
    missing = labels.isna()

    if positive_label is not None:
        mapped = labels == positive_label
        if not missing.all() and not mapped.any():
            # e.g. YAML reads an unquoted `yes` as True
            logger.warning(
                "positive_label_not_found",
                positive_label=positive_label,
                n_rows=len(labels),
            )
        return mapped.astype("boolean").mask(missing, pd.NA)

    if isinstance(labels.dtype, pd.CategoricalDtype):
        n_levels = len(labels.cat.categories)
        if n_levels > 2:
            msg = (
                f"Categorical label column has {n_levels} levels; "
                "binary evaluation needs at most two (or pass positive_label)"
            )
            raise InvalidLabelError(msg)
        # Level 0 is the negative class, level 1 the positive class.
        codes = pd.Series(labels.cat.codes, index=labels.index)
        return (codes == 1).astype("boolean").mask(missing, pd.NA)

    if is_bool_dtype(labels.dtype):
        return labels.astype("boolean")

    if is_numeric_dtype(labels.dtype):
        return (labels != 0).astype("boolean").mask(missing, pd.NA)

    return labels.map(_coerce_scalar, na_action="ignore").astype("boolean")


def _coerce_scalar(value: Any) -> bool:
    """Coerce one non-missing object-column label to bool."""
    if isinstance(value, bool | np.bool_):
        return bool(value)
    if isinstance(value, numbers.Real):
        return bool(value != 0)
    if isinstance(value, str):
        if value in _TRUE_STRINGS:
            return True
        if value in _FALSE_STRINGS:
            return False
    msg = (
        f"Cannot interpret label {value!r} as boolean; "
        "pass positive_label to name the positive class"
    )
    raise InvalidLabelError(msg)
