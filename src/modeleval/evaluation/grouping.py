"""Grouped execution: apply a computation to each group and flatten.

A per-group function receives one group's rows (without the key
columns) and returns a result table. The results are concatenated in
group-discovery order and prefixed with that group's key values, so
every evaluator in this package produces the same shape of output
regardless of how the caller partitioned the input.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import numpy as np
import pandas as pd
import structlog
from numpy.typing import NDArray
from pandas.core.groupby import DataFrameGroupBy

from modeleval.core.exceptions import ColumnNotFoundError, GroupComputationError

logger = structlog.get_logger(__name__)

DEFAULT_SUFFIX = "_new"

GroupFunction = Callable[[pd.DataFrame], pd.DataFrame]


def avoid_conflict(
    existing: Iterable[Any],
    name: str,
    suffix: str = DEFAULT_SUFFIX,
) -> str:
    """Return ``name``, suffixed until it does not clash with ``existing``.

    Args:
        existing: Names already in use (group keys, input columns).
        name: Preferred column name.
        suffix: Appended repeatedly until the name is free.

    Returns:
        A column name not present in ``existing``.
    """
    taken = {str(col) for col in existing}
    candidate = name
    while candidate in taken:
        candidate = f"{candidate}{suffix}"
    return candidate


def resolve_grouping(
    data: pd.DataFrame | DataFrameGroupBy,
    group_by: str | Sequence[str] | None = None,
) -> tuple[pd.DataFrame, list[str]]:
    """Split caller input into the underlying table and its group key.

    A ``DataFrameGroupBy`` carries its own key; a plain DataFrame is
    grouped by ``group_by`` (None or empty = one group).

    Args:
        data: Plain or pre-grouped table.
        group_by: Key column name(s) for a plain table.

    Returns:
        Tuple of (table, group key column names).

    Raises:
        ValueError: If both a grouped table and ``group_by`` are given,
            or the grouping is not by column names.
    """
    if isinstance(data, DataFrameGroupBy):
        if group_by:
            msg = "group_by must not be given for an already grouped table"
            raise ValueError(msg)
        keys = data.keys
        if isinstance(keys, str):
            keys = [keys]
        if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
            msg = "Grouped tables must be grouped by column names"
            raise ValueError(msg)
        return data.obj, list(keys)

    if group_by is None:
        return data, []
    if isinstance(group_by, str):
        return data, [group_by]
    return data, list(group_by)


def require_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    """Raise ColumnNotFoundError for the first column missing from ``df``."""
    available = [str(c) for c in df.columns]
    for col in columns:
        if col not in df.columns:
            raise ColumnNotFoundError(col, available)


def _partition(df: pd.DataFrame, group_cols: list[str]) -> list[NDArray[np.intp]]:
    """Row positions of each group, in order of first appearance."""
    if not group_cols:
        return [np.arange(len(df))]

    codes = (
        df.groupby(group_cols, sort=False, dropna=False, observed=True)
        .ngroup()
        .to_numpy()
    )
    if len(codes) == 0:
        return []
    counts = np.bincount(codes)
    order = np.argsort(codes, kind="stable")
    return np.split(order, np.cumsum(counts)[:-1])


def apply_per_group(
    df: pd.DataFrame,
    group_cols: Sequence[str],
    fn: GroupFunction,
    max_workers: int = 1,
    suffix: str = DEFAULT_SUFFIX,
    columns: Sequence[str] = (),
) -> pd.DataFrame:
    """Apply ``fn`` to each group of ``df`` and concatenate the results.

    Groups are discovered in first-seen order (missing key values form
    their own group). ``fn`` receives the group's rows with the key
    columns removed and a fresh 0-based index. Result columns that clash
    with a key column are renamed by appending ``suffix``.

    Args:
        df: Input table. Never modified.
        group_cols: Group key columns; empty means the whole table is
            one group.
        fn: Per-group computation returning a DataFrame.
        max_workers: Run groups on a thread pool when greater than 1.
            Output order is unaffected.
        suffix: Disambiguating suffix for generated column names.
        columns: Result columns of ``fn``. Used as the output schema when
            there are no groups, so an empty input still yields the key
            columns followed by the metric columns.

    Returns:
        Key columns followed by the per-group result columns, one block
        of rows per group.

    Raises:
        ColumnNotFoundError: If a key column is missing.
        GroupComputationError: If ``fn`` fails for any group. No partial
            result is returned.
    """
    group_cols = list(group_cols)
    require_columns(df, group_cols)

    partitions = _partition(df, group_cols)
    keys = (
        df[group_cols].take([rows[0] for rows in partitions]).reset_index(drop=True)
        if group_cols
        else pd.DataFrame(index=range(len(partitions)))
    )

    def run(index: int) -> pd.DataFrame:
        group = dict(zip(group_cols, keys.iloc[index].tolist(), strict=True))
        sub = (
            df.take(partitions[index])
            .drop(columns=group_cols)
            .reset_index(drop=True)
        )
        try:
            result = fn(sub)
        except Exception as exc:  # noqa: BLE001
            logger.error("group_failed", group=group, error=str(exc))
            msg = f"Computation failed for group {group}: {exc}"
            raise GroupComputationError(msg, group=group) from exc
        logger.debug("group_evaluated", group=group, n_rows=len(sub))
        return result

    if max_workers > 1 and len(partitions) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(run, range(len(partitions))))
    else:
        results = [run(i) for i in range(len(partitions))]

    if not results:
        return _empty_result(keys, columns, suffix)
    return _flatten(keys, results, [*group_cols, *map(str, df.columns)], suffix)


def _empty_result(
    keys: pd.DataFrame, columns: Sequence[str], suffix: str
) -> pd.DataFrame:
    """Zero-row output: key columns then ``columns``, clashes renamed."""
    group_cols = list(keys.columns)
    taken = [*group_cols, *columns]
    schema = [
        avoid_conflict(taken, c, suffix) if c in group_cols else c for c in columns
    ]
    return keys.reindex(columns=[*group_cols, *schema])


def _flatten(
    keys: pd.DataFrame,
    results: list[pd.DataFrame],
    existing: list[str],
    suffix: str,
) -> pd.DataFrame:
    """Stack per-group results and re-attach their key values.

    Each result is tagged with its group position under a temporary
    column, stacked, and the tag is then used to look up the key row.
    """
    group_cols = list(keys.columns)
    renamed: list[pd.DataFrame] = []
    for result in results:
        clashes = [c for c in result.columns if c in group_cols]
        if clashes:
            taken = [*group_cols, *map(str, result.columns)]
            result = result.rename(
                columns={c: avoid_conflict(taken, c, suffix) for c in clashes}
            )
        renamed.append(result)

    result_cols = [str(c) for r in renamed for c in r.columns]
    group_id_col = avoid_conflict([*existing, *result_cols], "tmp", suffix)

    staged = pd.concat(
        [
            r.reset_index(drop=True).assign(**{group_id_col: i})
            for i, r in enumerate(renamed)
        ],
        ignore_index=True,
    )
    key_rows = keys.take(staged[group_id_col].to_numpy()).reset_index(drop=True)
    return pd.concat(
        [key_rows, staged.drop(columns=group_id_col)],
        axis=1,
    )
