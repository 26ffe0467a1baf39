"""Shared helpers for CLI commands: config, parsing and output."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
import typer
from pandas.api.types import is_bool_dtype, is_float_dtype, is_integer_dtype
from rich.console import Console
from rich.table import Table

from modeleval.config import EvaluationConfig, load_config
from modeleval.core.enums import OutputFormat
from modeleval.core.exceptions import ModelEvalError
from modeleval.io.readers import read_table


def load_inputs(
    input_path: Path, config_path: Path | None
) -> tuple[pd.DataFrame, EvaluationConfig]:
    """Read the prediction table and the (optional) config file.

    Raises:
        typer.BadParameter: If either file cannot be read.
    """
    try:
        config = load_config(config_path) if config_path else EvaluationConfig()
        df = read_table(input_path)
    except (FileNotFoundError, ModelEvalError) as exc:
        raise typer.BadParameter(str(exc)) from exc
    return df, config


def parse_threshold(raw: str) -> float | str:
    """Numeric strings become floats; anything else is a criterion name."""
    try:
        return float(raw)
    except ValueError:
        return raw


def parse_positive_label(raw: str | None, column: pd.Series) -> Any:
    """Convert a command-line label value to the label column's type.

    Args:
        raw: Value given on the command line, or None.
        column: The label column it will be compared against.

    Returns:
        The value typed like ``column``; None when ``raw`` is None.

    Raises:
        typer.BadParameter: If ``raw`` cannot be converted.
    """
    if raw is None:
        return None
    try:
        if is_bool_dtype(column.dtype):
            lowered = raw.strip().lower()
            if lowered not in {"true", "false"}:
                raise ValueError(raw)
            return lowered == "true"
        if is_integer_dtype(column.dtype):
            return int(raw)
        if is_float_dtype(column.dtype):
            return float(raw)
    except ValueError as exc:
        raise typer.BadParameter(
            f"--positive-label {raw!r} does not match column type {column.dtype}"
        ) from exc
    return raw


def emit(df: pd.DataFrame, fmt: OutputFormat, title: str) -> None:
    """Print a result table to stdout in the requested format."""
    if fmt == OutputFormat.CSV:
        typer.echo(df.to_csv(index=False), nl=False)
    elif fmt == OutputFormat.JSON:
        typer.echo(df.to_json(orient="records", indent=2))
    else:
        table = Table(title=title)
        for col in df.columns:
            table.add_column(str(col))
        for row in df.itertuples(index=False):
            table.add_row(*(_format_cell(v) for v in row))
        Console().print(table)


def _format_cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.4f}"
    return str(value)


def fail(exc: ModelEvalError) -> typer.Exit:
    """Report a domain error on stderr and return the exit to raise."""
    typer.echo(f"Error: {exc}", err=True)
    return typer.Exit(code=1)
