"""modeleval regression — regression error statistics per group."""
from __future__ import annotations

from pathlib import Path

import typer

from modeleval.cli.common import emit, fail, load_inputs
from modeleval.core.enums import OutputFormat
from modeleval.core.exceptions import ModelEvalError
from modeleval.evaluation.regression import evaluate_regression

regression_app = typer.Typer(help="Evaluate a regression model.")


@regression_app.callback(invoke_without_command=True)
def regression(
    ctx: typer.Context,  # noqa: ARG001
    input_path: Path = typer.Option(  # noqa: B008
        ..., "--input", "-i", help="Prediction table (.csv, .tsv, .json, .xlsx)"
    ),
    pred: str = typer.Option(..., "--pred", help="Predicted value column"),  # noqa: B008
    actual: str = typer.Option(..., "--actual", help="Actual value column"),  # noqa: B008
    group_by: list[str] | None = typer.Option(  # noqa: B008
        None, "--group-by", "-g", help="Group key column (repeatable)"
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="YAML evaluation config"
    ),
    fmt: OutputFormat = typer.Option(  # noqa: B008
        OutputFormat.TABLE, "--format", "-f", help="Output format"
    ),
) -> None:
    """Print R squared, explained variance and error terms for each group."""
    df, config = load_inputs(input_path, config_path)

    try:
        result = evaluate_regression(
            df,
            pred,
            actual,
            group_by=group_by or None,
            max_workers=config.max_workers,
            suffix=config.conflict_suffix,
        )
    except ModelEvalError as exc:
        raise fail(exc) from exc

    emit(result, fmt, title="Regression")
