"""modeleval binary — AUC and confusion-matrix scores per group."""
from __future__ import annotations

from pathlib import Path

import structlog
import typer

from modeleval.cli.common import (
    emit,
    fail,
    load_inputs,
    parse_positive_label,
    parse_threshold,
)
from modeleval.core.enums import OutputFormat
from modeleval.core.exceptions import ModelEvalError
from modeleval.evaluation.binary import evaluate_binary

logger = structlog.get_logger(__name__)

binary_app = typer.Typer(help="Evaluate a binary classifier.")


@binary_app.callback(invoke_without_command=True)
def binary(
    ctx: typer.Context,  # noqa: ARG001
    input_path: Path = typer.Option(  # noqa: B008
        ..., "--input", "-i", help="Prediction table (.csv, .tsv, .json, .xlsx)"
    ),
    prob: str = typer.Option(..., "--prob", help="Predicted probability column"),  # noqa: B008
    actual: str = typer.Option(..., "--actual", help="Actual label column"),  # noqa: B008
    threshold: str | None = typer.Option(  # noqa: B008
        None, "--threshold", "-t",
        help="Decision threshold in [0, 1] or metric to maximize (e.g. f_score)",
    ),
    group_by: list[str] | None = typer.Option(  # noqa: B008
        None, "--group-by", "-g", help="Group key column (repeatable)"
    ),
    positive_label: str | None = typer.Option(  # noqa: B008
        None, "--positive-label", help="Label value of the positive class"
    ),
    config_path: Path | None = typer.Option(  # noqa: B008
        None, "--config", "-c", help="YAML evaluation config"
    ),
    fmt: OutputFormat = typer.Option(  # noqa: B008
        OutputFormat.TABLE, "--format", "-f", help="Output format"
    ),
) -> None:
    """Print AUC and thresholded scores for each group."""
    df, config = load_inputs(input_path, config_path)
    label = (
        parse_positive_label(positive_label, df[actual])
        if positive_label is not None and actual in df.columns
        else config.positive_label
    )
    chosen = parse_threshold(threshold) if threshold is not None else config.threshold

    try:
        result = evaluate_binary(
            df,
            prob,
            actual,
            threshold=chosen,
            group_by=group_by or None,
            positive_label=label,
            max_workers=config.max_workers,
            suffix=config.conflict_suffix,
        )
    except ModelEvalError as exc:
        raise fail(exc) from exc

    logger.debug("binary_cmd_complete", n_rows=len(result))
    emit(result, fmt, title="Binary classification")
