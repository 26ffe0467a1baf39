"""modeleval roc — ROC curve coordinates per group."""
from __future__ import annotations

from pathlib import Path

import typer

from modeleval.cli.common import emit, fail, load_inputs, parse_positive_label
from modeleval.core.enums import OutputFormat
from modeleval.core.exceptions import ModelEvalError
from modeleval.evaluation.roc import do_roc

roc_app = typer.Typer(help="Compute ROC curve coordinates.")


@roc_app.callback(invoke_without_command=True)
def roc(
    ctx: typer.Context,  # noqa: ARG001
    input_path: Path = typer.Option(  # noqa: B008
        ..., "--input", "-i", help="Prediction table (.csv, .tsv, .json, .xlsx)"
    ),
    prob: str = typer.Option(..., "--prob", help="Predicted probability column"),  # noqa: B008
    actual: str = typer.Option(..., "--actual", help="Actual label column"),  # noqa: B008
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
    """Print true/false positive rates for each group's ROC curve."""
    df, config = load_inputs(input_path, config_path)
    label = (
        parse_positive_label(positive_label, df[actual])
        if positive_label is not None and actual in df.columns
        else config.positive_label
    )

    try:
        result = do_roc(
            df,
            prob,
            actual,
            group_by=group_by or None,
            positive_label=label,
            max_workers=config.max_workers,
            suffix=config.conflict_suffix,
        )
    except ModelEvalError as exc:
        raise fail(exc) from exc

    emit(result, fmt, title="ROC curve")
