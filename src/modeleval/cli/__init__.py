"""modeleval CLI — Typer application."""
from __future__ import annotations

import logging
import sys

import structlog
import typer

from modeleval.cli.binary_cmd import binary_app
from modeleval.cli.regression_cmd import regression_app
from modeleval.cli.roc_cmd import roc_app

app = typer.Typer(
    name="modeleval",
    help="modeleval: grouped ROC, binary and regression metrics for prediction tables.",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(  # noqa: B008
        False, "--verbose", "-v", help="Log progress to stderr"
    ),
) -> None:
    """modeleval: grouped ROC, binary and regression metrics.

    Each command reads a prediction table and prints one result table.
    """
    # stdout carries the result table; keep log lines on stderr.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.INFO if verbose else logging.WARNING
        ),
        # Look sys.stderr up per logger; the stream may be swapped between runs.
        logger_factory=lambda *_: structlog.PrintLogger(sys.stderr),
    )


app.add_typer(roc_app, name="roc")
app.add_typer(binary_app, name="binary")
app.add_typer(regression_app, name="regression")
