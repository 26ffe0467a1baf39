"""Shared pytest fixtures for modeleval tests."""
from __future__ import annotations

import os
from collections.abc import Iterator

# Prevent Rich/Typer from emitting ANSI escape codes in CLI output.
# Without this, help text on Linux CI contains escape sequences that
# break plain-text substring assertions.
os.environ["NO_COLOR"] = "1"

import pandas as pd
import pytest
import structlog


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo logging configuration left behind by in-process CLI runs."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()


@pytest.fixture
def ranked_binary() -> pd.DataFrame:
    """Four rows already sorted by descending probability.

    Expected ROC: FPR = [0, 0, 0.5, 0.5, 1], TPR = [0, 0.5, 0.5, 1, 1],
    AUC = 0.75.
    """
    return pd.DataFrame(
        {
            "prob": [0.9, 0.8, 0.4, 0.1],
            "actual": [True, False, True, False],
        }
    )


@pytest.fixture
def grouped_binary() -> pd.DataFrame:
    """Two model folds with interleaved rows: B is seen first."""
    return pd.DataFrame(
        {
            "fold": ["B", "A", "B", "A", "B", "A", "B", "A"],
            "prob": [0.9, 0.9, 0.8, 0.8, 0.4, 0.4, 0.1, 0.1],
            "actual": [True, True, False, True, True, False, False, False],
        }
    )


@pytest.fixture
def regression_frame() -> pd.DataFrame:
    """Two segments with known regression statistics."""
    return pd.DataFrame(
        {
            "segment": ["x", "x", "x", "y", "y", "y"],
            "pred": [1.0, 2.0, 3.0, 5.0, 5.0, 5.0],
            "actual": [1.0, 2.0, 4.0, 4.0, 5.0, 6.0],
        }
    )
