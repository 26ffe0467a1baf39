"""Tests for the modeleval CLI."""
from __future__ import annotations

import json
import re
from pathlib import Path

import pandas as pd
import pytest
from typer.testing import CliRunner

from modeleval.cli import app
from modeleval.core.exceptions import GroupComputationError
from modeleval.evaluation.regression import evaluate_regression

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

runner = CliRunner()


@pytest.fixture
def binary_csv(tmp_path: Path, grouped_binary: pd.DataFrame) -> Path:
    path = tmp_path / "binary.csv"
    grouped_binary.assign(actual=grouped_binary["actual"].astype(int)).to_csv(
        path, index=False
    )
    return path


@pytest.fixture
def regression_csv(tmp_path: Path, regression_frame: pd.DataFrame) -> Path:
    path = tmp_path / "regression.csv"
    regression_frame.to_csv(path, index=False)
    return path


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    output = _ANSI_RE.sub("", result.output)
    for command in ("roc", "binary", "regression"):
        assert command in output


def test_binary_help() -> None:
    result = runner.invoke(app, ["binary", "--help"])
    assert result.exit_code == 0
    assert "--threshold" in _ANSI_RE.sub("", result.output)


class TestRocCommand:
    """Tests for `modeleval roc`."""

    def test_csv_output(self, binary_csv: Path) -> None:
        result = runner.invoke(app, [
            "roc", "--input", str(binary_csv), "--prob", "prob",
            "--actual", "actual", "--group-by", "fold", "--format", "csv",
        ])
        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().splitlines()
        assert lines[0] == "fold,true_positive_rate,false_positive_rate"
        assert len(lines) == 11

    def test_table_output(self, binary_csv: Path) -> None:
        result = runner.invoke(app, [
            "roc", "-i", str(binary_csv), "--prob", "prob", "--actual", "actual",
        ])
        assert result.exit_code == 0, result.output
        assert "ROC curve" in result.stdout

    def test_missing_column_exits_1(self, binary_csv: Path) -> None:
        result = runner.invoke(app, [
            "roc", "-i", str(binary_csv), "--prob", "score", "--actual", "actual",
        ])
        assert result.exit_code == 1
        assert "score" in result.output


class TestBinaryCommand:
    """Tests for `modeleval binary`."""

    def test_json_output(self, binary_csv: Path) -> None:
        result = runner.invoke(app, [
            "binary", "-i", str(binary_csv), "--prob", "prob", "--actual", "actual",
            "-g", "fold", "-f", "json",
        ])
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [r["fold"] for r in rows] == ["B", "A"]
        assert rows[0]["auc"] == pytest.approx(0.75)
        assert rows[1]["threshold"] == pytest.approx(0.8)

    def test_numeric_threshold(self, binary_csv: Path) -> None:
        result = runner.invoke(app, [
            "binary", "-i", str(binary_csv), "--prob", "prob", "--actual", "actual",
            "--threshold", "0.5", "-f", "json",
        ])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)[0]["threshold"] == 0.5

    def test_invalid_threshold_exits_1(self, binary_csv: Path) -> None:
        result = runner.invoke(app, [
            "binary", "-i", str(binary_csv), "--prob", "prob", "--actual", "actual",
            "--threshold", "best",
        ])
        assert result.exit_code == 1
        assert "Invalid threshold" in result.output

    def test_positive_label(self, tmp_path: Path) -> None:
        path = tmp_path / "labels.csv"
        path.write_text("prob,actual\n0.9,spam\n0.8,ham\n0.4,spam\n0.1,ham\n")
        result = runner.invoke(app, [
            "binary", "-i", str(path), "--prob", "prob", "--actual", "actual",
            "--positive-label", "spam", "-f", "json",
        ])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)[0]["auc"] == pytest.approx(0.75)

    def test_config_threshold(self, tmp_path: Path, binary_csv: Path) -> None:
        config = tmp_path / "modeleval.yaml"
        config.write_text("threshold: 0.5\nmax_workers: 2\n")
        result = runner.invoke(app, [
            "binary", "-i", str(binary_csv), "--prob", "prob", "--actual", "actual",
            "-g", "fold", "-c", str(config), "-f", "json",
        ])
        assert result.exit_code == 0, result.output
        assert [r["threshold"] for r in json.loads(result.stdout)] == [0.5, 0.5]


class TestRegressionCommand:
    """Tests for `modeleval regression`."""

    def test_csv_output(self, regression_csv: Path) -> None:
        result = runner.invoke(app, [
            "regression", "-i", str(regression_csv), "--pred", "pred",
            "--actual", "actual", "-g", "segment", "-f", "csv",
        ])
        assert result.exit_code == 0, result.output
        lines = result.stdout.strip().splitlines()
        assert lines[0].startswith("segment,r_squared,explained_variance")
        assert len(lines) == 3

    def test_missing_input_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, [
            "regression", "-i", str(tmp_path / "nope.csv"), "--pred", "pred",
            "--actual", "actual",
        ])
        assert result.exit_code != 0


def test_library_errors_after_cli_run(regression_csv: Path) -> None:
    """Logging set up by a finished CLI run must not break later library calls."""
    result = runner.invoke(app, [
        "regression", "-i", str(regression_csv), "--pred", "pred",
        "--actual", "actual", "-f", "csv",
    ])
    assert result.exit_code == 0, result.output
    df = pd.DataFrame({"pred": ["a", "b"], "actual": [1.0, 2.0]})
    with pytest.raises(GroupComputationError):
        evaluate_regression(df, "pred", "actual")
