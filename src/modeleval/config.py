"""Configuration loading for modeleval.

Loads evaluation defaults (threshold, label mapping, parallelism) from
a YAML file so command-line runs are reproducible.
"""
from __future__ import annotations

from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, Field

from modeleval.core.enums import ThresholdCriterion
from modeleval.evaluation.grouping import DEFAULT_SUFFIX

logger = structlog.get_logger(__name__)


class EvaluationConfig(BaseModel):
    """Evaluation defaults.

    Attributes:
        threshold: Fixed decision threshold in [0, 1] or the name of the
            metric to maximize when choosing one.
        positive_label: Label value denoting the positive class. None
            keeps the default boolean coercion.
        max_workers: Thread pool size for per-group evaluation.
        conflict_suffix: Suffix appended to generated column names that
            clash with existing ones.
    """

    threshold: float | str = ThresholdCriterion.F_SCORE.value
    positive_label: bool | int | str | None = None
    max_workers: int = Field(default=1, ge=1)
    conflict_suffix: str = Field(default=DEFAULT_SUFFIX, min_length=1)


def load_config(path: Path) -> EvaluationConfig:
    """Load evaluation configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        EvaluationConfig; an empty file yields the defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If a value is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    config = EvaluationConfig(**data)
    logger.info("load_config", path=str(path))
    return config
