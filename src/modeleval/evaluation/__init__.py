"""Evaluation module — grouped ROC, binary and regression metrics."""
from __future__ import annotations

from modeleval.evaluation.binary import (
    compute_auc,
    evaluate_binary,
    evaluate_binary_each,
    validate_threshold,
)
from modeleval.evaluation.grouping import (
    apply_per_group,
    avoid_conflict,
    resolve_grouping,
)
from modeleval.evaluation.labels import to_logical
from modeleval.evaluation.models import ConfusionScore, RegressionScore, ROCPoint
from modeleval.evaluation.regression import (
    compute_regression_score,
    evaluate_regression,
    evaluate_regression_each,
)
from modeleval.evaluation.roc import as_points, build_roc, do_roc
from modeleval.evaluation.threshold_optimizer import (
    ConfusionMatrixOptimizer,
    ThresholdOptimizer,
)

__all__ = [
    "ConfusionMatrixOptimizer",
    "ConfusionScore",
    "ROCPoint",
    "RegressionScore",
    "ThresholdOptimizer",
    "apply_per_group",
    "as_points",
    "avoid_conflict",
    "build_roc",
    "compute_auc",
    "compute_regression_score",
    "do_roc",
    "evaluate_binary",
    "evaluate_binary_each",
    "evaluate_regression",
    "evaluate_regression_each",
    "resolve_grouping",
    "to_logical",
    "validate_threshold",
]
