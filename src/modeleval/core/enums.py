"""Core enumerations for modeleval."""
from enum import StrEnum


class ThresholdCriterion(StrEnum):
    """Metric maximized when the decision threshold is auto-selected."""

    F_SCORE = "f_score"
    ACCURACY_RATE = "accuracy_rate"
    PRECISION = "precision"
    RECALL = "recall"
    SPECIFICITY = "specificity"


class OutputFormat(StrEnum):
    """Rendering of result tables on the command line."""

    TABLE = "table"
    CSV = "csv"
    JSON = "json"
