"""Evaluation data models for modeleval.

Pydantic models for ROC curve points, confusion-matrix scores at a
decision threshold, and regression error statistics. Each evaluator
flattens these into one row of its per-group result table, so field
order here is the column order of the output.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ROCPoint(BaseModel):
    """A single point on an ROC curve.

    Attributes:
        true_positive_rate: Cumulative fraction of positives ranked so far.
        false_positive_rate: Cumulative fraction of negatives ranked so far.
    """

    true_positive_rate: float = Field(ge=0.0, le=1.0)
    false_positive_rate: float = Field(ge=0.0, le=1.0)


class ConfusionScore(BaseModel):
    """Binary-classification metrics at one decision threshold.

    Attributes:
        f_score: Harmonic mean of precision and recall.
        accuracy_rate: Fraction of rows classified correctly.
        misclassification_rate: Fraction of rows classified incorrectly.
        precision: Positive predictive value.
        recall: True positive rate (sensitivity).
        specificity: True negative rate.
        true_positive: Count of positives predicted positive.
        false_positive: Count of negatives predicted positive.
        true_negative: Count of negatives predicted negative.
        false_negative: Count of positives predicted negative.
        threshold: Decision threshold the counts were taken at (NaN when
            the predicted labels were supplied directly).
    """

    f_score: float
    accuracy_rate: float
    misclassification_rate: float
    precision: float
    recall: float
    specificity: float
    true_positive: int
    false_positive: int
    true_negative: int
    false_negative: int
    threshold: float = float("nan")


class RegressionScore(BaseModel):
    """Continuous-regression error statistics for one group.

    Any field may be non-finite: constant actual values make the
    variance-based ratios undefined, and MAPE is NaN when every actual
    value is zero.
    """

    r_squared: float
    explained_variance: float
    mean_square_error: float
    root_mean_square_error: float
    mean_absolute_error: float
    mean_absolute_percentage_error: float
