"""
Evaluation subpackage.

Contains:
- confusion: confusion counts (TP/TN/FP/FN), structural validation, grid builder and formatter
- metrics: accuracy, misclassification rate, precision, recall, specificity and F1
  with micro/macro/weighted averaging, plus the classification report
- matrix: the ConfusionMatrix object tying store, metrics and normalization together
"""

from .confusion import (
    ConfusionCounts,
    validate_matrix,
    counts_for,
    all_counts,
    sum_counts,
    confusion_matrix,
    format_confusion_matrix,
)
from .metrics import (
    Average,
    Metric,
    ACCURACY,
    MISCLASSIFICATION_RATE,
    PRECISION,
    RECALL,
    SPECIFICITY,
    F1_SCORE,
    METRICS,
    get_metric,
    classification_report,
    report_to_frame,
)
from .matrix import ConfusionMatrix

__all__ = [
    # confusion
    "ConfusionCounts",
    "validate_matrix",
    "counts_for",
    "all_counts",
    "sum_counts",
    "confusion_matrix",
    "format_confusion_matrix",
    # metrics
    "Average",
    "Metric",
    "ACCURACY",
    "MISCLASSIFICATION_RATE",
    "PRECISION",
    "RECALL",
    "SPECIFICITY",
    "F1_SCORE",
    "METRICS",
    "get_metric",
    "classification_report",
    "report_to_frame",
    # matrix
    "ConfusionMatrix",
]
