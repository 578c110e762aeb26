"""
Confusion matrix model for classifier evaluation.

Subpackages:
- evaluation: ConfusionMatrix, confusion counts, metrics and reports
- data: min-max normalization and its undo history
- utils: logging and YAML configuration
"""

from .errors import (
    ConfusionMatrixError,
    InvalidMatrixError,
    InvalidLabelError,
    UnknownLabelError,
    InvalidRangeError,
    NormalizationError,
)
from .evaluation import (
    Average,
    ConfusionCounts,
    ConfusionMatrix,
    classification_report,
    report_to_frame,
)
from .utils import EvaluationSettings, configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    "ConfusionMatrixError",
    "InvalidMatrixError",
    "InvalidLabelError",
    "UnknownLabelError",
    "InvalidRangeError",
    "NormalizationError",
    "Average",
    "ConfusionCounts",
    "ConfusionMatrix",
    "classification_report",
    "report_to_frame",
    "EvaluationSettings",
    "configure_logging",
    "get_logger",
]
