"""
Data subpackage: reversible min-max rescaling of confusion matrix cells.

- normalization.py -> ValueRange, MatrixSnapshot, NormalizationHistory, min_max_rescale
"""

from .normalization import (
    ValueRange,
    MatrixSnapshot,
    NormalizationHistory,
    min_max_rescale,
    validate_target_range,
)

__all__ = [
    "ValueRange",
    "MatrixSnapshot",
    "NormalizationHistory",
    "min_max_rescale",
    "validate_target_range",
]
