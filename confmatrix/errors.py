# confmatrix/errors.py
from __future__ import annotations


class ConfusionMatrixError(ValueError):
    """Base class for every failure raised by the confusion matrix model."""


class InvalidMatrixError(ConfusionMatrixError):
    """Labels/cells break a structural invariant (size, squareness, duplicates)."""


class InvalidLabelError(ConfusionMatrixError):
    """An empty or missing label was passed where one is required."""


class UnknownLabelError(ConfusionMatrixError):
    """The label is not part of the current label set."""

    def __init__(self, label) -> None:
        super().__init__(f"The label {label!r} does not exist in the matrix.")
        self.label = label


class InvalidRangeError(ConfusionMatrixError):
    """Normalization target range (or rounding precision) is not usable."""


class NormalizationError(ConfusionMatrixError):
    """The matrix value range could not be determined for rescaling."""
