# confmatrix/evaluation/matrix.py
from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Dict, Hashable, List, Optional, Sequence, Union

import numpy as np

from ..data.normalization import (
    MatrixSnapshot,
    NormalizationHistory,
    ValueRange,
    min_max_rescale,
    validate_target_range,
)
from ..errors import InvalidMatrixError, NormalizationError
from ..utils.logging import get_logger
from .confusion import (
    ConfusionCounts,
    Number,
    all_counts,
    as_scalar,
    column_sums,
    confusion_matrix,
    counts_for,
    grid_sum,
    label_index,
    sum_counts,
    validate_matrix,
)
from .metrics import (
    ACCURACY,
    F1_SCORE,
    MISCLASSIFICATION_RATE,
    PRECISION,
    RECALL,
    SPECIFICITY,
    Average,
    Metric,
    get_metric,
)

if TYPE_CHECKING:
    from ..utils.config import EvaluationSettings


logger = get_logger("confmatrix.matrix")

MatrixLike = Union["ConfusionMatrix", MatrixSnapshot]


class ConfusionMatrix:
    """
    Labeled square confusion matrix with derived classifier metrics.

    Convention:
        rows = true classes
        cols = predicted classes

    Labels and cells are always private deep copies of what the caller
    passed in. Any mutation that would break the structural invariants
    (label/row count, squareness, unique labels) raises InvalidMatrixError
    and leaves the previous state in place.

    Example:
        >>> cm = ConfusionMatrix(["Happy", "Sad"], [[1, 2], [3, 4]])
        >>> cm.accuracy(label="Happy")
        0.5
    """

    def __init__(
        self,
        labels: Optional[Sequence[str]] = None,
        matrix: Optional[Sequence[Sequence[Number]]] = None,
    ) -> None:
        self.labels: List[str] = _copy_labels(labels) if labels is not None else []
        self.matrix: List[List[Number]] = _copy_grid(matrix) if matrix is not None else []
        self._normalizations = NormalizationHistory()
        self.validate()

    @classmethod
    def from_confusion_matrix(cls, other: MatrixLike) -> "ConfusionMatrix":
        """Copy labels and cells of another matrix (its history is not carried)."""
        return cls(other.labels, other.matrix)

    @classmethod
    def from_predictions(
        cls,
        y_true: Sequence[Hashable],
        y_pred: Sequence[Hashable],
        labels: Optional[Sequence[Hashable]] = None,
    ) -> "ConfusionMatrix":
        """Count (true, predicted) pairs; labels become strings."""
        cm, labels_used = confusion_matrix(y_true, y_pred, labels=labels)
        return cls([str(l) for l in labels_used], cm.tolist())

    def __repr__(self) -> str:
        return f"ConfusionMatrix(labels={self.labels!r}, matrix={self.matrix!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfusionMatrix):
            return NotImplemented
        return self.labels == other.labels and self.matrix == other.matrix

    __hash__ = None  # mutable

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def validate(self) -> None:
        validate_matrix(self.labels, self.matrix)

    def set_labels(self, labels: Sequence[str]) -> None:
        previous = self.labels
        self.labels = _copy_labels(labels)
        try:
            self.validate()
        except Exception:
            logger.debug(f"Rejected labels {self.labels!r}; keeping {previous!r}")
            self.labels = previous
            raise

    def set_matrix(self, matrix: Sequence[Sequence[Number]]) -> None:
        previous = self.matrix
        self.matrix = _copy_grid(matrix)
        try:
            self.validate()
        except Exception:
            logger.debug(f"Rejected matrix with {len(self.matrix)} rows; keeping previous grid")
            self.matrix = previous
            raise

    def replace_with(self, other: MatrixLike) -> None:
        """Deep-copy labels and cells of `other` into this matrix."""
        previous_labels, previous_matrix = self.labels, self.matrix
        self.labels = _copy_labels(other.labels)
        self.matrix = _copy_grid(other.matrix)
        try:
            self.validate()
        except Exception:
            logger.debug("Rejected replacement; keeping previous labels and grid")
            self.labels, self.matrix = previous_labels, previous_matrix
            raise

    def snapshot(self) -> MatrixSnapshot:
        return MatrixSnapshot.capture(self.labels, self.matrix)

    def min_and_max(self) -> Optional[ValueRange]:
        """
        Smallest and largest cell, or None when there is no data.

        A matrix whose first cell is 0 also yields None.
        """
        if not self.matrix or not self.matrix[0]:
            return None
        if not self.matrix[0][0]:
            return None
        cells = [as_scalar(v) for row in self.matrix for v in row]
        return ValueRange(min=min(cells), max=max(cells))

    def total_cell_sum(self) -> Number:
        return grid_sum(self.matrix)

    def label_prediction_sum(self) -> List[Number]:
        """Column sums: how many samples were predicted as each label."""
        return column_sums(self.matrix)

    def total_predictions(self, label: Optional[str] = None) -> Number:
        """
        Samples predicted as `label`, or as any label when `label` is omitted.

        An empty-string label counts as omitted and returns the grand total
        rather than raising InvalidLabelError.
        """
        sums = self.label_prediction_sum()
        if label:
            return sums[label_index(self.labels, label)]
        return sum(sums)

    # ------------------------------------------------------------------
    # Confusion counts
    # ------------------------------------------------------------------

    def get_confusion_matrix_classes(self, label: str) -> ConfusionCounts:
        self.validate()
        return counts_for(self.labels, self.matrix, label)

    def get_all_matrix_classes(self) -> Dict[str, ConfusionCounts]:
        self.validate()
        return all_counts(self.labels, self.matrix)

    def get_sum_confusion_matrix_classes(self) -> ConfusionCounts:
        self.validate()
        return sum_counts(self.labels, self.matrix)

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def metric(
        self,
        name: Union[str, Metric],
        label: Optional[str] = None,
        average: Optional[Average] = None,
    ) -> float:
        return get_metric(name)(self, label=label, average=average)

    def accuracy(self, label: Optional[str] = None, average: Average = Average.WEIGHTED) -> float:
        return ACCURACY(self, label=label, average=average)

    def misclassification_rate(self, label: Optional[str] = None, average: Average = Average.WEIGHTED) -> float:
        return MISCLASSIFICATION_RATE(self, label=label, average=average)

    def precision(self, label: Optional[str] = None, average: Average = Average.WEIGHTED) -> float:
        return PRECISION(self, label=label, average=average)

    def recall(self, label: Optional[str] = None, average: Average = Average.WEIGHTED) -> float:
        return RECALL(self, label=label, average=average)

    def specificity(self, label: Optional[str] = None, average: Average = Average.WEIGHTED) -> float:
        return SPECIFICITY(self, label=label, average=average)

    def f1_score(self, label: Optional[str] = None, average: Average = Average.WEIGHTED) -> float:
        return F1_SCORE(self, label=label, average=average)

    # ------------------------------------------------------------------
    # Normalization
    # ------------------------------------------------------------------

    @property
    def normalization_depth(self) -> int:
        return len(self._normalizations)

    def normalize(self, min: Number = 0, max: Number = 1, fraction_digits: Optional[int] = None) -> None:
        """
        Rescale every cell into [min, max] and record the prior state.

        Raises:
            InvalidRangeError: min >= max, or fraction_digits outside 0..20.
            NormalizationError: the matrix range is unknown or flat.
        """
        validate_target_range(min, max, fraction_digits)
        self.validate()

        source = self.min_and_max()
        if source is None:
            raise NormalizationError("Error getting the min and max value. Please, verify the matrix dimensions.")

        rescaled = min_max_rescale(self.matrix, source, min, max, fraction_digits)
        self._normalizations.push(self.snapshot())
        self.matrix = rescaled
        logger.debug(
            f"Normalized [{source.min}, {source.max}] -> [{min}, {max}] "
            f"(history depth {len(self._normalizations)})"
        )

    def normalize_with(self, settings: "EvaluationSettings") -> None:
        self.normalize(settings.normalize_min, settings.normalize_max, settings.fraction_digits)

    def revert_normalization(self) -> Optional[MatrixSnapshot]:
        """Restore the state before the last normalize(); None if there is none."""
        snapshot = self._normalizations.pop()
        if snapshot is None:
            return None
        self.replace_with(snapshot)
        logger.debug(f"Reverted normalization (history depth {len(self._normalizations)})")
        return snapshot

    def revert_all_normalizations(self) -> Optional[MatrixSnapshot]:
        """
        Restore the oldest recorded snapshot.

        The history itself is left untouched.
        """
        snapshot = self._normalizations.oldest()
        if snapshot is None:
            return None
        self.replace_with(snapshot)
        logger.debug("Restored oldest normalization snapshot")
        return snapshot

    def clone(self) -> "ConfusionMatrix":
        """Fully independent copy, normalization history included."""
        other = ConfusionMatrix(self.labels, self.matrix)
        other._normalizations = self._normalizations.copy()
        return other


def _copy_grid(matrix: Sequence[Sequence[Number]]) -> List[List[Number]]:
    if isinstance(matrix, np.ndarray):
        return matrix.tolist()
    return [copy.deepcopy(list(row)) for row in matrix]


def _copy_labels(labels: Sequence[str]) -> List[str]:
    if isinstance(labels, str):
        raise InvalidMatrixError(f"Labels must be a sequence of strings, not a single string {labels!r}.")
    return copy.deepcopy(list(labels))
