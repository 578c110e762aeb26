# confmatrix/evaluation/confusion.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import InvalidLabelError, InvalidMatrixError, UnknownLabelError


Number = Union[int, float]
Grid = Sequence[Sequence[Number]]


@dataclass(frozen=True)
class ConfusionCounts:
    """TP/TN/FP/FN for one label treated as the positive class."""
    true_positive: Number = 0
    true_negative: Number = 0
    false_positive: Number = 0
    false_negative: Number = 0

    @property
    def total(self) -> Number:
        return self.true_positive + self.true_negative + self.false_positive + self.false_negative

    def __add__(self, other: "ConfusionCounts") -> "ConfusionCounts":
        if not isinstance(other, ConfusionCounts):
            return NotImplemented
        return ConfusionCounts(
            true_positive=self.true_positive + other.true_positive,
            true_negative=self.true_negative + other.true_negative,
            false_positive=self.false_positive + other.false_positive,
            false_negative=self.false_negative + other.false_negative,
        )

    def as_dict(self) -> Dict[str, Number]:
        return {
            "true_positive": self.true_positive,
            "true_negative": self.true_negative,
            "false_positive": self.false_positive,
            "false_negative": self.false_negative,
        }


def validate_matrix(labels: Sequence[str], matrix: Grid) -> None:
    """
    Check the structural invariants of a labeled confusion matrix.

    Raises:
        InvalidMatrixError: row count differs from label count, a row is not
            as long as the matrix is tall, or a label appears twice.
    """
    if len(labels) != len(matrix):
        raise InvalidMatrixError(
            f"The labels length ({len(labels)}) should be equal to the matrix rows length ({len(matrix)})."
        )

    seen = set()
    for label in labels:
        if label in seen:
            raise InvalidMatrixError(f"The label {label!r} appears more than once in the labels.")
        seen.add(label)

    n = len(matrix)
    for i, row in enumerate(matrix):
        if len(row) != n:
            raise InvalidMatrixError(
                f"The confusion matrix is not square: row {i} has {len(row)} columns, expected {n}."
            )


def _as_grid(matrix: Grid) -> np.ndarray:
    grid = np.asarray(matrix)
    if grid.size == 0:
        return grid.reshape(0, 0)
    return grid


def as_scalar(value: Any) -> Any:
    """Unwrap numpy scalars; leave Python numbers (int, Fraction, Decimal, ...) alone."""
    return value.item() if isinstance(value, np.generic) else value


def grid_sum(matrix: Grid) -> Any:
    return as_scalar(sum(sum(row) for row in matrix))


def column_sums(matrix: Grid) -> List[Any]:
    return [as_scalar(sum(col)) for col in zip(*matrix)]


def label_index(labels: Sequence[str], label: Optional[str]) -> int:
    """Position of `label`, with the taxonomy errors for empty/unknown labels."""
    if not label:
        raise InvalidLabelError("A valid label should be passed.")
    try:
        return list(labels).index(label)
    except ValueError:
        raise UnknownLabelError(label) from None


def counts_for(labels: Sequence[str], matrix: Grid, label: str) -> ConfusionCounts:
    """
    Derive the confusion counts of one label.

    Convention (rows = true class, cols = predicted class):
        TP = cell on the diagonal
        FP = off-diagonal sum of the label's row
        FN = off-diagonal sum of the label's column
        TN = everything else
    """
    i = label_index(labels, label)

    # plain sums keep Fraction/Decimal/big-int cells exact
    tp = as_scalar(matrix[i][i])
    fp = as_scalar(sum(matrix[i])) - tp
    fn = as_scalar(sum(row[i] for row in matrix)) - tp
    tn = grid_sum(matrix) - tp - fp - fn

    return ConfusionCounts(
        true_positive=tp,
        true_negative=tn,
        false_positive=fp,
        false_negative=fn,
    )


def all_counts(labels: Sequence[str], matrix: Grid) -> Dict[str, ConfusionCounts]:
    """Counts for every label, keyed by label in label order."""
    return {label: counts_for(labels, matrix, label) for label in labels}


def sum_counts(labels: Sequence[str], matrix: Grid) -> ConfusionCounts:
    """Element-wise sum of every label's counts (micro pooling)."""
    total = ConfusionCounts()
    for counts in all_counts(labels, matrix).values():
        total = total + counts
    return total


def confusion_matrix(
    y_true: Sequence[Hashable],
    y_pred: Sequence[Hashable],
    labels: Optional[Sequence[Hashable]] = None,
) -> Tuple[np.ndarray, List[Any]]:
    """
    Compute a confusion matrix from raw label sequences.

    Convention:
        rows = true labels
        cols = predicted labels

    Args:
        y_true, y_pred: label sequences of equal length
        labels: explicit label order; if None, sorted union of observed labels.

    Returns:
        cm: (K, K) integer ndarray
        labels_used: list of labels in the order used
    """
    y_true = list(y_true)
    y_pred = list(y_pred)
    if len(y_true) != len(y_pred):
        raise ValueError("y_true and y_pred must have the same length.")

    if labels is None:
        labels = sorted(set(y_true) | set(y_pred))
    labels_used = list(labels)

    k = len(labels_used)
    idx = {lab: i for i, lab in enumerate(labels_used)}
    cm = np.zeros((k, k), dtype=int)

    for t, p in zip(y_true, y_pred):
        if t not in idx:
            raise UnknownLabelError(t)
        if p not in idx:
            raise UnknownLabelError(p)
        cm[idx[t], idx[p]] += 1

    return cm, labels_used


def format_confusion_matrix(labels: Sequence[str], matrix: Grid) -> str:
    """
    Create a simple aligned string representation for logs.

    Integer-valued grids print as counts; anything else (e.g. a normalized
    grid) prints with two decimals.
    """
    names = [str(l) for l in labels]
    grid = _as_grid(matrix)
    if not names:
        return ""

    integral = bool(np.all(np.mod(grid, 1) == 0))
    cells = [[f"{int(v)}" if integral else f"{float(v):.2f}" for v in row] for row in grid]

    # Column widths
    max_name = max(len(n) for n in names)
    max_val = max(len(c) for row in cells for c in row)
    cell_w = max(max_val, max_name, 5) + 1

    header = " " * (max_name + 2) + "".join([f"{n:>{cell_w}s}" for n in names])
    rows = [header]
    for n, row in zip(names, cells):
        rows.append(f"{n:<{max_name}s}  " + "".join([f"{c:>{cell_w}s}" for c in row]))
    return "\n".join(rows)
