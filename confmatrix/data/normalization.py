# confmatrix/data/normalization.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import InvalidRangeError, NormalizationError


Number = Union[int, float]

MAX_FRACTION_DIGITS = 20

# wide enough for any finite float quantized to MAX_FRACTION_DIGITS
_ROUNDING_CONTEXT = Context(prec=400, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class ValueRange:
    """Smallest and largest cell value of a grid."""
    min: Number
    max: Number


@dataclass(frozen=True)
class MatrixSnapshot:
    """
    Immutable copy of a labeled grid, taken before a rescaling mutates it.

    Rows are stored as tuples so a snapshot can never alias the live matrix.
    """
    labels: Tuple[str, ...]
    matrix: Tuple[Tuple[Number, ...], ...]

    @staticmethod
    def capture(labels: Sequence[str], matrix: Sequence[Sequence[Number]]) -> "MatrixSnapshot":
        return MatrixSnapshot(
            labels=tuple(labels),
            matrix=tuple(tuple(row) for row in matrix),
        )


class NormalizationHistory:
    """LIFO stack of snapshots; index 0 is the oldest."""

    def __init__(self, snapshots: Optional[Sequence[MatrixSnapshot]] = None) -> None:
        self._snapshots: List[MatrixSnapshot] = list(snapshots or [])

    def __len__(self) -> int:
        return len(self._snapshots)

    def __bool__(self) -> bool:
        return bool(self._snapshots)

    def push(self, snapshot: MatrixSnapshot) -> None:
        self._snapshots.append(snapshot)

    def pop(self) -> Optional[MatrixSnapshot]:
        """Remove and return the most recent snapshot, or None when empty."""
        if not self._snapshots:
            return None
        return self._snapshots.pop()

    def oldest(self) -> Optional[MatrixSnapshot]:
        return self._snapshots[0] if self._snapshots else None

    def copy(self) -> "NormalizationHistory":
        return NormalizationHistory(self._snapshots)


def validate_target_range(min_value: Number, max_value: Number, fraction_digits: Optional[int] = None) -> None:
    if min_value >= max_value:
        raise InvalidRangeError(
            f"Min value ({min_value}) cannot be equal or greater than max value ({max_value})."
        )
    if fraction_digits is not None:
        if isinstance(fraction_digits, bool) or not isinstance(fraction_digits, (int, np.integer)):
            raise InvalidRangeError(f"fraction_digits must be an integer, got {type(fraction_digits).__name__}.")
        if not 0 <= fraction_digits <= MAX_FRACTION_DIGITS:
            raise InvalidRangeError(
                f"fraction_digits must be between 0 and {MAX_FRACTION_DIGITS}, got {fraction_digits}."
            )


def min_max_rescale(
    matrix: Sequence[Sequence[Number]],
    source: ValueRange,
    min_value: Number = 0,
    max_value: Number = 1,
    fraction_digits: Optional[int] = None,
) -> List[List[float]]:
    """
    Linearly map every cell from `source` onto [min_value, max_value]:

        x' = (max - min) * (x - source.min) / (source.max - source.min) + min

    Args:
        matrix: (K, K) grid
        source: value range of `matrix`
        fraction_digits: optional rounding of each rescaled cell

    Raises:
        NormalizationError: the source range is flat (max == min).
    """
    validate_target_range(min_value, max_value, fraction_digits)
    if source.max == source.min:
        raise NormalizationError(
            f"Cannot rescale a flat matrix: every cell equals {source.min}."
        )

    lo, hi = float(source.min), float(source.max)
    grid = np.asarray(matrix, dtype=float)
    scaled = (max_value - min_value) * ((grid - lo) / (hi - lo)) + min_value
    if fraction_digits is None:
        return scaled.tolist()
    return [[round_half_up(v, int(fraction_digits)) for v in row] for row in scaled.tolist()]


def round_half_up(value: float, fraction_digits: int) -> float:
    """
    Round to `fraction_digits` decimals, ties away from zero.

    Works on the exact binary value of `value`, so 0.125 -> 0.13 while
    1.005 (stored as 1.00499...) -> 1.0.
    """
    quantum = Decimal(1).scaleb(-fraction_digits)
    return float(Decimal(value).quantize(quantum, context=_ROUNDING_CONTEXT))
