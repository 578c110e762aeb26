# tests/test_normalization.py
from __future__ import annotations

import pytest

from confmatrix import (
    ConfusionMatrix,
    EvaluationSettings,
    InvalidMatrixError,
    InvalidRangeError,
    NormalizationError,
)
from confmatrix.data.normalization import (
    MatrixSnapshot,
    NormalizationHistory,
    ValueRange,
    min_max_rescale,
    round_half_up,
)


def test_normalize_unit_range(happy_sad):
    happy_sad.normalize(0, 1)
    assert happy_sad.matrix[0][0] == 0
    assert happy_sad.matrix[1][1] == 1
    assert happy_sad.matrix[0][1] == pytest.approx(1 / 3)
    assert happy_sad.matrix[1][0] == pytest.approx(2 / 3)
    assert happy_sad.normalization_depth == 1


def test_normalize_custom_range_with_rounding(happy_sad):
    happy_sad.normalize(10, 20, fraction_digits=2)
    assert happy_sad.matrix == [[10.0, 13.33], [16.67, 20.0]]


def test_normalize_then_revert_restores_exact_values(happy_sad):
    happy_sad.normalize(0, 1)
    restored = happy_sad.revert_normalization()
    assert restored == MatrixSnapshot(labels=("Happy", "Sad"), matrix=((1, 2), (3, 4)))
    assert happy_sad.matrix == [[1, 2], [3, 4]]
    assert happy_sad.normalization_depth == 0


def test_revert_without_history_is_noop(happy_sad):
    assert happy_sad.revert_normalization() is None
    assert happy_sad.revert_all_normalizations() is None
    assert happy_sad.matrix == [[1, 2], [3, 4]]


def test_snapshot_is_not_aliased_by_live_matrix(happy_sad):
    happy_sad.normalize()
    happy_sad.matrix[0][1] = 123
    happy_sad.revert_normalization()
    assert happy_sad.matrix == [[1, 2], [3, 4]]


def test_revert_all_restores_oldest_and_keeps_history(happy_sad):
    happy_sad.normalize(1, 2)
    happy_sad.normalize(0, 10)
    assert happy_sad.normalization_depth == 2

    happy_sad.revert_all_normalizations()
    assert happy_sad.matrix == [[1, 2], [3, 4]]
    assert happy_sad.normalization_depth == 2

    # the most recent entry is still the state before the second normalize
    happy_sad.revert_normalization()
    assert happy_sad.matrix[0][0] == pytest.approx(1.0)
    assert happy_sad.matrix[0][1] == pytest.approx(4 / 3)
    assert happy_sad.matrix[1][1] == pytest.approx(2.0)


@pytest.mark.parametrize("lo, hi", [(1, 0), (1, 1)])
def test_invalid_target_range(happy_sad, lo, hi):
    with pytest.raises(InvalidRangeError):
        happy_sad.normalize(lo, hi)
    assert happy_sad.normalization_depth == 0


@pytest.mark.parametrize("digits", [-1, 21, 1.5, True])
def test_invalid_fraction_digits(happy_sad, digits):
    with pytest.raises(InvalidRangeError):
        happy_sad.normalize(0, 1, fraction_digits=digits)


def test_zero_first_cell_blocks_normalization():
    cm = ConfusionMatrix(["A", "B"], [[0, 1], [2, 3]])
    with pytest.raises(NormalizationError):
        cm.normalize()
    assert cm.normalization_depth == 0


def test_empty_matrix_cannot_be_normalized():
    with pytest.raises(NormalizationError):
        ConfusionMatrix().normalize()


def test_flat_matrix_is_rejected_without_side_effects():
    cm = ConfusionMatrix(["A", "B"], [[5, 5], [5, 5]])
    with pytest.raises(NormalizationError):
        cm.normalize()
    assert cm.matrix == [[5, 5], [5, 5]]
    assert cm.normalization_depth == 0


def test_normalize_revalidates(happy_sad):
    happy_sad.matrix.append([1, 1])
    with pytest.raises(InvalidMatrixError):
        happy_sad.normalize()


def test_normalize_with_settings(happy_sad):
    happy_sad.normalize_with(EvaluationSettings(normalize_min=-1.0, normalize_max=1.0, fraction_digits=3))
    assert happy_sad.matrix == [[-1.0, -0.333], [0.333, 1.0]]


def test_history_is_lifo():
    history = NormalizationHistory()
    first = MatrixSnapshot.capture(["A"], [[1]])
    second = MatrixSnapshot.capture(["A"], [[2]])
    history.push(first)
    history.push(second)
    assert len(history) == 2
    assert history.oldest() is first
    assert history.pop() is second
    assert history.pop() is first
    assert history.pop() is None
    assert not history


def test_history_copy_is_independent():
    history = NormalizationHistory([MatrixSnapshot.capture(["A"], [[1]])])
    twin = history.copy()
    twin.pop()
    assert len(history) == 1 and len(twin) == 0


def test_min_max_rescale():
    out = min_max_rescale([[2, 4], [6, 10]], ValueRange(min=2, max=10), 0, 100)
    assert out == [[0.0, 25.0], [50.0, 100.0]]


def test_rounding_ties_go_up():
    cm = ConfusionMatrix(["A", "B"], [[1, 2], [3, 9]])
    cm.normalize(0, 1, fraction_digits=2)
    # (2 - 1) / (9 - 1) == 0.125 exactly
    assert cm.matrix == [[0.0, 0.13], [0.25, 1.0]]


@pytest.mark.parametrize(
    "value, digits, expected",
    [
        (0.125, 2, 0.13),
        (-0.125, 2, -0.13),
        (2.5, 0, 3.0),
        (0.5, 0, 1.0),
        (1.005, 2, 1.0),  # binary value sits just below the tie
        (1e10 + 0.5, 20, 1e10 + 0.5),
    ],
)
def test_round_half_up(value, digits, expected):
    assert round_half_up(value, digits) == expected
