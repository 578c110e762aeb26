# tests/conftest.py
from __future__ import annotations

import pytest

from confmatrix import ConfusionMatrix


@pytest.fixture
def happy_sad() -> ConfusionMatrix:
    return ConfusionMatrix(["Happy", "Sad"], [[1, 2], [3, 4]])


@pytest.fixture
def three_class() -> ConfusionMatrix:
    # rows = true, cols = predicted
    return ConfusionMatrix(
        ["bird", "cat", "dog"],
        [
            [7, 1, 2],
            [3, 8, 1],
            [0, 2, 6],
        ],
    )
