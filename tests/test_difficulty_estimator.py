"""Tests for core/difficulty_estimator.py"""

import sys
sys.path.append(".")

import math

import pytest

from core.difficulty_estimator import (
    DifficultyEstimator,
    RegressionAccelerator,
    estimate,
    heuristic_difficulty,
)


class ConstantAccelerator:
    def __init__(self, value):
        self.value = value
        self.calls = []

    def predict(self, avg):
        self.calls.append(avg)
        return self.value


class BrokenAccelerator:
    def predict(self, avg):
        raise RuntimeError("model not loaded")


def test_empty_history_uses_baseline_fifty():
    assert estimate([]) == 52


def test_high_scores_saturate_at_hundred():
    assert estimate([90, 90, 90, 90, 90]) == 100


def test_low_scores_step_down():
    assert estimate([30, 30, 30, 30, 30]) == 25


@pytest.mark.parametrize("avg, expected", [
    (81, 91),
    (80, 85),   # 80 is in the (60, 80] band
    (61, 66),
    (60, 62),   # 60 is middle ground
    (40, 42),
    (39, 34),
    (3, 1),     # clamped at the floor
    (95, 100),  # clamped at the ceiling
])
def test_heuristic_bands(avg, expected):
    assert heuristic_difficulty(avg) == expected


def test_heuristic_rounds_half_up():
    # mean 62.5 -> 67.5 -> 68
    assert estimate([60, 65]) == 68


def test_every_history_gives_valid_difficulty():
    estimator = DifficultyEstimator.with_regression()
    for history in ([], [0], [100], [0, 0, 0, 0, 0], [100] * 5, [12, 99, 47, 3, 64]):
        value = estimator.estimate(history)
        assert isinstance(value, int)
        assert 1 <= value <= 100


def test_accelerator_result_is_clamped_and_rounded():
    assert DifficultyEstimator(ConstantAccelerator(140.2)).estimate([70]) == 100
    assert DifficultyEstimator(ConstantAccelerator(-3)).estimate([70]) == 1
    assert DifficultyEstimator(ConstantAccelerator(57.5)).estimate([70]) == 58


def test_accelerator_receives_unrounded_average():
    accelerator = ConstantAccelerator(50)
    DifficultyEstimator(accelerator).estimate([60, 65])
    assert accelerator.calls == [62.5]


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), -math.inf])
def test_non_finite_prediction_falls_back(bad):
    estimator = DifficultyEstimator(ConstantAccelerator(bad))
    assert estimator.estimate([30, 30, 30, 30, 30]) == 25


def test_accelerator_error_falls_back():
    estimator = DifficultyEstimator(BrokenAccelerator())
    assert estimator.estimate([]) == 52
    assert estimator.estimate([90] * 5) == 100


def test_regression_pushes_above_current_standing():
    accelerator = RegressionAccelerator()
    for avg in (50, 60, 70, 80, 90):
        assert accelerator.predict(avg) > avg
    estimator = DifficultyEstimator(accelerator)
    assert estimator.estimate([]) == 56
    assert estimator.estimate([100] * 5) == 100


def test_estimate_is_repeatable():
    estimator = DifficultyEstimator.with_regression()
    history = [55, 70, 65]
    assert estimator.estimate(history) == estimator.estimate(history)
