"""
Difficulty Estimator - maps a learner's recent scores to the next quiz difficulty.

Two strategies:
    - Accelerator (optional): a single-input linear regressor fitted at startup
      on a small calibration set ("push the student 5-10 points above their
      current standing, saturating at 100").
    - Heuristic (mandatory): piecewise adjustment of the average score.

The accelerator is tried first; any exception or non-finite prediction drops
through to the heuristic. estimate() never raises.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np
from sklearn.linear_model import LinearRegression

from config import MAX_DIFFICULTY, MIN_DIFFICULTY
from .score_history import average, round_half_up

logger = logging.getLogger(__name__)


# Calibration set: current average -> next difficulty
CALIBRATION_INPUTS = [50, 60, 70, 80, 90, 100]
CALIBRATION_TARGETS = [55, 65, 75, 85, 95, 100]


def clamp_difficulty(value: float) -> int:
    """Clamp to [MIN_DIFFICULTY, MAX_DIFFICULTY] and round half up."""
    return round_half_up(min(float(MAX_DIFFICULTY), max(float(MIN_DIFFICULTY), value)))


def heuristic_difficulty(avg: float) -> int:
    """
    Deterministic next difficulty for an average score.

    Doing well (>80) jumps +10, solid (60-80] +5, struggling (<40) -5,
    middle ground +2.
    """
    if avg > 80:
        next_diff = avg + 10
    elif avg > 60:
        next_diff = avg + 5
    elif avg < 40:
        next_diff = avg - 5
    else:
        next_diff = avg + 2
    return clamp_difficulty(next_diff)


class RegressionAccelerator:
    """Linear regression over the average score, fitted once on construction."""

    def __init__(self, inputs: Sequence[float] = CALIBRATION_INPUTS,
                 targets: Sequence[float] = CALIBRATION_TARGETS):
        xs = np.asarray(inputs, dtype=float).reshape(-1, 1)
        ys = np.asarray(targets, dtype=float)
        self.model = LinearRegression()
        self.model.fit(xs, ys)
        logger.info(
            "Difficulty model fitted: slope=%.3f intercept=%.3f",
            float(self.model.coef_[0]), float(self.model.intercept_)
        )

    def predict(self, avg: float) -> float:
        prediction = self.model.predict(np.array([[avg]], dtype=float))
        return float(prediction[0])


class DifficultyEstimator:
    """
    Next-difficulty estimator with an optional accelerator.

    Args:
        accelerator: Any object with predict(average) -> float, or None to
            always use the heuristic.
    """

    def __init__(self, accelerator=None):
        self.accelerator = accelerator

    @classmethod
    def with_regression(cls) -> "DifficultyEstimator":
        """Build an estimator backed by the calibrated regressor.

        If fitting fails the estimator runs heuristic-only.
        """
        try:
            return cls(accelerator=RegressionAccelerator())
        except Exception as e:
            logger.warning("Could not fit difficulty model, using heuristic only: %s", e)
            return cls()

    def _accelerated(self, avg: float) -> Optional[int]:
        if self.accelerator is None:
            return None
        try:
            value = float(self.accelerator.predict(avg))
        except Exception as e:
            logger.error("Difficulty prediction failed, using fallback: %s", e)
            return None
        if not math.isfinite(value):
            logger.warning("Difficulty prediction was not finite (%s), using fallback", value)
            return None
        return clamp_difficulty(value)

    def estimate(self, history: Sequence[int]) -> int:
        """
        Next difficulty (1-100) for a score history.

        Args:
            history: Recent scores, most recent last. May be empty.

        Returns:
            Clamped integer difficulty
        """
        avg = average(history or ())
        predicted = self._accelerated(avg)
        if predicted is not None:
            return predicted
        return heuristic_difficulty(avg)


def estimate(history: Sequence[int], accelerator=None) -> int:
    """Functional form of DifficultyEstimator.estimate."""
    return DifficultyEstimator(accelerator).estimate(history)
