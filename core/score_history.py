"""
Score History - bounded recent-score window and the mastery derived from it.

A learner keeps the last SCORE_WINDOW quiz scores, oldest first. Mastery is
always recomputed from that window, never stored independently.
"""

import math
from typing import Sequence, Tuple

from config import DEFAULT_MASTERY, SCORE_WINDOW


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def push_score(history: Sequence[int], score: int, window: int = SCORE_WINDOW) -> Tuple[int, ...]:
    """
    Append a score and evict the oldest entries beyond the window.

    Args:
        history: Current scores, most recent last
        score: New score (0-100)
        window: Maximum number of scores kept

    Returns:
        New history tuple
    """
    updated = tuple(history) + (int(score),)
    return updated[-window:]


def average(history: Sequence[int]) -> float:
    """Unrounded mean, or DEFAULT_MASTERY for an empty history."""
    if not history:
        return float(DEFAULT_MASTERY)
    return sum(history) / len(history)


def mastery_from(history: Sequence[int]) -> int:
    """Mastery score (0-100) for a score history."""
    return round_half_up(average(history))
