"""
Task Attempt Recorder - logs a completed quiz and updates the learner's mastery.

The learner record is copy-on-write: the stored snapshot is replaced, and the
new snapshot is returned. Callers must keep the returned value.
"""

import logging
import uuid
from dataclasses import replace
from typing import Optional, Sequence

from config import SCORE_WINDOW
from .models import Learner, QuizQuestion, TaskAttempt, now_ms
from .score_history import mastery_from, push_score

logger = logging.getLogger(__name__)


def apply_attempt(learner: Learner, attempt: TaskAttempt, window: int = SCORE_WINDOW) -> Learner:
    """Return a new learner snapshot with the attempt applied."""
    recent = push_score(learner.recent_scores, attempt.score, window)
    return replace(
        learner,
        recent_scores=recent,
        mastery_score=mastery_from(recent),
        task_history=(attempt,) + tuple(learner.task_history),
    )


def record_attempt(store, learner_id: str, task_id: str, task_title: str,
                   score: int, difficulty_used: int,
                   questions: Sequence[QuizQuestion],
                   now: Optional[int] = None) -> Learner:
    """
    Record a completed attempt for a learner.

    Args:
        store: Learner store with get(learner_id) and save(learner)
        learner_id: Learner to update
        task_id: Task the quiz was generated for
        task_title: Task title at the time of the attempt
        score: Quiz score, trusted to be 0-100
        difficulty_used: Difficulty the quiz was generated at
        questions: The exact questions that were asked
        now: Timestamp override (epoch ms)

    Returns:
        Updated learner snapshot

    Raises:
        LearnerNotFound: If the learner does not resolve
    """
    learner = store.get(learner_id)

    attempt = TaskAttempt(
        id=str(uuid.uuid4()),
        task_id=task_id,
        task_title=task_title,
        difficulty=int(difficulty_used),
        score=int(score),
        timestamp=now if now is not None else now_ms(),
        questions=tuple(questions),
    )
    updated = apply_attempt(learner, attempt)
    store.save(updated)

    logger.info(
        "Recorded attempt %s for %s: task=%s score=%d difficulty=%d mastery %d -> %d",
        attempt.id, learner_id, task_id, attempt.score, attempt.difficulty,
        learner.mastery_score, updated.mastery_score
    )
    return updated
