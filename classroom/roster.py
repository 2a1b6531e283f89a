"""
Roster - class enrollment and the dashboard views built on learner records.

Features:
    - Join a class by code
    - Per-class student lists for the teacher
    - Engagement / at-risk flags
    - Improvement suggestion and score chart for the student
"""

import logging
from dataclasses import replace
from typing import List

from config import AT_RISK_THRESHOLD, MIN_CLASS_CODE_LENGTH
from core.errors import InvalidClassCode
from core.models import Learner, UserRole
from core.score_history import round_half_up

logger = logging.getLogger(__name__)

NO_HISTORY_SUGGESTION = "Complete more tasks to get personalized suggestions."
CHART_ATTEMPTS = 5
CHART_TITLE_LENGTH = 8


def join_class(store, learner_id: str, code: str) -> Learner:
    """
    Enroll a learner in a class and make it their active class.

    Raises:
        InvalidClassCode: Code too short
        LearnerNotFound: Unknown learner
    """
    code = (code or "").strip()
    if len(code) < MIN_CLASS_CODE_LENGTH:
        raise InvalidClassCode(f"Class code {code!r} is too short")

    learner = store.get(learner_id)
    enrolled = learner.enrolled_class_codes
    if code not in enrolled:
        enrolled = enrolled + (code,)

    updated = replace(learner, enrolled_class_codes=enrolled, class_code=code)
    store.save(updated)
    logger.info("%s joined class %s", learner_id, code)
    return updated


def class_students(store, code: str) -> List[Learner]:
    """Students enrolled in a class."""
    return [
        learner for learner in store.list_learners()
        if learner.role == UserRole.STUDENT and code in learner.enrolled_class_codes
    ]


def engagement_score(learner: Learner) -> int:
    skills = learner.soft_skills
    return round_half_up((skills.collaboration + skills.communication) / 2)


def is_at_risk(learner: Learner) -> bool:
    return learner.mastery_score < AT_RISK_THRESHOLD


def improvement_suggestion(learner: Learner) -> str:
    """Suggestion driven by the learner's lowest-scoring attempt."""
    if not learner.task_history:
        return NO_HISTORY_SUGGESTION

    lowest = min(learner.task_history, key=lambda a: a.score)
    if lowest.score < 60:
        return f'Consider reviewing material for "{lowest.task_title}" to boost your foundational knowledge.'
    if lowest.score < 80:
        return f'You\'re doing well! Focus on "{lowest.task_title}" to reach mastery level.'
    return "Excellent performance across the board! Challenge yourself with higher difficulty tasks."


def history_chart(learner: Learner) -> List[dict]:
    """Last attempts in chronological order, for the score bar chart."""
    chronological = list(reversed(learner.task_history))[-CHART_ATTEMPTS:]
    points = []
    for attempt in chronological:
        title = attempt.task_title
        name = title[:CHART_TITLE_LENGTH] + ".." if len(title) > CHART_TITLE_LENGTH else title
        points.append({"name": name, "full_title": title, "score": attempt.score})
    return points
