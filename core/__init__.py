"""
Core module - Adaptive difficulty, score history and attempt recording.

Components:
    - models: Learner, TaskAttempt, QuizQuestion and feed records
    - score_history: Bounded score window + derived mastery
    - difficulty_estimator: Regression accelerator with heuristic fallback
    - attempt_recorder: Copy-on-write attempt logging
    - scoring: Quiz score aggregation
    - errors: Domain exceptions
"""

from .models import (
    Learner,
    UserRole,
    SoftSkills,
    TaskAttempt,
    QuizQuestion,
    Task,
    ClassResource,
    ChatMessage,
    Poll,
)
from .score_history import push_score, mastery_from, round_half_up
from .difficulty_estimator import DifficultyEstimator, RegressionAccelerator, heuristic_difficulty, estimate
from .attempt_recorder import record_attempt
from .scoring import score_quiz
from .errors import (
    ClassroomError,
    LearnerNotFound,
    TaskNotFound,
    GatewayUnavailable,
    InvalidQuizState,
    QuizNotFound,
    PollClosed,
    InvalidVote,
    InvalidClassCode,
)

__all__ = [
    "Learner",
    "UserRole",
    "SoftSkills",
    "TaskAttempt",
    "QuizQuestion",
    "Task",
    "ClassResource",
    "ChatMessage",
    "Poll",
    "push_score",
    "mastery_from",
    "round_half_up",
    "DifficultyEstimator",
    "RegressionAccelerator",
    "heuristic_difficulty",
    "estimate",
    "record_attempt",
    "score_quiz",
    "ClassroomError",
    "LearnerNotFound",
    "TaskNotFound",
    "GatewayUnavailable",
    "InvalidQuizState",
    "QuizNotFound",
    "PollClosed",
    "InvalidVote",
    "InvalidClassCode",
]
