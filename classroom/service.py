"""
Classroom - wires the adaptive core to the store, quiz generator and notifier.

Control flow for a quiz:
    start_quiz:  history -> estimator -> difficulty -> generator -> pending quiz
    submit_quiz: answers -> score -> recorder -> new mastery -> next difficulty

Writes to a learner are serialized with one lock per learner id. Pending
quizzes are capped per learner and expire after PENDING_QUIZ_TTL_MS.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from config import MAX_PENDING_QUIZZES, PENDING_QUIZ_TTL_MS
from core.attempt_recorder import record_attempt
from core.difficulty_estimator import DifficultyEstimator
from core.errors import QuizNotFound
from core.models import Learner, QuizQuestion, TaskAttempt, now_ms
from core.scoring import count_correct, score_quiz

from . import roster
from .catalog import TaskCatalog
from .feed import ClassFeed
from .notifier import Notifier, learner_topic
from .polls import PollBoard
from .quiz_generator import QuizGenerator

logger = logging.getLogger(__name__)


@dataclass
class PendingQuiz:
    """A generated quiz waiting for the learner's answers."""
    id: str
    learner_id: str
    task_id: str
    task_title: str
    topic: str
    difficulty: int
    questions: Tuple[QuizQuestion, ...]
    created_at: int = field(default_factory=now_ms)

    def to_public_dict(self) -> dict:
        """Quiz as shown to the learner (no answers)."""
        return {
            "quiz_id": self.id,
            "task_id": self.task_id,
            "task_title": self.task_title,
            "topic": self.topic,
            "difficulty": self.difficulty,
            "questions": [
                {"question": q.question, "options": list(q.options)}
                for q in self.questions
            ],
        }


@dataclass
class QuizOutcome:
    score: int
    correct_count: int
    total: int
    learner: Learner
    attempt: TaskAttempt
    next_difficulty: int


class Classroom:
    """Explicit application object; pass it to whatever serves requests."""

    def __init__(self, store, estimator: Optional[DifficultyEstimator] = None,
                 generator: Optional[QuizGenerator] = None,
                 notifier: Optional[Notifier] = None,
                 max_pending: int = MAX_PENDING_QUIZZES,
                 pending_ttl_ms: int = PENDING_QUIZ_TTL_MS):
        self.store = store
        self.estimator = estimator or DifficultyEstimator()
        self.generator = generator or QuizGenerator()
        self.notifier = notifier or Notifier()

        self.catalog = TaskCatalog(store, self.notifier)
        self.feed = ClassFeed(store, self.notifier)
        self.polls = PollBoard(store, self.notifier)

        self.max_pending = max_pending
        self.pending_ttl_ms = pending_ttl_ms
        # learner_id -> {quiz_id: PendingQuiz}, oldest first
        self._pending: Dict[str, Dict[str, PendingQuiz]] = {}
        self._pending_lock = threading.Lock()
        self._learner_locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _learner_lock(self, learner_id: str) -> threading.Lock:
        """Lock for a learner id. Only call with ids that resolved in the store."""
        with self._locks_guard:
            return self._learner_locks.setdefault(learner_id, threading.Lock())

    # ==================== Learners ====================

    def learner(self, learner_id: str) -> Learner:
        return self.store.get(learner_id)

    def next_difficulty(self, learner_id: str) -> int:
        """Difficulty the learner's next quiz should be generated at."""
        return self.estimator.estimate(self.store.get(learner_id).recent_scores)

    def join_class(self, learner_id: str, code: str) -> Learner:
        self.store.get(learner_id)
        with self._learner_lock(learner_id):
            learner = roster.join_class(self.store, learner_id, code)
        self.notifier.publish(learner_topic(learner_id), {"event": "joined", "class_code": learner.class_code})
        return learner

    def class_students(self, code: str) -> List[Learner]:
        return roster.class_students(self.store, code)

    # ==================== Pending Quizzes ====================

    def _expired(self, pending: PendingQuiz, now: int) -> bool:
        return now - pending.created_at > self.pending_ttl_ms

    def _prune_expired(self, now: int):
        """Drop expired quizzes for every learner. Caller holds _pending_lock."""
        for learner_id in list(self._pending):
            quizzes = self._pending[learner_id]
            for quiz_id in [q for q, p in quizzes.items() if self._expired(p, now)]:
                del quizzes[quiz_id]
                logger.info("Quiz %s for %s expired unsubmitted", quiz_id, learner_id)
            if not quizzes:
                del self._pending[learner_id]

    def _add_pending(self, pending: PendingQuiz):
        with self._pending_lock:
            self._prune_expired(now_ms())
            quizzes = self._pending.setdefault(pending.learner_id, {})
            quizzes[pending.id] = pending
            while len(quizzes) > self.max_pending:
                dropped = next(iter(quizzes))
                del quizzes[dropped]
                logger.info("Quiz %s for %s dropped, too many pending", dropped, pending.learner_id)

    def _discard_pending(self, learner_id: str, quiz_id: str):
        with self._pending_lock:
            quizzes = self._pending.get(learner_id, {})
            quizzes.pop(quiz_id, None)
            if not quizzes:
                self._pending.pop(learner_id, None)

    def pending_quizzes(self, learner_id: str) -> List[PendingQuiz]:
        """Unexpired quizzes waiting for this learner's answers, oldest first."""
        now = now_ms()
        with self._pending_lock:
            quizzes = list(self._pending.get(learner_id, {}).values())
        return [p for p in quizzes if not self._expired(p, now)]

    def pending_quiz(self, learner_id: str, quiz_id: str) -> PendingQuiz:
        """
        Look up a quiz waiting for this learner's answers.

        Raises:
            QuizNotFound: Unknown, expired, submitted or another learner's quiz
        """
        with self._pending_lock:
            pending = self._pending.get(learner_id, {}).get(quiz_id)
        if pending is None or self._expired(pending, now_ms()):
            raise QuizNotFound(f"No pending quiz {quiz_id} for {learner_id}")
        return pending

    # ==================== Quizzes ====================

    def start_quiz(self, learner_id: str, task_id: str) -> PendingQuiz:
        """Generate a quiz for a task at the learner's current difficulty."""
        learner = self.store.get(learner_id)
        task = self.catalog.get_task(task_id)

        difficulty = self.estimator.estimate(learner.recent_scores)
        questions = self.generator.generate(task.topic, difficulty)

        pending = PendingQuiz(
            id=str(uuid.uuid4()),
            learner_id=learner_id,
            task_id=task.id,
            task_title=task.title,
            topic=task.topic,
            difficulty=difficulty,
            questions=tuple(questions),
        )
        self._add_pending(pending)

        logger.info(
            "Quiz %s for %s on %r at difficulty %d (%d questions)",
            pending.id, learner_id, task.topic, difficulty, len(pending.questions)
        )
        return pending

    def submit_quiz(self, learner_id: str, quiz_id: str,
                    answers: Sequence[Optional[int]]) -> QuizOutcome:
        """
        Score a pending quiz and record the attempt.

        Raises:
            QuizNotFound: Unknown, expired or already submitted quiz
            InvalidQuizState: A quiz with no questions
            LearnerNotFound: Learner deleted since the quiz started
        """
        self.pending_quiz(learner_id, quiz_id)

        with self._learner_lock(learner_id):
            # Re-check under the lock; a concurrent submit may have won
            pending = self.pending_quiz(learner_id, quiz_id)
            score = score_quiz(pending.questions, answers)
            learner = record_attempt(
                self.store,
                learner_id,
                task_id=pending.task_id,
                task_title=pending.task_title,
                score=score,
                difficulty_used=pending.difficulty,
                questions=pending.questions,
            )
            self._discard_pending(learner_id, quiz_id)

        next_difficulty = self.estimator.estimate(learner.recent_scores)
        self.notifier.publish(learner_topic(learner_id), {
            "event": "attempt",
            "score": score,
            "mastery": learner.mastery_score,
            "next_difficulty": next_difficulty,
        })
        return QuizOutcome(
            score=score,
            correct_count=count_correct(pending.questions, answers),
            total=len(pending.questions),
            learner=learner,
            attempt=learner.task_history[0],
            next_difficulty=next_difficulty,
        )
