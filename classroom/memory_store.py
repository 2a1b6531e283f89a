"""
Memory Store - single-process store with demo classroom data.

Same interface as RedisStore. Records are copied in and out so callers never
share mutable state with the store.
"""

import copy
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from core.errors import LearnerNotFound
from core.models import (
    ChatMessage,
    ClassResource,
    Learner,
    Poll,
    QuizQuestion,
    SoftSkills,
    Task,
    TaskAttempt,
    UserRole,
    now_ms,
)
from core.score_history import mastery_from

DAY_MS = 86400000


class MemoryStore:
    def __init__(self, seed: bool = True):
        self._lock = threading.RLock()
        self._learners: Dict[str, Learner] = {}
        self._tasks: Dict[str, Task] = {}
        self._resources: List[ClassResource] = []  # Newest first
        self._messages: List[ChatMessage] = []  # Oldest first
        self._poll: Optional[Poll] = None

        if seed:
            seed_demo_data(self)

    # ==================== Learners ====================

    def get(self, learner_id: str) -> Learner:
        """Get a learner snapshot or raise LearnerNotFound."""
        with self._lock:
            learner = self._learners.get(learner_id)
        if learner is None:
            raise LearnerNotFound(learner_id)
        return learner

    def save(self, learner: Learner):
        """Replace the stored learner snapshot."""
        with self._lock:
            self._learners[learner.id] = learner

    def list_learners(self) -> List[Learner]:
        with self._lock:
            return list(self._learners.values())

    def delete(self, learner_id: str):
        with self._lock:
            self._learners.pop(learner_id, None)

    # ==================== Tasks ====================

    def list_tasks(self) -> List[Task]:
        with self._lock:
            return [copy.copy(t) for t in self._tasks.values()]

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._tasks.get(task_id)
        return copy.copy(task) if task else None

    def add_task(self, task: Task):
        with self._lock:
            self._tasks[task.id] = copy.copy(task)

    # ==================== Resources ====================

    def list_resources(self) -> List[ClassResource]:
        with self._lock:
            return [copy.copy(r) for r in self._resources]

    def add_resource(self, resource: ClassResource):
        with self._lock:
            self._resources.insert(0, copy.copy(resource))

    # ==================== Messages ====================

    def list_messages(self) -> List[ChatMessage]:
        with self._lock:
            return [copy.copy(m) for m in self._messages]

    def add_message(self, message: ChatMessage):
        with self._lock:
            self._messages.append(copy.copy(message))

    # ==================== Poll ====================

    def get_poll(self) -> Optional[Poll]:
        with self._lock:
            return copy.deepcopy(self._poll)

    def set_poll(self, poll: Poll):
        with self._lock:
            self._poll = copy.deepcopy(poll)

    def clear_poll(self):
        with self._lock:
            self._poll = None


def _demo_history() -> tuple:
    now = now_ms()
    return (
        TaskAttempt(
            id="h2",
            task_id="5",
            task_title="Newtonian Physics",
            difficulty=50,
            score=60,
            timestamp=now - DAY_MS,
            questions=(
                QuizQuestion("F = ma stands for?", ("Force", "Mass", "Acceleration", "Newton's 2nd Law"), 3),
            ),
        ),
        TaskAttempt(
            id="h1",
            task_id="1",
            task_title="Algebra Foundations",
            difficulty=45,
            score=80,
            timestamp=now - DAY_MS * 2,
            questions=(
                QuizQuestion("Solve for x: 2x = 4", ("1", "2", "3", "4"), 1),
                QuizQuestion("What is 5 + 5?", ("8", "9", "10", "11"), 2),
            ),
        ),
    )


def _save_learner(store, learner: Learner):
    """Save a seeded learner with mastery derived from its scores."""
    store.save(replace(learner, mastery_score=mastery_from(learner.recent_scores)))


def seed_demo_data(store):
    """Populate a store with the demo class (MATH101)."""
    for task in [
        Task("1", "Algebra Foundations", "Math", "quiz"),
        Task("2", "React Components", "Coding", "project"),
        Task("3", "Calculus Derivatives", "Math", "quiz"),
        Task("4", "Shakespearean Analysis", "Literature", "project"),
        Task("5", "Newtonian Physics", "Science", "quiz"),
        Task("6", "Neural Networks", "Coding", "project"),
    ]:
        store.add_task(task)

    _save_learner(store, Learner(
        id="student1",
        name="Alex Johnson",
        email="student@amep.edu",
        role=UserRole.STUDENT,
        class_code="MATH101",
        enrolled_class_codes=("MATH101", "SCI202"),
        soft_skills=SoftSkills(collaboration=75, communication=80),
        recent_scores=(60, 65, 70, 60, 70),
        task_history=_demo_history(),
    ))
    _save_learner(store, Learner(
        id="student2",
        name="Sarah Connor",
        email="sarah@amep.edu",
        role=UserRole.STUDENT,
        class_code="MATH101",
        enrolled_class_codes=("MATH101",),
        soft_skills=SoftSkills(collaboration=40, communication=90),
        recent_scores=(40, 45, 50, 40, 45),
    ))
    _save_learner(store, Learner(
        id="teacher1",
        name="Prof. Dumbledore",
        email="teacher@amep.edu",
        role=UserRole.TEACHER,
        class_code="MATH101",
        enrolled_class_codes=("MATH101",),
        soft_skills=SoftSkills(collaboration=100, communication=100),
    ))

    store.add_resource(ClassResource(
        id="101",
        title="Week 1: Algebra Notes",
        type="note",
        content="Review linear equations...",
        date="2023-10-01",
    ))
    store.add_message(ChatMessage(
        id="m1",
        sender_id="teacher1",
        sender_name="Prof. Dumbledore",
        role=UserRole.TEACHER,
        text="Welcome to the class everyone!",
        timestamp=now_ms() - 100000,
    ))
