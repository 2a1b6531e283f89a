"""
Classroom module - Quiz generation, live polls, class feed and roster.

Components:
    - service: Classroom facade (adaptive quiz flow, per-learner serialization)
    - quiz_generator: LLM quiz generation with static fallback
    - notifier: Publish/subscribe for state changes
    - polls: Live polls
    - feed: Shared resources and chat
    - catalog: Task catalog
    - roster: Enrollment and dashboard views
    - memory_store: Single-process store with demo data
"""

from .service import Classroom, PendingQuiz, QuizOutcome
from .quiz_generator import QuizGenerator, fallback_quiz
from .notifier import Notifier, RedisNotifier
from .polls import PollBoard, parse_options
from .feed import ClassFeed
from .catalog import TaskCatalog
from .memory_store import MemoryStore, seed_demo_data

__all__ = [
    "Classroom",
    "PendingQuiz",
    "QuizOutcome",
    "QuizGenerator",
    "fallback_quiz",
    "Notifier",
    "RedisNotifier",
    "PollBoard",
    "parse_options",
    "ClassFeed",
    "TaskCatalog",
    "MemoryStore",
    "seed_demo_data",
]
