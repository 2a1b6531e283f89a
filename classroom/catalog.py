"""Task catalog - topics students can be quizzed on."""

import logging
import random
import uuid
from typing import List, Optional

from config import RECOMMENDED_TASKS
from core.errors import TaskNotFound
from core.models import Task

logger = logging.getLogger(__name__)

TASKS_TOPIC = "tasks"
TASK_TYPES = ("quiz", "project")


class TaskCatalog:
    def __init__(self, store, notifier, rng: Optional[random.Random] = None):
        self.store = store
        self.notifier = notifier
        self.rng = rng or random.Random()

    def list_tasks(self) -> List[Task]:
        return self.store.list_tasks()

    def get_task(self, task_id: str) -> Task:
        task = self.store.get_task(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    def add_task(self, title: str, topic: str, type: str = "quiz") -> Task:
        if not title.strip() or not topic.strip():
            raise ValueError("Task title and topic are required")
        if type not in TASK_TYPES:
            raise ValueError(f"Unknown task type {type!r}")

        task = Task(id=str(uuid.uuid4()), title=title.strip(), topic=topic.strip(), type=type)
        self.store.add_task(task)
        logger.info("Task added: %s (%s)", task.title, task.topic)
        self.notifier.publish(TASKS_TOPIC, {"event": "added", "task": task.to_dict()})
        return task

    def recommend_tasks(self, difficulty: int, limit: int = RECOMMENDED_TASKS) -> List[Task]:
        """
        Tasks to offer a learner.

        Difficulty is generated per quiz, so any topic suits any learner;
        this returns a random sample of the catalog.
        """
        tasks = self.list_tasks()
        return self.rng.sample(tasks, min(limit, len(tasks)))
