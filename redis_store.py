"""
Redis Store - learner records and classroom feed in Redis.

Key Structure:
    learner:{learner_id}  -> String (JSON learner document)
    learners              -> Set (all learner ids)
    tasks                 -> Hash (task_id -> JSON task)
    tasks:order           -> List (task ids in insertion order)
    resources             -> List (JSON resources, newest first)
    messages              -> List (JSON chat messages, oldest first)
    poll:active           -> String (JSON active poll)
"""

import json
from typing import List, Optional

import redis

from config import REDIS_HOST, REDIS_PASSWORD, REDIS_PORT
from core.errors import LearnerNotFound
from core.models import ChatMessage, ClassResource, Learner, Poll, Task


class RedisStore:
    def __init__(self, client=None):
        """Connect to Redis using environment variables, or wrap a given client."""
        self.client = client or redis.Redis(
            host=REDIS_HOST,
            port=REDIS_PORT,
            password=REDIS_PASSWORD,
            decode_responses=True  # Return strings instead of bytes
        )

    # ==================== Key Builders ====================

    def _learner_key(self, learner_id: str) -> str:
        """Redis key for a learner document."""
        return f"learner:{learner_id}"

    LEARNERS_KEY = "learners"
    TASKS_KEY = "tasks"
    TASK_ORDER_KEY = "tasks:order"
    RESOURCES_KEY = "resources"
    MESSAGES_KEY = "messages"
    POLL_KEY = "poll:active"

    # ==================== Learners ====================

    def get(self, learner_id: str) -> Learner:
        """
        Load a learner snapshot.

        Args:
            learner_id: Learner to load

        Returns:
            Learner record

        Raises:
            LearnerNotFound: If no document exists
        """
        raw = self.client.get(self._learner_key(learner_id))
        if raw is None:
            raise LearnerNotFound(learner_id)
        return Learner.from_dict(json.loads(raw))

    def save(self, learner: Learner):
        """
        Store a learner snapshot, replacing the previous one.

        Args:
            learner: Learner to store
        """
        self.client.set(self._learner_key(learner.id), json.dumps(learner.to_dict()))
        self.client.sadd(self.LEARNERS_KEY, learner.id)

    def list_learners(self) -> List[Learner]:
        """All stored learners, ordered by id."""
        learners = []
        for learner_id in sorted(self.client.smembers(self.LEARNERS_KEY)):
            raw = self.client.get(self._learner_key(learner_id))
            if raw is not None:
                learners.append(Learner.from_dict(json.loads(raw)))
        return learners

    def delete(self, learner_id: str):
        """Delete a learner (for testing/cleanup)."""
        self.client.delete(self._learner_key(learner_id))
        self.client.srem(self.LEARNERS_KEY, learner_id)

    # ==================== Tasks ====================

    def list_tasks(self) -> List[Task]:
        """Tasks in the order they were added."""
        tasks = []
        for task_id in self.client.lrange(self.TASK_ORDER_KEY, 0, -1):
            raw = self.client.hget(self.TASKS_KEY, task_id)
            if raw is not None:
                tasks.append(Task.from_dict(json.loads(raw)))
        return tasks

    def get_task(self, task_id: str) -> Optional[Task]:
        raw = self.client.hget(self.TASKS_KEY, task_id)
        return Task.from_dict(json.loads(raw)) if raw else None

    def add_task(self, task: Task):
        if self.client.hget(self.TASKS_KEY, task.id) is None:
            self.client.rpush(self.TASK_ORDER_KEY, task.id)
        self.client.hset(self.TASKS_KEY, task.id, json.dumps(task.to_dict()))

    # ==================== Resources ====================

    def list_resources(self) -> List[ClassResource]:
        raw = self.client.lrange(self.RESOURCES_KEY, 0, -1)
        return [ClassResource.from_dict(json.loads(r)) for r in raw]

    def add_resource(self, resource: ClassResource):
        # Prepend so the list reads newest first
        self.client.lpush(self.RESOURCES_KEY, json.dumps(resource.to_dict()))

    # ==================== Messages ====================

    def list_messages(self) -> List[ChatMessage]:
        raw = self.client.lrange(self.MESSAGES_KEY, 0, -1)
        return [ChatMessage.from_dict(json.loads(m)) for m in raw]

    def add_message(self, message: ChatMessage):
        self.client.rpush(self.MESSAGES_KEY, json.dumps(message.to_dict()))

    # ==================== Poll ====================

    def get_poll(self) -> Optional[Poll]:
        raw = self.client.get(self.POLL_KEY)
        return Poll.from_dict(json.loads(raw)) if raw else None

    def set_poll(self, poll: Poll):
        self.client.set(self.POLL_KEY, json.dumps(poll.to_dict()))

    def clear_poll(self):
        self.client.delete(self.POLL_KEY)
