"""Shared fixtures: stores, a dict-backed Redis double and a scripted quiz generator."""

import sys
sys.path.append(".")

import pytest

from classroom.memory_store import MemoryStore
from classroom.notifier import Notifier
from classroom.service import Classroom
from core.difficulty_estimator import DifficultyEstimator
from core.models import QuizQuestion


class FakeRedis:
    """Just enough of the redis-py client (decode_responses=True) for RedisStore."""

    def __init__(self):
        self.strings = {}
        self.hashes = {}
        self.lists = {}
        self.sets = {}
        self.published = []

    def get(self, key):
        return self.strings.get(key)

    def set(self, key, value):
        self.strings[key] = value
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            for space in (self.strings, self.hashes, self.lists, self.sets):
                if key in space:
                    del space[key]
                    removed += 1
        return removed

    def sadd(self, key, *members):
        self.sets.setdefault(key, set()).update(members)

    def srem(self, key, *members):
        self.sets.get(key, set()).difference_update(members)

    def smembers(self, key):
        return set(self.sets.get(key, set()))

    def hset(self, key, field, value):
        self.hashes.setdefault(key, {})[field] = value

    def hget(self, key, field):
        return self.hashes.get(key, {}).get(field)

    def hgetall(self, key):
        return dict(self.hashes.get(key, {}))

    def lpush(self, key, *values):
        for value in values:
            self.lists.setdefault(key, []).insert(0, value)

    def rpush(self, key, *values):
        self.lists.setdefault(key, []).extend(values)

    def lrange(self, key, start, end):
        items = self.lists.get(key, [])
        return items[start:] if end == -1 else items[start:end + 1]

    def publish(self, channel, message):
        self.published.append((channel, message))
        return 0


class ScriptedGenerator:
    """Quiz generator that returns fixed questions and records requests."""

    def __init__(self, questions=None):
        self.questions = questions if questions is not None else make_questions(5)
        self.requests = []

    def generate(self, topic, difficulty):
        self.requests.append((topic, difficulty))
        return list(self.questions)


def make_questions(count, correct_index=0):
    return [
        QuizQuestion(
            question=f"Question {i + 1}?",
            options=("A", "B", "C", "D"),
            correct_answer_index=correct_index,
        )
        for i in range(count)
    ]


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def empty_store():
    return MemoryStore(seed=False)


@pytest.fixture
def generator():
    return ScriptedGenerator()


@pytest.fixture
def classroom(store, generator):
    return Classroom(store, estimator=DifficultyEstimator(), generator=generator, notifier=Notifier())
