"""Tests for classroom/feed.py and classroom/catalog.py"""

import sys
sys.path.append(".")

import random

import pytest

from classroom.catalog import TaskCatalog
from classroom.feed import ClassFeed
from classroom.notifier import Notifier
from core.errors import TaskNotFound


@pytest.fixture
def notifier():
    return Notifier()


def test_resources_newest_first(store, notifier):
    feed = ClassFeed(store, notifier)
    posted = []
    notifier.subscribe("resources", lambda t, p: posted.append(p["resource"]["title"]))

    feed.post_resource("Week 2: Quadratics", "Factor these", type="homework")

    titles = [r.title for r in feed.resources()]
    assert titles == ["Week 2: Quadratics", "Week 1: Algebra Notes"]
    assert posted == ["Week 2: Quadratics"]


def test_pdf_resource_keeps_attachment(store, notifier):
    resource = ClassFeed(store, notifier).post_resource(
        "Syllabus", type="pdf", file_url="data:application/pdf;base64,AAAA", file_name="syllabus.pdf"
    )
    assert store.list_resources()[0].file_name == "syllabus.pdf"
    assert resource.date


def test_unknown_resource_type_rejected(store, notifier):
    with pytest.raises(ValueError):
        ClassFeed(store, notifier).post_resource("Video", type="video")


def test_chat_oldest_first(store, notifier):
    feed = ClassFeed(store, notifier)
    student = store.get("student1")

    message = feed.send_message(student, "  Can we review derivatives?  ")

    messages = feed.messages()
    assert messages[0].text == "Welcome to the class everyone!"
    assert messages[-1].id == message.id
    assert message.text == "Can we review derivatives?"
    assert message.sender_name == "Alex Johnson"


def test_empty_message_rejected(store, notifier):
    with pytest.raises(ValueError):
        ClassFeed(store, notifier).send_message(store.get("student1"), "   ")


def test_catalog_add_and_get(store, notifier):
    catalog = TaskCatalog(store, notifier)
    task = catalog.add_task("Probability Basics", "Math")
    assert catalog.get_task(task.id) == task
    assert len(catalog.list_tasks()) == 7


def test_catalog_unknown_task(store, notifier):
    with pytest.raises(TaskNotFound):
        TaskCatalog(store, notifier).get_task("nope")


def test_recommendations_sample_catalog(store, notifier):
    catalog = TaskCatalog(store, notifier, rng=random.Random(7))
    picks = catalog.recommend_tasks(65)
    ids = [t.id for t in picks]
    assert len(ids) == 4
    assert len(set(ids)) == 4
    assert set(ids) <= {t.id for t in catalog.list_tasks()}


def test_recommendations_with_small_catalog(empty_store, notifier):
    catalog = TaskCatalog(empty_store, notifier)
    catalog.add_task("Only Task", "Math")
    assert len(catalog.recommend_tasks(50)) == 1
