"""Tests for api/main.py"""

import sys
sys.path.append(".")

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_classroom
from classroom.memory_store import MemoryStore
from classroom.notifier import Notifier
from classroom.service import Classroom
from conftest import ScriptedGenerator
from core.difficulty_estimator import DifficultyEstimator


@pytest.fixture
def classroom():
    return Classroom(
        MemoryStore(),
        estimator=DifficultyEstimator(),
        generator=ScriptedGenerator(),
        notifier=Notifier()
    )


@pytest.fixture
def client(classroom):
    app.dependency_overrides[get_classroom] = lambda: classroom
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_root(client):
    body = client.get("/").json()
    assert body["status"] == "ok"
    assert body["features"]["adaptive_model"] is False


def test_get_learner(client):
    body = client.get("/learners/student1").json()
    assert body["mastery_score"] == 65
    assert len(body["task_history"]) == 2


def test_unknown_learner_404(client):
    assert client.get("/learners/ghost").status_code == 404
    assert client.get("/learners/ghost/difficulty").status_code == 404


def test_next_difficulty(client):
    assert client.get("/learners/student2/difficulty").json()["difficulty"] == 46


def test_quiz_round_trip(client):
    quiz = client.post("/learners/student1/quizzes", json={"task_id": "1"}).json()
    assert quiz["difficulty"] == 70
    assert "correct_answer_index" not in quiz["questions"][0]

    response = client.post(
        f"/learners/student1/quizzes/{quiz['quiz_id']}/submit",
        json={"answers": [0, 0, 0, 1, 2]}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["score"] == 60
    assert body["correct_count"] == 3
    assert body["mastery"] == 65
    assert body["attempt"]["difficulty"] == 70
    assert len(body["attempt"]["questions"]) == 5

    history = client.get("/learners/student1").json()["task_history"]
    assert history[0]["id"] == body["attempt"]["id"]


def test_submit_unknown_quiz(client):
    response = client.post("/learners/student1/quizzes/nope/submit", json={"answers": []})
    assert response.status_code == 404


def test_losing_a_submit_race_is_404(classroom, client):
    quiz = client.post("/learners/student1/quizzes", json={"task_id": "1"}).json()
    lookup = classroom.pending_quiz
    raced = []

    def lookup_then_lose_race(learner_id, quiz_id):
        pending = lookup(learner_id, quiz_id)
        if not raced:
            # Another request submits the same quiz before this one takes the lock
            raced.append(quiz_id)
            classroom.submit_quiz(learner_id, quiz_id, [0] * 5)
        return pending

    classroom.pending_quiz = lookup_then_lose_race
    response = client.post(
        f"/learners/student1/quizzes/{quiz['quiz_id']}/submit", json={"answers": [0] * 5}
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Quiz not found"
    assert len(classroom.learner("student1").task_history) == 3


def test_empty_quiz_submission_rejected(classroom, client):
    classroom.generator = ScriptedGenerator(questions=[])
    quiz = client.post("/learners/student1/quizzes", json={"task_id": "1"}).json()
    response = client.post(f"/learners/student1/quizzes/{quiz['quiz_id']}/submit", json={"answers": []})
    assert response.status_code == 422


def test_unknown_task(client):
    response = client.post("/learners/student1/quizzes", json={"task_id": "99"})
    assert response.status_code == 404


def test_insights(client):
    body = client.get("/learners/student1/insights").json()
    assert [p["score"] for p in body["history"]] == [80, 60]
    assert "Newtonian Physics" in body["suggestion"]


def test_join_class_and_roster(client):
    assert client.post("/learners/student2/classes", json={"code": "SCI"}).status_code == 422
    body = client.post("/learners/student2/classes", json={"code": "SCI202"}).json()
    assert body["class_code"] == "SCI202"

    roster = client.get("/classes/SCI202/students").json()
    assert {s["id"] for s in roster["students"]} == {"student1", "student2"}
    assert roster["at_risk_count"] == 1


def test_tasks(client):
    created = client.post("/tasks", json={"title": "Vectors", "topic": "Math"}).json()
    ids = [t["id"] for t in client.get("/tasks").json()["tasks"]]
    assert created["id"] in ids
    assert client.post("/tasks", json={"title": "X", "topic": "Y", "type": "essay"}).status_code == 422

    recommended = client.get("/tasks/recommended", params={"learner_id": "student1"}).json()
    assert recommended["difficulty"] == 70
    assert len(recommended["tasks"]) == 4


def test_resources_and_chat(client):
    client.post("/resources", json={"title": "Week 2", "content": "Read ch. 3", "type": "homework"})
    assert client.get("/resources").json()["resources"][0]["title"] == "Week 2"

    sent = client.post("/messages", json={"sender_id": "student1", "text": "Thanks!"})
    assert sent.status_code == 200
    assert client.get("/messages").json()["messages"][-1]["text"] == "Thanks!"
    assert client.post("/messages", json={"sender_id": "ghost", "text": "hi"}).status_code == 404


def test_poll_flow(client):
    assert client.get("/poll").json()["poll"] is None
    assert client.post("/poll/vote", json={"student_id": "student1", "option_index": 0}).status_code == 409

    started = client.post("/poll", json={
        "question": "How well do you understand React Hooks?",
        "options_text": "Not at all, Somewhat, Very well, I can teach it"
    }).json()["poll"]
    assert len(started["options"]) == 4

    voted = client.post("/poll/vote", json={"student_id": "student1", "option_index": 2}).json()["poll"]
    assert voted["responses"]["2"] == 1
    assert client.post("/poll/vote", json={"student_id": "student1", "option_index": 1}).status_code == 422

    ended = client.delete("/poll").json()["poll"]
    assert ended["active"] is False
    assert client.get("/poll").json()["poll"] is None
