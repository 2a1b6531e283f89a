"""
FastAPI Backend for the AMEP classroom dashboard.

Students get quizzes generated at an adaptive difficulty; teachers watch
mastery, post resources and run live polls; everyone shares the class chat.

Endpoints:
    GET  /learners/{id}                     - Learner snapshot
    GET  /learners/{id}/difficulty          - Next quiz difficulty
    GET  /learners/{id}/insights            - Score chart + suggestion
    POST /learners/{id}/classes             - Join a class
    POST /learners/{id}/quizzes             - Generate a quiz for a task
    POST /learners/{id}/quizzes/{quiz}/submit - Score and record a quiz
    GET  /classes/{code}/students           - Teacher roster view
    GET/POST /tasks, GET /tasks/recommended
    GET/POST /resources, GET/POST /messages
    GET/POST/DELETE /poll, POST /poll/vote
"""

import logging
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import config
from classroom import roster
from classroom.memory_store import MemoryStore
from classroom.notifier import Notifier, RedisNotifier
from classroom.polls import parse_options
from classroom.quiz_generator import QuizGenerator
from classroom.service import Classroom
from core.difficulty_estimator import DifficultyEstimator
from core.errors import (
    InvalidClassCode,
    InvalidQuizState,
    InvalidVote,
    LearnerNotFound,
    PollClosed,
    QuizNotFound,
    TaskNotFound,
)
from core.models import Learner
from redis_store import RedisStore

logger = logging.getLogger(__name__)

# ==================== Initialize ====================

app = FastAPI(
    title="AMEP Classroom API",
    description="Adaptive quizzes, mastery tracking, live polls and class feed",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def build_classroom() -> Classroom:
    """Wire the classroom from configuration."""
    for issue in config.validate_config():
        logger.warning(issue)

    if config.STORE_BACKEND == "redis":
        store = RedisStore()
        notifier = RedisNotifier(store.client)
    else:
        store = MemoryStore()
        notifier = Notifier()

    if config.ADAPTIVE_MODEL_ENABLED:
        estimator = DifficultyEstimator.with_regression()
    else:
        estimator = DifficultyEstimator()

    return Classroom(store, estimator=estimator, generator=QuizGenerator(), notifier=notifier)


_classroom: Optional[Classroom] = None


def get_classroom() -> Classroom:
    global _classroom
    if _classroom is None:
        _classroom = build_classroom()
    return _classroom


# ==================== Request/Response Models ====================

class JoinClassRequest(BaseModel):
    code: str


class StartQuizRequest(BaseModel):
    task_id: str


class SubmitQuizRequest(BaseModel):
    answers: List[Optional[int]]


class SubmitQuizResponse(BaseModel):
    score: int
    correct_count: int
    total: int
    mastery: int
    next_difficulty: int
    attempt: dict


class AddTaskRequest(BaseModel):
    title: str
    topic: str
    type: str = "quiz"


class PostResourceRequest(BaseModel):
    title: str
    content: str = ""
    type: str = "note"
    file_url: Optional[str] = None
    file_name: Optional[str] = None


class SendMessageRequest(BaseModel):
    sender_id: str
    text: str


class StartPollRequest(BaseModel):
    question: str
    options: Optional[List[str]] = None
    options_text: Optional[str] = None  # "a, b, c" as typed by the teacher


class VoteRequest(BaseModel):
    student_id: str
    option_index: int


# ==================== Helper Functions ====================

def load_learner(classroom: Classroom, learner_id: str) -> Learner:
    try:
        return classroom.learner(learner_id)
    except LearnerNotFound:
        raise HTTPException(status_code=404, detail="Learner not found")


def roster_entry(learner: Learner) -> dict:
    """Teacher's view of one student."""
    return {
        "id": learner.id,
        "name": learner.name,
        "mastery_score": learner.mastery_score,
        "engagement": roster.engagement_score(learner),
        "at_risk": roster.is_at_risk(learner),
        "attempts": len(learner.task_history),
    }


# ==================== Core Endpoints ====================

@app.get("/")
def root(classroom: Classroom = Depends(get_classroom)):
    return {
        "status": "ok",
        "message": "AMEP Classroom API is running",
        "version": "1.0.0",
        "features": {
            "adaptive_model": classroom.estimator.accelerator is not None,
            "store": type(classroom.store).__name__,
        }
    }


@app.get("/learners/{learner_id}")
def get_learner(learner_id: str, classroom: Classroom = Depends(get_classroom)):
    return load_learner(classroom, learner_id).to_dict()


@app.get("/learners/{learner_id}/difficulty")
def get_next_difficulty(learner_id: str, classroom: Classroom = Depends(get_classroom)):
    try:
        difficulty = classroom.next_difficulty(learner_id)
    except LearnerNotFound:
        raise HTTPException(status_code=404, detail="Learner not found")
    return {"learner_id": learner_id, "difficulty": difficulty}


@app.get("/learners/{learner_id}/insights")
def get_insights(learner_id: str, classroom: Classroom = Depends(get_classroom)):
    learner = load_learner(classroom, learner_id)
    return {
        "learner_id": learner_id,
        "mastery_score": learner.mastery_score,
        "history": roster.history_chart(learner),
        "suggestion": roster.improvement_suggestion(learner),
    }


@app.post("/learners/{learner_id}/classes")
def join_class(learner_id: str, request: JoinClassRequest,
               classroom: Classroom = Depends(get_classroom)):
    try:
        learner = classroom.join_class(learner_id, request.code)
    except LearnerNotFound:
        raise HTTPException(status_code=404, detail="Learner not found")
    except InvalidClassCode as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "class_code": learner.class_code,
        "enrolled_class_codes": list(learner.enrolled_class_codes),
    }


# ==================== Quiz Endpoints ====================

@app.post("/learners/{learner_id}/quizzes")
def start_quiz(learner_id: str, request: StartQuizRequest,
               classroom: Classroom = Depends(get_classroom)):
    try:
        pending = classroom.start_quiz(learner_id, request.task_id)
    except LearnerNotFound:
        raise HTTPException(status_code=404, detail="Learner not found")
    except TaskNotFound:
        raise HTTPException(status_code=404, detail="Task not found")
    return pending.to_public_dict()


@app.post("/learners/{learner_id}/quizzes/{quiz_id}/submit", response_model=SubmitQuizResponse)
def submit_quiz(learner_id: str, quiz_id: str, request: SubmitQuizRequest,
                classroom: Classroom = Depends(get_classroom)):
    try:
        outcome = classroom.submit_quiz(learner_id, quiz_id, request.answers)
    except QuizNotFound:
        raise HTTPException(status_code=404, detail="Quiz not found")
    except LearnerNotFound:
        raise HTTPException(status_code=404, detail="Learner not found")
    except InvalidQuizState as e:
        raise HTTPException(status_code=422, detail=str(e))

    return SubmitQuizResponse(
        score=outcome.score,
        correct_count=outcome.correct_count,
        total=outcome.total,
        mastery=outcome.learner.mastery_score,
        next_difficulty=outcome.next_difficulty,
        attempt=outcome.attempt.to_dict()
    )


# ==================== Teacher Endpoints ====================

@app.get("/classes/{code}/students")
def get_class_students(code: str, classroom: Classroom = Depends(get_classroom)):
    students = classroom.class_students(code)
    return {
        "class_code": code,
        "students": [roster_entry(s) for s in students],
        "at_risk_count": sum(1 for s in students if roster.is_at_risk(s)),
    }


@app.get("/tasks")
def list_tasks(classroom: Classroom = Depends(get_classroom)):
    return {"tasks": [t.to_dict() for t in classroom.catalog.list_tasks()]}


@app.post("/tasks")
def add_task(request: AddTaskRequest, classroom: Classroom = Depends(get_classroom)):
    try:
        task = classroom.catalog.add_task(request.title, request.topic, request.type)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return task.to_dict()


@app.get("/tasks/recommended")
def recommended_tasks(learner_id: str, classroom: Classroom = Depends(get_classroom)):
    try:
        difficulty = classroom.next_difficulty(learner_id)
    except LearnerNotFound:
        raise HTTPException(status_code=404, detail="Learner not found")
    tasks = classroom.catalog.recommend_tasks(difficulty)
    return {"difficulty": difficulty, "tasks": [t.to_dict() for t in tasks]}


# ==================== Feed Endpoints ====================

@app.get("/resources")
def list_resources(classroom: Classroom = Depends(get_classroom)):
    return {"resources": [r.to_dict() for r in classroom.feed.resources()]}


@app.post("/resources")
def post_resource(request: PostResourceRequest, classroom: Classroom = Depends(get_classroom)):
    try:
        resource = classroom.feed.post_resource(
            request.title,
            content=request.content,
            type=request.type,
            file_url=request.file_url,
            file_name=request.file_name
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return resource.to_dict()


@app.get("/messages")
def list_messages(classroom: Classroom = Depends(get_classroom)):
    return {"messages": [m.to_dict() for m in classroom.feed.messages()]}


@app.post("/messages")
def send_message(request: SendMessageRequest, classroom: Classroom = Depends(get_classroom)):
    sender = load_learner(classroom, request.sender_id)
    try:
        message = classroom.feed.send_message(sender, request.text)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return message.to_dict()


# ==================== Poll Endpoints ====================

@app.get("/poll")
def get_poll(classroom: Classroom = Depends(get_classroom)):
    poll = classroom.polls.active()
    return {"poll": poll.to_dict() if poll else None}


@app.post("/poll")
def start_poll(request: StartPollRequest, classroom: Classroom = Depends(get_classroom)):
    options = request.options
    if options is None:
        options = parse_options(request.options_text or "")
    try:
        poll = classroom.polls.start(request.question, options)
    except InvalidVote as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"poll": poll.to_dict()}


@app.post("/poll/vote")
def vote(request: VoteRequest, classroom: Classroom = Depends(get_classroom)):
    try:
        poll = classroom.polls.vote(request.student_id, request.option_index)
    except PollClosed as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidVote as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {"poll": poll.to_dict()}


@app.delete("/poll")
def end_poll(classroom: Classroom = Depends(get_classroom)):
    poll = classroom.polls.end()
    return {"poll": poll.to_dict() if poll else None}


# ==================== Run Server ====================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.main:app", host="0.0.0.0", port=8000, reload=True)
