"""
Data model - Learners, attempts, quiz questions and classroom feed records.

All records are plain dataclasses with dict round-tripping for the stores.
Learner and TaskAttempt are frozen: updates go through dataclasses.replace
and callers must use the returned snapshot.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from config import DEFAULT_MASTERY


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"


@dataclass(frozen=True)
class QuizQuestion:
    """A multiple-choice question."""
    question: str
    options: Tuple[str, ...]
    correct_answer_index: int

    def to_dict(self) -> dict:
        return {
            "question": self.question,
            "options": list(self.options),
            "correct_answer_index": self.correct_answer_index,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuizQuestion":
        return cls(
            question=data["question"],
            options=tuple(data["options"]),
            correct_answer_index=int(data["correct_answer_index"]),
        )


@dataclass(frozen=True)
class TaskAttempt:
    """One completed quiz submission. Never mutated after creation."""
    id: str
    task_id: str
    task_title: str
    difficulty: int  # Difficulty the quiz was generated at
    score: int
    timestamp: int  # Epoch milliseconds
    questions: Tuple[QuizQuestion, ...]  # Exactly what was asked

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "task_title": self.task_title,
            "difficulty": self.difficulty,
            "score": self.score,
            "timestamp": self.timestamp,
            "questions": [q.to_dict() for q in self.questions],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TaskAttempt":
        return cls(
            id=data["id"],
            task_id=data["task_id"],
            task_title=data["task_title"],
            difficulty=int(data["difficulty"]),
            score=int(data["score"]),
            timestamp=int(data["timestamp"]),
            questions=tuple(QuizQuestion.from_dict(q) for q in data.get("questions", [])),
        )


@dataclass(frozen=True)
class SoftSkills:
    collaboration: int = 50
    communication: int = 50


@dataclass(frozen=True)
class Learner:
    """A student or teacher account with its adaptive state."""
    id: str
    name: str
    email: str
    role: UserRole = UserRole.STUDENT
    mastery_score: int = DEFAULT_MASTERY
    class_code: Optional[str] = None  # Active class
    enrolled_class_codes: Tuple[str, ...] = ()
    soft_skills: SoftSkills = field(default_factory=SoftSkills)
    recent_scores: Tuple[int, ...] = ()  # Most recent last
    task_history: Tuple[TaskAttempt, ...] = ()  # Newest first

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "mastery_score": self.mastery_score,
            "class_code": self.class_code,
            "enrolled_class_codes": list(self.enrolled_class_codes),
            "soft_skills": {
                "collaboration": self.soft_skills.collaboration,
                "communication": self.soft_skills.communication,
            },
            "recent_scores": list(self.recent_scores),
            "task_history": [a.to_dict() for a in self.task_history],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Learner":
        skills = data.get("soft_skills", {})
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            role=UserRole(data.get("role", UserRole.STUDENT.value)),
            mastery_score=int(data.get("mastery_score", DEFAULT_MASTERY)),
            class_code=data.get("class_code"),
            enrolled_class_codes=tuple(data.get("enrolled_class_codes", [])),
            soft_skills=SoftSkills(
                collaboration=int(skills.get("collaboration", 50)),
                communication=int(skills.get("communication", 50)),
            ),
            recent_scores=tuple(int(s) for s in data.get("recent_scores", [])),
            task_history=tuple(TaskAttempt.from_dict(a) for a in data.get("task_history", [])),
        )


@dataclass
class Task:
    """A task template. Difficulty is set adaptively per learner."""
    id: str
    title: str
    topic: str
    type: str = "quiz"  # "quiz" or "project"

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "topic": self.topic, "type": self.type}

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        return cls(
            id=data["id"],
            title=data["title"],
            topic=data["topic"],
            type=data.get("type", "quiz"),
        )


@dataclass
class ClassResource:
    """A note, homework or file posted to the class feed."""
    id: str
    title: str
    type: str  # "note", "homework", "pdf"
    content: str
    date: str
    file_url: Optional[str] = None
    file_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "content": self.content,
            "date": self.date,
            "file_url": self.file_url,
            "file_name": self.file_name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClassResource":
        return cls(
            id=data["id"],
            title=data["title"],
            type=data.get("type", "note"),
            content=data.get("content", ""),
            date=data.get("date", ""),
            file_url=data.get("file_url"),
            file_name=data.get("file_name"),
        )


@dataclass
class ChatMessage:
    id: str
    sender_id: str
    sender_name: str
    role: UserRole
    text: str
    timestamp: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender_id": self.sender_id,
            "sender_name": self.sender_name,
            "role": self.role.value,
            "text": self.text,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ChatMessage":
        return cls(
            id=data["id"],
            sender_id=data["sender_id"],
            sender_name=data["sender_name"],
            role=UserRole(data.get("role", UserRole.STUDENT.value)),
            text=data["text"],
            timestamp=int(data["timestamp"]),
        )


@dataclass
class Poll:
    """A live poll. Only one is active at a time."""
    id: str
    question: str
    options: List[str]
    active: bool = True
    responses: Dict[int, int] = field(default_factory=dict)  # option index -> count
    voters: List[str] = field(default_factory=list)

    @property
    def total_votes(self) -> int:
        return sum(self.responses.values())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "active": self.active,
            # JSON object keys are strings
            "responses": {str(k): v for k, v in self.responses.items()},
            "voters": list(self.voters),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Poll":
        return cls(
            id=data["id"],
            question=data["question"],
            options=list(data["options"]),
            active=bool(data.get("active", True)),
            responses={int(k): int(v) for k, v in data.get("responses", {}).items()},
            voters=list(data.get("voters", [])),
        )
