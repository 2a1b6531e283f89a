"""
Quiz Generator - LLM-backed multiple-choice quiz generation.

Features:
    - Difficulty-calibrated prompt (0 = elementary, 100 = expert/university)
    - Structured output validated into QuizQuestion records
    - Static single-question fallback when generation is unavailable
"""

import logging
from typing import List, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, Field

from config import OPENAI_MODEL, OPENAI_TEMPERATURE, OPTIONS_PER_QUESTION, QUESTIONS_PER_QUIZ
from core.errors import GatewayUnavailable
from core.models import QuizQuestion

logger = logging.getLogger(__name__)


class GeneratedQuestion(BaseModel):
    question: str
    options: List[str]
    correct_answer_index: int = Field(description="The index (0-3) of the correct option.")


class GeneratedQuiz(BaseModel):
    questions: List[GeneratedQuestion]


SYSTEM_PROMPT = """You write multiple-choice quizzes for a classroom.
Every question has exactly {options} options and exactly one correct option.
Return the zero-based index of the correct option in correct_answer_index."""

QUIZ_PROMPT = """Generate a {count}-question multiple-choice quiz about "{topic}".
The difficulty level is {difficulty} out of 100.
100 is expert/university level, 0 is beginner/elementary level.
Adjust the complexity of the questions strictly according to this difficulty.
Provide {options} options for each question."""


def fallback_quiz(topic: str) -> List[QuizQuestion]:
    """Static quiz used when generation fails."""
    return [
        QuizQuestion(
            question=f"(Fallback) What is a key concept in {topic}?",
            options=("Concept A", "Concept B", "Concept C", "Concept D"),
            correct_answer_index=0,
        )
    ]


def validate_questions(raw: List[GeneratedQuestion], limit: int,
                       options: int = OPTIONS_PER_QUESTION) -> List[QuizQuestion]:
    """
    Convert generated questions, rejecting the whole quiz on any malformed one.

    Fewer than `limit` questions is malformed; extra questions are trimmed.
    """
    if not raw:
        raise GatewayUnavailable("Generator returned no questions")
    if len(raw) < limit:
        raise GatewayUnavailable(f"Generator returned {len(raw)} questions, expected {limit}")

    questions = []
    for idx, item in enumerate(raw[:limit]):
        if not item.question.strip():
            raise GatewayUnavailable(f"Question {idx + 1} is empty")
        if len(item.options) != options:
            raise GatewayUnavailable(
                f"Question {idx + 1} has {len(item.options)} options, expected {options}"
            )
        if not 0 <= item.correct_answer_index < options:
            raise GatewayUnavailable(
                f"Question {idx + 1} has answer index {item.correct_answer_index}"
            )
        questions.append(QuizQuestion(
            question=item.question.strip(),
            options=tuple(o.strip() for o in item.options),
            correct_answer_index=item.correct_answer_index,
        ))
    return questions


class QuizGenerator:
    """
    Quiz generation gateway.

    The chat model is created on first use so the app starts without an
    API key; a missing key then surfaces as GatewayUnavailable.
    """

    def __init__(self, model: str = OPENAI_MODEL, temperature: float = OPENAI_TEMPERATURE,
                 llm=None, num_questions: int = QUESTIONS_PER_QUIZ):
        self.model = model
        self.temperature = temperature
        self.llm = llm
        self.num_questions = num_questions

    def _get_llm(self):
        if self.llm is None:
            self.llm = ChatOpenAI(model=self.model, temperature=self.temperature)
        return self.llm

    def request_quiz(self, topic: str, difficulty: int) -> List[QuizQuestion]:
        """
        Ask the model for a quiz.

        Raises:
            GatewayUnavailable: On any client error or malformed output
        """
        messages = [
            SystemMessage(content=SYSTEM_PROMPT.format(options=OPTIONS_PER_QUESTION)),
            HumanMessage(content=QUIZ_PROMPT.format(
                count=self.num_questions,
                topic=topic,
                difficulty=difficulty,
                options=OPTIONS_PER_QUESTION,
            )),
        ]

        try:
            structured = self._get_llm().with_structured_output(GeneratedQuiz)
            result = structured.invoke(messages)
            if isinstance(result, dict):
                result = GeneratedQuiz.model_validate(result)
        except Exception as e:
            raise GatewayUnavailable(f"Quiz generation failed: {e}") from e

        if not isinstance(result, GeneratedQuiz):
            raise GatewayUnavailable(f"Unexpected generator output: {type(result).__name__}")

        return validate_questions(result.questions, self.num_questions)

    def generate(self, topic: str, difficulty: int) -> List[QuizQuestion]:
        """Generate a quiz, substituting the fallback quiz on failure."""
        try:
            questions = self.request_quiz(topic, difficulty)
        except GatewayUnavailable as e:
            logger.error("AI generation error for %r, using fallback quiz: %s", topic, e)
            return fallback_quiz(topic)

        logger.info("Generated %d questions for %r at difficulty %d", len(questions), topic, difficulty)
        return questions
