"""Quiz score aggregation."""

from typing import Optional, Sequence

from .errors import InvalidQuizState
from .models import QuizQuestion
from .score_history import round_half_up


def count_correct(questions: Sequence[QuizQuestion], answers: Sequence[Optional[int]]) -> int:
    """Number of questions whose submitted answer index matches.

    Missing answers (short list or None) count as wrong.
    """
    correct = 0
    for idx, question in enumerate(questions):
        if idx < len(answers) and answers[idx] == question.correct_answer_index:
            correct += 1
    return correct


def score_quiz(questions: Sequence[QuizQuestion], answers: Sequence[Optional[int]]) -> int:
    """
    Score a submitted quiz as a 0-100 percentage.

    Args:
        questions: Questions as generated
        answers: Submitted option indices, one per question

    Returns:
        round(100 * correct / total), halves rounded up

    Raises:
        InvalidQuizState: If the quiz has no questions
    """
    total = len(questions)
    if total == 0:
        raise InvalidQuizState("Cannot score a quiz with zero questions")
    return round_half_up(100 * count_correct(questions, answers) / total)
