"""Aggregation of a terminal session into a ``QuizResult``."""

from __future__ import annotations

from datetime import datetime, timezone
import math
from typing import Sequence

from quiz_engine.core.identifiers import generate_result_id
from quiz_engine.core.models import Question, QuizResult, QuizSession


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def calculate_score(session: QuizSession, questions: Sequence[Question]) -> int:
    points_by_id = {question.id: question.points for question in questions}
    # Answers for unknown question ids contribute nothing.
    return sum(points_by_id.get(answer.question_id, 0) for answer in session.answers if answer.is_correct)


def calculate_max_score(questions: Sequence[Question]) -> int:
    return sum(question.points for question in questions)


def calculate_correct_count(session: QuizSession) -> int:
    return sum(1 for answer in session.answers if answer.is_correct)


def calculate_time_taken(session: QuizSession) -> int:
    return sum(answer.time_taken for answer in session.answers)


def calculate_percentage(score: int, max_score: int) -> int:
    if max_score <= 0:
        return 0
    return min(100, max(0, round_half_up(score / max_score * 100)))


def complete_session(
    session: QuizSession,
    questions: Sequence[Question],
    quiz_name: str,
    user_id: str,
    username: str,
) -> QuizResult:
    """Score a session against the full question list.

    ``max_score`` always covers every supplied question, so finishing early
    leaves unanswered points in the denominator.
    """
    score = calculate_score(session, questions)
    max_score = calculate_max_score(questions)
    return QuizResult(
        id=generate_result_id(),
        quiz_id=session.quiz_id,
        quiz_name=quiz_name,
        user_id=user_id,
        username=username,
        score=score,
        max_score=max_score,
        percentage=calculate_percentage(score, max_score),
        correct_count=calculate_correct_count(session),
        total_questions=len(questions),
        time_taken=calculate_time_taken(session),
        completed_at=datetime.now(timezone.utc),
        answers=session.answers,
    )
