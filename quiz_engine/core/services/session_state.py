"""State transitions for a single quiz attempt.

Sessions are frozen values: every transition returns a new ``QuizSession``
and leaves its input untouched. Once a session is ``completed`` or
``timed_out`` it is terminal and every mutating transition raises
``SessionClosedError``.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
import logging
from typing import Sequence

from quiz_engine.core.answer_validation import validate_answer
from quiz_engine.core.errors import SessionClosedError
from quiz_engine.core.identifiers import generate_session_id
from quiz_engine.core.models import Question, QuizSession, SessionStatus, UserAnswer

logger = logging.getLogger(__name__)


def create_session(quiz_id: str, questions: Sequence[Question], time_limit: int = 0) -> QuizSession:
    session = QuizSession(
        id=generate_session_id(),
        quiz_id=quiz_id,
        started_at=datetime.now(timezone.utc),
        current_question_index=0,
        answers=(),
        time_remaining=time_limit,
        status=SessionStatus.IN_PROGRESS,
    )
    logger.debug("Created session %s for quiz %s (%d questions).", session.id, quiz_id, len(questions))
    return session


def submit_answer(
    session: QuizSession,
    question: Question,
    selected_options: Sequence[str],
    text_answer: str | None,
    time_taken: int,
) -> QuizSession:
    """Validate and record an answer, then advance to the next question."""
    _ensure_in_progress(session)
    answer = UserAnswer(
        question_id=question.id,
        selected_options=tuple(selected_options),
        text_answer=text_answer,
        is_correct=validate_answer(question, selected_options, text_answer),
        answered_at=datetime.now(timezone.utc),
        time_taken=time_taken,
    )
    return replace(
        session,
        answers=session.answers + (answer,),
        current_question_index=session.current_question_index + 1,
    )


def skip_question(session: QuizSession, question: Question, time_taken: int) -> QuizSession:
    """Record the question as unanswered; it is scored as incorrect."""
    return submit_answer(session, question, (), None, time_taken)


def has_more_questions(session: QuizSession, total_questions: int) -> bool:
    return session.current_question_index < total_questions


def mark_session_completed(session: QuizSession) -> QuizSession:
    _ensure_in_progress(session)
    return replace(session, status=SessionStatus.COMPLETED)


def timeout_session(session: QuizSession) -> QuizSession:
    _ensure_in_progress(session)
    return replace(session, status=SessionStatus.TIMED_OUT)


def update_time_remaining(session: QuizSession, time_remaining: int) -> QuizSession:
    _ensure_in_progress(session)
    return replace(session, time_remaining=max(0, time_remaining))


def _ensure_in_progress(session: QuizSession) -> None:
    if session.status is not SessionStatus.IN_PROGRESS:
        raise SessionClosedError(f"Session {session.id} is already {session.status.value}.")
