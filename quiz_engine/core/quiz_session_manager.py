"""Coordinates one quiz attempt: session state, both timers, scoring and storage."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Sequence

from quiz_engine.constants.quiz_constants import DEFAULT_USER_ID, DEFAULT_USERNAME, NO_TIME_LIMIT
from quiz_engine.core.errors import NoQuestionsAvailableError
from quiz_engine.core.models import (
    Progress,
    Question,
    Quiz,
    QuizResult,
    QuizSession,
    SessionStatus,
    TimerSnapshot,
)
from quiz_engine.core.scoring import complete_session, round_half_up
from quiz_engine.core.services import session_state
from quiz_engine.core.services.countdown_timer import CountdownTimer
from quiz_engine.core.services.result_store import ResultStore
from quiz_engine.utils.scheduling import TickScheduler

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionCallbacks:
    """Optional notifications for presentation code."""

    on_complete: Callable[[QuizResult], None] | None = None
    on_timeout: Callable[[], None] | None = None
    on_question_timeout: Callable[[], None] | None = None
    on_timer_tick: Callable[[int], None] | None = None
    on_question_timer_tick: Callable[[int], None] | None = None
    on_state_change: Callable[["QuizSessionManager"], None] | None = None


class QuizSessionManager:
    """Facade that owns the live session, the quiz timer and the question timer.

    Everything runs on the caller's thread: operations and timer ticks each
    run to completion before the next one starts. Only the first terminal
    transition (finish, last answer, or quiz timeout) is scored; the guard is
    cleared by ``start_session`` and ``reset_session``.
    """

    def __init__(
        self,
        quiz: Quiz,
        questions: Sequence[Question],
        scheduler: TickScheduler,
        *,
        user_id: str = DEFAULT_USER_ID,
        username: str = DEFAULT_USERNAME,
        result_store: ResultStore | None = None,
        callbacks: SessionCallbacks | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._quiz = quiz
        self._questions: tuple[Question, ...] = tuple(questions)
        self._user_id = user_id
        self._username = username
        self._result_store = result_store
        self._callbacks = callbacks or SessionCallbacks()
        self._clock = clock or scheduler.now

        self._session: QuizSession | None = None
        self._result: QuizResult | None = None
        self._terminated = False
        self._question_started_at: float = self._clock()

        self._quiz_timer = CountdownTimer(
            scheduler,
            initial_time=max(NO_TIME_LIMIT, quiz.time_limit),
            on_tick=self._on_quiz_timer_tick,
            on_expire=self._on_quiz_timer_expired,
        )
        first = self._questions[0] if self._questions else None
        self._question_timer = CountdownTimer(
            scheduler,
            initial_time=first.time_limit if first is not None and first.has_time_limit else NO_TIME_LIMIT,
            on_tick=self._on_question_timer_tick,
            on_expire=self._on_question_timer_expired,
        )

    # --- Reactive state ---

    @property
    def quiz(self) -> Quiz:
        return self._quiz

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def session(self) -> QuizSession | None:
        return self._session

    @property
    def result(self) -> QuizResult | None:
        return self._result

    @property
    def current_question(self) -> Question | None:
        if self._session is None or self._session.status is not SessionStatus.IN_PROGRESS:
            return None
        index = self._session.current_question_index
        if index >= len(self._questions):
            return None
        return self._questions[index]

    @property
    def is_in_progress(self) -> bool:
        return self._session is not None and self._session.status is SessionStatus.IN_PROGRESS

    @property
    def is_completed(self) -> bool:
        return self._session is not None and self._session.status.is_terminal

    @property
    def progress(self) -> Progress:
        current = self._session.current_question_index if self._session else 0
        total = len(self._questions)
        percentage = round_half_up(current / total * 100) if total > 0 else 0
        return Progress(current=current, total=total, percentage=percentage)

    @property
    def quiz_timer(self) -> TimerSnapshot:
        return self._quiz_timer.snapshot()

    @property
    def question_timer(self) -> TimerSnapshot:
        return self._question_timer.snapshot()

    @property
    def has_quiz_time_limit(self) -> bool:
        return self._quiz.time_limit > NO_TIME_LIMIT

    @property
    def has_question_time_limit(self) -> bool:
        question = self.current_question
        return question is not None and question.has_time_limit

    # --- Operations ---

    def start_session(self) -> QuizSession:
        """Begin a fresh attempt, discarding any previous session."""
        if not self._questions:
            raise NoQuestionsAvailableError(f"Quiz '{self._quiz.unique_key}' has no questions.")

        self._quiz_timer.pause()
        self._question_timer.pause()
        self._terminated = False
        self._result = None
        self._session = session_state.create_session(
            self._quiz.unique_key, self._questions, max(NO_TIME_LIMIT, self._quiz.time_limit)
        )
        self._question_started_at = self._clock()
        logger.info(
            "Started session %s for quiz %s (%d questions, limit %ss).",
            self._session.id,
            self._quiz.unique_key,
            len(self._questions),
            self._quiz.time_limit,
        )

        if self._quiz.time_limit > NO_TIME_LIMIT:
            self._quiz_timer.reset(self._quiz.time_limit)
            self._quiz_timer.start()
        else:
            self._quiz_timer.reset(NO_TIME_LIMIT)
        self._arm_question_timer(self._questions[0])
        self._notify_change()
        return self._session

    def submit_answer(self, selected_options: Sequence[str], text_answer: str | None = None) -> None:
        session = self._session
        question = self.current_question
        if session is None or question is None or self._terminated:
            logger.warning("Ignoring answer: no question is awaiting an answer.")
            return

        time_taken = self._elapsed_on_question()
        updated = session_state.submit_answer(session, question, selected_options, text_answer, time_taken)
        logger.debug(
            "Session %s answered %s (correct=%s, %ss).",
            updated.id,
            question.id,
            updated.answers[-1].is_correct,
            time_taken,
        )

        if not session_state.has_more_questions(updated, len(self._questions)):
            self._session = updated
            self._terminate(session_state.mark_session_completed(updated))
            return

        self._session = updated
        self._question_started_at = self._clock()
        self._arm_question_timer(self._questions[updated.current_question_index])
        self._notify_change()

    def skip_question(self) -> None:
        self.submit_answer([], None)

    def finish_quiz(self) -> QuizResult | None:
        """End the attempt early, scoring whatever has been answered."""
        if self._session is None or not self.is_in_progress or self._terminated:
            return None
        self._terminate(session_state.mark_session_completed(self._session))
        return self._result

    def reset_session(self) -> None:
        self._quiz_timer.reset()
        self._question_timer.reset()
        self._session = None
        self._result = None
        self._terminated = False
        self._notify_change()

    # --- Timer wiring ---

    def _arm_question_timer(self, question: Question) -> None:
        if question.has_time_limit:
            self._question_timer.reset(question.time_limit)
            self._question_timer.start()
        else:
            # Unlimited question: stop ticking and clear any earlier expiry.
            self._question_timer.reset(NO_TIME_LIMIT)

    def _on_quiz_timer_tick(self, time_remaining: int) -> None:
        if self.is_in_progress and not self._terminated:
            self._session = session_state.update_time_remaining(self._session, time_remaining)
        if self._callbacks.on_timer_tick is not None:
            self._callbacks.on_timer_tick(time_remaining)
        self._notify_change()

    def _on_question_timer_tick(self, time_remaining: int) -> None:
        if self._callbacks.on_question_timer_tick is not None:
            self._callbacks.on_question_timer_tick(time_remaining)
        self._notify_change()

    def _on_quiz_timer_expired(self) -> None:
        if self._session is None or not self.is_in_progress or self._terminated:
            return
        logger.info("Quiz timer expired for session %s.", self._session.id)
        self._terminate(session_state.timeout_session(self._session))

    def _on_question_timer_expired(self) -> None:
        if not self.is_in_progress or self._terminated or not self.has_question_time_limit:
            return
        logger.info("Question timer expired on %s; skipping.", self.current_question.id)
        if self._callbacks.on_question_timeout is not None:
            self._callbacks.on_question_timeout()
        self.skip_question()

    # --- Helpers ---

    def _terminate(self, terminal_session: QuizSession) -> None:
        if self._terminated:
            return
        self._terminated = True
        self._quiz_timer.pause()
        self._question_timer.pause()
        self._session = terminal_session

        result = complete_session(
            terminal_session,
            self._questions,
            self._quiz.display_name,
            self._user_id,
            self._username,
        )
        self._result = result
        logger.info(
            "Session %s %s: %d/%d (%d%%).",
            terminal_session.id,
            terminal_session.status.value,
            result.score,
            result.max_score,
            result.percentage,
        )
        if self._result_store is not None:
            self._result_store.save(result)

        if terminal_session.status is SessionStatus.TIMED_OUT and self._callbacks.on_timeout is not None:
            self._callbacks.on_timeout()
        if self._callbacks.on_complete is not None:
            self._callbacks.on_complete(result)
        self._notify_change()

    def _elapsed_on_question(self) -> int:
        return max(0, round_half_up(self._clock() - self._question_started_at))

    def _notify_change(self) -> None:
        if self._callbacks.on_state_change is not None:
            self._callbacks.on_state_change(self)
