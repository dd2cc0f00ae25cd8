"""Domain models for the quiz engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from quiz_engine.constants.quiz_constants import DEFAULT_QUESTION_POINTS, DEFAULT_QUIZ_NAME, NO_TIME_LIMIT


class QuestionType(str, Enum):
    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"
    TEXT_INPUT = "text_input"


class QuizDifficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class QuizStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class SessionStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.IN_PROGRESS


@dataclass(slots=True)
class LocalizedText:
    """Text shipped in several site languages; English is always present."""

    en: str
    jp: str = ""
    cn: str | None = None
    tw: str | None = None
    kr: str | None = None

    def resolve(self, language: str = "en") -> str:
        value = getattr(self, language, None) if language in self.languages() else None
        return value or self.en

    def values(self) -> list[str]:
        return [value for value in (self.en, self.jp, self.cn, self.tw, self.kr) if value]

    @staticmethod
    def languages() -> tuple[str, ...]:
        return ("en", "jp", "cn", "tw", "kr")


@dataclass(slots=True)
class Quiz:
    """Quiz metadata as listed in the content catalogue."""

    id: int
    unique_key: str
    name: LocalizedText
    description: LocalizedText
    time_limit: int = NO_TIME_LIMIT  # seconds
    questions_ref: str = ""
    category: str = ""
    difficulty: QuizDifficulty = QuizDifficulty.EASY
    status: QuizStatus = QuizStatus.DRAFT
    question_count: int = 0
    image: str = ""
    author: str = ""
    updated_at: str = ""
    tags: list[str] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name.en or self.unique_key or DEFAULT_QUIZ_NAME


@dataclass(slots=True)
class QuestionOption:
    id: str
    text: str
    is_correct: bool = False


@dataclass(slots=True)
class Question:
    """One assessable item of a quiz."""

    id: str
    type: QuestionType
    content: str
    options: list[QuestionOption] = field(default_factory=list)
    correct_answer: str | None = None  # text input only
    explanation: str | None = None
    time_limit: int | None = None  # per-question limit in seconds
    points: int = DEFAULT_QUESTION_POINTS

    @property
    def has_time_limit(self) -> bool:
        return bool(self.time_limit and self.time_limit > 0)

    def correct_option_ids(self) -> list[str]:
        return [option.id for option in self.options if option.is_correct]


@dataclass(frozen=True, slots=True)
class UserAnswer:
    """A submitted response. Never mutated after creation."""

    question_id: str
    selected_options: tuple[str, ...]
    text_answer: str | None
    is_correct: bool
    answered_at: datetime
    time_taken: int  # seconds spent on the question


@dataclass(frozen=True, slots=True)
class QuizSession:
    """Working state of one attempt. Transitions return new instances."""

    id: str
    quiz_id: str
    started_at: datetime
    current_question_index: int = 0
    answers: tuple[UserAnswer, ...] = ()
    time_remaining: int = 0
    status: SessionStatus = SessionStatus.IN_PROGRESS


@dataclass(frozen=True, slots=True)
class QuizResult:
    """Scored outcome of a terminal session."""

    id: str
    quiz_id: str
    quiz_name: str
    user_id: str
    username: str
    score: int
    max_score: int
    percentage: int
    correct_count: int
    total_questions: int
    time_taken: int
    completed_at: datetime
    answers: tuple[UserAnswer, ...] = ()


@dataclass(frozen=True, slots=True)
class Progress:
    current: int
    total: int
    percentage: int


@dataclass(frozen=True, slots=True)
class TimerSnapshot:
    """Read-only view of a countdown timer for presentation code."""

    time_remaining: int
    formatted_time: str
    is_running: bool
    is_expired: bool
