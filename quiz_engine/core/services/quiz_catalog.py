"""Service for looking up quizzes and their questions."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
import io
import logging
from pathlib import Path
import re

from quiz_engine.core.errors import QuizImportError, QuizNotFoundError
from quiz_engine.core.models import LocalizedText, Question, Quiz, QuizDifficulty, QuizStatus
from quiz_engine.core.question_importer import load_questions_from_file

logger = logging.getLogger(__name__)

_REQUIRED_COLUMNS = ("id", "unique_key", "name_en", "difficulty", "questions_ref")
_TAG_SEPARATORS = re.compile(r"[|;]")


@dataclass(slots=True)
class QuizRowError:
    row: int
    field: str
    message: str
    value: str | None = None


@dataclass(slots=True)
class QuizCsvParseResult:
    quizzes: list[Quiz] = field(default_factory=list)
    errors: list[QuizRowError] = field(default_factory=list)


def load_quizzes_from_csv(file_path: Path) -> QuizCsvParseResult:
    return parse_quiz_csv(Path(file_path).read_text(encoding="utf-8"))


def parse_quiz_csv(text: str) -> QuizCsvParseResult:
    result = QuizCsvParseResult()
    reader = csv.DictReader(io.StringIO(text))
    # Row numbers are 1-based and count the header line.
    for row_number, row in enumerate(reader, start=2):
        cleaned = {key.strip(): (value or "").strip() for key, value in row.items() if key}
        errors = _validate_row(cleaned, row_number)
        if errors:
            result.errors.extend(errors)
            continue
        result.quizzes.append(_row_to_quiz(cleaned))
    return result


def _validate_row(row: dict[str, str], row_number: int) -> list[QuizRowError]:
    errors = [
        QuizRowError(row_number, column, f"{column} is required")
        for column in _REQUIRED_COLUMNS
        if not row.get(column)
    ]
    if row.get("id") and not row["id"].isdigit():
        errors.append(QuizRowError(row_number, "id", "id must be a valid positive integer", row["id"]))
    difficulty = row.get("difficulty")
    if difficulty and difficulty not in {item.value for item in QuizDifficulty}:
        errors.append(QuizRowError(row_number, "difficulty", "difficulty must be Easy, Medium or Hard", difficulty))
    status = row.get("status")
    if status and status not in {item.value for item in QuizStatus}:
        errors.append(QuizRowError(row_number, "status", "status must be draft, published or archived", status))
    for column in ("time_limit", "question_count"):
        value = row.get(column)
        if value and not value.isdigit():
            errors.append(QuizRowError(row_number, column, f"{column} must be a non-negative integer", value))
    return errors


def _localized(row: dict[str, str], prefix: str) -> LocalizedText:
    return LocalizedText(
        en=row.get(f"{prefix}_en", ""),
        jp=row.get(f"{prefix}_jp", ""),
        cn=row.get(f"{prefix}_cn") or None,
        tw=row.get(f"{prefix}_tw") or None,
        kr=row.get(f"{prefix}_kr") or None,
    )


def _row_to_quiz(row: dict[str, str]) -> Quiz:
    return Quiz(
        id=int(row["id"]),
        unique_key=row["unique_key"],
        name=_localized(row, "name"),
        description=_localized(row, "description"),
        time_limit=int(row.get("time_limit") or 0),
        questions_ref=row["questions_ref"],
        category=row.get("category", ""),
        difficulty=QuizDifficulty(row["difficulty"]),
        status=QuizStatus(row.get("status") or QuizStatus.DRAFT.value),
        question_count=int(row.get("question_count") or 0),
        image=row.get("image", ""),
        author=row.get("author", ""),
        updated_at=row.get("updated_at", ""),
        tags=[tag.strip() for tag in _TAG_SEPARATORS.split(row.get("tags", "")) if tag.strip()],
    )


class QuizCatalog:
    """Read-only source of quizzes and their question lists.

    Questions are loaded lazily from ``content_root / quiz.questions_ref`` and
    cached per quiz key; the engine receives them as an immutable list.
    """

    def __init__(self, quizzes: list[Quiz], content_root: Path | None = None) -> None:
        self._quizzes: dict[str, Quiz] = {}
        for quiz in quizzes:
            if quiz.unique_key in self._quizzes:
                raise ValueError(f"Duplicate quiz key '{quiz.unique_key}'.")
            self._quizzes[quiz.unique_key] = quiz
        self._content_root = Path(content_root) if content_root is not None else None
        self._questions: dict[str, list[Question]] = {}

    @classmethod
    def from_csv(cls, csv_path: Path, content_root: Path | None = None) -> "QuizCatalog":
        parsed = load_quizzes_from_csv(csv_path)
        for error in parsed.errors:
            logger.warning("%s row %d: %s", csv_path, error.row, error.message)
        root = content_root if content_root is not None else Path(csv_path).resolve().parent
        return cls(parsed.quizzes, content_root=root)

    def register_questions(self, quiz_key: str, questions: list[Question]) -> None:
        self.get_quiz(quiz_key)
        self._questions[quiz_key] = list(questions)

    def get_quizzes(self) -> list[Quiz]:
        return list(self._quizzes.values())

    def get_quiz(self, quiz_key: str) -> Quiz:
        quiz = self._quizzes.get(quiz_key)
        if quiz is None:
            raise QuizNotFoundError(quiz_key)
        return quiz

    def get_questions(self, quiz_key: str) -> list[Question]:
        """Return the quiz's questions; an empty list when none can be loaded."""
        quiz = self.get_quiz(quiz_key)
        if quiz_key not in self._questions:
            self._questions[quiz_key] = self._load_questions(quiz)
        return list(self._questions[quiz_key])

    def _load_questions(self, quiz: Quiz) -> list[Question]:
        if self._content_root is None or not quiz.questions_ref:
            return []
        path = self._content_root / quiz.questions_ref
        if not path.exists():
            logger.warning("Question file not found for quiz %s: %s", quiz.unique_key, path)
            return []
        try:
            return load_questions_from_file(path)
        except QuizImportError as exc:
            logger.warning("No usable questions for quiz %s: %s", quiz.unique_key, exc)
            return []

    def categories(self) -> list[str]:
        return sorted({quiz.category for quiz in self._quizzes.values() if quiz.category})

    def published(self) -> list[Quiz]:
        return [quiz for quiz in self._quizzes.values() if quiz.status is QuizStatus.PUBLISHED]


def filter_quizzes(
    quizzes: list[Quiz],
    category: str | None = None,
    difficulty: QuizDifficulty | None = None,
    status: QuizStatus | None = None,
) -> list[Quiz]:
    return [
        quiz
        for quiz in quizzes
        if (category is None or quiz.category == category)
        and (difficulty is None or quiz.difficulty == difficulty)
        and (status is None or quiz.status == status)
    ]


def search_quizzes(quizzes: list[Quiz], term: str) -> list[Quiz]:
    """Case-insensitive match against every localized quiz name."""
    needle = term.strip().casefold()
    if not needle:
        return list(quizzes)
    return [quiz for quiz in quizzes if any(needle in value.casefold() for value in quiz.name.values())]
