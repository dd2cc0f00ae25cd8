"""Utilities for importing quiz questions from the site's markdown format.

File format (question blocks separated by a line containing only '---'):

    # Question 1
    type: single_choice | multiple_choice | text_input
    points: 10            (optional, default 10)
    time_limit: 30        (optional, seconds)
    answer: Paris         (required for text_input)

    Question body in markdown. Additional lines until the option list are
    part of the body.

    - [ ] Wrong option
    - [x] Correct option

    ## Explanation
    Optional explanation shown after answering.

Blocks that fail validation are reported as ``QuestionValidationError``
entries and skipped, so one broken question does not hide the rest.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import re

from quiz_engine.constants.quiz_constants import (
    DEFAULT_QUESTION_POINTS,
    OPTION_ID_PREFIX,
    QUESTION_BLOCK_SEPARATOR,
    QUESTION_ID_PREFIX,
)
from quiz_engine.core.errors import QuizImportError
from quiz_engine.core.models import Question, QuestionOption, QuestionType

logger = logging.getLogger(__name__)

_TITLE_PATTERN = re.compile(r"^#\s+Question\s+(\d+)", re.IGNORECASE)
_OPTION_PATTERN = re.compile(r"^-\s*\[([ xX])\]\s*(.+)$")
_EXPLANATION_HEADER = "## Explanation"
_CHOICE_TYPES = (QuestionType.SINGLE_CHOICE, QuestionType.MULTIPLE_CHOICE)


@dataclass(slots=True)
class QuestionValidationError:
    question_index: int
    field: str
    message: str


@dataclass(slots=True)
class QuestionParseResult:
    questions: list[Question] = field(default_factory=list)
    errors: list[QuestionValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


@dataclass(slots=True)
class _Metadata:
    type: QuestionType | None = None
    points: int = DEFAULT_QUESTION_POINTS
    time_limit: int | None = None
    answer: str | None = None


class _BlockError(Exception):
    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name
        self.message = message


def load_questions_from_file(file_path: Path) -> list[Question]:
    """Parse a question file, logging skipped blocks. Raises if nothing is usable."""
    text = Path(file_path).read_text(encoding="utf-8")
    result = parse_question_markdown(text)
    for error in result.errors:
        logger.warning(
            "%s: question %d skipped (%s: %s)", file_path, error.question_index, error.field, error.message
        )
    if not result.questions:
        raise QuizImportError(f"{file_path} did not contain any valid questions.")
    return result.questions


def parse_question_markdown(text: str) -> QuestionParseResult:
    result = QuestionParseResult()
    if not text or not text.strip():
        return result

    for index, block in enumerate(_split_blocks(text), start=1):
        try:
            result.questions.append(_parse_block(block, index))
        except _BlockError as exc:
            result.errors.append(QuestionValidationError(index, exc.field_name, exc.message))
    return result


def _split_blocks(text: str) -> list[str]:
    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        if raw_line.strip() == QUESTION_BLOCK_SEPARATOR:
            blocks.append("\n".join(current_block).strip())
            current_block = []
            continue
        current_block.append(raw_line)
    blocks.append("\n".join(current_block).strip())
    return [block for block in blocks if block]


def _parse_block(block: str, question_index: int) -> Question:
    lines = block.splitlines()

    title_index = next((i for i, line in enumerate(lines) if _TITLE_PATTERN.match(line)), None)
    if title_index is None:
        raise _BlockError("title", 'Question must start with "# Question N" header')
    question_id = f"{QUESTION_ID_PREFIX}{_TITLE_PATTERN.match(lines[title_index]).group(1)}"

    metadata_lines: list[str] = []
    content_start = len(lines)
    for i in range(title_index + 1, len(lines)):
        line = lines[i].strip()
        if not line or line.startswith("-") or line.startswith("##") or ":" not in line:
            content_start = i
            break
        metadata_lines.append(lines[i])
    metadata = _parse_metadata(metadata_lines)
    if metadata.type is None:
        allowed = ", ".join(question_type.value for question_type in QuestionType)
        raise _BlockError("type", f"Question type is required. Must be one of: {allowed}")

    content_lines: list[str] = []
    option_lines: list[str] = []
    explanation_lines: list[str] = []
    in_options = False
    in_explanation = False
    for line in lines[content_start:]:
        stripped = line.strip()
        if stripped.startswith(_EXPLANATION_HEADER):
            in_explanation = True
            in_options = False
            continue
        if in_explanation:
            explanation_lines.append(line)
        elif stripped.startswith("- ["):
            in_options = True
            option_lines.append(line)
        elif in_options and stripped.startswith("-"):
            option_lines.append(line)
        elif not in_options and stripped:
            content_lines.append(line)

    content = "\n".join(content_lines).strip()
    explanation = "\n".join(explanation_lines).strip()
    if not content:
        raise _BlockError("content", "Question content is required")

    options = _parse_options(option_lines)
    if metadata.type in _CHOICE_TYPES:
        _validate_choice_options(metadata.type, options)
    elif not metadata.answer:
        raise _BlockError("answer", 'Text input questions must have an "answer:" field in metadata')

    is_text = metadata.type is QuestionType.TEXT_INPUT
    return Question(
        id=question_id,
        type=metadata.type,
        content=content,
        options=[] if is_text else options,
        correct_answer=metadata.answer if is_text else None,
        explanation=explanation or None,
        time_limit=metadata.time_limit,
        points=metadata.points,
    )


def _parse_metadata(lines: list[str]) -> _Metadata:
    metadata = _Metadata()
    for line in lines:
        key, _, raw_value = line.partition(":")
        key = key.strip().lower()
        value = raw_value.strip()
        if key == "type":
            try:
                metadata.type = QuestionType(value.lower())
            except ValueError:
                metadata.type = None
        elif key == "points":
            points = _positive_int(value)
            if points is not None:
                metadata.points = points
        elif key == "time_limit":
            metadata.time_limit = _positive_int(value)
        elif key == "answer":
            metadata.answer = value
    return metadata


def _positive_int(value: str) -> int | None:
    try:
        parsed = int(value)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


def _parse_options(lines: list[str]) -> list[QuestionOption]:
    options: list[QuestionOption] = []
    for line in lines:
        match = _OPTION_PATTERN.match(line.strip())
        if match is None:
            continue
        options.append(
            QuestionOption(
                id=f"{OPTION_ID_PREFIX}{len(options)}",
                text=match.group(2).strip(),
                is_correct=match.group(1).lower() == "x",
            )
        )
    return options


def _validate_choice_options(question_type: QuestionType, options: list[QuestionOption]) -> None:
    if len(options) < 2:
        raise _BlockError("options", "Choice questions must have at least 2 options")
    correct_count = sum(1 for option in options if option.is_correct)
    if correct_count == 0:
        raise _BlockError("options", "At least one option must be marked as correct")
    if question_type is QuestionType.SINGLE_CHOICE and correct_count > 1:
        raise _BlockError("options", "Single choice questions must have exactly one correct answer")


def serialize_questions(questions: list[Question]) -> str:
    """Write questions back into the markdown import format."""
    return f"\n\n{QUESTION_BLOCK_SEPARATOR}\n\n".join(
        _serialize_question(question, position) for position, question in enumerate(questions, start=1)
    )


def _serialize_question(question: Question, position: int) -> str:
    number = re.search(r"\d+", question.id)
    lines = [f"# Question {number.group(0) if number else position}"]
    lines.append(f"type: {QuestionType(question.type).value}")
    lines.append(f"points: {question.points}")
    if question.time_limit is not None:
        lines.append(f"time_limit: {question.time_limit}")
    if question.type == QuestionType.TEXT_INPUT and question.correct_answer:
        lines.append(f"answer: {question.correct_answer}")

    lines.append("")
    lines.append(question.content)

    if question.type != QuestionType.TEXT_INPUT and question.options:
        lines.append("")
        for option in question.options:
            checkbox = "[x]" if option.is_correct else "[ ]"
            lines.append(f"- {checkbox} {option.text}")

    if question.explanation:
        lines.append("")
        lines.append(_EXPLANATION_HEADER)
        lines.append(question.explanation)

    return "\n".join(lines)
