"""Correctness checks for submitted answers, one per question type."""

from __future__ import annotations

import logging
from typing import Callable, Sequence

from quiz_engine.core.models import Question, QuestionType

logger = logging.getLogger(__name__)


def validate_single_choice(question: Question, selected_options: Sequence[str]) -> bool:
    """Exactly one option selected, and it is the correct one."""
    if len(selected_options) != 1:
        return False
    selected_id = selected_options[0]
    selected = next((option for option in question.options if option.id == selected_id), None)
    return selected is not None and selected.is_correct is True


def validate_multiple_choice(question: Question, selected_options: Sequence[str]) -> bool:
    """The selection equals the correct option set, with no omissions or extras."""
    correct_ids = set(question.correct_option_ids())
    selected_ids = set(selected_options)
    if len(selected_options) != len(selected_ids):
        return False
    return selected_ids == correct_ids


def validate_text_input(question: Question, text_answer: str | None) -> bool:
    """Case-insensitive match after trimming surrounding whitespace."""
    if not text_answer or not question.correct_answer:
        return False
    return text_answer.strip().casefold() == question.correct_answer.strip().casefold()


_CHOICE_VALIDATORS: dict[QuestionType, Callable[[Question, Sequence[str]], bool]] = {
    QuestionType.SINGLE_CHOICE: validate_single_choice,
    QuestionType.MULTIPLE_CHOICE: validate_multiple_choice,
}


def validate_answer(
    question: Question,
    selected_options: Sequence[str],
    text_answer: str | None = None,
) -> bool:
    """Dispatch on ``question.type``; unknown types are never correct."""
    if question.type == QuestionType.TEXT_INPUT:
        if not question.correct_answer:
            logger.warning("Text question %s has no correct answer configured.", question.id)
        return validate_text_input(question, text_answer)

    validator = _CHOICE_VALIDATORS.get(question.type)
    if validator is None:
        logger.warning(
            "Question %s has unsupported type %r; answer treated as incorrect.",
            question.id,
            question.type,
        )
        return False
    return validator(question, selected_options)
