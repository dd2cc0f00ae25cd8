"""Tests for per-type answer validation."""

from __future__ import annotations

import logging

from quiz_engine.core.answer_validation import (
    validate_answer,
    validate_multiple_choice,
    validate_single_choice,
    validate_text_input,
)
from quiz_engine.core.models import Question

from factories import multiple_choice, single_choice, text_input


class TestSingleChoice:
    def test_correct_option(self):
        assert validate_single_choice(single_choice(), ["B"])

    def test_wrong_option(self):
        assert not validate_single_choice(single_choice(), ["A"])

    def test_more_than_one_selection_is_wrong(self):
        assert not validate_single_choice(single_choice(), ["A", "B"])

    def test_empty_selection_is_wrong(self):
        assert not validate_single_choice(single_choice(), [])

    def test_unknown_option_id_is_wrong(self):
        assert not validate_single_choice(single_choice(), ["Z"])


class TestMultipleChoice:
    def test_exact_set_is_correct(self):
        assert validate_multiple_choice(multiple_choice(), ["B", "D"])
        assert validate_multiple_choice(multiple_choice(), ["D", "B"])

    def test_omission_is_wrong(self):
        assert not validate_multiple_choice(multiple_choice(), ["B"])

    def test_extra_option_is_wrong(self):
        assert not validate_multiple_choice(multiple_choice(), ["B", "D", "C"])

    def test_duplicate_selection_is_wrong(self):
        assert not validate_multiple_choice(multiple_choice(), ["B", "B", "D"])


class TestTextInput:
    def test_case_and_surrounding_whitespace_ignored(self):
        assert validate_text_input(text_input(), "paris")
        assert validate_text_input(text_input(), " PARIS ")

    def test_punctuation_is_not_ignored(self):
        assert not validate_text_input(text_input(), "paris.")

    def test_missing_answer_is_wrong(self):
        assert not validate_text_input(text_input(), None)
        assert not validate_text_input(text_input(), "")

    def test_missing_correct_answer_is_wrong(self):
        question = text_input()
        question.correct_answer = None
        assert not validate_text_input(question, "Paris")


class TestDispatch:
    def test_dispatches_by_type(self):
        assert validate_answer(single_choice(), ["B"])
        assert validate_answer(multiple_choice(), ["B", "D"])
        assert validate_answer(text_input(), [], "Paris")

    def test_unknown_type_is_incorrect_and_logged(self, caplog):
        question = Question(id="q_9", type="true_false", content="?")
        with caplog.at_level(logging.WARNING):
            assert validate_answer(question, ["A"], "yes") is False
        assert "q_9" in caplog.text
        assert "true_false" in caplog.text
