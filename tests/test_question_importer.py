"""Tests for the markdown question importer."""

from __future__ import annotations

import pytest

from quiz_engine.core.errors import QuizImportError
from quiz_engine.core.models import QuestionType
from quiz_engine.core.question_importer import (
    load_questions_from_file,
    parse_question_markdown,
    serialize_questions,
)

SAMPLE = """# Question 1
type: single_choice
points: 10
time_limit: 30

Which island hosts the resort?

- [ ] Zack Island
- [x] Venus Island

## Explanation
The resort moved to **Venus Island**.

---

# Question 2
type: multiple_choice
points: 20

Pick the rare tiers.

- [x] SSR
- [ ] N
- [x] SR

---

# Question 3
type: text_input
answer: Paris

What is the capital of France?
"""


class TestParse:
    def test_parses_all_types(self):
        result = parse_question_markdown(SAMPLE)
        assert not result.has_errors
        first, second, third = result.questions

        assert first.id == "q_1"
        assert first.type is QuestionType.SINGLE_CHOICE
        assert first.points == 10
        assert first.time_limit == 30
        assert first.content == "Which island hosts the resort?"
        assert [(o.id, o.is_correct) for o in first.options] == [("opt_0", False), ("opt_1", True)]
        assert first.explanation == "The resort moved to **Venus Island**."

        assert second.type is QuestionType.MULTIPLE_CHOICE
        assert second.correct_option_ids() == ["opt_0", "opt_2"]
        assert second.time_limit is None

        assert third.type is QuestionType.TEXT_INPUT
        assert third.correct_answer == "Paris"
        assert third.options == []
        assert third.points == 10

    def test_empty_text(self):
        result = parse_question_markdown("   ")
        assert result.questions == []
        assert result.errors == []

    def test_invalid_blocks_are_reported_and_skipped(self):
        text = """# Question 1
type: single_choice

Two right answers?

- [x] Yes
- [x] Also yes

---

# Question 2
type: essay

Write something.

---

No header here

---

# Question 4
type: text_input

Missing answer field.

---

# Question 5
type: multiple_choice

Only one option.

- [x] Lonely
"""
        result = parse_question_markdown(text)
        assert result.questions == []
        assert [(e.question_index, e.field) for e in result.errors] == [
            (1, "options"),
            (2, "type"),
            (3, "title"),
            (4, "answer"),
            (5, "options"),
        ]

    def test_non_positive_points_fall_back_to_default(self):
        text = "# Question 7\ntype: text_input\npoints: -5\nanswer: x\n\nBody"
        (question,) = parse_question_markdown(text).questions
        assert question.points == 10
        assert question.id == "q_7"


class TestSerialize:
    def test_serialized_questions_parse_back(self):
        questions = parse_question_markdown(SAMPLE).questions
        reparsed = parse_question_markdown(serialize_questions(questions)).questions
        assert reparsed == questions


class TestLoadFromFile:
    def test_loads_valid_file(self, tmp_path):
        path = tmp_path / "quiz.md"
        path.write_text(SAMPLE, encoding="utf-8")
        assert len(load_questions_from_file(path)) == 3

    def test_file_without_valid_questions(self, tmp_path):
        path = tmp_path / "broken.md"
        path.write_text("# Question 1\ntype: nope\n\nBody", encoding="utf-8")
        with pytest.raises(QuizImportError):
            load_questions_from_file(path)
