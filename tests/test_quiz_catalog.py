"""Tests for the quiz catalogue and CSV loader."""

from __future__ import annotations

import pytest

from quiz_engine.core.errors import NoQuestionsAvailableError, QuizNotFoundError
from quiz_engine.core.models import QuizDifficulty, QuizStatus
from quiz_engine.core.quiz_session_manager import QuizSessionManager
from quiz_engine.core.services.quiz_catalog import (
    QuizCatalog,
    filter_quizzes,
    parse_quiz_csv,
    search_quizzes,
)

CSV_TEXT = """id,unique_key,name_en,name_jp,description_en,difficulty,time_limit,question_count,questions_ref,status,category,tags
1,venus-basics,Venus Basics,ヴィーナス基本,Warm-up,Easy,300,1,quizzes/venus.md,published,general,intro|basics
2,gacha-expert,Gacha Expert,ガチャ,Hard one,Hard,0,0,quizzes/missing.md,draft,gacha,gacha;advanced
3,,No Key,,,Medium,0,0,quizzes/x.md,published,general,
4,bad-difficulty,Bad,,,Impossible,0,0,quizzes/y.md,published,general,
"""

QUESTIONS_MD = """# Question 1
type: text_input
answer: Venus

Name the island.
"""


@pytest.fixture
def catalog(tmp_path):
    (tmp_path / "quizzes").mkdir()
    (tmp_path / "quizzes" / "venus.md").write_text(QUESTIONS_MD, encoding="utf-8")
    csv_path = tmp_path / "quizzes.csv"
    csv_path.write_text(CSV_TEXT, encoding="utf-8")
    return QuizCatalog.from_csv(csv_path)


class TestCsv:
    def test_valid_rows_become_quizzes(self):
        result = parse_quiz_csv(CSV_TEXT)
        assert [quiz.unique_key for quiz in result.quizzes] == ["venus-basics", "gacha-expert"]
        venus = result.quizzes[0]
        assert venus.name.en == "Venus Basics"
        assert venus.name.resolve("jp") == "ヴィーナス基本"
        assert venus.name.resolve("kr") == "Venus Basics"
        assert venus.time_limit == 300
        assert venus.difficulty is QuizDifficulty.EASY
        assert venus.status is QuizStatus.PUBLISHED
        assert venus.tags == ["intro", "basics"]
        assert result.quizzes[1].tags == ["gacha", "advanced"]

    def test_invalid_rows_are_reported(self):
        result = parse_quiz_csv(CSV_TEXT)
        assert {(error.row, error.field) for error in result.errors} == {
            (4, "unique_key"),
            (5, "difficulty"),
        }


class TestCatalog:
    def test_lookup_and_questions(self, catalog):
        quiz = catalog.get_quiz("venus-basics")
        questions = catalog.get_questions("venus-basics")
        assert quiz.display_name == "Venus Basics"
        assert [q.id for q in questions] == ["q_1"]

    def test_unknown_quiz(self, catalog):
        with pytest.raises(QuizNotFoundError):
            catalog.get_quiz("nope")

    def test_missing_question_file_gives_no_questions(self, catalog, scheduler):
        assert catalog.get_questions("gacha-expert") == []
        manager = QuizSessionManager(catalog.get_quiz("gacha-expert"), [], scheduler)
        with pytest.raises(NoQuestionsAvailableError):
            manager.start_session()

    def test_registered_questions_take_precedence(self, catalog, questions):
        catalog.register_questions("gacha-expert", questions)
        assert len(catalog.get_questions("gacha-expert")) == 3

    def test_helpers(self, catalog):
        quizzes = catalog.get_quizzes()
        assert catalog.categories() == ["gacha", "general"]
        assert [q.unique_key for q in catalog.published()] == ["venus-basics"]
        assert [q.unique_key for q in filter_quizzes(quizzes, difficulty=QuizDifficulty.HARD)] == ["gacha-expert"]
        assert [q.unique_key for q in search_quizzes(quizzes, "ガチャ")] == ["gacha-expert"]
        assert [q.unique_key for q in search_quizzes(quizzes, "  venus ")] == ["venus-basics"]
        assert len(search_quizzes(quizzes, "")) == 2

    def test_duplicate_keys_rejected(self, catalog):
        quiz = catalog.get_quiz("venus-basics")
        with pytest.raises(ValueError):
            QuizCatalog([quiz, quiz])
