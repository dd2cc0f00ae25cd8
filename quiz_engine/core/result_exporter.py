"""Utilities for exporting quiz results as text, CSV, JSON or HTML."""

from __future__ import annotations

import csv
from dataclasses import dataclass
import html
import io
import json
from pathlib import Path
import re
from typing import Iterable, Sequence

from quiz_engine.core.markdown_math_renderer import renderer
from quiz_engine.core.models import Question, QuestionType, QuizResult, UserAnswer
from quiz_engine.core.services.result_store import serialize_result

EXPORT_FORMATS = ("txt", "csv", "json", "html")
_RULE = "=" * 50
_SUMMARY_FIELDS = ("score", "max_score", "percentage", "correct_count", "total_questions", "time_taken")


@dataclass(frozen=True, slots=True)
class ResultsSummary:
    total_results: int
    unique_quizzes: int
    average_percentage: float
    average_time_taken: float
    total_correct: int
    total_questions: int


def results_summary(results: Sequence[QuizResult]) -> ResultsSummary:
    if not results:
        return ResultsSummary(0, 0, 0.0, 0.0, 0, 0)
    count = len(results)
    return ResultsSummary(
        total_results=count,
        unique_quizzes=len({result.quiz_id for result in results}),
        average_percentage=sum(result.percentage for result in results) / count,
        average_time_taken=sum(result.time_taken for result in results) / count,
        total_correct=sum(result.correct_count for result in results),
        total_questions=sum(result.total_questions for result in results),
    )


def results_to_csv(results: Iterable[QuizResult]) -> str:
    """One summary row per result."""
    rows = [
        [
            "Quiz Name",
            "Score",
            "Max Score",
            "Percentage",
            "Correct",
            "Total Questions",
            "Time Taken (s)",
            "Completed At",
        ]
    ]
    for result in results:
        rows.append(
            [
                result.quiz_name,
                str(result.score),
                str(result.max_score),
                f"{result.percentage}%",
                str(result.correct_count),
                str(result.total_questions),
                str(result.time_taken),
                result.completed_at.isoformat(),
            ]
        )
    return _write_csv(rows)


def export_result(
    result: QuizResult,
    questions: Sequence[Question],
    fmt: str = "txt",
    include_explanations: bool = True,
) -> str:
    """Render a result's questions and answers. Answers for unknown questions are skipped."""
    pairs = _answered_questions(result, questions)
    if fmt == "txt":
        return _export_text(result, pairs, include_explanations)
    if fmt == "csv":
        return _export_csv(pairs, include_explanations)
    if fmt == "json":
        return _export_json(result, pairs, include_explanations)
    if fmt == "html":
        return _export_html(result, pairs, include_explanations)
    raise ValueError(f"Unsupported export format '{fmt}'. Use one of: {', '.join(EXPORT_FORMATS)}.")


def export_filename(result: QuizResult, fmt: str) -> str:
    safe_name = re.sub(r"[^a-z0-9]", "_", result.quiz_name, flags=re.IGNORECASE).lower()
    return f"quiz_{safe_name}_{result.completed_at.date().isoformat()}.{fmt}"


def save_result_export(
    directory: Path,
    result: QuizResult,
    questions: Sequence[Question],
    fmt: str = "txt",
    include_explanations: bool = True,
) -> Path:
    """Write the export into ``directory`` and return the file path."""
    document = export_result(result, questions, fmt, include_explanations)
    file_path = Path(directory).resolve() / export_filename(result, fmt)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(document, encoding="utf-8")
    return file_path


def _answered_questions(
    result: QuizResult, questions: Sequence[Question]
) -> list[tuple[Question, UserAnswer]]:
    by_id = {question.id: question for question in questions}
    return [(by_id[answer.question_id], answer) for answer in result.answers if answer.question_id in by_id]


def _type_label(question: Question) -> str:
    return QuestionType(question.type).value.replace("_", " ")


def _selected_texts(question: Question, answer: UserAnswer) -> list[str]:
    return [option.text for option in question.options if option.id in answer.selected_options]


def _correct_texts(question: Question) -> list[str]:
    return [option.text for option in question.options if option.is_correct]


def _export_text(result: QuizResult, pairs: list[tuple[Question, UserAnswer]], include_explanations: bool) -> str:
    minutes, seconds = divmod(result.time_taken, 60)
    lines = [
        _RULE,
        f"QUIZ RESULTS: {result.quiz_name}",
        _RULE,
        "",
        f"Score: {result.score}/{result.max_score} ({result.percentage}%)",
        f"Correct: {result.correct_count}/{result.total_questions}",
        f"Time Taken: {minutes}m {seconds}s",
        f"Completed: {result.completed_at.isoformat()}",
        "",
        _RULE,
        "QUESTIONS & ANSWERS",
        _RULE,
        "",
    ]
    for number, (question, answer) in enumerate(pairs, start=1):
        lines.append(f"--- Question {number} ---")
        lines.append(f"Type: {_type_label(question)}")
        lines.append(f"Points: {question.points}")
        lines.append(f"Result: {'✓ Correct' if answer.is_correct else '✗ Incorrect'}")
        lines.append(f"Time: {answer.time_taken}s")
        lines.append("")
        lines.append(f"Q: {question.content}")
        lines.append("")
        if question.type == QuestionType.TEXT_INPUT:
            lines.append(f"Your Answer: {answer.text_answer or '(no answer)'}")
            if question.correct_answer:
                lines.append(f"Correct Answer: {question.correct_answer}")
        else:
            lines.append("Options:")
            for option in question.options:
                marker = "[✓]" if option.is_correct else "[ ]"
                selected = " <- Your answer" if option.id in answer.selected_options else ""
                lines.append(f"  {marker} {option.text}{selected}")
        if include_explanations and question.explanation:
            lines.append("")
            lines.append(f"Explanation: {question.explanation}")
        lines.append("")
    return "\n".join(lines)


def _export_csv(pairs: list[tuple[Question, UserAnswer]], include_explanations: bool) -> str:
    header = ["Question #", "Type", "Question", "Your Answer", "Correct Answer", "Result", "Points", "Time (s)"]
    if include_explanations:
        header.append("Explanation")
    rows = [header]
    for number, (question, answer) in enumerate(pairs, start=1):
        if question.type == QuestionType.TEXT_INPUT:
            user_answer = answer.text_answer or ""
            correct_answer = question.correct_answer or ""
        else:
            user_answer = "; ".join(_selected_texts(question, answer))
            correct_answer = "; ".join(_correct_texts(question))
        row = [
            str(number),
            _type_label(question),
            question.content.replace("\n", " "),
            user_answer,
            correct_answer,
            "Correct" if answer.is_correct else "Incorrect",
            str(question.points),
            str(answer.time_taken),
        ]
        if include_explanations:
            row.append(question.explanation or "")
        rows.append(row)
    return _write_csv(rows)


def _export_json(result: QuizResult, pairs: list[tuple[Question, UserAnswer]], include_explanations: bool) -> str:
    entries = []
    for number, (question, answer) in enumerate(pairs, start=1):
        entry: dict[str, object] = {
            "number": number,
            "type": QuestionType(question.type).value,
            "content": question.content,
            "points": question.points,
            "is_correct": answer.is_correct,
            "time_taken": answer.time_taken,
        }
        if question.type == QuestionType.TEXT_INPUT:
            entry["user_answer"] = answer.text_answer or ""
            entry["correct_answer"] = question.correct_answer or ""
        else:
            entry["options"] = [
                {
                    "text": option.text,
                    "is_correct": option.is_correct,
                    "was_selected": option.id in answer.selected_options,
                }
                for option in question.options
            ]
        if include_explanations and question.explanation:
            entry["explanation"] = question.explanation
        entries.append(entry)

    stored = serialize_result(result)
    document = {
        "quiz": {"name": stored["quiz_name"], "completed_at": stored["completed_at"]},
        "summary": {key: stored[key] for key in _SUMMARY_FIELDS},
        "questions": entries,
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def _export_html(result: QuizResult, pairs: list[tuple[Question, UserAnswer]], include_explanations: bool) -> str:
    parts = [
        f"<h1>{html.escape(result.quiz_name)}</h1>",
        f"<p>Score: {result.score}/{result.max_score} ({result.percentage}%) &middot; "
        f"Correct: {result.correct_count}/{result.total_questions}</p>",
    ]
    for number, (question, answer) in enumerate(pairs, start=1):
        css_class = "answer-correct" if answer.is_correct else "answer-incorrect"
        parts.append('<section class="question">')
        parts.append(f"<h2>Question {number} <small class=\"{css_class}\">"
                     f"{'Correct' if answer.is_correct else 'Incorrect'}</small></h2>")
        parts.append(renderer.render_fragment(question.content))
        if question.type == QuestionType.TEXT_INPUT:
            parts.append(f"<p>Your answer: {html.escape(answer.text_answer or '(no answer)')}</p>")
        else:
            items = "".join(
                f"<li>{'&#10003; ' if option.is_correct else ''}{html.escape(option.text)}"
                f"{' <strong>(your answer)</strong>' if option.id in answer.selected_options else ''}</li>"
                for option in question.options
            )
            parts.append(f"<ul>{items}</ul>")
        if include_explanations and question.explanation:
            parts.append(renderer.render_fragment(question.explanation))
        parts.append("</section>")
    return renderer.wrap_with_mathjax("\n".join(parts), title=result.quiz_name)


def _write_csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")
