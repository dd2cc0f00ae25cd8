"""Service for persisting and querying completed quiz results."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from quiz_engine.constants.storage_constants import MAX_RETAINED_RESULTS, RESULTS_STORAGE_KEY
from quiz_engine.core.errors import StorageError, StorageQuotaExceededError
from quiz_engine.core.models import QuizResult
from quiz_engine.core.services.result_storage import KeyValueStorage

logger = logging.getLogger(__name__)

_RESULT_ADAPTER = TypeAdapter(QuizResult)


class ResultDocument(BaseModel):
    """Stored shape: every result in append order, datetimes as ISO-8601."""

    quiz_results: list[QuizResult] = []


def serialize_result(result: QuizResult) -> dict[str, Any]:
    """Convert a result into JSON-compatible data."""
    return _RESULT_ADAPTER.dump_python(result, mode="json")


def deserialize_result(data: dict[str, Any]) -> QuizResult:
    return _RESULT_ADAPTER.validate_python(data)


class ResultStore:
    """Append-only log of results on top of a key-value storage backend.

    Queries are full scans; result volume per user is small. Storage failures
    never propagate: a result that cannot be written is logged and dropped so
    finishing a quiz is never blocked by persistence.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = RESULTS_STORAGE_KEY,
        max_retained: int = MAX_RETAINED_RESULTS,
    ) -> None:
        if max_retained <= 0:
            raise ValueError("max_retained must be a positive integer.")
        self._storage = storage
        self._storage_key = storage_key
        self._max_retained = max_retained

    def save(self, result: QuizResult) -> None:
        results = self._read()
        results.append(result)
        self._write(results)

    def load_all(self) -> list[QuizResult]:
        """Return every stored result, most recently completed first."""
        return sorted(self._read(), key=lambda r: r.completed_at, reverse=True)

    def by_quiz(self, quiz_id: str) -> list[QuizResult]:
        return [result for result in self.load_all() if result.quiz_id == quiz_id]

    def by_user(self, user_id: str) -> list[QuizResult]:
        return [result for result in self.load_all() if result.user_id == user_id]

    def best(self, quiz_id: str, user_id: str) -> QuizResult | None:
        """Highest percentage for the quiz/user pair; the first maximum wins ties."""
        best: QuizResult | None = None
        for result in self.by_quiz(quiz_id):
            if result.user_id != user_id:
                continue
            if best is None or result.percentage > best.percentage:
                best = result
        return best

    def delete(self, result_id: str) -> bool:
        """Remove one result. Returns False when no result has that id or the write fails."""
        results = self._read()
        remaining = [result for result in results if result.id != result_id]
        if len(remaining) == len(results):
            logger.info("Result %s not found; nothing deleted.", result_id)
            return False
        return self._write(remaining)

    def clear_all(self) -> None:
        try:
            self._storage.remove(self._storage_key)
        except StorageError:
            logger.exception("Failed to clear stored quiz results.")

    def count(self) -> int:
        return len(self._read())

    def _read(self) -> list[QuizResult]:
        try:
            raw = self._storage.get(self._storage_key)
        except StorageError:
            logger.exception("Failed to load quiz results from storage.")
            return []
        if not raw:
            return []
        try:
            return list(ResultDocument.model_validate_json(raw).quiz_results)
        except ValidationError:
            logger.error("Stored quiz results under '%s' are unreadable; ignoring them.", self._storage_key)
            return []

    def _write(self, results: list[QuizResult]) -> bool:
        """Persist ``results``; returns False when nothing could be written."""
        try:
            self._storage.set(self._storage_key, self._encode(results))
            return True
        except StorageQuotaExceededError:
            logger.warning(
                "Result storage is full; keeping only the newest %d results.", self._max_retained
            )
        except StorageError:
            logger.exception("Failed to save quiz results to storage.")
            return False

        trimmed = results[-self._max_retained:]
        try:
            self._storage.set(self._storage_key, self._encode(trimmed))
        except StorageError:
            logger.exception("Failed to save quiz results after trimming to %d entries.", len(trimmed))
            return False
        return True

    @staticmethod
    def _encode(results: list[QuizResult]) -> str:
        return ResultDocument(quiz_results=results).model_dump_json()
