"""Exception hierarchy for the quiz engine."""

from __future__ import annotations


class QuizEngineError(Exception):
    """Base class for errors raised by the quiz engine."""


class QuizNotFoundError(QuizEngineError):
    """Raised when a quiz key is not present in the catalogue."""

    def __init__(self, quiz_key: str) -> None:
        super().__init__(f"Quiz '{quiz_key}' not found.")
        self.quiz_key = quiz_key


class NoQuestionsAvailableError(QuizEngineError):
    """Raised when a session is requested for a quiz without questions."""


class SessionClosedError(QuizEngineError):
    """Raised when a terminal session is asked to change."""


class QuizImportError(QuizEngineError):
    """Raised when quiz content cannot be parsed."""


class StorageError(QuizEngineError):
    """Raised by a storage backend when a blob cannot be read or written."""


class StorageQuotaExceededError(StorageError):
    """Raised when a write would exceed the backend's capacity."""
