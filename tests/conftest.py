"""Shared fixtures for quiz engine tests."""

from __future__ import annotations

import pytest

from quiz_engine.core.models import Question
from quiz_engine.core.services.result_storage import InMemoryStorage
from quiz_engine.core.services.result_store import ResultStore
from quiz_engine.utils.scheduling import ManualTickScheduler

from factories import multiple_choice, single_choice, text_input


@pytest.fixture
def scheduler() -> ManualTickScheduler:
    return ManualTickScheduler()


@pytest.fixture
def questions() -> list[Question]:
    return [single_choice(), multiple_choice(), text_input()]


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def result_store(storage: InMemoryStorage) -> ResultStore:
    return ResultStore(storage)
