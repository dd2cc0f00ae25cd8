"""Key-value backends holding whole JSON blobs for the result store."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from quiz_engine.constants.storage_constants import STORAGE_ENCODING, STORAGE_FILE_SUFFIX
from quiz_engine.core.errors import StorageError, StorageQuotaExceededError

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Get/set/remove of whole string blobs, like browser local storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryStorage:
    """Process-local storage with an optional byte quota."""

    def __init__(self, max_bytes: int | None = None) -> None:
        self._items: dict[str, str] = {}
        self._max_bytes = max_bytes

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        if self._max_bytes is not None:
            size = len(value.encode(STORAGE_ENCODING))
            if size > self._max_bytes:
                raise StorageQuotaExceededError(
                    f"Value for '{key}' needs {size} bytes; quota is {self._max_bytes}."
                )
        self._items[key] = value

    def remove(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Stores each key as ``<key>.json`` inside a directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    def _path_for(self, key: str) -> Path:
        if not key or any(sep in key for sep in ("/", "\\")) or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}{STORAGE_FILE_SUFFIX}"

    def get(self, key: str) -> str | None:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding=STORAGE_ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Could not read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding=STORAGE_ENCODING)
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc
        logger.debug("Wrote %d characters to %s", len(value), path)

    def remove(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Could not remove {path}: {exc}") from exc
