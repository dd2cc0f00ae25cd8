"""Identifier helpers for sessions and results."""

from __future__ import annotations

import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_rng = random.Random()


def _random_suffix(length: int = 7) -> str:
    return "".join(_rng.choice(_ALPHABET) for _ in range(length))


def generate_id(prefix: str) -> str:
    """Return ``<prefix>-<epoch ms>-<7 base36 chars>``."""
    return f"{prefix}-{int(time.time() * 1000)}-{_random_suffix()}"


def generate_session_id() -> str:
    return generate_id("session")


def generate_result_id() -> str:
    return generate_id("result")
