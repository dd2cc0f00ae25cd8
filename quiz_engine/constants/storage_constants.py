"""Persistence constants for stored quiz results."""

RESULTS_STORAGE_KEY: str = "quiz_results"
MAX_RETAINED_RESULTS: int = 50
STORAGE_FILE_SUFFIX: str = ".json"
STORAGE_ENCODING: str = "utf-8"
