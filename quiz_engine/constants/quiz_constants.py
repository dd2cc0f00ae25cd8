"""Quiz-related constants shared across the engine."""

DEFAULT_QUESTION_POINTS: int = 10
NO_TIME_LIMIT: int = 0
TICK_INTERVAL_SECONDS: int = 1

DEFAULT_USER_ID: str = "anonymous"
DEFAULT_USERNAME: str = "Anonymous"
DEFAULT_QUIZ_NAME: str = "Quiz"

OPTION_ID_PREFIX: str = "opt_"
QUESTION_ID_PREFIX: str = "q_"
QUESTION_BLOCK_SEPARATOR: str = "---"
