"""Document keys and locations used by the persistent store."""

from pathlib import Path

USERS_KEY: str = "quiz_users"
QUESTIONS_KEY: str = "quiz_questions"
ATTEMPTS_KEY: str = "quiz_attempts"
CURRENT_USER_KEY: str = "quiz_current_user"

DEFAULT_DATA_DIR: Path = Path.home() / ".quiz_portal"
DOCUMENT_SUFFIX: str = ".json"
