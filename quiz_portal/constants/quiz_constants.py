"""Quiz-related constants shared across the core and API layers."""

OPTION_COUNT: int = 4
UNANSWERED: int = -1

HIGH_SCORE_THRESHOLD: float = 80.0
MEDIUM_SCORE_THRESHOLD: float = 60.0

# (id, username, password, role)
DEFAULT_ACCOUNTS: tuple[tuple[str, str, str, str], ...] = (
    ("1", "admin", "admin123", "admin"),
    ("2", "student", "student123", "student"),
)

# (question, options, correct index, category, difficulty)
DEFAULT_QUESTIONS: tuple[tuple[str, tuple[str, ...], int, str, str], ...] = (
    (
        "What is the capital of France?",
        ("London", "Berlin", "Paris", "Madrid"),
        2,
        "Geography",
        "easy",
    ),
    (
        "Which programming language is known for its use in web development?",
        ("Python", "JavaScript", "C++", "Java"),
        1,
        "Technology",
        "medium",
    ),
    (
        "What is 2 + 2?",
        ("3", "4", "5", "6"),
        1,
        "Mathematics",
        "easy",
    ),
)
