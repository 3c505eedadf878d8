"""Static metadata describing Quiz Portal."""

APP_NAME = "Quiz Portal"
APP_VERSION = "0.1"
APP_DESCRIPTION = (
    "Quiz Portal lets administrators author multiple-choice questions and "
    "students take timed quizzes, with score history for both roles."
)
