"""Domain models for the quiz portal."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Account role deciding which dashboard a user is routed to."""

    ADMIN = "admin"
    STUDENT = "student"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(slots=True)
class User:
    """Identity record. Passwords are stored and compared as plain text."""

    id: str
    username: str
    password: str
    role: Role


@dataclass(slots=True)
class QuestionDraft:
    """Caller-supplied fields for creating or updating a question."""

    question: str
    options: list[str]
    correct_answer: int
    category: str
    difficulty: Difficulty = Difficulty.MEDIUM


@dataclass(slots=True)
class Question:
    """Multiple-choice quiz question with exactly four options."""

    id: str
    question: str
    options: list[str]
    correct_answer: int
    category: str
    difficulty: Difficulty
    created_at: datetime


@dataclass(slots=True)
class QuizAttempt:
    """Completed quiz. Holds its own copy of the questions it was built from."""

    id: str
    student_id: str
    student_name: str
    questions: list[Question]
    answers: list[int]
    score: float
    total_questions: int
    completed_at: datetime
    time_spent: int  # whole seconds


@dataclass(slots=True)
class StudentSummary:
    """Aggregated view of one student's attempt history."""

    attempt_count: int
    best_score: float
    average_score: float
    average_time_spent: float
    score_trend: float | None = None


@dataclass(slots=True)
class OverviewStats:
    """Aggregated view over every recorded attempt for the admin dashboard."""

    question_count: int
    attempt_count: int
    distinct_students: int
    average_score: float

