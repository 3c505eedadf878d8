"""Service for recorded quiz attempts and the statistics derived from them."""

from __future__ import annotations

from collections.abc import Sequence
import logging

from quiz_portal.constants.quiz_constants import HIGH_SCORE_THRESHOLD, MEDIUM_SCORE_THRESHOLD
from quiz_portal.constants.storage_constants import ATTEMPTS_KEY
from quiz_portal.core.context import AppContext
from quiz_portal.core.documents import DocumentCollection
from quiz_portal.core.models import OverviewStats, QuizAttempt, StudentSummary

_logger = logging.getLogger(__name__)


class AttemptLedger:
    """Append-only history of completed quizzes."""

    def __init__(self, context: AppContext) -> None:
        self._attempts = DocumentCollection(context.store, ATTEMPTS_KEY, QuizAttempt)

    def record(self, attempt: QuizAttempt) -> None:
        attempts = self._attempts.load_or_empty()
        attempts.append(attempt)
        self._attempts.save(attempts)
        _logger.info(
            "Recorded attempt %s for %s: %.1f%% in %ds",
            attempt.id,
            attempt.student_name,
            attempt.score,
            attempt.time_spent,
        )

    def list_all(self) -> list[QuizAttempt]:
        return self._attempts.load_or_empty()

    def list_for_student(self, student_id: str) -> list[QuizAttempt]:
        return [a for a in self.list_all() if a.student_id == student_id]


# --- Derived statistics ---
# All of these accept any sequence of attempts and return zero for an empty one.


def count_distinct_students(attempts: Sequence[QuizAttempt]) -> int:
    return len({attempt.student_id for attempt in attempts})


def average_score(attempts: Sequence[QuizAttempt]) -> float:
    if not attempts:
        return 0.0
    return sum(attempt.score for attempt in attempts) / len(attempts)


def best_score(attempts: Sequence[QuizAttempt]) -> float:
    if not attempts:
        return 0.0
    return max(attempt.score for attempt in attempts)


def average_time_spent(attempts: Sequence[QuizAttempt]) -> float:
    if not attempts:
        return 0.0
    return sum(attempt.time_spent for attempt in attempts) / len(attempts)


def newest_first(attempts: Sequence[QuizAttempt]) -> list[QuizAttempt]:
    return sorted(attempts, key=lambda a: a.completed_at, reverse=True)


def score_trend(attempts: Sequence[QuizAttempt]) -> float | None:
    """Score change between the latest attempt and the one before it."""
    if len(attempts) < 2:
        return None
    latest, previous = newest_first(attempts)[:2]
    return latest.score - previous.score


def correct_count(attempt: QuizAttempt) -> int:
    return sum(
        1
        for question, answer in zip(attempt.questions, attempt.answers)
        if answer == question.correct_answer
    )


def score_band(score: float) -> str:
    if score >= HIGH_SCORE_THRESHOLD:
        return "high"
    if score >= MEDIUM_SCORE_THRESHOLD:
        return "medium"
    return "low"


def format_duration(seconds: float) -> str:
    whole = max(0, int(seconds))
    minutes, remainder = divmod(whole, 60)
    return f"{minutes}m {remainder}s"


def summarize_student(attempts: Sequence[QuizAttempt]) -> StudentSummary:
    return StudentSummary(
        attempt_count=len(attempts),
        best_score=best_score(attempts),
        average_score=average_score(attempts),
        average_time_spent=average_time_spent(attempts),
        score_trend=score_trend(attempts),
    )


def summarize_overview(question_count: int, attempts: Sequence[QuizAttempt]) -> OverviewStats:
    return OverviewStats(
        question_count=question_count,
        attempt_count=len(attempts),
        distinct_students=count_distinct_students(attempts),
        average_score=average_score(attempts),
    )
