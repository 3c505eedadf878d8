from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from quiz_portal.core.models import Difficulty, Question, QuizAttempt
from quiz_portal.core.services.attempt_ledger import (
    average_score,
    average_time_spent,
    best_score,
    correct_count,
    count_distinct_students,
    format_duration,
    newest_first,
    score_band,
    score_trend,
    summarize_overview,
    summarize_student,
)

_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _question(correct: int) -> Question:
    return Question(
        id=f"q{correct}",
        question="Pick one",
        options=["a", "b", "c", "d"],
        correct_answer=correct,
        category="General",
        difficulty=Difficulty.MEDIUM,
        created_at=_START,
    )


def _attempt(attempt_id: str, student_id: str, score: float, minutes: int, time_spent: int = 60) -> QuizAttempt:
    return QuizAttempt(
        id=attempt_id,
        student_id=student_id,
        student_name=f"user-{student_id}",
        questions=[_question(0)],
        answers=[0 if score else 1],
        score=score,
        total_questions=1,
        completed_at=_START + timedelta(minutes=minutes),
        time_spent=time_spent,
    )


def test_record_appends_in_order(ledger):
    first = _attempt("a1", "2", 100.0, 1)
    second = _attempt("a2", "3", 0.0, 2)

    ledger.record(first)
    ledger.record(second)

    assert ledger.list_all() == [first, second]


def test_list_for_student_is_an_order_preserving_filter(ledger):
    attempts = [
        _attempt("a1", "2", 100.0, 1),
        _attempt("a2", "3", 50.0, 2),
        _attempt("a3", "2", 0.0, 3),
    ]
    for attempt in attempts:
        ledger.record(attempt)

    assert ledger.list_for_student("2") == [attempts[0], attempts[2]]
    assert ledger.list_for_student("unknown") == []


def test_empty_ledger(ledger):
    assert ledger.list_all() == []
    assert ledger.list_for_student("2") == []


def test_statistics_default_to_zero_when_empty():
    assert count_distinct_students([]) == 0
    assert average_score([]) == 0.0
    assert best_score([]) == 0.0
    assert average_time_spent([]) == 0.0
    assert score_trend([]) is None


def test_statistics_over_attempts():
    attempts = [
        _attempt("a1", "2", 100.0, 1, time_spent=30),
        _attempt("a2", "3", 50.0, 2, time_spent=90),
        _attempt("a3", "2", 0.0, 3, time_spent=60),
    ]

    assert count_distinct_students(attempts) == 2
    assert average_score(attempts) == pytest.approx(50.0)
    assert best_score(attempts) == 100.0
    assert average_time_spent(attempts) == pytest.approx(60.0)


def test_newest_first_and_trend():
    older = _attempt("a1", "2", 40.0, 1)
    newer = _attempt("a2", "2", 75.0, 5)

    assert newest_first([older, newer]) == [newer, older]
    assert score_trend([older, newer]) == pytest.approx(35.0)
    assert score_trend([older]) is None


def test_correct_count_uses_attempt_snapshot():
    attempt = QuizAttempt(
        id="a1",
        student_id="2",
        student_name="student",
        questions=[_question(2), _question(1), _question(1)],
        answers=[2, 1, 0],
        score=200 / 3,
        total_questions=3,
        completed_at=_START,
        time_spent=10,
    )

    assert correct_count(attempt) == 2


@pytest.mark.parametrize(
    "score, band",
    [(100.0, "high"), (80.0, "high"), (79.9, "medium"), (60.0, "medium"), (59.9, "low"), (0.0, "low")],
)
def test_score_band(score, band):
    assert score_band(score) == band


def test_format_duration():
    assert format_duration(0) == "0m 0s"
    assert format_duration(75) == "1m 15s"
    assert format_duration(90.7) == "1m 30s"


def test_summaries():
    attempts = [_attempt("a1", "2", 40.0, 1, time_spent=20), _attempt("a2", "2", 80.0, 2, time_spent=40)]

    summary = summarize_student(attempts)
    assert summary.attempt_count == 2
    assert summary.best_score == 80.0
    assert summary.average_score == pytest.approx(60.0)
    assert summary.average_time_spent == pytest.approx(30.0)
    assert summary.score_trend == pytest.approx(40.0)

    empty = summarize_student([])
    assert (empty.attempt_count, empty.best_score, empty.average_score) == (0, 0.0, 0.0)

    overview = summarize_overview(5, attempts)
    assert overview.question_count == 5
    assert overview.attempt_count == 2
    assert overview.distinct_students == 1
    assert overview.average_score == pytest.approx(60.0)
