from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from quiz_portal.core.context import AppContext
from quiz_portal.core.models import Difficulty, QuestionDraft, Role, User
from quiz_portal.core.quiz_portal import QuizPortal
from quiz_portal.core.services.account_directory import AccountDirectory
from quiz_portal.core.services.attempt_ledger import AttemptLedger
from quiz_portal.core.services.question_bank import QuestionBank
from quiz_portal.core.storage import MemoryStore


class FakeClock:
    """Manually advanced wall and monotonic clocks."""

    def __init__(self) -> None:
        self.current = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
        self.ticks = 1000.0

    def now(self) -> datetime:
        return self.current

    def monotonic(self) -> float:
        return self.ticks

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)
        self.ticks += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def context(store: MemoryStore, clock: FakeClock) -> AppContext:
    ids = count(1)
    return AppContext(
        store=store,
        now=clock.now,
        monotonic=clock.monotonic,
        new_id=lambda: f"id-{next(ids)}",
    )


@pytest.fixture
def accounts(context: AppContext) -> AccountDirectory:
    return AccountDirectory(context)


@pytest.fixture
def bank(context: AppContext) -> QuestionBank:
    return QuestionBank(context)


@pytest.fixture
def ledger(context: AppContext) -> AttemptLedger:
    return AttemptLedger(context)


@pytest.fixture
def portal(context: AppContext) -> QuizPortal:
    quiz_portal = QuizPortal(context)
    quiz_portal.initialize_defaults()
    return quiz_portal


@pytest.fixture
def student() -> User:
    return User(id="2", username="student", password="student123", role=Role.STUDENT)


def make_draft(
    question: str = "What is 2 + 2?",
    options: list[str] | None = None,
    correct_answer: int = 1,
    category: str = "Mathematics",
    difficulty: Difficulty = Difficulty.EASY,
) -> QuestionDraft:
    return QuestionDraft(
        question=question,
        options=list(options) if options is not None else ["3", "4", "5", "6"],
        correct_answer=correct_answer,
        category=category,
        difficulty=difficulty,
    )


@pytest.fixture
def draft_factory():
    return make_draft
