"""Service driving one student's pass through a quiz."""

from __future__ import annotations

import copy
from enum import Enum, auto
import logging
from typing import TYPE_CHECKING

from quiz_portal.constants.quiz_constants import UNANSWERED
from quiz_portal.core.context import AppContext
from quiz_portal.core.models import Question, QuizAttempt, User

if TYPE_CHECKING:
    from quiz_portal.core.services.attempt_ledger import AttemptLedger

_logger = logging.getLogger(__name__)


class QuizUnavailableError(RuntimeError):
    """Raised when a quiz is requested but there are no questions to ask."""


class SessionState(Enum):
    IN_PROGRESS = auto()
    COMPLETED = auto()


def compute_score(questions: list[Question], answers: list[int]) -> float:
    """Percentage of questions whose answer matches the correct option."""
    if not questions:
        return 0.0
    correct = sum(
        1 for question, answer in zip(questions, answers) if answer == question.correct_answer
    )
    return correct / len(questions) * 100


class QuizSession:
    """State machine for an in-progress quiz.

    The session starts ``IN_PROGRESS`` on the first question with every answer
    slot set to ``UNANSWERED``. Moving past the last question scores the quiz,
    hands the finished ``QuizAttempt`` to the ledger and switches to
    ``COMPLETED``. Transitions that are not allowed in the current state
    return False and leave the session untouched.
    """

    def __init__(
        self,
        context: AppContext,
        ledger: AttemptLedger,
        student: User,
        questions: list[Question],
    ) -> None:
        if not questions:
            raise QuizUnavailableError("No questions are available yet.")
        self._context = context
        self._ledger = ledger
        self._student = student
        self._questions: list[Question] = copy.deepcopy(questions)
        self._answers: list[int] = [UNANSWERED] * len(self._questions)
        self._index: int = 0
        self._state = SessionState.IN_PROGRESS
        self._started_at: float = context.monotonic()
        self._time_spent: int | None = None
        self._attempt: QuizAttempt | None = None

    @classmethod
    def begin(
        cls,
        context: AppContext,
        ledger: AttemptLedger,
        student: User,
        questions: list[Question],
    ) -> "QuizSession":
        session = cls(context, ledger, student, questions)
        _logger.info(
            "Started quiz for %s with %d questions", student.username, len(questions)
        )
        return session

    # --- State ---

    @property
    def state(self) -> SessionState:
        return self._state

    def is_completed(self) -> bool:
        return self._state is SessionState.COMPLETED

    @property
    def student(self) -> User:
        return self._student

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Question:
        return self._questions[self._index]

    @property
    def questions(self) -> list[Question]:
        return list(self._questions)

    @property
    def question_count(self) -> int:
        return len(self._questions)

    @property
    def answers(self) -> list[int]:
        return list(self._answers)

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self._answers if answer != UNANSWERED)

    @property
    def is_last_question(self) -> bool:
        return self._index == len(self._questions) - 1

    @property
    def elapsed_seconds(self) -> int:
        if self._time_spent is not None:
            return self._time_spent
        return max(0, int(self._context.monotonic() - self._started_at))

    @property
    def attempt(self) -> QuizAttempt | None:
        return self._attempt

    # --- Transitions ---

    def select_answer(self, question_index: int, option_index: int) -> bool:
        if self._state is not SessionState.IN_PROGRESS:
            return False
        if not 0 <= question_index < len(self._questions):
            return False
        if not 0 <= option_index < len(self._questions[question_index].options):
            return False
        self._answers[question_index] = option_index
        return True

    def advance(self) -> bool:
        if self._state is not SessionState.IN_PROGRESS:
            return False
        if self._answers[self._index] == UNANSWERED:
            return False
        if not self.is_last_question:
            self._index += 1
            return True
        self._complete()
        return True

    def retreat(self) -> bool:
        if self._state is not SessionState.IN_PROGRESS or self._index == 0:
            return False
        self._index -= 1
        return True

    def _complete(self) -> None:
        time_spent = self.elapsed_seconds
        attempt = QuizAttempt(
            id=self._context.new_id(),
            student_id=self._student.id,
            student_name=self._student.username,
            questions=copy.deepcopy(self._questions),
            answers=list(self._answers),
            score=compute_score(self._questions, self._answers),
            total_questions=len(self._questions),
            completed_at=self._context.now(),
            time_spent=time_spent,
        )
        self._ledger.record(attempt)
        self._time_spent = time_spent
        self._attempt = attempt
        self._state = SessionState.COMPLETED
