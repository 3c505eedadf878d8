"""Core services operating on the persistent store."""

from .account_directory import AccountDirectory
from .attempt_ledger import AttemptLedger
from .question_bank import QuestionBank
from .quiz_session import QuizSession, QuizUnavailableError, SessionState

__all__ = [
    "AccountDirectory",
    "AttemptLedger",
    "QuestionBank",
    "QuizSession",
    "QuizUnavailableError",
    "SessionState",
]
