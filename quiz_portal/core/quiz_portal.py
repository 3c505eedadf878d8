"""Facade over the core services shared by the HTTP API and the entry point."""

from __future__ import annotations

import logging
from threading import Lock

from quiz_portal.core.context import AppContext
from quiz_portal.core.models import (
    OverviewStats,
    Question,
    QuestionDraft,
    QuizAttempt,
    Role,
    StudentSummary,
    User,
)
from quiz_portal.core.question_exporter import serialize_questions
from quiz_portal.core.question_importer import QuestionImportError, parse_questions_text
from quiz_portal.core.services.account_directory import AccountDirectory
from quiz_portal.core.services.attempt_ledger import (
    AttemptLedger,
    newest_first,
    summarize_overview,
    summarize_student,
)
from quiz_portal.core.services.question_bank import QuestionBank
from quiz_portal.core.services.quiz_session import QuizSession

_logger = logging.getLogger(__name__)


class QuizPortal:
    """Facade for quiz services: Accounts, Question Bank, Ledger and Quiz Sessions.

    Every public method takes the lock, so the API server's worker threads see
    each operation as one step.
    """

    def __init__(self, context: AppContext) -> None:
        self._lock = Lock()
        self._context = context

        # Services
        self._accounts = AccountDirectory(context)
        self._questions = QuestionBank(context)
        self._ledger = AttemptLedger(context)

        # In-progress quizzes keyed by student id
        self._quiz_sessions: dict[str, QuizSession] = {}

    def initialize_defaults(self) -> None:
        with self._lock:
            self._accounts.initialize_defaults()
            self._questions.initialize_defaults()

    # --- Account Directory Delegation ---

    def login(self, username: str, password: str) -> User | None:
        with self._lock:
            return self._accounts.login(username, password)

    def authenticate(self, username: str, password: str) -> User | None:
        with self._lock:
            return self._accounts.authenticate(username, password)

    def start_session(self, user: User) -> None:
        with self._lock:
            self._accounts.start_session(user)

    def logout(self) -> None:
        with self._lock:
            current = self._accounts.current_session()
            if current is not None:
                self._quiz_sessions.pop(current.id, None)
            self._accounts.end_session()

    def current_user(self) -> User | None:
        with self._lock:
            return self._accounts.current_session()

    @staticmethod
    def has_role(user: User | None, role: Role) -> bool:
        return AccountDirectory.has_role(user, role)

    # --- Question Bank Delegation ---

    def list_questions(self) -> list[Question]:
        with self._lock:
            return self._questions.list()

    def get_question(self, question_id: str) -> Question | None:
        with self._lock:
            return self._questions.get(question_id)

    def get_question_count(self) -> int:
        with self._lock:
            return self._questions.count()

    def list_categories(self) -> list[str]:
        with self._lock:
            return self._questions.categories()

    def validate_question(self, draft: QuestionDraft) -> str | None:
        with self._lock:
            return self._questions.validate(draft)

    def create_question(self, draft: QuestionDraft) -> Question | None:
        with self._lock:
            return self._questions.create(draft)

    def update_question(self, question_id: str, draft: QuestionDraft) -> Question | None:
        with self._lock:
            return self._questions.update(question_id, draft)

    def delete_question(self, question_id: str) -> bool:
        with self._lock:
            return self._questions.delete(question_id)

    def import_questions(self, text: str) -> tuple[list[Question], int]:
        """Create a question for every block in ``text``; invalid drafts are skipped.

        Returns the created questions and the number of drafts parsed. Raises
        QuestionImportError when the text is malformed or holds no questions.
        """
        drafts = parse_questions_text(text)
        if not drafts:
            raise QuestionImportError("The import did not contain any questions.")
        created: list[Question] = []
        with self._lock:
            for draft in drafts:
                question = self._questions.create(draft)
                if question is not None:
                    created.append(question)
        _logger.info("Imported %d of %d questions", len(created), len(drafts))
        return created, len(drafts)

    def export_questions(self) -> str:
        """Raises ValueError when the bank is empty or a question cannot be written."""
        with self._lock:
            questions = self._questions.list()
        return serialize_questions(questions)

    # --- Quiz Session Delegation ---

    def start_quiz(self, student: User) -> QuizSession:
        """Start a fresh quiz for ``student``, replacing any unfinished one.

        Raises QuizUnavailableError when the bank holds no questions.
        """
        with self._lock:
            session = QuizSession.begin(
                self._context,
                self._ledger,
                student,
                self._questions.list(),
            )
            self._quiz_sessions[student.id] = session
            return session

    def get_quiz(self, student: User) -> QuizSession | None:
        with self._lock:
            return self._quiz_sessions.get(student.id)

    def select_answer(
        self,
        student: User,
        question_index: int | None,
        option_index: int,
    ) -> QuizSession | None:
        """Select an option; ``question_index=None`` targets the current question.

        Returns the session on success and None when rejected.
        """
        with self._lock:
            session = self._quiz_sessions.get(student.id)
            if session is None:
                return None
            if question_index is None:
                question_index = session.current_index
            if not session.select_answer(question_index, option_index):
                return None
            return session

    def advance_quiz(self, student: User) -> QuizSession | None:
        """Move forward; returns the session on success and None when rejected."""
        with self._lock:
            session = self._quiz_sessions.get(student.id)
            if session is None or not session.advance():
                return None
            if session.is_completed():
                # Finished quizzes are in the ledger; a new one needs start_quiz.
                del self._quiz_sessions[student.id]
            return session

    def retreat_quiz(self, student: User) -> QuizSession | None:
        with self._lock:
            session = self._quiz_sessions.get(student.id)
            if session is None or not session.retreat():
                return None
            return session

    # --- Attempt Ledger Delegation ---

    def list_attempts(self) -> list[QuizAttempt]:
        with self._lock:
            return newest_first(self._ledger.list_all())

    def list_student_attempts(self, student_id: str) -> list[QuizAttempt]:
        with self._lock:
            return newest_first(self._ledger.list_for_student(student_id))

    def get_student_summary(self, student_id: str) -> StudentSummary:
        with self._lock:
            return summarize_student(self._ledger.list_for_student(student_id))

    def get_overview(self) -> OverviewStats:
        with self._lock:
            return summarize_overview(self._questions.count(), self._ledger.list_all())
