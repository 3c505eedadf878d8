"""Service for managing the collection of quiz questions."""

from __future__ import annotations

from datetime import datetime
import logging

from quiz_portal.constants.quiz_constants import DEFAULT_QUESTIONS, OPTION_COUNT
from quiz_portal.constants.storage_constants import QUESTIONS_KEY
from quiz_portal.core.context import AppContext
from quiz_portal.core.documents import DocumentCollection
from quiz_portal.core.models import Difficulty, Question, QuestionDraft

_logger = logging.getLogger(__name__)


class QuestionBank:
    """Manages the lifecycle and storage of quiz questions.

    Every mutation rewrites the whole questions document. Invalid drafts and
    unknown ids are reported through the return value and never raise.
    """

    def __init__(self, context: AppContext) -> None:
        self._context = context
        self._questions = DocumentCollection(context.store, QUESTIONS_KEY, Question)

    def initialize_defaults(self) -> bool:
        """Seed the starter questions if the bank has never been saved."""
        if self._questions.exists():
            return False
        seeded = [
            self._build_question(
                QuestionDraft(
                    question=text,
                    options=list(options),
                    correct_answer=correct,
                    category=category,
                    difficulty=Difficulty(difficulty),
                ),
                question_id=self._context.new_id(),
            )
            for text, options, correct, category, difficulty in DEFAULT_QUESTIONS
        ]
        self._questions.save(seeded)
        _logger.info("Seeded %d default questions", len(seeded))
        return True

    def list(self) -> list[Question]:
        """Return all questions in insertion order."""
        return self._questions.load_or_empty()

    def get(self, question_id: str) -> Question | None:
        return next((q for q in self.list() if q.id == question_id), None)

    def count(self) -> int:
        return len(self.list())

    def categories(self) -> list[str]:
        seen: dict[str, None] = {}
        for question in self.list():
            seen.setdefault(question.category, None)
        return list(seen)

    def validate(self, draft: QuestionDraft) -> str | None:
        """Return the first problem with ``draft``, or None if it can be stored."""
        if not isinstance(draft.question, str) or not draft.question.strip():
            return "Question text must not be empty."
        if not isinstance(draft.category, str) or not draft.category.strip():
            return "Category must not be empty."
        if len(draft.options) != OPTION_COUNT:
            return f"Each question must have exactly {OPTION_COUNT} options."
        if any(not isinstance(option, str) or not option.strip() for option in draft.options):
            return "Option text cannot be empty."
        correct = draft.correct_answer
        if isinstance(correct, bool) or not isinstance(correct, int):
            return "Correct answer must be an option index."
        if not 0 <= correct < OPTION_COUNT:
            return f"Correct answer must be between 0 and {OPTION_COUNT - 1}."
        try:
            Difficulty(draft.difficulty)
        except ValueError:
            return "Difficulty must be one of easy, medium or hard."
        return None

    def create(self, draft: QuestionDraft) -> Question | None:
        problem = self.validate(draft)
        if problem is not None:
            _logger.warning("Rejected new question: %s", problem)
            return None

        question = self._build_question(draft, question_id=self._unique_id())
        questions = self.list()
        questions.append(question)
        self._questions.save(questions)
        return question

    def update(self, question_id: str, draft: QuestionDraft) -> Question | None:
        problem = self.validate(draft)
        if problem is not None:
            _logger.warning("Rejected update of question %s: %s", question_id, problem)
            return None

        questions = self.list()
        index = next((i for i, q in enumerate(questions) if q.id == question_id), -1)
        if index < 0:
            return None

        # Preserve the original ID and creation time
        updated = self._build_question(
            draft,
            question_id=question_id,
            created_at=questions[index].created_at,
        )
        questions[index] = updated
        self._questions.save(questions)
        return updated

    def delete(self, question_id: str) -> bool:
        questions = self.list()
        remaining = [q for q in questions if q.id != question_id]
        if len(remaining) == len(questions):
            return False
        self._questions.save(remaining)
        return True

    def _build_question(
        self,
        draft: QuestionDraft,
        question_id: str,
        created_at: datetime | None = None,
    ) -> Question:
        return Question(
            id=question_id,
            question=draft.question.strip(),
            options=[option.strip() for option in draft.options],
            correct_answer=draft.correct_answer,
            category=draft.category.strip(),
            difficulty=Difficulty(draft.difficulty),
            created_at=created_at if created_at is not None else self._context.now(),
        )

    def _unique_id(self) -> str:
        existing = {q.id for q in self.list()}
        candidate = self._context.new_id()
        while candidate in existing:
            candidate = self._context.new_id()
        return candidate
