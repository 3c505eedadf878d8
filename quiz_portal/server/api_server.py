"""FastAPI server exposing the quiz portal to a browser front-end."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field
import uvicorn

from quiz_portal.constants.about import APP_DESCRIPTION, APP_NAME, APP_VERSION
from quiz_portal.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_portal.core.markdown_renderer import renderer
from quiz_portal.core.models import (
    Difficulty,
    Question,
    QuestionDraft,
    QuizAttempt,
    Role,
    User,
)
from quiz_portal.core.question_importer import QuestionImportError
from quiz_portal.core.quiz_portal import QuizPortal
from quiz_portal.core.services.attempt_ledger import (
    correct_count,
    format_duration,
    score_band,
)
from quiz_portal.core.services.quiz_session import QuizSession, QuizUnavailableError


class LoginPayload(BaseModel):
    """Credentials plus the flow the caller is signing in to."""

    username: str
    password: str
    role: Role | None = None


class QuestionPayload(BaseModel):
    """Payload schema for creating or updating a question."""

    question: str
    options: list[str]
    correct_answer: int
    category: str
    difficulty: Difficulty = Difficulty.MEDIUM

    def to_draft(self) -> QuestionDraft:
        return QuestionDraft(
            question=self.question,
            options=list(self.options),
            correct_answer=self.correct_answer,
            category=self.category,
            difficulty=self.difficulty,
        )


class ImportPayload(BaseModel):
    """Question blocks in the plain-text transfer format."""

    text: str


class AnswerPayload(BaseModel):
    """Payload schema for selecting an option in the running quiz."""

    option_index: int = Field(ge=0)
    question_index: int | None = None


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def _user_to_dict(user: User) -> dict[str, object]:
    return {"id": user.id, "username": user.username, "role": user.role.value}


def _question_to_dict(question: Question, include_answer: bool) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": question.id,
        "question": question.question,
        "question_html": renderer.render_fragment(question.question),
        "options": list(question.options),
        "options_html": [renderer.render_inline(option) for option in question.options],
        "category": question.category,
        "difficulty": question.difficulty.value,
        "created_at": _iso(question.created_at),
    }
    if include_answer:
        payload["correct_answer"] = question.correct_answer
    return payload


def _attempt_to_dict(attempt: QuizAttempt, include_questions: bool = False) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": attempt.id,
        "student_id": attempt.student_id,
        "student_name": attempt.student_name,
        "score": attempt.score,
        "score_band": score_band(attempt.score),
        "correct_count": correct_count(attempt),
        "total_questions": attempt.total_questions,
        "answers": list(attempt.answers),
        "completed_at": _iso(attempt.completed_at),
        "time_spent": attempt.time_spent,
        "time_spent_label": format_duration(attempt.time_spent),
    }
    if include_questions:
        payload["questions"] = [
            _question_to_dict(question, include_answer=True) for question in attempt.questions
        ]
    return payload


def _quiz_to_dict(session: QuizSession) -> dict[str, object]:
    payload: dict[str, object] = {
        "state": session.state.name.lower(),
        "current_index": session.current_index,
        "question_count": session.question_count,
        "answers": session.answers,
        "answered_count": session.answered_count,
        "is_last_question": session.is_last_question,
        "elapsed_seconds": session.elapsed_seconds,
    }
    attempt = session.attempt
    if attempt is None:
        # Correct answers stay hidden until the quiz is submitted
        payload["question"] = _question_to_dict(session.current_question, include_answer=False)
    else:
        payload["result"] = _attempt_to_dict(attempt, include_questions=True)
    return payload


def _get_portal_dependency(portal: QuizPortal):
    def dependency() -> QuizPortal:
        return portal

    return dependency


def create_api_app(portal: QuizPortal) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz portal."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION, description=APP_DESCRIPTION)
    portal_dep = _get_portal_dependency(portal)

    def current_user(manager: QuizPortal = Depends(portal_dep)) -> User:
        user = manager.current_user()
        if user is None:
            raise HTTPException(status_code=401, detail="Please log in first.")
        return user

    def admin_user(user: User = Depends(current_user)) -> User:
        if not QuizPortal.has_role(user, Role.ADMIN):
            raise HTTPException(status_code=403, detail="Administrator access required.")
        return user

    def student_user(user: User = Depends(current_user)) -> User:
        if not QuizPortal.has_role(user, Role.STUDENT):
            raise HTTPException(status_code=403, detail="Only students can take quizzes.")
        return user

    # --- Session ---

    @app.post("/login")
    def login(
        payload: LoginPayload,
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        user = manager.authenticate(payload.username, payload.password)
        if user is None:
            raise HTTPException(status_code=401, detail="Invalid username or password.")
        if payload.role is not None and not QuizPortal.has_role(user, payload.role):
            raise HTTPException(
                status_code=403,
                detail=f"This account cannot sign in as {payload.role.value}.",
            )
        manager.start_session(user)
        return {"user": _user_to_dict(user)}

    @app.post("/logout")
    def logout(manager: QuizPortal = Depends(portal_dep)) -> dict[str, object]:
        manager.logout()
        return {"user": None}

    @app.get("/session")
    def get_session(manager: QuizPortal = Depends(portal_dep)) -> dict[str, object]:
        user = manager.current_user()
        return {"user": _user_to_dict(user) if user is not None else None}

    # --- Questions ---

    @app.get("/questions")
    def list_questions(
        user: User = Depends(current_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        include_answer = QuizPortal.has_role(user, Role.ADMIN)
        return {
            "questions": [
                _question_to_dict(question, include_answer=include_answer)
                for question in manager.list_questions()
            ],
            "categories": manager.list_categories(),
        }

    @app.post("/questions", status_code=201)
    def create_question(
        payload: QuestionPayload,
        _admin: User = Depends(admin_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        draft = payload.to_draft()
        problem = manager.validate_question(draft)
        if problem is not None:
            raise HTTPException(status_code=422, detail=problem)
        question = manager.create_question(draft)
        if question is None:
            raise HTTPException(status_code=422, detail="Question could not be saved.")
        return _question_to_dict(question, include_answer=True)

    @app.put("/questions/{question_id}")
    def update_question(
        question_id: str,
        payload: QuestionPayload,
        _admin: User = Depends(admin_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        if manager.get_question(question_id) is None:
            raise HTTPException(status_code=404, detail="Question not found.")
        draft = payload.to_draft()
        problem = manager.validate_question(draft)
        if problem is not None:
            raise HTTPException(status_code=422, detail=problem)
        question = manager.update_question(question_id, draft)
        if question is None:
            raise HTTPException(status_code=404, detail="Question not found.")
        return _question_to_dict(question, include_answer=True)

    @app.delete("/questions/{question_id}")
    def delete_question(
        question_id: str,
        _admin: User = Depends(admin_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        if not manager.delete_question(question_id):
            raise HTTPException(status_code=404, detail="Question not found.")
        return {"deleted": question_id}

    @app.post("/questions/import", status_code=201)
    def import_questions(
        payload: ImportPayload,
        _admin: User = Depends(admin_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        try:
            created, parsed = manager.import_questions(payload.text)
        except QuestionImportError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {
            "questions": [_question_to_dict(q, include_answer=True) for q in created],
            "skipped": parsed - len(created),
        }

    @app.get("/questions/export", response_class=PlainTextResponse)
    def export_questions(
        _admin: User = Depends(admin_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> str:
        try:
            return manager.export_questions()
        except ValueError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc

    # --- Quiz ---

    @app.post("/quiz/start", status_code=201)
    def start_quiz(
        student: User = Depends(student_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        try:
            session = manager.start_quiz(student)
        except QuizUnavailableError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _quiz_to_dict(session)

    @app.get("/quiz")
    def get_quiz(
        student: User = Depends(student_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        session = manager.get_quiz(student)
        if session is None:
            raise HTTPException(status_code=404, detail="No quiz in progress.")
        return _quiz_to_dict(session)

    @app.post("/quiz/answer")
    def select_answer(
        payload: AnswerPayload,
        student: User = Depends(student_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        if manager.get_quiz(student) is None:
            raise HTTPException(status_code=404, detail="No quiz in progress.")
        session = manager.select_answer(student, payload.question_index, payload.option_index)
        if session is None:
            raise HTTPException(status_code=409, detail="That answer cannot be selected.")
        return _quiz_to_dict(session)

    @app.post("/quiz/next")
    def next_question(
        student: User = Depends(student_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        if manager.get_quiz(student) is None:
            raise HTTPException(status_code=404, detail="No quiz in progress.")
        session = manager.advance_quiz(student)
        if session is None:
            raise HTTPException(
                status_code=409,
                detail="Please select an answer before moving on.",
            )
        return _quiz_to_dict(session)

    @app.post("/quiz/previous")
    def previous_question(
        student: User = Depends(student_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        if manager.get_quiz(student) is None:
            raise HTTPException(status_code=404, detail="No quiz in progress.")
        session = manager.retreat_quiz(student)
        if session is None:
            raise HTTPException(status_code=409, detail="Already at the first question.")
        return _quiz_to_dict(session)

    # --- Results ---

    @app.get("/attempts")
    def list_attempts(
        _admin: User = Depends(admin_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        return {"attempts": [
                _attempt_to_dict(a, include_questions=True) for a in manager.list_attempts()
            ]}

    @app.get("/attempts/me")
    def list_my_attempts(
        student: User = Depends(student_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        attempts = manager.list_student_attempts(student.id)
        return {"attempts": [_attempt_to_dict(a) for a in attempts]}

    @app.get("/stats/overview")
    def get_overview(
        _admin: User = Depends(admin_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        overview = manager.get_overview()
        return {
            "question_count": overview.question_count,
            "attempt_count": overview.attempt_count,
            "distinct_students": overview.distinct_students,
            "average_score": overview.average_score,
        }

    @app.get("/stats/me")
    def get_my_stats(
        student: User = Depends(student_user),
        manager: QuizPortal = Depends(portal_dep),
    ) -> dict[str, object]:
        summary = manager.get_student_summary(student.id)
        return {
            "attempt_count": summary.attempt_count,
            "best_score": summary.best_score,
            "average_score": summary.average_score,
            "average_time_spent": summary.average_time_spent,
            "average_time_label": format_duration(summary.average_time_spent),
            "score_trend": summary.score_trend,
            "question_count": manager.get_question_count(),
        }

    return app


def run_api_server(
    portal: QuizPortal,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve the API in the foreground until interrupted."""
    app = create_api_app(portal)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)
    server.run()
