from __future__ import annotations

import pytest

from quiz_portal.core.question_importer import QuestionImportError
from quiz_portal.core.services.quiz_session import QuizUnavailableError, SessionState


def _login_student(portal):
    return portal.login("student", "student123")


def test_initialize_defaults_seeds_accounts_and_questions(portal):
    assert portal.get_question_count() == 3
    assert portal.authenticate("admin", "admin123") is not None


def test_full_quiz_flow_records_an_attempt(portal, clock):
    student = _login_student(portal)
    session = portal.start_quiz(student)

    for question in session.questions:
        assert portal.select_answer(student, session.current_index, question.correct_answer)
        clock.advance(5)
        assert portal.advance_quiz(student) is session

    assert session.state is SessionState.COMPLETED
    assert session.attempt.score == 100.0
    assert session.attempt.time_spent == 15
    assert portal.get_quiz(student) is None

    attempts = portal.list_student_attempts(student.id)
    assert [a.id for a in attempts] == [session.attempt.id]

    summary = portal.get_student_summary(student.id)
    assert summary.attempt_count == 1
    assert summary.best_score == 100.0


def test_advance_without_answer_is_rejected(portal):
    student = _login_student(portal)
    session = portal.start_quiz(student)

    assert portal.advance_quiz(student) is None
    assert session.current_index == 0
    assert portal.retreat_quiz(student) is None


def test_transitions_without_a_quiz_are_rejected(portal):
    student = _login_student(portal)

    assert portal.get_quiz(student) is None
    assert portal.select_answer(student, 0, 0) is None
    assert portal.advance_quiz(student) is None
    assert portal.retreat_quiz(student) is None


def test_start_quiz_with_empty_bank_is_unavailable(portal):
    for question in portal.list_questions():
        portal.delete_question(question.id)
    student = _login_student(portal)

    with pytest.raises(QuizUnavailableError):
        portal.start_quiz(student)
    assert portal.get_quiz(student) is None


def test_bank_edits_do_not_change_recorded_attempts(portal, draft_factory):
    student = _login_student(portal)
    session = portal.start_quiz(student)
    for question in session.questions:
        portal.select_answer(student, session.current_index, question.correct_answer)
        portal.advance_quiz(student)

    first = portal.list_questions()[0]
    portal.update_question(first.id, draft_factory(question="Rewritten"))
    portal.delete_question(portal.list_questions()[1].id)

    stored = portal.list_attempts()[0]
    assert [q.question for q in stored.questions] == [q.question for q in session.questions]
    assert stored.score == 100.0


def test_logout_clears_session_and_quiz(portal):
    student = _login_student(portal)
    portal.start_quiz(student)

    portal.logout()

    assert portal.current_user() is None
    assert portal.get_quiz(student) is None


def test_overview_counts_distinct_students(portal, clock):
    student = _login_student(portal)
    for chosen in (0, 3):
        session = portal.start_quiz(student)
        for _ in session.questions:
            portal.select_answer(student, session.current_index, chosen)
            portal.advance_quiz(student)
        clock.advance(60)

    overview = portal.get_overview()
    assert overview.question_count == 3
    assert overview.attempt_count == 2
    assert overview.distinct_students == 1

    newest, oldest = portal.list_attempts()
    assert newest.completed_at > oldest.completed_at


def test_select_answer_defaults_to_current_question(portal):
    student = _login_student(portal)
    session = portal.start_quiz(student)
    portal.select_answer(student, None, 2)
    portal.advance_quiz(student)

    assert portal.select_answer(student, None, 3) is session
    assert session.answers == [2, 3, -1]
    assert portal.select_answer(student, None, 9) is None


def test_export_then_import_restores_the_bank(portal):
    exported = portal.export_questions()
    for question in portal.list_questions():
        portal.delete_question(question.id)

    created, parsed = portal.import_questions(exported)

    assert parsed == 3
    assert [q.question for q in created] == [q.question for q in portal.list_questions()]
    assert [q.correct_answer for q in created] == [2, 1, 1]
    assert [q.category for q in created] == ["Geography", "Technology", "Mathematics"]


def test_multi_paragraph_question_survives_export(portal, draft_factory):
    original = portal.create_question(draft_factory(question="Read this:\n\nWhat is 2 + 2?"))
    exported = portal.export_questions()
    for question in portal.list_questions():
        portal.delete_question(question.id)

    created, _ = portal.import_questions(exported)

    assert created[-1].question == original.question
    assert created[-1].options == original.options


def test_import_without_questions_raises(portal):
    with pytest.raises(QuestionImportError):
        portal.import_questions("\n\n")


def test_export_of_empty_bank_raises(portal):
    for question in portal.list_questions():
        portal.delete_question(question.id)

    with pytest.raises(ValueError):
        portal.export_questions()
