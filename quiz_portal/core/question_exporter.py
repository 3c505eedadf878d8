"""Utilities for exporting questions to the plain-text import format."""

from __future__ import annotations

from quiz_portal.core.models import Question
from quiz_portal.core.question_importer import BLOCK_SEPARATOR, OPTION_LETTERS

# Continuation lines starting with one of these would be read back as a marker
RESERVED_PREFIXES = ("Q:", "CORRECT:", "CATEGORY:", "DIFFICULTY:") + tuple(
    f"{letter}:" for letter in OPTION_LETTERS
)


def serialize_questions(questions: list[Question]) -> str:
    """Render ``questions`` as text that ``parse_questions_text`` reads back."""

    if not questions:
        raise ValueError("Cannot export an empty question bank.")

    blocks = [_serialize_question(question) for question in questions]
    return f"\n\n{BLOCK_SEPARATOR}\n\n".join(blocks) + "\n"


def _serialize_question(question: Question) -> str:
    lines: list[str] = []

    question_lines = question.question.splitlines() or [""]
    _check_continuation(question, question_lines[1:])
    lines.append(f"Q: {question_lines[0]}")
    lines.extend(question_lines[1:])

    for letter, option_text in zip(OPTION_LETTERS, question.options):
        option_lines = option_text.splitlines() or [""]
        _check_continuation(question, option_lines[1:])
        lines.append(f"{letter}: {option_lines[0]}")
        lines.extend(option_lines[1:])

    lines.append(f"CORRECT: {OPTION_LETTERS[question.correct_answer]}")
    lines.append(f"CATEGORY: {question.category}")
    lines.append(f"DIFFICULTY: {question.difficulty.value}")
    return "\n".join(lines)


def _check_continuation(question: Question, lines: list[str]) -> None:
    for line in lines:
        stripped = line.strip()
        if stripped == BLOCK_SEPARATOR or stripped.upper().startswith(RESERVED_PREFIXES):
            raise ValueError(
                f"Question '{question.id}' cannot be exported: the line '{stripped}' "
                "would be read back as part of the file format."
            )
