"""Utilities for importing questions from a human-friendly text file.

File format (repeat blocks separated by '---' lines, or by blank lines when
the file contains no '---' at all):

    Q: Question text (supports markdown). Additional lines until the next
       marker are treated as part of the question.
    A: First option text
    B: Second option text
    C: Third option text
    D: Fourth option text
    CORRECT: A|B|C|D
    CATEGORY: Free text
    DIFFICULTY: easy|medium|hard   (optional, defaults to medium)

Once a file uses '---', blank lines inside a block belong to the question or
option text, so multi-paragraph Markdown survives an export and re-import.

Example:

    Q: What is 2 + 2?
    A: 3
    B: 4
    C: 5
    D: 6
    CORRECT: B
    CATEGORY: Mathematics
    DIFFICULTY: easy
"""

from __future__ import annotations

from quiz_portal.core.models import Difficulty, QuestionDraft

BLOCK_SEPARATOR = "---"
OPTION_LETTERS = ("A", "B", "C", "D")


class QuestionImportError(Exception):
    """Raised when question text cannot be parsed."""


def parse_questions_text(text: str) -> list[QuestionDraft]:
    lines = text.splitlines()
    has_separator = any(line.strip() == BLOCK_SEPARATOR for line in lines)

    blocks: list[str] = []
    current_block: list[str] = []
    for raw_line in lines:
        stripped = raw_line.strip()
        if stripped == BLOCK_SEPARATOR:
            if current_block:
                blocks.append("\n".join(current_block).strip())
                current_block = []
            continue
        if stripped or has_separator:
            current_block.append(raw_line)
        elif current_block:
            blocks.append("\n".join(current_block).strip())
            current_block = []
    if current_block:
        blocks.append("\n".join(current_block).strip())

    return [_parse_block(block) for block in blocks if block]


def _parse_block(block: str) -> QuestionDraft:
    question_lines: list[str] = []
    options: dict[str, str] = {}
    correct_letter: str | None = None
    category: str | None = None
    difficulty = Difficulty.MEDIUM
    current_section: str | None = None

    for raw_line in block.splitlines():
        line = raw_line.strip()
        if not line:
            if current_section == "Q":
                question_lines.append("")
            elif current_section in OPTION_LETTERS:
                options[current_section] += "\n"
            continue

        upper = line.upper()
        if upper.startswith("Q:"):
            if question_lines:
                raise QuestionImportError(
                    "Found a second 'Q:' in one block; "
                    f"separate questions with '{BLOCK_SEPARATOR}'."
                )
            question_lines = [line[2:].strip()]
            current_section = "Q"
            continue

        if upper.startswith("CORRECT:"):
            correct_letter = _value_of(line).upper()
            current_section = None
            continue

        if upper.startswith("CATEGORY:"):
            category = _value_of(line)
            current_section = None
            continue

        if upper.startswith("DIFFICULTY:"):
            raw_value = _value_of(line).lower()
            try:
                difficulty = Difficulty(raw_value)
            except ValueError as exc:
                raise QuestionImportError(
                    "DIFFICULTY must be one of easy, medium or hard."
                ) from exc
            current_section = None
            continue

        if len(line) > 2 and line[0].upper() in OPTION_LETTERS and line[1] == ":":
            letter = line[0].upper()
            options[letter] = line[2:].strip()
            current_section = letter
            continue

        if current_section == "Q":
            question_lines.append(line)
        elif current_section in OPTION_LETTERS:
            options[current_section] = options[current_section] + f"\n{line}"
        else:
            raise QuestionImportError(
                f"Encountered text outside of a known section: '{line}'."
            )

    question_text = "\n".join(question_lines).strip()
    if not question_text:
        raise QuestionImportError("Question text missing (Q: ...)")
    if len(options) != len(OPTION_LETTERS):
        raise QuestionImportError("Each question must define exactly four options (A-D).")

    option_list = [options[letter].strip() for letter in OPTION_LETTERS]
    if any(not option for option in option_list):
        raise QuestionImportError("Option text cannot be empty.")

    if correct_letter is None:
        raise QuestionImportError(f"Question '{question_text}' is missing CORRECT.")
    if correct_letter not in OPTION_LETTERS:
        raise QuestionImportError("CORRECT must be one of A, B, C, or D.")

    if not category:
        raise QuestionImportError(f"Question '{question_text}' is missing CATEGORY.")

    return QuestionDraft(
        question=question_text,
        options=option_list,
        correct_answer=OPTION_LETTERS.index(correct_letter),
        category=category,
        difficulty=difficulty,
    )


def _value_of(line: str) -> str:
    return line.split(":", 1)[1].strip()
