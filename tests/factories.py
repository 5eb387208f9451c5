"""Builders for valid domain records used across the test suite."""

from __future__ import annotations

from waai_app.core.models import Option, Question, QuestionType


def multiple_choice(question_id: str, correct_index: int = 0, text: str | None = None) -> Question:
    options = [
        Option(id=f"{question_id}_opt_{index}", text=f"Answer {index}", is_correct=index == correct_index)
        for index in range(4)
    ]
    return Question(
        id=question_id,
        text=text or f"Question {question_id}?",
        type=QuestionType.MULTIPLE_CHOICE,
        options=options,
    )


def true_false(question_id: str, answer: bool = True) -> Question:
    return Question(
        id=question_id,
        text=f"Statement {question_id}",
        type=QuestionType.TRUE_FALSE,
        options=[
            Option(id=f"{question_id}_true", text="True", is_correct=answer),
            Option(id=f"{question_id}_false", text="False", is_correct=not answer),
        ],
    )


def correct_option_id(question: Question) -> str:
    return question.correct_option.id


def wrong_option_id(question: Question) -> str:
    return next(option.id for option in question.options if not option.is_correct)
