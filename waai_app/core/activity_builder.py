"""Mutable drafts behind the activity editor.

Drafts accept incomplete input while the teacher is typing. ``build`` turns a
draft into validated ``Question`` values; any rule the draft breaks surfaces
as the same ``ValidationError`` the models raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from waai_app.constants.quiz_constants import (
    FALSE_LABEL,
    MULTIPLE_CHOICE_OPTION_COUNT,
    TRUE_LABEL,
)
from waai_app.core.errors import NotFoundError, ValidationError
from waai_app.core.models import Activity, MediaFile, Option, Question, QuestionType


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid4().hex[:12]}"


@dataclass(slots=True)
class OptionDraft:
    id: str
    text: str = ""
    is_correct: bool = False


@dataclass(slots=True)
class QuestionDraft:
    id: str
    type: QuestionType
    text: str = ""
    options: list[OptionDraft] = field(default_factory=list)
    media: MediaFile | None = None

    @classmethod
    def multiple_choice(cls) -> "QuestionDraft":
        question_id = _new_id("q")
        options = [OptionDraft(id=f"{question_id}_opt_{index}") for index in range(1, MULTIPLE_CHOICE_OPTION_COUNT + 1)]
        return cls(id=question_id, type=QuestionType.MULTIPLE_CHOICE, options=options)

    @classmethod
    def true_false(cls) -> "QuestionDraft":
        question_id = _new_id("q")
        options = [
            OptionDraft(id=f"{question_id}_true", text=TRUE_LABEL),
            OptionDraft(id=f"{question_id}_false", text=FALSE_LABEL),
        ]
        return cls(id=question_id, type=QuestionType.TRUE_FALSE, options=options)

    @classmethod
    def from_question(cls, question: Question) -> "QuestionDraft":
        return cls(
            id=question.id,
            type=question.type,
            text=question.text,
            options=[OptionDraft(option.id, option.text, option.is_correct) for option in question.options],
            media=question.media,
        )

    def set_option_text(self, option_id: str, text: str) -> None:
        if self.type is QuestionType.TRUE_FALSE:
            raise ValidationError("True/false options cannot be renamed.")
        self._find_option(option_id).text = text

    def mark_correct(self, option_id: str) -> None:
        """Make ``option_id`` the single correct option."""
        self._find_option(option_id)
        for option in self.options:
            option.is_correct = option.id == option_id

    def _find_option(self, option_id: str) -> OptionDraft:
        for option in self.options:
            if option.id == option_id:
                return option
        raise NotFoundError(f"Unknown option {option_id!r}.")

    def build(self) -> Question:
        return Question(
            id=self.id,
            text=self.text,
            type=self.type,
            options=[Option(option.id, option.text.strip(), option.is_correct) for option in self.options],
            media=self.media,
        )


@dataclass(slots=True)
class ActivityDraft:
    """Editor state for a new or existing activity."""

    title: str = ""
    goals: str = ""
    questions: list[QuestionDraft] = field(default_factory=list)
    cover_media: MediaFile | None = None
    activity_id: str | None = None

    @classmethod
    def from_activity(cls, activity: Activity) -> "ActivityDraft":
        return cls(
            title=activity.title,
            goals=activity.goals,
            questions=[QuestionDraft.from_question(question) for question in activity.questions],
            cover_media=activity.cover_media,
            activity_id=activity.id,
        )

    @property
    def is_new(self) -> bool:
        return self.activity_id is None

    def add_multiple_choice(self) -> QuestionDraft:
        draft = QuestionDraft.multiple_choice()
        self.questions.append(draft)
        return draft

    def add_true_false(self) -> QuestionDraft:
        draft = QuestionDraft.true_false()
        self.questions.append(draft)
        return draft

    def question(self, question_id: str) -> QuestionDraft:
        for draft in self.questions:
            if draft.id == question_id:
                return draft
        raise NotFoundError(f"Unknown question {question_id!r}.")

    def remove_question(self, question_id: str) -> None:
        self.questions.remove(self.question(question_id))

    def build_questions(self) -> list[Question]:
        """Validate every question in order; the first broken rule is raised."""
        if not self.title.strip():
            raise ValidationError("Please enter a title for this activity.")
        if not self.goals.strip():
            raise ValidationError("Please enter the learning goals for this activity.")
        if not self.questions:
            raise ValidationError("Please add at least one question to the activity.")
        return [draft.build() for draft in self.questions]
