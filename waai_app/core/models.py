"""Domain models for teachers, children, activities and progress.

Records validate their invariants at construction time and raise
``ValidationError`` with a message that can be shown to the teacher as-is.
Gateway records use the camelCase keys of the hosted database; ids are the
tree keys and are not repeated inside the stored value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from waai_app.constants.quiz_constants import (
    MULTIPLE_CHOICE_OPTION_COUNT,
    PIN_LENGTH,
    TRUE_FALSE_OPTION_COUNT,
)
from waai_app.core.errors import ValidationError


def validate_pin(pin: str) -> str:
    """Return ``pin`` when it is exactly PIN_LENGTH ASCII digits."""
    if len(pin) != PIN_LENGTH or not (pin.isascii() and pin.isdigit()):
        raise ValidationError(f"Please enter a {PIN_LENGTH}-digit PIN.")
    return pin


@dataclass(slots=True)
class Teacher:
    """Authenticated account holder."""

    id: str
    name: str
    email: str
    has_pin: bool = False

    def to_profile(self) -> dict[str, Any]:
        return {"name": self.name, "email": self.email, "hasPin": self.has_pin}

    @classmethod
    def from_profile(cls, teacher_id: str, data: dict[str, Any]) -> "Teacher":
        return cls(
            id=teacher_id,
            name=str(data.get("name", "")),
            email=str(data.get("email", "")),
            has_pin=bool(data.get("hasPin", False)),
        )


@dataclass(frozen=True, slots=True)
class Avatar:
    """Read-only avatar catalog entry."""

    id: str
    url: str
    description: str


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(slots=True)
class MediaFile:
    """Reference to an image or video hosted by the media upload service."""

    id: str
    name: str
    url: str
    type: MediaType = MediaType.IMAGE
    thumbnail_url: str | None = None

    def __post_init__(self) -> None:
        try:
            self.type = MediaType(self.type)
        except ValueError as exc:
            raise ValidationError("Media must be an image or a video.") from exc
        if not self.url.strip():
            raise ValidationError("Media URL must not be empty.")

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "type": self.type.value,
        }
        if self.thumbnail_url:
            record["thumbnailUrl"] = self.thumbnail_url
        return record

    @classmethod
    def from_record(cls, data: dict[str, Any] | None) -> "MediaFile | None":
        if not data:
            return None
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            url=str(data.get("url", "")),
            type=data.get("type", MediaType.IMAGE.value),
            thumbnail_url=data.get("thumbnailUrl"),
        )


@dataclass(slots=True)
class Option:
    """One answer choice of a question."""

    id: str
    text: str
    is_correct: bool = False

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "text": self.text, "isCorrect": self.is_correct}

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Option":
        return cls(
            id=str(data["id"]),
            text=str(data.get("text", "")),
            is_correct=bool(data.get("isCorrect", False)),
        )


class QuestionType(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"

    @property
    def option_count(self) -> int:
        if self is QuestionType.TRUE_FALSE:
            return TRUE_FALSE_OPTION_COUNT
        return MULTIPLE_CHOICE_OPTION_COUNT


@dataclass(slots=True)
class Question:
    """Quiz prompt with an ordered list of options, exactly one of them correct."""

    id: str
    text: str
    type: QuestionType
    options: list[Option]
    media: MediaFile | None = None

    def __post_init__(self) -> None:
        try:
            self.type = QuestionType(self.type)
        except ValueError as exc:
            raise ValidationError(f"Unknown question type: {self.type!r}.") from exc

        self.text = self.text.strip()
        if not self.text:
            raise ValidationError("Please enter text for all questions.")

        expected = self.type.option_count
        if len(self.options) != expected:
            raise ValidationError(f"A {self.type.value} question must have exactly {expected} options.")
        if self.type is QuestionType.MULTIPLE_CHOICE and any(not option.text.strip() for option in self.options):
            raise ValidationError("Please enter text for all options in multiple choice questions.")

        option_ids = [option.id for option in self.options]
        if len(set(option_ids)) != len(option_ids):
            raise ValidationError("Option ids must be unique within a question.")

        correct_count = sum(1 for option in self.options if option.is_correct)
        if correct_count != 1:
            raise ValidationError("Please mark exactly one correct answer for each question.")

    def find_option(self, option_id: str) -> Option | None:
        return next((option for option in self.options if option.id == option_id), None)

    @property
    def correct_option(self) -> Option:
        return next(option for option in self.options if option.is_correct)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "options": [option.to_record() for option in self.options],
        }
        if self.media is not None:
            record["media"] = self.media.to_record()
        return record

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "Question":
        return cls(
            id=str(data["id"]),
            text=str(data.get("text", "")),
            type=data.get("type", QuestionType.MULTIPLE_CHOICE.value),
            options=[Option.from_record(item) for item in _as_list(data.get("options"))],
            media=MediaFile.from_record(data.get("media")),
        )


@dataclass(slots=True)
class Activity:
    """Authored quiz; question order is quiz order."""

    id: str
    title: str
    goals: str
    questions: list[Question]
    created_at: int
    teacher_id: str
    cover_media: MediaFile | None = None

    def __post_init__(self) -> None:
        self.title = self.title.strip()
        self.goals = self.goals.strip()
        if not self.title:
            raise ValidationError("Please enter a title for this activity.")
        if not self.goals:
            raise ValidationError("Please enter the learning goals for this activity.")
        if not self.questions:
            raise ValidationError("Please add at least one question to the activity.")
        question_ids = [question.id for question in self.questions]
        if len(set(question_ids)) != len(question_ids):
            raise ValidationError("Question ids must be unique within an activity.")

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def find_question(self, question_id: str) -> Question | None:
        return next((question for question in self.questions if question.id == question_id), None)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "title": self.title,
            "goals": self.goals,
            "questions": [question.to_record() for question in self.questions],
            "createdAt": self.created_at,
            "teacherId": self.teacher_id,
        }
        if self.cover_media is not None:
            record["coverMedia"] = self.cover_media.to_record()
        return record

    @classmethod
    def from_record(cls, activity_id: str, data: dict[str, Any]) -> "Activity":
        return cls(
            id=activity_id,
            title=str(data.get("title", "")),
            goals=str(data.get("goals", "")),
            questions=[Question.from_record(item) for item in _as_list(data.get("questions"))],
            created_at=int(data.get("createdAt", 0)),
            teacher_id=str(data.get("teacherId", "")),
            cover_media=MediaFile.from_record(data.get("coverMedia")),
        )


@dataclass(slots=True)
class Child:
    """Learner profile owned by one teacher."""

    id: str
    name: str
    avatar_id: str
    created_at: int
    pin: str | None = None

    def __post_init__(self) -> None:
        self.name = self.name.strip()
        if not self.name:
            raise ValidationError("Please enter a name for the child.")
        if not self.avatar_id:
            raise ValidationError("Please select an avatar for the child.")
        if not self.pin:
            self.pin = None
        else:
            validate_pin(self.pin)

    @property
    def has_pin(self) -> bool:
        return self.pin is not None

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "name": self.name,
            "avatarId": self.avatar_id,
            "createdAt": self.created_at,
        }
        if self.pin:
            record["pin"] = self.pin
        return record

    @classmethod
    def from_record(cls, child_id: str, data: dict[str, Any]) -> "Child":
        # the child node also holds the progress subtree, which is not part of the profile
        pin = data.get("pin")
        return cls(
            id=child_id,
            name=str(data.get("name", "")),
            avatar_id=str(data.get("avatarId", "")),
            created_at=int(data.get("createdAt", 0)),
            pin=str(pin) if pin not in (None, "") else None,
        )


@dataclass(slots=True)
class AnswerRecord:
    selected_option_id: str
    is_correct: bool
    answered_at: int

    def to_record(self) -> dict[str, Any]:
        return {
            "selectedOptionId": self.selected_option_id,
            "isCorrect": self.is_correct,
            "answeredAt": self.answered_at,
        }

    @classmethod
    def from_record(cls, data: dict[str, Any]) -> "AnswerRecord":
        return cls(
            selected_option_id=str(data.get("selectedOptionId", "")),
            is_correct=bool(data.get("isCorrect", False)),
            answered_at=int(data.get("answeredAt", 0)),
        )


@dataclass(slots=True)
class ActivityProgress:
    """Persisted answers of one child for one activity."""

    child_id: str
    activity_id: str
    answers: dict[str, AnswerRecord] = field(default_factory=dict)
    started_at: int | None = None
    completed_at: int | None = None
    score: int | None = None

    @property
    def answered_count(self) -> int:
        return len(self.answers)

    @property
    def correct_count(self) -> int:
        return sum(1 for answer in self.answers.values() if answer.is_correct)

    @classmethod
    def from_record(cls, child_id: str, activity_id: str, data: dict[str, Any]) -> "ActivityProgress":
        raw_answers = data.get("answers") or {}
        return cls(
            child_id=child_id,
            activity_id=activity_id,
            answers={
                question_id: AnswerRecord.from_record(answer)
                for question_id, answer in raw_answers.items()
            },
            started_at=data.get("startedAt") or None,
            completed_at=data.get("completedAt"),
            score=data.get("score"),
        )


@dataclass(slots=True)
class QuizScore:
    correct: int = 0
    total: int = 0

    @property
    def percentage(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.correct / self.total * 100)


def _as_list(value: Any) -> list[Any]:
    """Accept both JSON arrays and index-keyed objects for ordered children."""
    if value is None:
        return []
    if isinstance(value, dict):
        return [value[key] for key in sorted(value, key=int)]
    return list(value)
