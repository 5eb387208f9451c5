"""Tests for waai_app.core.models."""

from __future__ import annotations

import pytest

from waai_app.core.errors import ValidationError
from waai_app.core.models import (
    Activity,
    ActivityProgress,
    Child,
    Option,
    Question,
    QuestionType,
    QuizScore,
    validate_pin,
)

from tests.factories import multiple_choice, true_false


def _options(correct_flags: list[bool], text: str = "x") -> list[Option]:
    return [Option(id=f"o{index}", text=text, is_correct=flag) for index, flag in enumerate(correct_flags)]


class TestQuestion:
    def test_exactly_one_correct_option_is_accepted(self):
        question = multiple_choice("q1", correct_index=2)
        assert question.correct_option.id == "q1_opt_2"

    @pytest.mark.parametrize("flags", [[False] * 4, [True, True, False, False]])
    def test_zero_or_several_correct_options_are_rejected(self, flags):
        with pytest.raises(ValidationError, match="exactly one correct"):
            Question(id="q", text="Pick", type=QuestionType.MULTIPLE_CHOICE, options=_options(flags))

    def test_multiple_choice_needs_four_options(self):
        with pytest.raises(ValidationError):
            Question(id="q", text="Pick", type=QuestionType.MULTIPLE_CHOICE, options=_options([True, False]))

    def test_true_false_needs_two_options(self):
        with pytest.raises(ValidationError):
            Question(id="q", text="Pick", type=QuestionType.TRUE_FALSE, options=_options([True, False, False, False]))

    def test_multiple_choice_options_need_text(self):
        with pytest.raises(ValidationError, match="text for all options"):
            Question(id="q", text="Pick", type=QuestionType.MULTIPLE_CHOICE, options=_options([True, False, False, False], text=" "))

    def test_blank_text_is_rejected(self):
        with pytest.raises(ValidationError, match="text for all questions"):
            Question(id="q", text="  ", type=QuestionType.TRUE_FALSE, options=_options([True, False]))

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValidationError):
            Question(id="q", text="Pick", type="essay", options=_options([True, False]))

    def test_record_round_trip_keeps_camel_case_keys(self):
        question = true_false("q9", answer=False)
        record = question.to_record()
        assert record["options"][1]["isCorrect"] is True
        assert Question.from_record(record) == question

    def test_from_record_accepts_index_keyed_options(self):
        record = multiple_choice("q1").to_record()
        record["options"] = {str(index): option for index, option in enumerate(record["options"])}
        assert [option.id for option in Question.from_record(record).options] == [
            "q1_opt_0", "q1_opt_1", "q1_opt_2", "q1_opt_3"
        ]


class TestActivity:
    def test_requires_title_goals_and_questions(self):
        with pytest.raises(ValidationError, match="title"):
            Activity("a", " ", "goals", [multiple_choice("q1")], 0, "t")
        with pytest.raises(ValidationError, match="learning goals"):
            Activity("a", "Title", "", [multiple_choice("q1")], 0, "t")
        with pytest.raises(ValidationError, match="at least one question"):
            Activity("a", "Title", "goals", [], 0, "t")

    def test_question_ids_must_be_unique(self):
        with pytest.raises(ValidationError):
            Activity("a", "Title", "goals", [multiple_choice("q1"), multiple_choice("q1")], 0, "t")

    def test_stored_record_omits_id(self):
        activity = Activity("a1", "Title", "goals", [multiple_choice("q1")], 5, "t1")
        record = activity.to_record()
        assert "id" not in record
        assert record["teacherId"] == "t1"
        assert Activity.from_record("a1", record) == activity


class TestChild:
    def test_empty_pin_means_no_pin(self):
        child = Child(id="c", name="Lina", avatar_id="cat_avatar_01", created_at=1, pin="")
        assert child.pin is None
        assert not child.has_pin
        assert "pin" not in child.to_record()

    @pytest.mark.parametrize("pin", ["123", "12345", "12a4", "١٢٣٤"])
    def test_pin_must_be_four_ascii_digits(self, pin):
        with pytest.raises(ValidationError):
            Child(id="c", name="Lina", avatar_id="cat_avatar_01", created_at=1, pin=pin)

    def test_from_record_ignores_progress_subtree(self):
        child = Child.from_record("c1", {"name": "Omar", "avatarId": "fox_avatar_04", "createdAt": 3, "pin": "5678", "progress": {"a": {}}})
        assert child.pin == "5678"
        assert child.avatar_id == "fox_avatar_04"


def test_validate_pin_returns_pin():
    assert validate_pin("0042") == "0042"


def test_quiz_score_percentage_guards_zero_total():
    assert QuizScore(0, 0).percentage == 0
    assert QuizScore(1, 3).percentage == 33
    assert QuizScore(2, 3).percentage == 67


def test_activity_progress_counts():
    progress = ActivityProgress.from_record(
        "c1",
        "a1",
        {
            "startedAt": 10,
            "answers": {
                "q1": {"selectedOptionId": "x", "isCorrect": True, "answeredAt": 11},
                "q2": {"selectedOptionId": "y", "isCorrect": False, "answeredAt": 12},
            },
        },
    )
    assert progress.answered_count == 2
    assert progress.correct_count == 1
    assert progress.started_at == 10
    assert progress.completed_at is None
