"""Tests for the activity editor drafts."""

from __future__ import annotations

import pytest

from waai_app.core.activity_builder import ActivityDraft, QuestionDraft
from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.errors import NotFoundError, ValidationError
from waai_app.core.models import Activity, QuestionType


def _filled_multiple_choice(draft: ActivityDraft, text: str = "How many legs has a cat?") -> QuestionDraft:
    question = draft.add_multiple_choice()
    question.text = text
    for index, option in enumerate(question.options):
        question.set_option_text(option.id, str(index + 2))
    question.mark_correct(question.options[2].id)
    return question


class TestQuestionDraft:
    def test_multiple_choice_has_four_blank_options(self):
        draft = QuestionDraft.multiple_choice()
        assert draft.type is QuestionType.MULTIPLE_CHOICE
        assert [option.id for option in draft.options] == [f"{draft.id}_opt_{index}" for index in range(1, 5)]
        assert all(option.text == "" and not option.is_correct for option in draft.options)

    def test_true_false_has_fixed_labels(self):
        draft = QuestionDraft.true_false()
        assert [option.text for option in draft.options] == ["True", "False"]
        assert [option.id for option in draft.options] == [f"{draft.id}_true", f"{draft.id}_false"]
        with pytest.raises(ValidationError):
            draft.set_option_text(draft.options[0].id, "Yes")

    def test_mark_correct_keeps_a_single_correct_option(self):
        draft = QuestionDraft.multiple_choice()
        draft.mark_correct(draft.options[0].id)
        draft.mark_correct(draft.options[3].id)
        assert [option.is_correct for option in draft.options] == [False, False, False, True]

    def test_mark_correct_unknown_option(self):
        with pytest.raises(NotFoundError):
            QuestionDraft.true_false().mark_correct("missing")

    def test_build_requires_a_correct_option(self):
        draft = QuestionDraft.true_false()
        draft.text = "The sky is green"
        with pytest.raises(ValidationError):
            draft.build()
        draft.mark_correct(draft.options[1].id)
        assert draft.build().correct_option.text == "False"

    def test_build_requires_option_text(self):
        draft = QuestionDraft.multiple_choice()
        draft.text = "Pick one"
        draft.mark_correct(draft.options[0].id)
        with pytest.raises(ValidationError):
            draft.build()


class TestActivityDraft:
    def test_build_questions_validates_header(self):
        draft = ActivityDraft(goals="Count")
        _filled_multiple_choice(draft)
        with pytest.raises(ValidationError, match="title"):
            draft.build_questions()

        draft = ActivityDraft(title="Cats")
        _filled_multiple_choice(draft)
        with pytest.raises(ValidationError, match="goals"):
            draft.build_questions()

        with pytest.raises(ValidationError, match="at least one question"):
            ActivityDraft(title="Cats", goals="Count").build_questions()

    def test_remove_question(self):
        draft = ActivityDraft(title="Cats", goals="Count")
        first = _filled_multiple_choice(draft)
        second = draft.add_true_false()
        draft.remove_question(second.id)
        assert [question.id for question in draft.questions] == [first.id]
        with pytest.raises(NotFoundError):
            draft.question(second.id)

    def test_save_new_draft_creates_activity(self, signed_in_manager: ClassroomManager):
        draft = ActivityDraft(title="Cats", goals="Count legs")
        _filled_multiple_choice(draft)
        question = draft.add_true_false()
        question.text = "Cats can fly"
        question.mark_correct(question.options[1].id)

        activity = signed_in_manager.save_draft(draft)
        assert not draft.is_new
        assert draft.activity_id == activity.id
        stored = signed_in_manager.get_activity(activity.id)
        assert [q.type for q in stored.questions] == [QuestionType.MULTIPLE_CHOICE, QuestionType.TRUE_FALSE]
        assert stored.questions[0].correct_option.text == "4"

    def test_save_existing_draft_updates_activity(self, signed_in_manager: ClassroomManager, activity: Activity):
        draft = ActivityDraft.from_activity(activity)
        assert not draft.is_new
        draft.title = "Counting again"
        draft.question("q2").mark_correct("q2_opt_3")

        signed_in_manager.save_draft(draft)
        stored = signed_in_manager.get_activity(activity.id)
        assert stored.title == "Counting again"
        assert stored.questions[1].correct_option.id == "q2_opt_3"
        assert len(signed_in_manager.get_activities()) == 1

    def test_invalid_draft_is_not_saved(self, signed_in_manager: ClassroomManager):
        draft = ActivityDraft(title="Cats", goals="Count")
        draft.add_multiple_choice()
        with pytest.raises(ValidationError):
            signed_in_manager.save_draft(draft)
        assert signed_in_manager.get_activities() == []
