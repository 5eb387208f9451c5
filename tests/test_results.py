"""Tests for waai_app.core.results."""

from __future__ import annotations

from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.models import Activity, ActivityProgress, AnswerRecord
from waai_app.core.results import summarize_progress

from tests.conftest import ManualScheduler


def test_summary_without_progress(activity: Activity):
    summary = summarize_progress(activity, "c1", None)
    assert summary.total == 3
    assert summary.answered_count == 0
    assert summary.percentage == 0
    assert not summary.is_completed
    assert [review.answered for review in summary.reviews] == [False, False, False]
    assert summary.reviews[0].correct_option_text == "Answer 0"


def test_summary_joins_answers_in_question_order(activity: Activity):
    progress = ActivityProgress(
        child_id="c1",
        activity_id=activity.id,
        answers={
            "q3": AnswerRecord("q3_opt_0", True, 20),
            "q1": AnswerRecord("q1_opt_2", False, 10),
        },
        started_at=10,
    )
    summary = summarize_progress(activity, "c1", progress)

    assert summary.answered_count == 2
    assert summary.correct_count == 1
    assert summary.percentage == 50
    assert summary.started_at == 10
    assert [review.question_id for review in summary.reviews] == ["q1", "q2", "q3"]
    assert summary.reviews[0].selected_option_text == "Answer 2"
    assert summary.reviews[0].is_correct is False
    assert summary.reviews[1].selected_option_text is None


def test_percentage_rounds(activity: Activity):
    progress = ActivityProgress(
        child_id="c1",
        activity_id=activity.id,
        answers={
            "q1": AnswerRecord("q1_opt_0", True, 1),
            "q2": AnswerRecord("q2_opt_0", True, 2),
            "q3": AnswerRecord("q3_opt_1", False, 3),
        },
    )
    assert summarize_progress(activity, "c1", progress).percentage == 67


def test_results_for_child_cover_every_activity(
    signed_in_manager: ClassroomManager,
    activity: Activity,
    scheduler: ManualScheduler,
):
    child = signed_in_manager.add_child("Lina", "cat_avatar_01")
    signed_in_manager.unlock_child(child.id)
    other = signed_in_manager.create_activity("Shapes", "Name shapes", activity.questions[:1])

    signed_in_manager.start_quiz(child.id, activity.id)
    for option_id in ("q1_opt_0", "q2_opt_0", "q3_opt_1"):
        signed_in_manager.answer(child.id, activity.id, option_id)
        scheduler.run_pending()

    results = {summary.activity_id: summary for summary in signed_in_manager.get_results_for_child(child.id)}
    assert set(results) == {activity.id, other.id}
    assert results[activity.id].is_completed
    assert results[activity.id].correct_count == 2
    assert results[other.id].answered_count == 0

    single = signed_in_manager.get_results(child.id, activity.id)
    assert single.percentage == 67
