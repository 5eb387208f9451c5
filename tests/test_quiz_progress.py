"""Tests for the quiz progress engine."""

from __future__ import annotations

import pytest

from waai_app.core.classroom_manager import ClassroomManager
from waai_app.core.models import Activity
from waai_app.core.quiz_progress import QuizProgressEngine

from tests.conftest import FlakyGateway, ManualScheduler
from tests.factories import correct_option_id, true_false, wrong_option_id


@pytest.fixture()
def engine(signed_in_manager: ClassroomManager, activity: Activity, scheduler: ManualScheduler) -> QuizProgressEngine:
    engine = QuizProgressEngine(activity, "c1", signed_in_manager.activity_store, scheduler, feedback_delay_ms=1500)
    engine.start()
    return engine


def _answer(engine: QuizProgressEngine, scheduler: ManualScheduler, correct: bool) -> None:
    question = engine.current_question()
    option_id = correct_option_id(question) if correct else wrong_option_id(question)
    assert engine.select_option(option_id)
    scheduler.run_pending()


def test_start_is_at_first_question(engine: QuizProgressEngine):
    state = engine.state
    assert state.current_question_index == 0
    assert state.score.correct == 0
    assert state.score.total == 3
    assert not state.show_feedback
    assert not state.completed


def test_correct_answer_shows_feedback_then_advances(engine: QuizProgressEngine, scheduler: ManualScheduler):
    assert engine.select_option("q1_opt_0")

    state = engine.state
    assert state.show_feedback
    assert state.is_correct is True
    assert state.selected_option_id == "q1_opt_0"
    assert state.score.correct == 1
    assert [call.delay_ms for call in scheduler.pending] == [1500]

    scheduler.run_pending()
    state = engine.state
    assert state.current_question_index == 1
    assert state.selected_option_id is None
    assert state.is_correct is None
    assert not state.show_feedback


def test_wrong_answer_does_not_score(engine: QuizProgressEngine, scheduler: ManualScheduler):
    assert engine.select_option("q1_opt_2")
    assert engine.state.is_correct is False
    assert engine.state.score.correct == 0


def test_selection_ignored_during_feedback(engine: QuizProgressEngine, scheduler: ManualScheduler):
    engine.select_option("q1_opt_1")
    assert not engine.select_option("q1_opt_0")
    state = engine.state
    assert state.selected_option_id == "q1_opt_1"
    assert state.score.correct == 0
    assert len(scheduler.pending) == 1


def test_unknown_option_is_ignored(engine: QuizProgressEngine, scheduler: ManualScheduler):
    assert not engine.select_option("nope")
    state = engine.state
    assert not state.show_feedback
    assert state.is_correct is None
    assert scheduler.pending == []
    assert engine.select_option("q1_opt_0")


def test_completes_once_after_last_question(
    engine: QuizProgressEngine,
    scheduler: ManualScheduler,
    signed_in_manager: ClassroomManager,
    activity: Activity,
):
    _answer(engine, scheduler, correct=True)
    _answer(engine, scheduler, correct=False)
    _answer(engine, scheduler, correct=True)

    state = engine.state
    assert state.completed
    assert state.current_question_index == 2
    assert state.score.correct == 2
    assert state.answered_questions == {"q1", "q2", "q3"}

    assert not engine.select_option("q3_opt_0")
    progress = signed_in_manager.activity_store.get_progress("c1", activity.id)
    assert progress.completed_at is not None
    assert progress.score == 2


def test_answers_are_stored(engine: QuizProgressEngine, scheduler: ManualScheduler, signed_in_manager, activity):
    _answer(engine, scheduler, correct=False)
    progress = signed_in_manager.activity_store.get_progress("c1", activity.id)
    assert progress.answers["q1"].is_correct is False
    assert progress.started_at is not None
    assert progress.completed_at is None


def test_resume_restarts_at_first_question_with_stored_score(
    engine: QuizProgressEngine,
    scheduler: ManualScheduler,
    signed_in_manager: ClassroomManager,
    activity: Activity,
):
    _answer(engine, scheduler, correct=True)
    _answer(engine, scheduler, correct=True)
    engine.close()

    resumed = QuizProgressEngine(activity, "c1", signed_in_manager.activity_store, scheduler)
    state = resumed.start()
    assert state.current_question_index == 0
    assert state.score.correct == 2
    assert state.answered_questions == {"q1", "q2"}

    # replaying an answered question does not count it twice
    assert resumed.select_option("q1_opt_0")
    assert resumed.state.score.correct == 2


def test_stored_answers_for_removed_questions_are_ignored(
    signed_in_manager: ClassroomManager,
    activity: Activity,
    scheduler: ManualScheduler,
):
    signed_in_manager.activity_store.save_progress("c1", activity.id, "gone", "gone_opt_0", True)
    engine = QuizProgressEngine(activity, "c1", signed_in_manager.activity_store, scheduler)
    state = engine.start()
    assert state.score.correct == 0
    assert state.answered_questions == frozenset()


def test_restart_cancels_pending_advance(engine: QuizProgressEngine, scheduler: ManualScheduler):
    engine.select_option("q1_opt_0")
    pending = scheduler.pending[0]

    state = engine.restart()
    assert pending.cancelled
    assert state.current_question_index == 0
    assert not state.show_feedback
    assert state.score.correct == 1


def test_stale_timer_cannot_advance_restarted_session(engine: QuizProgressEngine, scheduler: ManualScheduler):
    engine.select_option("q1_opt_0")
    stale = scheduler.calls[0]
    engine.restart()

    stale.callback()
    assert engine.state.current_question_index == 0


def test_close_cancels_pending_advance(engine: QuizProgressEngine, scheduler: ManualScheduler):
    engine.select_option("q1_opt_0")
    engine.close()
    assert scheduler.pending == []
    assert engine.state.current_question_index == 0


def test_write_failure_does_not_block_progress(
    engine: QuizProgressEngine,
    scheduler: ManualScheduler,
    gateway: FlakyGateway,
):
    gateway.fail_writes = True
    _answer(engine, scheduler, correct=True)
    _answer(engine, scheduler, correct=True)
    _answer(engine, scheduler, correct=True)

    state = engine.state
    assert state.completed
    assert state.score.correct == 3


def test_single_question_activity_completes(signed_in_manager: ClassroomManager, scheduler: ManualScheduler):
    activity = signed_in_manager.create_activity("Sky", "Colours", [true_false("t1", answer=False)])
    engine = QuizProgressEngine(activity, "c1", signed_in_manager.activity_store, scheduler)
    engine.start()
    assert engine.select_option("t1_false")
    scheduler.run_pending()
    assert engine.state.completed
    assert engine.state.score.percentage == 100
