"""Per-child result summaries for the teacher's results view."""

from __future__ import annotations

from dataclasses import dataclass, field

from waai_app.core.models import Activity, ActivityProgress


@dataclass(slots=True)
class QuestionReview:
    question_id: str
    question_text: str
    correct_option_text: str
    selected_option_text: str | None = None
    is_correct: bool | None = None

    @property
    def answered(self) -> bool:
        return self.is_correct is not None


@dataclass(slots=True)
class ActivityResultSummary:
    child_id: str
    activity_id: str
    activity_title: str
    total: int
    answered_count: int = 0
    correct_count: int = 0
    started_at: int | None = None
    completed_at: int | None = None
    reviews: list[QuestionReview] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        """Share of answered questions that were correct; 0 when nothing was answered."""
        if self.answered_count == 0:
            return 0
        return round(self.correct_count / self.answered_count * 100)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


def summarize_progress(activity: Activity, child_id: str, progress: ActivityProgress | None) -> ActivityResultSummary:
    """Join stored answers with the activity's questions, in question order."""
    summary = ActivityResultSummary(
        child_id=child_id,
        activity_id=activity.id,
        activity_title=activity.title,
        total=activity.question_count,
    )
    answers = progress.answers if progress is not None else {}
    if progress is not None:
        summary.started_at = progress.started_at
        summary.completed_at = progress.completed_at

    for question in activity.questions:
        review = QuestionReview(
            question_id=question.id,
            question_text=question.text,
            correct_option_text=question.correct_option.text,
        )
        answer = answers.get(question.id)
        if answer is not None:
            selected = question.find_option(answer.selected_option_id)
            review.selected_option_text = selected.text if selected is not None else None
            review.is_correct = answer.is_correct
            summary.answered_count += 1
            if answer.is_correct:
                summary.correct_count += 1
        summary.reviews.append(review)
    return summary
