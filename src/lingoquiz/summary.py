from datetime import datetime
from typing import Optional

from .models import SessionRecord, SessionState, SessionSummary


def accuracy(correct_count: int, total_questions: int) -> float:
    """Percentage of correct answers, 0 for an empty session."""
    if total_questions == 0:
        return 0.0
    return correct_count / total_questions * 100


def build_summary(state: SessionState, now: Optional[datetime] = None) -> SessionSummary:
    """Projects the final state; a completed session ends at ``completed_at``."""
    end = state.completed_at or now or datetime.now()
    total = state.total_questions
    return SessionSummary(
        total_questions=total,
        correct_count=state.correct_count,
        wrong_answers=list(state.wrong_answers),
        duration_seconds=max(0.0, (end - state.session_started_at).total_seconds()),
        accuracy=accuracy(state.correct_count, total),
    )


def build_record(state: SessionState, summary: SessionSummary) -> SessionRecord:
    fields = dict(
        variant=state.variant,
        total_questions=summary.total_questions,
        correct_count=summary.correct_count,
        wrong_count=len(summary.wrong_answers),
        wrong_answers=list(summary.wrong_answers),
        duration_seconds=summary.duration_seconds,
        accuracy=summary.accuracy,
    )
    if state.completed_at is not None:
        fields["completed_at"] = state.completed_at
    return SessionRecord(**fields)
