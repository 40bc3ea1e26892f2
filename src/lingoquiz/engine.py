import logging
import math
import random
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from . import generator, signals
from .config import settings
from .exceptions import InvalidConfiguration, InvalidStateTransition
from .models import (
    AnswerResolution,
    Question,
    QuestionView,
    SessionPhase,
    SessionRecord,
    SessionState,
    SessionSummary,
    TestVariant,
    Word,
    WrongAnswerRecord,
)
from .summary import build_record, build_summary
from .timer import CountdownTimer

logger = logging.getLogger(__name__)


class QuizSession:
    """State machine for one timed practice session.

    Phases run ``idle -> active -> answered -> active ... -> completed``; a
    session set up with no words goes straight to the terminal
    ``no_questions`` phase. The session owns its countdown timer and is the
    only thing that arms or cancels it. Every mutation is expected to happen
    on the event loop the timer runs on.
    """

    def __init__(
        self,
        timer: Optional[CountdownTimer] = None,
        distractor_count: int = settings.DISTRACTOR_COUNT,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.timer = timer or CountdownTimer()
        self.distractor_count = distractor_count
        self.rng = rng
        self.clock = clock
        self.state = SessionState(
            phase=SessionPhase.NO_QUESTIONS,
            completed=True,
            session_started_at=clock(),
        )

    # --- Read-only accessors ---
    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def variant(self) -> TestVariant:
        return self.state.variant

    @property
    def questions(self) -> List[Question]:
        return self.state.questions

    @property
    def total_questions(self) -> int:
        return self.state.total_questions

    def current_question(self) -> Optional[QuestionView]:
        """The question on screen, or None when no question is showing."""
        if self.state.phase not in (SessionPhase.ACTIVE, SessionPhase.ANSWERED):
            return None
        question = self.state.questions[self.state.current_index]
        return QuestionView(
            word=question.word,
            options=list(question.options),
            index=self.state.current_index,
            total=self.total_questions,
        )

    def retry_wrong_words(self) -> List[Word]:
        """Words missed in a finished session, in the order they were missed."""
        self._require("retry_wrong_words", SessionPhase.COMPLETED)
        return [record.word for record in self.state.wrong_answers]

    # --- Lifecycle ---
    def setup(
        self,
        words: Sequence[Word],
        variant: TestVariant,
        time_limit_per_question: float = settings.TIME_LIMIT_PER_QUESTION,
    ) -> SessionState:
        """Builds the question sequence. Does not start the timer."""
        try:
            variant = TestVariant(variant)
        except ValueError:
            raise InvalidConfiguration("variant", variant)
        try:
            limit = float(time_limit_per_question)
        except (TypeError, ValueError):
            raise InvalidConfiguration("time_limit_per_question", time_limit_per_question)
        if not math.isfinite(limit) or limit <= 0:
            raise InvalidConfiguration("time_limit_per_question", time_limit_per_question)

        self.timer.cancel()
        questions = generator.generate(words, variant, self.distractor_count, self.rng)
        self.state = SessionState(questions=questions, variant=variant)
        self.state.time_limit_per_question = limit
        self._clear_progress()

        logger.info(
            f"Session set up: {len(questions)} {variant.value} questions, "
            f"{limit:g}s per question"
        )
        if not questions:
            logger.warning("Session has no questions: nothing to practice")
        return self.state

    def start(self) -> None:
        self._require("start", SessionPhase.IDLE)
        self.state.phase = SessionPhase.ACTIVE
        self._arm()
        self._announce_question()

    def submit_answer(self, answer: str) -> Optional[bool]:
        """Resolves the current question.

        Returns whether the answer was correct, or None when the question was
        already resolved (a repeated submit changes nothing).
        """
        if self.state.phase == SessionPhase.ANSWERED:
            return None
        self._require("submit_answer", SessionPhase.ACTIVE)
        return self._resolve(answer, timed_out=False)

    def next_question(self) -> None:
        self._require("next_question", SessionPhase.ANSWERED)
        state = self.state
        state.current_index += 1

        if state.current_index == state.total_questions:
            state.completed = True
            state.completed_at = self.clock()
            state.last_resolution = None
            state.phase = SessionPhase.COMPLETED
            summary = self.summary()
            logger.info(
                f"Session completed: {summary.correct_count}/{summary.total_questions} "
                f"correct ({summary.accuracy:.1f}%) in {summary.duration_seconds:.1f}s"
            )
            signals.session_completed.send(self, summary=summary)
            return

        state.time_remaining = state.time_limit_per_question
        state.last_resolution = None
        state.phase = SessionPhase.ACTIVE
        self._arm()
        self._announce_question()

    def reset(self) -> None:
        """Back to idle over the same questions, with all progress cleared."""
        self.timer.cancel()
        self._clear_progress()
        logger.info("Session reset")

    def close(self) -> None:
        """Releases the timer. Safe to call any number of times."""
        self.timer.cancel()

    # --- Results ---
    def summary(self) -> SessionSummary:
        self._require("summary", SessionPhase.COMPLETED, SessionPhase.NO_QUESTIONS)
        return build_summary(self.state, self.clock())

    def to_record(self) -> SessionRecord:
        self._require("to_record", SessionPhase.COMPLETED)
        return build_record(self.state, self.summary())

    # --- Internals ---
    def _require(self, operation: str, *phases: SessionPhase) -> None:
        if self.state.phase not in phases:
            logger.warning(f"Rejected {operation} in phase {self.state.phase.value}")
            raise InvalidStateTransition(operation, self.state.phase.value)

    def _clear_progress(self) -> None:
        state = self.state
        state.current_index = 0
        state.correct_count = 0
        state.wrong_answers = []
        state.time_remaining = state.time_limit_per_question
        state.session_started_at = self.clock()
        state.completed_at = None
        state.last_resolution = None
        state.completed = state.total_questions == 0
        state.phase = SessionPhase.NO_QUESTIONS if state.completed else SessionPhase.IDLE

    def _arm(self) -> None:
        self.timer.arm(self.state.time_limit_per_question, self._on_tick, self._on_expire)

    def _on_tick(self, remaining: float) -> None:
        self.state.time_remaining = min(
            self.state.time_limit_per_question, max(0.0, remaining)
        )

    def _on_expire(self) -> None:
        if self.state.phase != SessionPhase.ACTIVE:
            return
        self.state.time_remaining = 0.0
        logger.info(f"Question {self.state.current_index + 1} timed out")
        self._resolve("", timed_out=True)

    def _resolve(self, answer: str, timed_out: bool) -> bool:
        self.timer.cancel()
        state = self.state
        question = state.questions[state.current_index]

        if state.variant == TestVariant.FILL_IN_BLANK:
            is_correct = answer.strip().lower() == question.correct_answer
        else:
            is_correct = answer == question.correct_answer

        if is_correct:
            state.correct_count += 1
        else:
            state.wrong_answers.append(
                WrongAnswerRecord(
                    word=question.word,
                    user_answer=answer,
                    correct_answer=question.correct_answer,
                )
            )
        state.last_resolution = AnswerResolution(
            index=state.current_index,
            correct=is_correct,
            user_answer=answer,
            correct_answer=question.correct_answer,
            timed_out=timed_out,
        )
        state.phase = SessionPhase.ANSWERED

        signals.answer_resolved.send(self, **state.last_resolution.model_dump())
        return is_correct

    def _announce_question(self) -> None:
        signals.question_changed.send(
            self, index=self.state.current_index, total=self.total_questions
        )
