import logging
import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Cookie, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import database, sampler
from .config import settings
from .engine import QuizSession
from .exceptions import EmptyWordPool, InvalidConfiguration, InvalidStateTransition
from .globals import sessions, vocab_manager
from .models import (
    AnswerResolution,
    CategoryFilter,
    QuestionView,
    SessionPhase,
    SessionRecord,
    SessionSummary,
    TestVariant,
)
from .timer import CountdownTimer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Request / response schemas ---
class StartSessionRequest(BaseModel):
    variant: TestVariant
    category: CategoryFilter = CategoryFilter.ALL
    count: int = settings.TEST_SIZE
    time_limit: float = settings.TIME_LIMIT_PER_QUESTION


class AnswerRequest(BaseModel):
    answer: str = ""


class SessionSnapshot(BaseModel):
    phase: SessionPhase
    variant: TestVariant
    question: Optional[QuestionView]
    current_index: int
    total_questions: int
    correct_count: int
    wrong_count: int
    time_remaining: float
    time_limit: float
    last_resolution: Optional[AnswerResolution] = None


# --- Dependencies ---
def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _session_invalid() -> JSONResponse:
    return _error("Session invalid", 401)


def snapshot(session: QuizSession) -> SessionSnapshot:
    state = session.state
    time_remaining = state.time_remaining
    if session.timer.armed:
        time_remaining = min(state.time_limit_per_question, session.timer.remaining)
    return SessionSnapshot(
        phase=state.phase,
        variant=state.variant,
        question=session.current_question(),
        current_index=state.current_index,
        total_questions=state.total_questions,
        correct_count=state.correct_count,
        wrong_count=len(state.wrong_answers),
        time_remaining=time_remaining,
        time_limit=state.time_limit_per_question,
        last_resolution=state.last_resolution,
    )


def _launch(words, variant, time_limit) -> QuizSession:
    session = QuizSession(timer=CountdownTimer())
    session.setup(words, variant, time_limit)
    if session.phase == SessionPhase.IDLE:
        session.start()
    return session


def _with_cookie(payload: BaseModel, session_id: str) -> JSONResponse:
    response = JSONResponse(payload.model_dump(mode="json"))
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        samesite="Lax",
    )
    return response


# --- Routes ---
@router.get("/categories")
async def get_categories():
    return vocab_manager.get_categories()


@router.post("/sessions", response_model=SessionSnapshot)
async def start_session(request: StartSessionRequest):
    try:
        words = sampler.sample(
            vocab_manager.get_words(), request.category, request.count
        )
        session = _launch(words, request.variant, request.time_limit)
    except InvalidConfiguration as e:
        return _error(e.message, 422)

    new_id = sessions.add(session)
    logger.info(
        f"New session: {new_id} [Variant: {request.variant.value}, "
        f"Category: {request.category.value}, Questions: {session.total_questions}]"
    )
    return _with_cookie(snapshot(session), new_id)


@router.get("/sessions/current", response_model=SessionSnapshot)
async def get_current_session(session_id: str = Depends(get_session_id)):
    session = sessions.get(session_id)
    if not session:
        return _session_invalid()
    return snapshot(session)


@router.post("/sessions/current/answer", response_model=AnswerResolution)
async def submit_answer(
    request: AnswerRequest, session_id: str = Depends(get_session_id)
):
    session = sessions.get(session_id)
    if not session:
        return _session_invalid()

    try:
        correct = session.submit_answer(request.answer)
    except InvalidStateTransition as e:
        return _error(e.message, 409)
    if correct is None:
        return _error("Already answered", 409)

    return session.state.last_resolution


@router.post("/sessions/current/next", response_model=SessionSnapshot)
async def next_question(session_id: str = Depends(get_session_id)):
    session = sessions.get(session_id)
    if not session:
        return _session_invalid()

    try:
        session.next_question()
    except InvalidStateTransition as e:
        return _error(e.message, 409)

    if session.phase == SessionPhase.COMPLETED:
        try:
            database.save_session(session.to_record())
        except sqlite3.Error as e:
            logger.error(f"Failed to save session {session_id}: {e}")
    return snapshot(session)


@router.post("/sessions/current/reset", response_model=SessionSnapshot)
async def reset_session(session_id: str = Depends(get_session_id)):
    session = sessions.get(session_id)
    if not session:
        return _session_invalid()

    session.reset()
    if session.phase == SessionPhase.IDLE:
        session.start()
    return snapshot(session)


@router.post("/sessions/current/retry", response_model=SessionSnapshot)
async def retry_wrong_words(session_id: str = Depends(get_session_id)):
    """Starts a new session over the words missed in the current one."""
    session = sessions.get(session_id)
    if not session:
        return _session_invalid()

    try:
        words = session.retry_wrong_words()
    except InvalidStateTransition as e:
        return _error(e.message, 409)

    try:
        if not words:
            raise EmptyWordPool("wrong_words")
        retry = _launch(words, session.variant, session.state.time_limit_per_question)
    except EmptyWordPool as e:
        return _error(e.message, 404)

    sessions.remove(session_id)
    new_id = sessions.add(retry)
    logger.info(f"Retry session: {new_id} over {len(words)} missed words")
    return _with_cookie(snapshot(retry), new_id)


@router.get("/sessions/current/summary", response_model=SessionSummary)
async def get_summary(session_id: str = Depends(get_session_id)):
    session = sessions.get(session_id)
    if not session:
        return _session_invalid()

    try:
        return session.summary()
    except InvalidStateTransition as e:
        return _error(e.message, 409)


@router.delete("/sessions/current")
async def end_session(session_id: str = Depends(get_session_id)):
    sessions.remove(session_id)
    response = JSONResponse({"status": "success"})
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


@router.get("/history", response_model=List[SessionRecord])
async def get_history(limit: int = 50):
    return database.list_sessions(limit)
