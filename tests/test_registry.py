from datetime import datetime, timedelta

from lingoquiz.engine import QuizSession
from lingoquiz.models import TestVariant as Variant
from lingoquiz.registry import SessionRegistry


class FakeClock:
    def __init__(self):
        self.now = datetime(2025, 12, 14, 9, 0, 0)

    def __call__(self):
        return self.now


def started_session(timer, words):
    session = QuizSession(timer=timer)
    session.setup(words, Variant.MULTIPLE_CHOICE)
    session.start()
    return session


def test_add_and_get(timer, words):
    registry = SessionRegistry(timeout_minutes=120)
    session = started_session(timer, words)
    session_id = registry.add(session)

    assert registry.get(session_id) is session
    assert registry.get("unknown") is None
    assert registry.get(None) is None
    assert len(registry) == 1


def test_expired_session_is_dropped_and_closed(timer, words):
    clock = FakeClock()
    registry = SessionRegistry(timeout_minutes=120, clock=clock)
    session = started_session(timer, words)
    session_id = registry.add(session)

    clock.now += timedelta(minutes=121)

    assert registry.get(session_id) is None
    assert len(registry) == 0
    assert not session.timer.armed


def test_remove_and_clear_close_sessions(loop, words):
    from lingoquiz.timer import CountdownTimer

    registry = SessionRegistry(timeout_minutes=120)
    first = started_session(CountdownTimer(loop=loop), words)
    second = started_session(CountdownTimer(loop=loop), words)
    first_id = registry.add(first)
    registry.add(second)

    assert registry.remove(first_id) is True
    assert registry.remove(first_id) is False
    assert not first.timer.armed

    registry.clear()
    assert len(registry) == 0
    assert not second.timer.armed
    assert loop.pending == []
