import heapq
import random

import pytest

from lingoquiz.config import settings
from lingoquiz.engine import QuizSession
from lingoquiz.models import Word, WordCategory
from lingoquiz.timer import CountdownTimer

WORD_ROWS = [
    ("apple", "苹果", WordCategory.CET4),
    ("book", "书", WordCategory.CET4),
    ("cat", "猫", WordCategory.CET4),
    ("dog", "狗", WordCategory.CET4),
    ("egg", "鸡蛋", WordCategory.CET4),
    ("fish", "鱼", WordCategory.CET4),
    ("garden", "花园", WordCategory.CET6),
    ("harbor", "港口", WordCategory.CET6),
    ("island", "岛屿", WordCategory.CET6),
    ("journey", "旅程", WordCategory.CET6),
]


def make_word(english, chinese, category=WordCategory.CET4, **kwargs):
    return Word(
        id=kwargs.pop("id", english),
        english=english,
        chinese=chinese,
        category=category,
        **kwargs,
    )


class ManualHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self.callback = callback
        self.args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled


class ManualLoop:
    """Deterministic stand-in for an event loop: time only moves on advance()."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = 0

    def time(self):
        return self.now

    def call_at(self, when, callback, *args):
        handle = ManualHandle(when, callback, args)
        heapq.heappush(self._queue, (when, self._seq, handle))
        self._seq += 1
        return handle

    @property
    def pending(self):
        return [h for _, _, h in self._queue if not h.cancelled()]

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled():
                continue
            self.now = max(self.now, when)
            handle.callback(*handle.args)
        self.now = target


@pytest.fixture
def words():
    return [make_word(english, chinese, category) for english, chinese, category in WORD_ROWS]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def loop():
    return ManualLoop()


@pytest.fixture
def timer(loop):
    return CountdownTimer(loop=loop, interval=0.1)


@pytest.fixture
def session(timer, rng):
    quiz = QuizSession(timer=timer, rng=rng)
    yield quiz
    quiz.close()


@pytest.fixture
def tmp_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DB_DIR", str(tmp_path / "db"))
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setattr(settings, "VOCAB_DIR", str(tmp_path / "vocabulary"))
    return settings
