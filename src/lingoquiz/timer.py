import asyncio
import logging
from typing import Any, Callable, Optional

from .config import settings

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], Any]
ExpireCallback = Callable[[], Any]

# Remaining time below this fraction of a tick counts as expired
_EXPIRY_TOLERANCE = 1e-3


class CountdownTimer:
    """Per-question countdown driven by an asyncio event loop.

    All callbacks run on ``loop``, so they never interleave with the caller.
    ``loop`` may be any object providing ``time()`` and ``call_at()``; when it
    is omitted the running loop is looked up at ``arm`` time.
    """

    def __init__(self, loop=None, interval: float = settings.TIMER_INTERVAL):
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        self._loop = loop
        self.interval = interval
        self._handle = None
        self._generation = 0
        self._deadline = 0.0
        self._duration = 0.0
        self._on_tick: Optional[TickCallback] = None
        self._on_expire: Optional[ExpireCallback] = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def remaining(self) -> float:
        if not self.armed:
            return 0.0
        return self._clamp(self._deadline - self._get_loop().time())

    def _get_loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _clamp(self, value: float) -> float:
        return min(self._duration, max(0.0, value))

    def arm(
        self,
        duration: float,
        on_tick: Optional[TickCallback],
        on_expire: ExpireCallback,
    ) -> None:
        """Starts a countdown of ``duration`` seconds, replacing any running one."""
        self.cancel()

        loop = self._get_loop()
        self._generation += 1
        self._duration = duration
        self._deadline = loop.time() + duration
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._schedule(loop, self._generation)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._on_tick = None
        self._on_expire = None

    def _schedule(self, loop, generation: int) -> None:
        when = min(loop.time() + self.interval, self._deadline)
        self._handle = loop.call_at(when, self._tick, generation)

    def _tick(self, generation: int) -> None:
        # A handle from an earlier period that slipped past cancel()
        if generation != self._generation or self._handle is None:
            return

        loop = self._get_loop()
        remaining = self._clamp(self._deadline - loop.time())
        if remaining <= self.interval * _EXPIRY_TOLERANCE:
            remaining = 0.0

        on_tick, on_expire = self._on_tick, self._on_expire
        if remaining > 0:
            self._schedule(loop, generation)

        if on_tick is not None:
            on_tick(remaining)

        if remaining == 0.0:
            # on_tick may have cancelled or re-armed us
            if generation != self._generation or self._on_expire is None:
                return
            self._handle = None
            self._on_tick = None
            self._on_expire = None
            logger.debug("Countdown expired")
            on_expire()
