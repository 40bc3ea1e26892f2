import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

from .engine import QuizSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Live quiz sessions of the service, keyed by cookie id.

    Sessions older than ``timeout_minutes`` are dropped on lookup. Every
    removal closes the session so no countdown outlives it.
    """

    def __init__(
        self,
        timeout_minutes: int,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.timeout = timedelta(minutes=timeout_minutes)
        self.clock = clock
        self._sessions: Dict[str, QuizSession] = {}
        self._created_at: Dict[str, datetime] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def add(self, session: QuizSession) -> str:
        session_id = str(uuid.uuid4())
        self._sessions[session_id] = session
        self._created_at[session_id] = self.clock()
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[QuizSession]:
        if not session_id or session_id not in self._sessions:
            return None
        if self.clock() - self._created_at[session_id] > self.timeout:
            logger.info(f"Session expired: {session_id}")
            self.remove(session_id)
            return None
        return self._sessions[session_id]

    def remove(self, session_id: Optional[str]) -> bool:
        session = self._sessions.pop(session_id, None)
        self._created_at.pop(session_id, None)
        if session is None:
            return False
        session.close()
        return True

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.remove(session_id)
