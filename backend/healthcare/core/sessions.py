import logging
import secrets
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from healthcare.core.auth import Caller

logger = logging.getLogger(__name__)


@dataclass
class _SessionEntry:
    caller: Caller
    expires_at: float


class SessionStore:
    """In-process server-side session store keyed by an opaque session id.

    One instance is created at startup and kept on ``app.state``. Entries
    expire after ``ttl_seconds``; expired entries are dropped on read and by
    ``prune()``.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: Dict[str, _SessionEntry] = {}
        self._lock = threading.Lock()

    def create(self, caller: Caller) -> str:
        session_id = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[session_id] = _SessionEntry(caller, self._clock() + self.ttl_seconds)
        logger.debug(f"Session opened for user {caller.id}")
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[Caller]:
        if not session_id:
            return None
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._sessions[session_id]
                return None
            return entry.caller

    def destroy(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def prune(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [sid for sid, entry in self._sessions.items() if entry.expires_at <= now]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            logger.info(f"Pruned {len(expired)} expired sessions")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
