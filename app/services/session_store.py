"""In-memory map of summary session ids to model conversations.

Session ids double as creation timestamps (milliseconds since epoch), which
lets ``sweep`` age entries without a separate field. They are predictable and
must never be used as credentials.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Optional

_logger = logging.getLogger("summarizer.sessions")

DEFAULT_TTL_SECONDS = 60 * 60


class SessionStore:
    """Thread-safe session map with lazy, explicitly triggered expiry."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl_ms = int(ttl_seconds * 1000)
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, Any] = {}
        self._last_id = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_ms / 1000

    def _now_ms(self, now: Optional[float] = None) -> int:
        return int((self._clock() if now is None else now) * 1000)

    def create(self, handle: Any) -> str:
        with self._lock:
            stamp = max(self._now_ms(), self._last_id + 1)
            self._last_id = stamp
            session_id = str(stamp)
            self._sessions[session_id] = handle
        _logger.info("Session created: %s", session_id)
        return session_id

    def get(self, session_id: Optional[str]) -> Optional[Any]:
        if not session_id:
            return None
        with self._lock:
            return self._sessions.get(session_id)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop sessions created more than the TTL before ``now`` (epoch seconds)."""
        cutoff = self._now_ms(now) - self._ttl_ms
        with self._lock:
            expired = [sid for sid in self._sessions if int(sid) < cutoff]
            for sid in expired:
                del self._sessions[sid]
        if expired:
            _logger.info("Cleaned up %d old sessions", len(expired))
        return len(expired)

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)
