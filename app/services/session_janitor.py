"""
Background janitor that expires old summary sessions.

Runs as a daemon thread and periodically asks the session store to sweep
entries older than its TTL. The same sweep is available on demand through
``run_once`` and the cleanup endpoint.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.services.session_store import SessionStore

_logger = logging.getLogger("summarizer.sessions.janitor")


class SessionJanitor:
    """Background service that sweeps expired sessions on a fixed interval."""

    def __init__(self, store: "SessionStore", *, interval_seconds: float = 3600.0) -> None:
        """Initialize the janitor.

        Args:
            store: Session store to sweep
            interval_seconds: Seconds to wait between sweeps
        """
        self._store = store
        self._interval = interval_seconds

        self._running = False
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Start the janitor thread."""
        if self._running:
            _logger.warning("SessionJanitor already running")
            return
        if self._interval <= 0:
            raise ValueError("interval_seconds must be positive")

        self._running = True
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._sweep_loop,
            name="SessionJanitor",
            daemon=True,
        )
        self._thread.start()
        _logger.info("SessionJanitor started interval=%ss", self._interval)

    def stop(self) -> None:
        """Stop the janitor thread."""
        if not self._running:
            return

        self._running = False
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
        _logger.info("SessionJanitor stopped")

    def run_once(self) -> int:
        """Sweep expired sessions now and return how many were removed."""
        return self._store.sweep()

    def _sweep_loop(self) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                removed = self.run_once()
                _logger.debug("SessionJanitor sweep removed=%d remaining=%d", removed, self._store.count())
            except Exception as exc:
                _logger.exception("SessionJanitor sweep loop error: %s", exc)
