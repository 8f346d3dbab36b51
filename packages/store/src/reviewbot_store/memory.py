"""MemorySessionStore: process-local sessions with a bounded lifetime.

Sessions do not survive a restart; a submit after a restart (or after the
TTL) misses here and the workflow falls back to text recovery.
"""

from __future__ import annotations

import logging
import secrets
import threading
import time
from typing import Callable

from reviewbot_store.base import BaseSessionStore
from reviewbot_store.models import InteractionSession

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 900.0


class MemorySessionStore(BaseSessionStore):
    """Dict-backed store; expired entries are purged lazily on every access."""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, InteractionSession] = {}
        self._lock = threading.Lock()

    def open(self, pr_number: int, suggestions: list[str], user_id: str = "") -> InteractionSession:
        session = InteractionSession(
            token=secrets.token_urlsafe(12),
            pr_number=pr_number,
            suggestions=list(suggestions),
            user_id=user_id,
            created_at=self._clock(),
        )
        with self._lock:
            self._purge()
            self._sessions[session.token] = session
        logger.debug("Opened session for PR #%d", pr_number)
        return session

    def get(self, token: str) -> InteractionSession | None:
        with self._lock:
            self._purge()
            return self._sessions.get(token)

    def discard(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def close(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            self._purge()
            return len(self._sessions)

    def _purge(self) -> None:
        now = self._clock()
        expired = [t for t, s in self._sessions.items() if now - s.created_at >= self._ttl]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.debug("Expired %d session(s)", len(expired))
