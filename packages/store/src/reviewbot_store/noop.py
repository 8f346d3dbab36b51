"""No-op store: sessions are never kept.

Every lookup misses, so the workflow falls back to recovering the PR from the
rendered message text.
"""

from __future__ import annotations

import secrets

from reviewbot_store.base import BaseSessionStore
from reviewbot_store.models import InteractionSession


class NoOpSessionStore(BaseSessionStore):
    def open(self, pr_number: int, suggestions: list[str], user_id: str = "") -> InteractionSession:
        return InteractionSession(
            token=secrets.token_urlsafe(8), pr_number=pr_number, suggestions=list(suggestions), user_id=user_id
        )

    def get(self, token: str) -> InteractionSession | None:
        return None

    def discard(self, token: str) -> None:
        pass  # intentional no-op
