"""Abstract session store interface.

The workflow depends on BaseSessionStore rather than a concrete backend, so the
in-memory store can be swapped (or disabled) without touching workflow code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reviewbot_store.models import InteractionSession


class BaseSessionStore(ABC):
    """Short-lived, server-held continuation state keyed by an opaque token."""

    @abstractmethod
    def open(self, pr_number: int, suggestions: list[str], user_id: str = "") -> InteractionSession:
        """Create a session and return it; its token goes into the UI."""

    @abstractmethod
    def get(self, token: str) -> InteractionSession | None:
        """Return the live session for ``token``, or None if unknown or expired.

        Never raises.
        """

    @abstractmethod
    def discard(self, token: str) -> None:
        """Forget a session. Unknown tokens are ignored."""

    def close(self) -> None:
        """Release any resources held by the store.

        The default does nothing.
        """
