"""Error taxonomy shared by every reviewbot layer.

The dispatcher maps each subclass to its own user-facing render; nothing here
knows about the chat surface.
"""

from __future__ import annotations


class ReviewBotError(Exception):
    """Base class for errors raised by reviewbot."""


class UpstreamError(ReviewBotError):
    """The code host was unreachable or answered with a non-2xx status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class InferenceError(ReviewBotError):
    """The LLM endpoint was unreachable or returned a malformed payload."""


class StateRecoveryError(ReviewBotError):
    """Workflow context could not be recovered from the triggering UI state."""
