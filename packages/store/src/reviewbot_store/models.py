"""Interaction session model.

Decoupled from reviewbot_core so the store layer can be used independently
and reviewbot_core has no knowledge of how sessions are kept.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class InteractionSession:
    """Context the suggestion checklist needs when it is submitted.

    Created by the workflow when it renders the checklist; the checklist's
    submit control carries only the token.
    """

    token: str
    pr_number: int
    suggestions: list[str] = field(default_factory=list)
    user_id: str = ""
    created_at: float = 0.0  # store clock reading, seconds
