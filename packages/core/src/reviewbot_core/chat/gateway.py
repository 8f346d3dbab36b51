"""Boundary between the review workflow and whatever chat transport runs it.

The transport (Slack Bolt app, console loop, test double) turns its native
events into CommandEvent / ActionEvent, and implements ChatGateway.render to
display or replace a message. The workflow never sees transport objects.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class MessageRef:
    """Where a rendered message lives, so it can be replaced in place."""

    channel_id: str
    message_id: str


@dataclass(frozen=True)
class RenderedMessage:
    ref: MessageRef
    text: str


@dataclass
class CommandEvent:
    command: str
    text: str
    user_id: str
    channel_id: str
    team_id: str = ""


@dataclass
class ActionEvent:
    action_id: str
    value: str
    trigger_message: Optional[RenderedMessage]
    user_id: str
    channel_id: str
    selected: list[str] = field(default_factory=list)  # checklist values, platform order


@dataclass
class RenderRequest:
    text: str
    channel_id: str
    blocks: list[dict] = field(default_factory=list)
    ephemeral: bool = True
    replace_target: Optional[MessageRef] = None
    user_id: str = ""


class ChatGateway(ABC):
    """Accepts render instructions from the workflow."""

    @abstractmethod
    def render(self, request: RenderRequest) -> MessageRef:
        """Post a new message, or replace ``request.replace_target`` in place.

        Returns the reference of the message now showing the content.
        """
