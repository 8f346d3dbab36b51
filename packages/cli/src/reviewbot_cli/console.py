"""A ChatGateway that renders to the terminal.

Lets the whole review workflow run without a chat workspace: messages are
printed with rich, and the controls of the latest message are offered as
numbered prompts by the ``chat`` command.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from reviewbot_core.chat.gateway import ChatGateway, MessageRef, RenderRequest


@dataclass
class ConsoleMessage:
    ref: MessageRef
    text: str
    blocks: list[dict] = field(default_factory=list)


class ConsoleGateway(ChatGateway):
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.messages: dict[MessageRef, ConsoleMessage] = {}
        self.last: Optional[ConsoleMessage] = None
        self._ids = itertools.count(1)

    def render(self, request: RenderRequest) -> MessageRef:
        if request.replace_target is not None and request.replace_target in self.messages:
            ref = request.replace_target
            title = f"message {ref.message_id} (updated)"
        else:
            ref = MessageRef(channel_id=request.channel_id, message_id=str(next(self._ids)))
            title = f"message {ref.message_id}"
        message = ConsoleMessage(ref=ref, text=request.text, blocks=list(request.blocks))
        self.messages[ref] = message
        self.last = message
        self.console.print(Panel(Text(request.text), title=title, title_align="left"))
        return ref
