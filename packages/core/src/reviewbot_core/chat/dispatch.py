"""Routing of chat events to workflow transitions.

Commands and actions are both closed sets: text and action ids are parsed
into an enum first, and each enum member maps to exactly one handler. Every
error a handler raises ends as a user-visible render here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from reviewbot_core.chat import blocks
from reviewbot_core.chat.blocks import CHECKLIST_ACTION_ID, ActionId
from reviewbot_core.chat.gateway import ActionEvent, CommandEvent, MessageRef
from reviewbot_core.errors import StateRecoveryError, UpstreamError
from reviewbot_core.workflow import ReviewWorkflow

logger = logging.getLogger(__name__)


class Subcommand(Enum):
    PRS = "prs"
    HELP = "help"
    PING = "ping"
    ASK = "ask"
    UNRECOGNIZED = "unrecognized"


_SUBCOMMAND_TOKENS = {
    "prs": Subcommand.PRS,
    "list": Subcommand.PRS,
    "review": Subcommand.PRS,
    "help": Subcommand.HELP,
    "ping": Subcommand.PING,
    "ask": Subcommand.ASK,
}


@dataclass
class ParsedCommand:
    subcommand: Subcommand
    token: str = ""
    args: list[str] = field(default_factory=list)
    rest: str = ""  # text after the first token, spacing kept


def parse_command(text: str | None) -> ParsedCommand:
    stripped = (text or "").strip()
    words = stripped.split()
    if not words:
        return ParsedCommand(Subcommand.HELP)
    token = words[0].lower()
    rest = stripped[len(words[0]) :].strip()
    return ParsedCommand(_SUBCOMMAND_TOKENS.get(token, Subcommand.UNRECOGNIZED), token, words[1:], rest)


def help_text(command: str) -> str:
    return (
        "*PR review bot*\n\n"
        f"• `{command} prs [branch]` - list open PRs (default branch from config) and review one\n"
        f"• `{command} ask <question>` - ask the AI a short question\n"
        f"• `{command} ping` - check the bot is alive\n"
        f"• `{command} help` - show this message"
    )


class Dispatcher:
    def __init__(self, workflow: ReviewWorkflow):
        self.workflow = workflow
        self._commands: dict[Subcommand, Callable[[CommandEvent, ParsedCommand], MessageRef]] = {
            Subcommand.PRS: self._list,
            Subcommand.HELP: self._help,
            Subcommand.PING: self._ping,
            Subcommand.ASK: self._ask,
            Subcommand.UNRECOGNIZED: self._unrecognized,
        }
        self._actions: dict[ActionId, Callable[[ActionEvent], MessageRef]] = {
            ActionId.SELECT_PR: workflow.select,
            ActionId.APPROVE: workflow.approve,
            ActionId.SUGGEST: workflow.suggest,
            ActionId.SUBMIT_SUGGESTIONS: workflow.submit,
        }

    # ------------------------------------------------------------------ #
    # Commands                                                             #
    # ------------------------------------------------------------------ #

    def handle_command(self, event: CommandEvent) -> MessageRef:
        parsed = parse_command(event.text)
        logger.info("Command %s %r from %s", event.command, parsed.subcommand.value, event.user_id)
        try:
            return self._commands[parsed.subcommand](event, parsed)
        except UpstreamError as e:
            logger.error("Command %r failed: %s", parsed.token, e)
            return self.workflow.render(blocks.upstream_error_view(str(e)), event.channel_id, event.user_id)

    def _list(self, event: CommandEvent, parsed: ParsedCommand) -> MessageRef:
        base_branch = parsed.args[0] if parsed.args else None
        return self.workflow.list_pull_requests(event, base_branch=base_branch)

    def _help(self, event: CommandEvent, parsed: ParsedCommand) -> MessageRef:
        return self.workflow.render(blocks.notice_view(help_text(event.command)), event.channel_id, event.user_id)

    def _ping(self, event: CommandEvent, parsed: ParsedCommand) -> MessageRef:
        return self.workflow.render(blocks.notice_view("Pong!"), event.channel_id, event.user_id)

    def _ask(self, event: CommandEvent, parsed: ParsedCommand) -> MessageRef:
        return self.workflow.answer_question(event, parsed.rest)

    def _unrecognized(self, event: CommandEvent, parsed: ParsedCommand) -> MessageRef:
        view = blocks.notice_view(f'Unknown command: "{parsed.token}". Try `{event.command} help`.')
        return self.workflow.render(view, event.channel_id, event.user_id)

    # ------------------------------------------------------------------ #
    # UI actions                                                           #
    # ------------------------------------------------------------------ #

    def handle_action(self, event: ActionEvent) -> Optional[MessageRef]:
        """Route a UI callback; returns None for callbacks that need no render."""
        if event.action_id == CHECKLIST_ACTION_ID:
            # Ticking a checkbox is only state on the client until submit.
            return None
        try:
            action = ActionId(event.action_id)
        except ValueError:
            logger.warning("Unsupported action %r from %s", event.action_id, event.user_id)
            return self.workflow.render_reply(blocks.unsupported_action_view(event.action_id), event)

        logger.info("Action %s from %s", action.value, event.user_id)
        try:
            return self._actions[action](event)
        except StateRecoveryError as e:
            logger.warning("Action %s lost its context: %s", action.value, e)
            return self.workflow.render_reply(blocks.context_lost_view(), event)
        except UpstreamError as e:
            logger.error("Action %s failed: %s", action.value, e)
            return self.workflow.render_reply(blocks.upstream_error_view(str(e)), event)
