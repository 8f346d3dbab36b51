"""chat command: run the interactive review workflow in the terminal."""

from __future__ import annotations

import getpass

import click
from rich.console import Console

from reviewbot_cli.auth import require_github, require_inference_credentials
from reviewbot_cli.console import ConsoleGateway, ConsoleMessage
from reviewbot_core.chat.blocks import CHECKLIST_ACTION_ID
from reviewbot_core.chat.dispatch import Dispatcher
from reviewbot_core.chat.gateway import ActionEvent, CommandEvent, RenderedMessage
from reviewbot_core.errors import UpstreamError
from reviewbot_core.gh.pull_request import CodeHostClient
from reviewbot_core.workflow import ReviewWorkflow, get_inference_client

console = Console()

CHANNEL = "console"


def _controls(message: ConsoleMessage) -> tuple[list[dict], list[dict], list[dict]]:
    """Split a message's interactive elements into (select options, buttons, checkbox options)."""
    options: list[dict] = []
    buttons: list[dict] = []
    checks: list[dict] = []
    for block in message.blocks:
        accessory = block.get("accessory") or {}
        if accessory.get("type") == "static_select":
            options.extend({**o, "action_id": accessory["action_id"]} for o in accessory.get("options", []))
        for element in block.get("elements", []):
            if element.get("type") == "button":
                buttons.append(element)
            elif element.get("type") == "checkboxes" and element.get("action_id") == CHECKLIST_ACTION_ID:
                checks.extend(element.get("options", []))
    return options, buttons, checks


def _pick(labels: list[str], prompt: str) -> int | None:
    """Prompt for a 1-based choice; 0 means quit. Returns a 0-based index or None."""
    for i, label in enumerate(labels, 1):
        console.print(f"  [bold]{i}[/bold]  {label}")
    console.print("  [bold]0[/bold]  quit")
    choice = click.prompt(prompt, type=click.IntRange(0, len(labels)), default=0)
    return None if choice == 0 else choice - 1


def _parse_selection(raw: str, count: int) -> list[int]:
    picked: list[int] = []
    for part in raw.replace(" ", "").split(","):
        if part.isdigit() and 1 <= int(part) <= count and int(part) - 1 not in picked:
            picked.append(int(part) - 1)
    return picked


def next_action(message: ConsoleMessage, user_id: str) -> ActionEvent | None:
    """Offer the latest message's controls and turn the choice into an ActionEvent."""
    options, buttons, checks = _controls(message)
    trigger = RenderedMessage(ref=message.ref, text=message.text)

    if options:
        index = _pick([o["text"]["text"] for o in options], "Select a PR")
        if index is None:
            return None
        chosen = options[index]
        return ActionEvent(chosen["action_id"], chosen["value"], trigger, user_id, CHANNEL)

    selected: list[str] = []
    if checks:
        for i, option in enumerate(checks, 1):
            console.print(f"  [bold]{i}[/bold]  {option['text']['text']}")
        raw = click.prompt("Suggestions to post (comma-separated numbers)", default="", show_default=False)
        selected = [checks[i]["value"] for i in _parse_selection(raw, len(checks))]

    if not buttons:
        return None
    index = _pick([b["text"]["text"] for b in buttons], "Choose an action")
    if index is None:
        return None
    button = buttons[index]
    return ActionEvent(button["action_id"], button.get("value", ""), trigger, user_id, CHANNEL, selected=selected)


@click.command("chat")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Overrides config file.")
@click.option("--branch", default=None, help="Base branch the PRs target. Overrides config file.")
@click.pass_context
def chat_cmd(ctx, repo: str | None, branch: str | None):
    """Browse open PRs, review one with AI, then approve it or post suggestions.

    Runs the same workflow a chat workspace would, with the terminal as the
    chat surface.

    \b
    Required environment variables:
      GITHUB_TOKEN         GitHub personal access token (or use gh CLI)
      OPENAI_API_KEY       Required when using --model openai
      ANTHROPIC_API_KEY    Required when using --model anthropic
      OLLAMA_URL           Optional Ollama server URL
    """
    config = ctx.obj["config"]
    repo, token = require_github(config, repo)
    require_inference_credentials(config)

    try:
        code_host = CodeHostClient.from_token(repo, token)
    except UpstreamError as e:
        raise click.ClickException(str(e))

    gateway = ConsoleGateway(console)
    workflow = ReviewWorkflow(
        code_host=code_host,
        inference=get_inference_client(config),
        gateway=gateway,
        store=ctx.obj.get("store"),
        config=config,
    )
    dispatcher = Dispatcher(workflow)
    user_id = getpass.getuser()

    text = f"prs {branch}" if branch else "prs"
    dispatcher.handle_command(CommandEvent(command="reviewbot", text=text, user_id=user_id, channel_id=CHANNEL))

    while gateway.last is not None:
        event = next_action(gateway.last, user_id)
        if event is None:
            break
        dispatcher.handle_action(event)
