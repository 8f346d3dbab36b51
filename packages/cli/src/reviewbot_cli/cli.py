"""CLI entry point for reviewbot.

Commands:
  chat    run the interactive review workflow in the terminal
  prs     list open pull requests
  ping    test the connection to the configured model
  ask     ask the configured model a short question
  models  list the models installed on the Ollama server
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console

from reviewbot_cli.commands.chat import chat_cmd
from reviewbot_cli.commands.inference import ask_cmd, models_cmd, ping_cmd
from reviewbot_cli.commands.prs import prs_cmd

console = Console()


def _build_store(config: dict):
    """Instantiate the session store from .reviewbot.yml settings.

      session_ttl_seconds > 0   → MemorySessionStore with that lifetime
      session_ttl_seconds 0/null → NoOpSessionStore (text recovery only)

    This factory lives in cli.py so reviewbot_core does not import
    reviewbot_store.
    """
    from reviewbot_store.memory import MemorySessionStore
    from reviewbot_store.noop import NoOpSessionStore

    ttl = config.get("session_ttl_seconds")
    if not ttl:
        return NoOpSessionStore()
    if ttl < 0:
        console.print("[yellow]session_ttl_seconds must not be negative. Sessions are disabled.[/yellow]")
        return NoOpSessionStore()
    return MemorySessionStore(ttl_seconds=ttl)


@click.group()
@click.version_option(
    version=importlib.metadata.version("reviewbot"),
    prog_name="reviewbot",
)
@click.option(
    "--config",
    "config_path",
    default=".reviewbot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="REVIEWBOT_CONFIG",
)
@click.option(
    "--model",
    type=click.Choice(["ollama", "ollama-chat", "openai", "anthropic"]),
    default=None,
    help="AI model provider. Overrides config file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output.")
@click.pass_context
def main(ctx: click.Context, config_path: str, model: str | None, verbose: bool):
    """Chat-driven AI review of open GitHub pull requests."""
    from reviewbot_core.config import load_config
    from reviewbot_cli.auth import resolve_github_token

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"model": model})

    # Resolve token early so all subcommands share the same resolution.
    token = resolve_github_token()
    if token:
        config["github_token"] = token

    store = _build_store(config)
    ctx.obj["store"] = store
    ctx.obj["config"] = config
    ctx.call_on_close(store.close)


main.add_command(chat_cmd)
main.add_command(prs_cmd)
main.add_command(ping_cmd)
main.add_command(ask_cmd)
main.add_command(models_cmd)
