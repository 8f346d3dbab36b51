"""ping, ask and models commands: talk to the configured model endpoint directly."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from reviewbot_cli.auth import require_inference_credentials
from reviewbot_core.errors import InferenceError
from reviewbot_core.prompts import build_question_prompt
from reviewbot_core.providers.base import ask_or_apologize
from reviewbot_core.workflow import get_inference_client

console = Console()


@click.command("ping")
@click.pass_context
def ping_cmd(ctx):
    """Send a trivial prompt to the configured model."""
    config = ctx.obj["config"]
    require_inference_credentials(config)
    client = get_inference_client(config)
    if not client.ping():
        raise click.ClickException(f"AI connection failed ({config['model']}). Please check your setup.")
    console.print(f"[green]AI connection is working ({config['model']}).[/green]")


@click.command("ask")
@click.argument("question", nargs=-1)
@click.pass_context
def ask_cmd(ctx, question: tuple[str, ...]):
    """Ask the configured model a short question."""
    text = " ".join(question).strip()
    if not text:
        raise click.UsageError("Please provide a question after 'ask'.")
    config = ctx.obj["config"]
    require_inference_credentials(config)
    client = get_inference_client(config)
    console.print(ask_or_apologize(client, build_question_prompt(text)), markup=False)


@click.command("models")
@click.pass_context
def models_cmd(ctx):
    """List the models installed on the Ollama server."""
    config = ctx.obj["config"]
    if config["model"] not in ("ollama", "ollama-chat"):
        raise click.UsageError("Model listing is only available for the Ollama providers.")
    client = get_inference_client(config)
    try:
        models = client.list_models()
    except InferenceError as e:
        raise click.ClickException(str(e))

    if not models:
        console.print("[yellow]No models installed.[/yellow]")
        return

    table = Table(title=f"Ollama models — {config['ollama_url']}", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Size", justify="right")
    for m in models:
        size = m.get("size")
        table.add_row(m.get("name", ""), f"{size / 1e9:.1f} GB" if isinstance(size, (int, float)) else "")
    console.print(table)
