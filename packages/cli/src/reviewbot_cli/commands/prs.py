"""prs command: list open pull requests."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from reviewbot_cli.auth import require_github
from reviewbot_core.errors import UpstreamError
from reviewbot_core.gh.pull_request import CodeHostClient

console = Console()


@click.command("prs")
@click.option("--repo", default=None, help="GitHub repository in owner/name format. Overrides config file.")
@click.option("--branch", default=None, help="Base branch the PRs target. Overrides config file.")
@click.pass_context
def prs_cmd(ctx, repo: str | None, branch: str | None):
    """List open pull requests targeting a branch."""
    config = ctx.obj["config"]
    repo, token = require_github(config, repo)
    branch = branch or config["base_branch"]

    try:
        prs = CodeHostClient.from_token(repo, token).list_open_pull_requests(branch)
    except UpstreamError as e:
        raise click.ClickException(str(e))

    if not prs:
        console.print(f"[yellow]No open pull requests targeting {branch}.[/yellow]")
        return

    table = Table(title=f"Open PRs — {repo} ({branch})", show_header=True, header_style="bold cyan")
    table.add_column("PR", style="bold", width=6)
    table.add_column("Title")
    for pr in prs:
        table.add_row(f"#{pr.number}", pr.title)
    console.print(table)
