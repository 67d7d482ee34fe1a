"""token command: inspect the GitHub token the CLI would use."""

from __future__ import annotations

import click
from rich.console import Console

from prcomments_core.validation import TOKEN_PREFIXES, validate_token

console = Console()

_SOURCE_LABELS = {"env": "GITHUB_TOKEN environment variable", "gh": "gh CLI session"}


@click.group("token")
def token_cmd():
    """Inspect GitHub token resolution."""


@token_cmd.command("check")
def check_cmd():
    """Report where the token comes from and whether its format is recognized.

    The token value itself is never printed.
    """
    from prcomments_cli.auth import resolve_github_token

    resolved = resolve_github_token()
    if resolved is None:
        raise click.ClickException("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")

    console.print(f"Token source: [bold]{_SOURCE_LABELS[resolved.source]}[/bold]")
    if validate_token(resolved.value) is None:
        # gh CLI OAuth tokens (gho_) work against the API but cannot be saved through the web form.
        console.print(
            f"[yellow]Token format not recognized by the web API (expected a {' or '.join(TOKEN_PREFIXES)} "
            "token of 20-500 characters).[/yellow]"
        )
    else:
        console.print("[green]Token format recognized.[/green]")
