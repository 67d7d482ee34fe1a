"""fetch command: fetch review comments for a pull request."""

from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from prcomments_core.comments import FetchResult, fetch_comments
from prcomments_core.export import export_filename, render_markdown
from prcomments_core.gh.errors import FetchError, ValidationError
from prcomments_core.validation import parse_pr_url

console = Console()

_BODY_PREVIEW_CHARS = 120


def _render_table(result: FetchResult) -> Table:
    request = result.request
    table = Table(
        title=f"Review comments: {request.slug}#{request.pr_number}",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", justify="right", width=4)
    table.add_column("File", max_width=40)
    table.add_column("Line", justify="right", width=6)
    table.add_column("Author", width=16)
    table.add_column("Comment")

    for index, c in enumerate(result.comments, start=1):
        body = " ".join(c.body.split())
        if len(body) > _BODY_PREVIEW_CHARS:
            body = body[: _BODY_PREVIEW_CHARS - 1] + "…"
        table.add_row(
            str(index),
            escape(c.path),
            str(c.line) if c.line is not None else "",
            escape(c.author),
            escape(body),
        )
    return table


@click.command("fetch")
@click.argument("pr_url")
@click.option(
    "--output",
    "-o",
    "output",
    default=None,
    help="Write a Markdown export to this path. Pass '-' to use the default file name.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the comments as JSON instead of a table.")
@click.pass_context
def fetch_cmd(ctx, pr_url: str, output: str | None, as_json: bool):
    """Fetch review comments for PR_URL (https://github.com/owner/repo/pull/123).

    \b
    Token resolution:
      GITHUB_TOKEN         GitHub personal access token
      gh auth token        used when GITHUB_TOKEN is not set
    """
    from prcomments_cli.auth import resolve_github_token

    config = ctx.obj["config"]

    try:
        request = parse_pr_url(pr_url)
    except ValidationError as e:
        raise click.UsageError(e.message) from e

    resolved = resolve_github_token()
    if resolved is None:
        raise click.UsageError(
            "No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.\n"
            "Create a token at https://github.com/settings/tokens"
        )
    try:
        result = fetch_comments(request, resolved.value, config)
    except FetchError as e:
        if e.clears_credential:
            source = "GITHUB_TOKEN" if resolved.source == "env" else "the gh CLI session"
            raise click.ClickException(f"{e.message} (token from {source} was rejected)") from e
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    elif not result.comments:
        console.print("[yellow]No comments found.[/yellow]")
    else:
        console.print(_render_table(result))

    if output:
        path = Path(export_filename(request) if output == "-" else output)
        path.write_text(render_markdown(request, result.comments), encoding="utf-8")
        # Keep stdout clean for --json consumers.
        Console(stderr=True).print(f"[green]Wrote {result.total} comments to {path}[/green]")
