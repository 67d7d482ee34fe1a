"""CLI entry point for prcomments.

Commands:
  fetch  - fetch review comments for a PR URL and print or export them
  serve  - run the HTTP API
  token  - inspect the GitHub token the CLI would use
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prcomments_cli.commands.fetch import fetch_cmd
from prcomments_cli.commands.serve import serve_cmd
from prcomments_cli.commands.token import token_cmd

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # httpx logs full request URLs at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


@click.group()
@click.version_option(
    version=importlib.metadata.version("prcomments"),
    prog_name="prcomments",
)
@click.option(
    "--config",
    "config_path",
    default=".prcomments.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRCOMMENTS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Fetch and export GitHub pull request review comments."""
    from prcomments_core.config import ConfigError, load_config

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    try:
        ctx.obj["config"] = load_config(config_path)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e


main.add_command(fetch_cmd)
main.add_command(serve_cmd)
main.add_command(token_cmd)
