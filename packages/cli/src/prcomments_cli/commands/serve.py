"""serve command: run the HTTP API under uvicorn."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True, help="Interface to bind.")
@click.option("--port", default=8000, show_default=True, type=int, help="Port to listen on.")
@click.pass_context
def serve_cmd(ctx, host: str, port: int):
    """Serve the credential and comments API.

    Set SESSION_SECRET (32+ characters) and PRCOMMENTS_ENV=production when
    deploying behind HTTPS; session cookies are only marked Secure in production.
    """
    import uvicorn

    from prcomments_web.main import create_app

    config = ctx.obj["config"]
    if not config.production:
        console.print("[yellow]Running in development mode: session cookies are not marked Secure.[/yellow]")

    uvicorn.run(create_app(config), host=host, port=port)
