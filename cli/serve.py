"""Serve command - Run the YouTube upload server"""

import os

import click
from rich.console import Console

console = Console()


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address")
@click.option("--port", type=int, default=8000, show_default=True, help="Bind port")
@click.option("--reload", is_flag=True, help="Reload on code changes")
@click.option("--mock", is_flag=True, help="Simulate YouTube uploads")
def serve_cmd(host: str, port: int, reload: bool, mock: bool):
    """Run the upload server that the publish workflow posts to."""
    import uvicorn

    if mock:
        # Settings are read from the environment at import time
        os.environ["SLIDE_STUDIO_PROVIDER_MODE"] = "mock"

    console.print(f"[bold blue]Slide Studio upload server[/bold blue] on http://{host}:{port}")
    uvicorn.run("server.main:app", host=host, port=port, reload=reload, log_level="info")
