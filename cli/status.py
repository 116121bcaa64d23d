"""System status command"""

import asyncio
import json

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from core.renderer import FFmpegRenderer
from core.secrets import KNOWN_KEYS, list_api_keys


console = Console()


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status_cmd(as_json: bool):
    """Show FFmpeg and credential status"""
    status = get_status_dict()

    if as_json:
        click.echo(json.dumps(status, indent=2))
        return

    console.print(Panel.fit(
        "[bold blue]Slide Studio[/bold blue]\n"
        "Slide-narration videos from storyboard to YouTube",
        border_style="blue"
    ))

    ffmpeg = status["ffmpeg"]
    engine_table = Table(title="Render Engine", box=box.ROUNDED)
    engine_table.add_column("Component", style="cyan")
    engine_table.add_column("Status")

    if ffmpeg.get("installed"):
        engine_table.add_row("FFmpeg", f"[green]✓ {ffmpeg.get('version', 'installed')}[/green]")
        engine_table.add_row("Path", ffmpeg.get("path", ""))
    else:
        engine_table.add_row("FFmpeg", f"[red]✗ {ffmpeg.get('error', 'not found')}[/red]")

    console.print(engine_table)

    config_table = Table(title="Credentials", box=box.ROUNDED)
    config_table.add_column("Key", style="cyan")
    config_table.add_column("Description", style="dim")
    config_table.add_column("Status")

    for key, source in status["credentials"].items():
        if source == "not_set":
            label = "[red]✗ Missing[/red]"
        else:
            label = f"[green]✓ {source}[/green]"
        config_table.add_row(key, KNOWN_KEYS[key], label)

    console.print(config_table)


def get_status_dict() -> dict:
    """Get status as dictionary for JSON output"""
    return {
        "ffmpeg": asyncio.run(FFmpegRenderer().check_ffmpeg_installed()),
        "credentials": list_api_keys(),
    }
