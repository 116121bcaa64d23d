"""Render command - Render a storyboard to an MP4 with FFmpeg"""

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from core.composition import RenderParams, build_composition
from core.defaults import DEFAULT_FPS, DEFAULT_HEIGHT, DEFAULT_WIDTH
from core.errors import StudioError
from core.providers.mock import MockRenderService
from core.render_engine import RenderEngineAdapter
from core.renderer import FFmpegRenderer
from core.scene_store import SceneStore

console = Console()


async def render_storyboard(
    store: SceneStore,
    output: Path,
    params: RenderParams,
    mock: bool = False,
) -> Path:
    """
    Load the engine, render one composition and copy the preview to output.

    Raises:
        StudioError: On load failure, empty storyboard or render failure
    """
    service = MockRenderService() if mock else FFmpegRenderer()

    with tempfile.TemporaryDirectory(prefix="slide_studio_") as work_dir:
        engine = RenderEngineAdapter(service, output_dir=work_dir)

        with console.status("[bold cyan]Loading render engine..."):
            await engine.load()

        request = build_composition(store, params)

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task = progress.add_task(
                f"Rendering {len(request.scenes)} scenes ({request.total_duration:g}s)", total=100
            )
            result = await engine.generate(
                request,
                on_progress=lambda ratio: progress.update(task, completed=ratio * 100),
            )

        output.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(result.playable_reference, output)
        engine.close()

    return output


@click.command()
@click.argument("storyboard", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), default="slide_studio.mp4", help="Output MP4 path")
@click.option("--audio", type=click.Path(exists=True), default=None, help="Background audio track")
@click.option("--width", type=int, default=DEFAULT_WIDTH, show_default=True, help="Frame width")
@click.option("--height", type=int, default=DEFAULT_HEIGHT, show_default=True, help="Frame height")
@click.option("--fps", type=int, default=DEFAULT_FPS, show_default=True, help="Frames per second")
@click.option("--mock", is_flag=True, help="Use the mock render engine (no FFmpeg)")
def render_cmd(storyboard: str, output: str, audio: Optional[str], width: int, height: int,
               fps: int, mock: bool):
    """
    Render a storyboard to an MP4 video.

    \b
    Examples:
        slide-studio render storyboard.json -o video.mp4
        slide-studio render storyboard.json --audio music.mp3 --width 1920 --height 1080
    """
    try:
        store = SceneStore.load(storyboard)
    except (OSError, ValueError, KeyError) as e:
        raise click.ClickException(f"Could not read storyboard {storyboard}: {e}")

    try:
        params = RenderParams(width=width, height=height, fps=fps, background_audio=audio)
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        path = asyncio.run(render_storyboard(store, Path(output), params, mock=mock))
    except StudioError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise click.Abort()

    size_mb = path.stat().st_size / (1024 * 1024)
    console.print(Panel(
        f"[green]✓ Render complete![/green]\n\n"
        f"Output: [cyan]{path}[/cyan]\n"
        f"Scenes: {len(store)}\n"
        f"Runtime: {store.total_runtime:g}s\n"
        f"Size: {size_mb:.1f} MB",
        title="Slide Studio Render",
    ))
