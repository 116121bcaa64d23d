"""
Storyboard CLI - Create and edit scene storyboards.

A storyboard is a JSON file holding the ordered scene list. Every command
loads it into a SceneStore, applies one operation and saves it back.
"""

import json
import random
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.table import Table
from rich import box

from core.defaults import GRADIENT_PALETTE, MAX_DURATION, MIN_DURATION
from core.scene_store import SceneStore, resolve_topic

console = Console()


def parse_gradient(value: Optional[str]) -> Optional[Tuple[str, str]]:
    """Palette name ("Sky Surge") or two colours ("#112233,#445566")."""
    if value is None:
        return None
    for name, colors in GRADIENT_PALETTE.items():
        if name.lower() == value.strip().lower():
            return colors
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != 2:
        raise click.BadParameter(
            f"Use a palette name ({', '.join(GRADIENT_PALETTE)}) or two colours like '#112233,#445566'"
        )
    return (parts[0], parts[1])


def gradient_name(gradient: Tuple[str, str]) -> str:
    for name, colors in GRADIENT_PALETTE.items():
        if tuple(colors) == tuple(gradient):
            return name
    return f"{gradient[0]} → {gradient[1]}"


def resolve_scene_id(store: SceneStore, ref: str) -> str:
    """Accept a full id, a unique id prefix, or a 1-based position."""
    if store.get(ref):
        return ref
    if ref.isdigit():
        position = int(ref)
        scenes = store.scenes
        if 1 <= position <= len(scenes):
            return scenes[position - 1].id
    matches = [s.id for s in store if s.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    return ref


def load_store(path: str) -> SceneStore:
    try:
        return SceneStore.load(path)
    except (OSError, ValueError, KeyError) as e:
        raise click.ClickException(f"Could not read storyboard {path}: {e}")


def print_store(store: SceneStore, title: str = "Storyboard"):
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", style="dim", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Duration", justify="right")
    table.add_column("Gradient")
    table.add_column("Emphasis", style="dim")

    for i, scene in enumerate(store, start=1):
        table.add_row(
            str(i),
            scene.id[:8],
            scene.title,
            f"{scene.duration:g}s",
            gradient_name(scene.gradient),
            scene.emphasis or "",
        )

    console.print(table)
    console.print(f"Scenes: [cyan]{len(store)}[/cyan]  Total runtime: [cyan]{store.total_runtime:g}[/cyan] seconds")


@click.group()
def scenes_cmd():
    """Create and edit storyboards.

    \b
    Examples:
      slide-studio scenes init --topic "Home automation" -o storyboard.json
      slide-studio scenes show storyboard.json
      slide-studio scenes update storyboard.json 2 --duration 10
      slide-studio scenes duplicate storyboard.json 3
    """
    pass


@scenes_cmd.command("init")
@click.option("--topic", "-t", default="", help="Video topic (default topic if blank)")
@click.option("--output", "-o", type=click.Path(), default="storyboard.json", help="Storyboard file")
@click.option("--seed", type=int, default=None, help="Random seed for gradient selection")
@click.option("--force", is_flag=True, help="Overwrite an existing storyboard")
def init_cmd(topic: str, output: str, seed: Optional[int], force: bool):
    """Auto-compose a six-scene storyboard for a topic."""
    if Path(output).exists() and not force:
        raise click.ClickException(f"{output} already exists (use --force to overwrite)")

    rng = random.Random(seed) if seed is not None else None
    store = SceneStore(rng=rng)
    store.seed(topic)
    store.save(output)

    console.print(f"[green]✓[/green] Composed storyboard for [bold]{resolve_topic(topic)}[/bold] → {output}")
    print_store(store)


@scenes_cmd.command("show")
@click.argument("storyboard", type=click.Path(exists=True))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show_cmd(storyboard: str, as_json: bool):
    """Show the scenes in a storyboard."""
    store = load_store(storyboard)
    if as_json:
        data = store.to_dict()
        data["total_runtime"] = store.total_runtime
        click.echo(json.dumps(data, indent=2))
        return
    print_store(store, title=Path(storyboard).name)


@scenes_cmd.command("add")
@click.argument("storyboard", type=click.Path(exists=True))
@click.option("--title", default=None, help="Scene headline")
@click.option("--narration", default=None, help="Narration text")
@click.option("--duration", type=click.IntRange(MIN_DURATION, MAX_DURATION), default=None,
              help=f"Seconds ({MIN_DURATION}-{MAX_DURATION})")
@click.option("--gradient", default=None, help="Palette name or two colours")
@click.option("--emphasis", default=None, help="Authoring note")
def add_cmd(storyboard, title, narration, duration, gradient, emphasis):
    """Append a scene (a "New Scene" template unless fields are given)."""
    store = load_store(storyboard)
    scene = store.add()

    patch = {
        key: value for key, value in {
            "title": title,
            "narration": narration,
            "duration": duration,
            "gradient": parse_gradient(gradient),
            "emphasis": emphasis,
        }.items() if value is not None
    }
    if patch:
        try:
            store.update(scene.id, **patch)
        except ValueError as e:
            raise click.BadParameter(str(e))

    store.save(storyboard)
    console.print(f"[green]✓[/green] Added scene [cyan]{scene.id[:8]}[/cyan]")


@scenes_cmd.command("update")
@click.argument("storyboard", type=click.Path(exists=True))
@click.argument("scene")
@click.option("--title", default=None, help="Scene headline")
@click.option("--narration", default=None, help="Narration text")
@click.option("--duration", type=click.IntRange(MIN_DURATION, MAX_DURATION), default=None,
              help=f"Seconds ({MIN_DURATION}-{MAX_DURATION})")
@click.option("--gradient", default=None, help="Palette name or two colours")
@click.option("--emphasis", default=None, help="Authoring note")
def update_cmd(storyboard, scene, title, narration, duration, gradient, emphasis):
    """Patch fields of one scene (SCENE is an id, id prefix or position)."""
    store = load_store(storyboard)
    scene_id = resolve_scene_id(store, scene)

    patch = {
        key: value for key, value in {
            "title": title,
            "narration": narration,
            "duration": duration,
            "gradient": parse_gradient(gradient),
            "emphasis": emphasis,
        }.items() if value is not None
    }
    if not patch:
        raise click.UsageError("Nothing to update - pass at least one field option")

    try:
        updated = store.update(scene_id, **patch)
    except ValueError as e:
        raise click.BadParameter(str(e))

    if not updated:
        raise click.ClickException(f"Scene not found: {scene}")

    store.save(storyboard)
    console.print(f"[green]✓[/green] Updated {', '.join(sorted(patch))}")


@scenes_cmd.command("remove")
@click.argument("storyboard", type=click.Path(exists=True))
@click.argument("scene")
def remove_cmd(storyboard, scene):
    """Remove one scene."""
    store = load_store(storyboard)
    if not store.remove(resolve_scene_id(store, scene)):
        raise click.ClickException(f"Scene not found: {scene}")
    store.save(storyboard)
    console.print(f"[green]✓[/green] Removed scene ({len(store)} left)")


@scenes_cmd.command("duplicate")
@click.argument("storyboard", type=click.Path(exists=True))
@click.argument("scene")
def duplicate_cmd(storyboard, scene):
    """Append a copy of a scene with an "(extended)" title."""
    store = load_store(storyboard)
    clone = store.duplicate(resolve_scene_id(store, scene))
    if clone is None:
        console.print(f"[yellow]Scene not found: {scene} - nothing duplicated[/yellow]")
        return
    store.save(storyboard)
    console.print(f"[green]✓[/green] Added [bold]{clone.title}[/bold] ([cyan]{clone.id[:8]}[/cyan])")


@scenes_cmd.command("move")
@click.argument("storyboard", type=click.Path(exists=True))
@click.argument("scene")
@click.argument("position", type=click.IntRange(min=1))
def move_cmd(storyboard, scene, position):
    """Move a scene to a 1-based POSITION."""
    store = load_store(storyboard)
    if not store.move(resolve_scene_id(store, scene), position - 1):
        raise click.ClickException(f"Scene not found: {scene}")
    store.save(storyboard)
    print_store(store)
