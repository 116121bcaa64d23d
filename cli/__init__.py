"""Slide Studio CLI"""

import logging

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from .scenes import scenes_cmd
from .render import render_cmd
from .upload import upload_cmd
from .serve import serve_cmd
from .status import status_cmd

# Load .env file at CLI startup
load_dotenv()

console = Console(stderr=True)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """Slide Studio - Slide-narration videos from storyboard to YouTube

    \b
    Quick Start:
      slide-studio scenes init --topic "Your topic" -o storyboard.json
      slide-studio render storyboard.json -o video.mp4
      slide-studio upload youtube video.mp4 -t "Title" -d "Description"

    \b
    Commands:
      scenes   Create and edit storyboards
      render   Render a storyboard to MP4 with FFmpeg
      upload   Publish a rendered video to YouTube
      serve    Run the upload server
      status   Show FFmpeg and credential status
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


# Storyboard and production commands
main.add_command(scenes_cmd, name="scenes")
main.add_command(render_cmd, name="render")
main.add_command(upload_cmd, name="upload")

# Server and info commands
main.add_command(serve_cmd, name="serve")
main.add_command(status_cmd, name="status")


if __name__ == "__main__":
    main()
