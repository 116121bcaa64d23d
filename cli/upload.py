"""Upload command - Publish rendered videos to YouTube."""

import asyncio
import json
import os
from datetime import datetime, timezone
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from core.defaults import default_description
from core.models.publish import PrivacyStatus, PublishForm, PublishResult, parse_tags
from core.models.render import RenderResult
from core.providers.mock import MockUploadService
from core.providers.upload.http import DEFAULT_ENDPOINT, HttpUploadService
from core.publish import PublishWorkflow
from core.secrets import get_api_key

console = Console()


def _save_upload_metadata(video_path: str, result: PublishResult, form: PublishForm):
    """Append an upload record next to the video. Credentials are never written."""
    video_file = Path(video_path)
    upload_meta = {
        "platform": "youtube",
        "url": result.url,
        "title": form.title,
        "description": form.description,
        "tags": form.tags,
        "privacy": form.privacy_status.value,
        "uploaded_at": datetime.now(timezone.utc).isoformat(),
        "source_file": str(video_file.name),
    }

    upload_record_path = video_file.parent / "upload_record.json"
    records = []
    if upload_record_path.exists():
        try:
            records = json.loads(upload_record_path.read_text())
        except json.JSONDecodeError:
            records = []
        if not isinstance(records, list):
            records = []
    records.append(upload_meta)
    upload_record_path.write_text(json.dumps(records, indent=2))
    return upload_record_path


def _missing_credentials_panel():
    console.print(Panel(
        "[red]YouTube OAuth2 credentials not configured.[/red]\n\n"
        "[bold]Option 1 - Command line:[/bold]\n"
        "  [cyan]--client-id ... --client-secret ... --refresh-token ...[/cyan]\n\n"
        "[bold]Option 2 - Environment / .env / keychain:[/bold]\n"
        "  [cyan]YOUTUBE_CLIENT_ID, YOUTUBE_CLIENT_SECRET, YOUTUBE_REFRESH_TOKEN[/cyan]\n\n"
        "Get a refresh token with [cyan]slide-studio upload youtube-auth[/cyan]",
        title="YouTube Setup Required",
    ))


@click.group()
def upload_cmd():
    """Upload videos to platforms."""
    pass


@upload_cmd.command("youtube")
@click.argument("video_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--title", "-t", required=True, help="Video title")
@click.option("--description", "-d", default=None, help="Video description (default derived from title)")
@click.option("--tags", default="", help="Comma-separated tags")
@click.option("--privacy", type=click.Choice([p.value for p in PrivacyStatus]), default="private",
              show_default=True, help="Privacy status")
@click.option("--client-id", default=None, help="OAuth2 client id (default: YOUTUBE_CLIENT_ID)")
@click.option("--client-secret", default=None, help="OAuth2 client secret (default: YOUTUBE_CLIENT_SECRET)")
@click.option("--refresh-token", default=None, help="OAuth2 refresh token (default: YOUTUBE_REFRESH_TOKEN)")
@click.option("--endpoint", envvar="SLIDE_STUDIO_ENDPOINT", default=DEFAULT_ENDPOINT, show_default=True,
              help="Upload server base URL")
@click.option("--mock", is_flag=True, help="Simulate the upload without a server")
def youtube(video_path, title, description, tags, privacy, client_id, client_secret,
            refresh_token, endpoint, mock):
    """Upload a rendered video to YouTube through the upload server.

    Credentials are used for this request only and are never stored.

    Example:
        slide-studio upload youtube ./video.mp4 -t "Automating YouTube Videos"
    """
    form = PublishForm(
        title=title,
        description=description if description is not None else default_description(title),
        tags=parse_tags(tags),
        privacy_status=PrivacyStatus(privacy),
        client_id=client_id or get_api_key("YOUTUBE_CLIENT_ID") or "",
        client_secret=client_secret or get_api_key("YOUTUBE_CLIENT_SECRET") or "",
        refresh_token=refresh_token or get_api_key("YOUTUBE_REFRESH_TOKEN") or "",
    )

    if not (form.client_id and form.client_secret and form.refresh_token):
        _missing_credentials_panel()
        raise click.Abort()

    service = MockUploadService() if mock else HttpUploadService(base_url=endpoint)
    workflow = PublishWorkflow(service, form)

    video = Path(video_path).read_bytes()
    render_result = RenderResult(artifact=video, playable_reference=os.path.abspath(video_path), generation=0)

    with console.status("[bold green]Uploading to YouTube..."):
        result = asyncio.run(workflow.submit(render_result))

    if not result.success:
        console.print(f"[red]✗ Upload failed: {result.message}[/red]")
        raise click.Abort()

    console.print(Panel(
        f"[green]✓ {result.message}[/green]\n\n"
        f"URL: [cyan]{result.url}[/cyan]\n"
        f"Privacy: {form.privacy_status.value}",
        title="YouTube Upload",
    ))
    _save_upload_metadata(video_path, result, form)


@upload_cmd.command("youtube-auth")
@click.option("--client-id", default=None, help="OAuth2 client id (default: YOUTUBE_CLIENT_ID)")
@click.option("--client-secret", default=None, help="OAuth2 client secret (default: YOUTUBE_CLIENT_SECRET)")
@click.option("--port", type=int, default=0, help="Local redirect port (0 picks a free port)")
def youtube_auth(client_id, client_secret, port):
    """Obtain a refresh token with the youtube.upload scope.

    Opens a browser window for Google account authorization. The token is
    printed, not stored: pass it with --refresh-token or YOUTUBE_REFRESH_TOKEN.
    """
    from core.providers.upload.youtube import authorize_installed_app

    client_id = client_id or get_api_key("YOUTUBE_CLIENT_ID")
    client_secret = client_secret or get_api_key("YOUTUBE_CLIENT_SECRET")
    if not (client_id and client_secret):
        _missing_credentials_panel()
        raise click.Abort()

    console.print("[yellow]Opening browser for YouTube authorization...[/yellow]")
    try:
        token = authorize_installed_app(client_id, client_secret, port=port)
    except Exception as e:
        console.print(f"[red]✗ Authentication failed: {e}[/red]")
        raise click.Abort()

    console.print(Panel(
        f"[green]✓ Authorization complete.[/green]\n\n"
        f"Refresh token: [cyan]{token}[/cyan]",
        title="YouTube Auth",
    ))
