"""YouTube upload provider using YouTube Data API v3.

Authorizes with the caller's OAuth client and refresh token for the
lifetime of one upload. Nothing is written to disk.
"""

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.defaults import MAX_TAGS, watch_url

logger = logging.getLogger(__name__)

# OAuth2 scopes needed for upload
SCOPES = ["https://www.googleapis.com/auth/youtube.upload"]

TOKEN_URI = "https://oauth2.googleapis.com/token"
AUTH_URI = "https://accounts.google.com/o/oauth2/auth"

# 10MB resumable upload chunks
CHUNK_SIZE = 10 * 1024 * 1024


@dataclass
class UploadResult:
    """Result from a YouTube upload."""
    success: bool
    video_id: Optional[str] = None
    video_url: Optional[str] = None
    error: Optional[str] = None


def build_client_config(client_id: str, client_secret: str) -> Dict[str, Any]:
    """OAuth2 installed-app client config from individual secrets."""
    return {
        "installed": {
            "client_id": client_id,
            "client_secret": client_secret,
            "auth_uri": AUTH_URI,
            "token_uri": TOKEN_URI,
            "redirect_uris": ["http://localhost"],
        }
    }


def authorize_installed_app(client_id: str, client_secret: str, port: int = 0) -> str:
    """Run the browser consent flow once and return the refresh token.

    The token is returned to the caller, not stored.
    """
    from google_auth_oauthlib.flow import InstalledAppFlow

    flow = InstalledAppFlow.from_client_config(build_client_config(client_id, client_secret), SCOPES)
    creds = flow.run_local_server(port=port, access_type="offline", prompt="consent")
    if not creds.refresh_token:
        raise RuntimeError("Google did not return a refresh token. Revoke access and try again.")
    return creds.refresh_token


class YouTubeUploader:
    """Upload videos to YouTube using the Data API v3.

    Credentials are supplied per request (client id, client secret and a
    refresh token with the youtube.upload scope). google-auth exchanges the
    refresh token for an access token on the first API call.
    """

    def __init__(self, client_id: str, client_secret: str, refresh_token: str):
        self.client_id = client_id
        self.client_secret = client_secret
        self.refresh_token = refresh_token
        self._service = None

    def _get_credentials(self):
        """OAuth2 credentials from the refresh token (access token fetched lazily)."""
        from google.oauth2.credentials import Credentials

        return Credentials(
            token=None,
            refresh_token=self.refresh_token,
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_uri=TOKEN_URI,
            scopes=SCOPES,
        )

    def _get_service(self):
        """Get authenticated YouTube API service."""
        if self._service is None:
            from googleapiclient.discovery import build
            creds = self._get_credentials()
            self._service = build("youtube", "v3", credentials=creds, cache_discovery=False)
        return self._service

    def upload_bytes(
        self,
        video: bytes,
        title: str,
        description: str = "",
        tags: Optional[list] = None,
        privacy: str = "private",  # unlisted|public|private
    ) -> UploadResult:
        """Upload an in-memory video to YouTube.

        Args:
            video: MP4 bytes
            title: Video title
            description: Video description
            tags: List of tags (first 500 are sent)
            privacy: Privacy status (unlisted, public, private)

        Returns:
            UploadResult with video_id and URL on success
        """
        from googleapiclient.http import MediaIoBaseUpload

        if not video:
            return UploadResult(success=False, error="Missing video payload.")

        body = {
            "snippet": {
                "title": title,
                "description": description,
                "tags": (tags or [])[:MAX_TAGS],
            },
            "status": {
                "privacyStatus": privacy,
            },
        }

        media = MediaIoBaseUpload(
            io.BytesIO(video),
            mimetype="video/mp4",
            resumable=True,
            chunksize=CHUNK_SIZE,
        )

        try:
            service = self._get_service()
            request = service.videos().insert(
                part="snippet,status",
                body=body,
                media_body=media,
            )

            response = None
            while response is None:
                status, response = request.next_chunk()
                if status:
                    logger.info(f"Upload progress: {int(status.progress() * 100)}%")

            video_id = response.get("id")
            return UploadResult(
                success=True,
                video_id=video_id,
                video_url=watch_url(video_id) if video_id else None,
            )

        except Exception as e:
            logger.warning(f"YouTube upload failed: {e}")
            return UploadResult(success=False, error=str(e))
