"""Mock render and upload providers for running without FFmpeg or YouTube credentials"""

import asyncio
import hashlib
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.defaults import watch_url
from core.models.render import CompositionRequest
from .base import ProgressCallback, RenderService, UploadResponse, UploadService
from .upload.youtube import UploadResult


# ftyp box so players and sniffers treat the file as MP4
MOCK_MP4_HEADER = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"


class MockRenderService(RenderService):
    """
    Mock encoding engine that simulates a render without FFmpeg.

    Used for:
    - Testing without FFmpeg installed
    - Development of the publish flow
    - CI/CD pipeline testing
    """

    def __init__(self, steps: int = 4, delay: float = 0.0):
        self.steps = steps
        self.delay = delay
        self.load_count = 0
        self.render_count = 0
        self.requests: List[CompositionRequest] = []

    async def load(self) -> None:
        await asyncio.sleep(self.delay)
        self.load_count += 1

    async def render(
        self,
        request: CompositionRequest,
        output_path: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        self.render_count += 1
        self.requests.append(request)

        for step in range(1, self.steps + 1):
            await asyncio.sleep(self.delay)
            if on_progress:
                on_progress(step / self.steps)

        digest = hashlib.sha256(
            "|".join(f"{s.title}:{s.duration}" for s in request.scenes).encode()
        ).digest()
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(MOCK_MP4_HEADER + digest)
        return str(path)

    def reset(self):
        """Reset mock state (useful for testing)"""
        self.load_count = 0
        self.render_count = 0
        self.requests.clear()


class MockUploadService(UploadService):
    """Upload service that accepts every request and returns a fake video id"""

    def __init__(self):
        self.upload_count = 0
        self.bodies: List[Dict[str, Any]] = []

    async def upload(self, body: Dict[str, Any]) -> UploadResponse:
        await asyncio.sleep(0)
        self.upload_count += 1
        self.bodies.append(body)
        video_id = f"mock{self.upload_count:07d}"
        return UploadResponse(
            status_code=200,
            body={"videoId": video_id, "videoUrl": watch_url(video_id)},
        )


class MockYouTubeUploader:
    """Server-side stand-in for YouTubeUploader in mock provider mode"""

    def __init__(self, *args, **kwargs):
        self.uploads: List[Dict[str, Any]] = []

    def upload_bytes(self, video: bytes, title: str, description: str = "",
                     tags: Optional[list] = None, privacy: str = "private") -> UploadResult:
        self.uploads.append({"size": len(video), "title": title, "privacy": privacy})
        video_id = "mock_" + hashlib.sha256(video).hexdigest()[:11]
        return UploadResult(success=True, video_id=video_id, video_url=watch_url(video_id))
