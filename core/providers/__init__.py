"""Provider interfaces for external services (rendering, uploading)"""

from .base import (
    ProgressCallback,
    RenderService,
    UploadResponse,
    UploadService,
)
from .mock import MockRenderService, MockUploadService, MockYouTubeUploader
from .upload import HttpUploadService, UploadResult, YouTubeUploader

__all__ = [
    # Base interfaces
    "ProgressCallback",
    "RenderService",
    "UploadResponse",
    "UploadService",
    # Mock providers
    "MockRenderService",
    "MockUploadService",
    "MockYouTubeUploader",
    # Upload providers
    "HttpUploadService",
    "UploadResult",
    "YouTubeUploader",
]
