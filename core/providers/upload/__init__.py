"""Upload providers"""

from .youtube import YouTubeUploader, UploadResult
from .http import HttpUploadService

__all__ = [
    "YouTubeUploader",
    "UploadResult",
    "HttpUploadService",
]
