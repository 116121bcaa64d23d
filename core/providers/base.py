"""Abstract base classes for provider interfaces"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from core.models.render import CompositionRequest


# Receives a render progress ratio in [0.0, 1.0]
ProgressCallback = Callable[[float], None]


class RenderService(ABC):
    """
    Abstract base class for encoding engines.

    Anything that can turn a CompositionRequest into a video file implements
    this interface (FFmpeg, Mock). The render engine adapter owns its
    lifecycle, so implementations do not need to guard against concurrent
    calls.
    """

    @abstractmethod
    async def load(self) -> None:
        """
        Initialize the engine (locate binaries, warm caches).

        Raises:
            Exception: If the engine cannot be used
        """
        pass

    @abstractmethod
    async def render(
        self,
        request: CompositionRequest,
        output_path: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        Render a composition to an MP4 file.

        Args:
            request: Immutable composition snapshot
            output_path: Where to write the video
            on_progress: Called with progress ratios while rendering

        Returns:
            Path to the rendered file
        """
        pass


@dataclass
class UploadResponse:
    """Raw outcome of a publish dispatch"""
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class UploadService(ABC):
    """
    Abstract base class for publish targets.

    Accepts the publish request body (camelCase wire keys, see
    server.models.requests.UploadRequest) and returns the service's response.
    Transport problems raise; rejections come back as a non-2xx response.
    """

    @abstractmethod
    async def upload(self, body: Dict[str, Any]) -> UploadResponse:
        pass
