"""
Render models for FFmpeg slide assembly

These models represent the immutable render job built from the scene store,
the encoder configuration, and the result of a finished render.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from core.defaults import DEFAULT_FPS, DEFAULT_HEIGHT, DEFAULT_WIDTH
from core.models.scene import Scene


@dataclass
class RenderConfig:
    """
    Encoder configuration for rendering.

    Attributes:
        video_codec: Video codec (h264, h265, etc.)
        audio_codec: Audio codec (aac, mp3, etc.)
        audio_bitrate: Audio bitrate (e.g., "192k")
        pixel_format: Pixel format (yuv420p for compatibility)
        title_fontsize: Headline size in pixels at 720p
        narration_fontsize: Narration size in pixels at 720p
        wrap_width: Characters per narration line
    """
    video_codec: str = "libx264"
    audio_codec: str = "aac"
    audio_bitrate: str = "192k"
    pixel_format: str = "yuv420p"

    # Quality preset (ultrafast, fast, medium, slow, veryslow)
    preset: str = "medium"

    # CRF for quality-based encoding (0-51, lower = better, 23 is default)
    crf: int = 23

    # Slide typography
    title_fontsize: int = 56
    narration_fontsize: int = 30
    wrap_width: int = 48


@dataclass(frozen=True)
class CompositionRequest:
    """
    Immutable snapshot of scenes and render parameters.

    Attributes:
        scenes: Scenes in playback order (private copies)
        width: Output width in pixels
        height: Output height in pixels
        fps: Output frame rate
        background_audio: Optional audio file mixed under the full runtime
    """
    scenes: Tuple[Scene, ...]
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fps: int = DEFAULT_FPS
    background_audio: Optional[str] = None

    @property
    def total_duration(self) -> float:
        return float(sum(scene.duration for scene in self.scenes))

    @property
    def resolution(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class RenderResult:
    """
    Output of a completed render.

    Attributes:
        artifact: Encoded MP4 bytes
        playable_reference: Local path of the preview file
        generation: Engine render generation that produced this result
        duration: Runtime of the rendered video in seconds
        render_time: Wall-clock seconds spent rendering
        superseded: True once a newer render has started
    """
    artifact: bytes = field(repr=False)
    playable_reference: str
    generation: int
    duration: Optional[float] = None
    render_time: Optional[float] = None
    superseded: bool = False

    @property
    def has_artifact(self) -> bool:
        return not self.superseded and bool(self.artifact)

    @property
    def file_size(self) -> int:
        return len(self.artifact)
