"""
Composition Request Builder

Projects the scene store plus global render parameters into an immutable
CompositionRequest. Later edits to the store never reach a request that was
already built.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union

from core.defaults import DEFAULT_FPS, DEFAULT_HEIGHT, DEFAULT_WIDTH, MAX_DURATION, MIN_DURATION
from core.errors import EmptyComposition
from core.models.render import CompositionRequest
from core.models.scene import Scene
from core.scene_store import SceneStore


@dataclass
class RenderParams:
    """Global render parameters chosen alongside the storyboard"""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    fps: int = DEFAULT_FPS
    background_audio: Optional[str] = None

    def __post_init__(self):
        for name in ("width", "height", "fps"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")


def clamp_duration(duration: float) -> float:
    return min(max(duration, MIN_DURATION), MAX_DURATION)


def build_composition(
    scenes: Union[SceneStore, Iterable[Scene]],
    params: Optional[RenderParams] = None,
) -> CompositionRequest:
    """
    Snapshot scenes into a render job.

    Args:
        scenes: A SceneStore or any iterable of scenes, in playback order
        params: Render parameters (canonical 1280x720 @ 30fps if omitted)

    Returns:
        CompositionRequest holding private copies of the scenes with
        durations clamped into [MIN_DURATION, MAX_DURATION]

    Raises:
        EmptyComposition: If there are no scenes
    """
    params = params or RenderParams()
    snapshot = tuple(
        scene.copy(duration=clamp_duration(scene.duration))
        for scene in scenes
    )

    if not snapshot:
        raise EmptyComposition()

    return CompositionRequest(
        scenes=snapshot,
        width=params.width,
        height=params.height,
        fps=params.fps,
        background_audio=params.background_audio,
    )
