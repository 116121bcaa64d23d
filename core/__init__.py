"""Core components - scene store, composition, rendering and publishing"""

from .scene_store import SceneStore
from .composition import RenderParams, build_composition
from .render_engine import EngineState, RenderEngineAdapter
from .publish import PublishWorkflow, can_publish, parse_tags
from .transport import encode_artifact, decode_artifact

# Note: StudioSession is NOT imported here to keep `import core` light
# Import it directly: from core.studio import StudioSession

__all__ = [
    # Scenes
    "SceneStore",
    "RenderParams",
    "build_composition",

    # Rendering
    "EngineState",
    "RenderEngineAdapter",

    # Publishing
    "PublishWorkflow",
    "can_publish",
    "parse_tags",
    "encode_artifact",
    "decode_artifact",
]
