"""Data models for Slide Studio"""

from .scene import Scene, make_scene_id
from .render import CompositionRequest, RenderConfig, RenderResult
from .publish import PrivacyStatus, PublishForm, PublishResult

__all__ = [
    "Scene",
    "make_scene_id",
    "CompositionRequest",
    "RenderConfig",
    "RenderResult",
    "PrivacyStatus",
    "PublishForm",
    "PublishResult",
]
