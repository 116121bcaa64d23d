"""Test data factories for consistent test setup"""

from typing import List

from core.models.publish import PrivacyStatus, PublishForm
from core.models.render import RenderResult
from core.models.scene import Scene


def make_scene(
    title: str = "Test Scene",
    narration: str = "A test narration",
    duration: float = 6,
    **kwargs
) -> Scene:
    """Factory for Scene objects"""
    defaults = {
        "title": title,
        "narration": narration,
        "duration": duration,
        "gradient": ("#0ea5e9", "#6366f1"),
    }
    defaults.update(kwargs)
    return Scene(**defaults)


def make_scene_list(count: int = 3, **kwargs) -> List[Scene]:
    """Factory for list of scenes"""
    return [
        make_scene(
            title=f"Scene {i+1}",
            narration=f"Narration {i+1}",
            id=f"scene_{i+1}",
            **kwargs
        )
        for i in range(count)
    ]


def make_publish_form(**kwargs) -> PublishForm:
    """Factory for a fully filled in PublishForm"""
    defaults = {
        "title": "Test Video",
        "description": "A test description",
        "tags": ["ai", "automation"],
        "privacy_status": PrivacyStatus.PRIVATE,
        "client_id": "client-id",
        "client_secret": "client-secret",
        "refresh_token": "refresh-token",
    }
    defaults.update(kwargs)
    return PublishForm(**defaults)


def make_render_result(artifact: bytes = b"\x00\x00\x00\x18ftypmp42", **kwargs) -> RenderResult:
    """Factory for RenderResult objects"""
    defaults = {
        "artifact": artifact,
        "playable_reference": "/tmp/preview.mp4",
        "generation": 1,
        "duration": 18.0,
    }
    defaults.update(kwargs)
    return RenderResult(**defaults)
