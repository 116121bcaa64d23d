"""Scene model - one narrated, timed slide of the composed video"""

import math
import numbers
import re
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from core.defaults import DEFAULT_SCENE_DURATION, GRADIENT_PALETTE


HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Fields a patch may touch. The id is the key and is never patched.
EDITABLE_FIELDS = ("title", "narration", "duration", "gradient", "emphasis")


def make_scene_id() -> str:
    """Opaque unique scene identifier"""
    return uuid.uuid4().hex


def validate_gradient(gradient) -> Tuple[str, str]:
    """Return the gradient as a colour pair, or raise ValueError if malformed."""
    try:
        start, end = gradient
    except (TypeError, ValueError):
        raise ValueError(f"Gradient must be a pair of colours, got {gradient!r}")

    for color in (start, end):
        if not isinstance(color, str) or not HEX_COLOR.match(color):
            raise ValueError(f"Invalid gradient colour: {color!r}")

    return (start, end)


def validate_duration(duration) -> float:
    """Return the duration in seconds, or raise ValueError if not a finite number."""
    if isinstance(duration, bool) or not isinstance(duration, numbers.Real):
        raise ValueError(f"Duration must be a number of seconds, got {duration!r}")
    if not math.isfinite(duration):
        raise ValueError(f"Duration must be finite, got {duration!r}")
    return duration


@dataclass
class Scene:
    """
    One narrated segment of the video.

    Attributes:
        id: Opaque identifier, stable for the scene's lifetime
        title: Headline drawn on the slide (may be empty while editing)
        narration: Voice-over script drawn under the headline
        duration: Seconds allotted to the scene
        gradient: Two colours for the slide background
        emphasis: Authoring note, not rendered
    """
    title: str
    narration: str
    duration: float = DEFAULT_SCENE_DURATION
    gradient: Tuple[str, str] = GRADIENT_PALETTE["Sky Surge"]
    emphasis: Optional[str] = None
    id: str = field(default_factory=make_scene_id)

    def __post_init__(self):
        self.gradient = validate_gradient(self.gradient)
        self.duration = validate_duration(self.duration)

    def copy(self, **changes) -> "Scene":
        """Shallow copy with optional field changes"""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "narration": self.narration,
            "duration": self.duration,
            "gradient": list(self.gradient),
            "emphasis": self.emphasis,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scene":
        return cls(
            id=data.get("id") or make_scene_id(),
            title=data.get("title", ""),
            narration=data.get("narration", ""),
            duration=data.get("duration", DEFAULT_SCENE_DURATION),
            gradient=tuple(data.get("gradient", GRADIENT_PALETTE["Sky Surge"])),
            emphasis=data.get("emphasis"),
        )
