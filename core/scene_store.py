"""
Scene Store - ordered, single-owner collection of scenes.

All operations are synchronous and keyed by scene id. Renders never read the
store directly; they work on a snapshot built by core.composition.
"""

import json
import logging
import random
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from core.defaults import DEFAULT_TOPIC, GRADIENT_PALETTE, MIN_DURATION
from core.models.scene import EDITABLE_FIELDS, Scene, make_scene_id, validate_duration, validate_gradient

logger = logging.getLogger(__name__)


# (title, narration template, emphasis). Templates take the trimmed topic.
SCENE_BLUEPRINTS: List[Tuple[str, str, str]] = [
    (
        "Hook",
        "Why spend days editing when {focus} lets you storyboard, narrate, and publish while you sleep?",
        "Promise: by the end you'll have a reusable autopilot.",
    ),
    (
        "System Overview",
        "We break down the automated studio behind {focus} into three loops: ideation, production, "
        "and publishing. Each loop is orchestrated by workflows that watch for new ideas then "
        "generate finished episodes.",
        "Visualize the pipeline as an assembly line from prompt to publish.",
    ),
    (
        "Asset Generation",
        "Scripts, narration, and visuals for {focus} are produced through composable agents. We chunk "
        "the narrative, batch-render slides, and synthesize voice overs so that the heavy lifting "
        "is done without editors.",
        "Tip: reuse templates per content pillar to stay on brand.",
    ),
    (
        "Video Assembly",
        "Slides and audio are merged with FFmpeg on-demand, yielding high quality MP4 files ready "
        "for upload. Effects like zooms or overlays can be added through programmable filters.",
        "Result: deterministic renders with predictable timing.",
    ),
    (
        "Deployment",
        "Finally the pipeline pushes metadata, thumbnails, and the compiled video to YouTube through "
        "their API. Schedule, tag, and publish in a single request while analytics feeds future "
        "iterations.",
        "Close with a call-to-action that matches your funnel.",
    ),
    (
        "Call To Action",
        "Start automating your {focus_lower} today and reinvest saved hours into strategy and community.",
        "Subscribe for more build logs and automation recipes.",
    ),
]

NEW_SCENE_TITLE = "New Scene"
NEW_SCENE_NARRATION = "Refine this narration to keep the narrative tight and insightful."
NEW_SCENE_EMPHASIS = "Adjust duration and visuals to fit the rhythm."


def resolve_topic(topic: Optional[str]) -> str:
    """Trimmed topic, or the default topic when blank."""
    focus = (topic or "").strip()
    return focus or DEFAULT_TOPIC


class SceneStore:
    """
    Ordered collection of Scene records.

    Scene ids are unique within the store at all times. Every mutation bumps
    ``generation`` so callers can tell whether a rendered result still matches
    the storyboard.
    """

    def __init__(self, scenes: Optional[List[Scene]] = None, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()
        self._scenes: List[Scene] = []
        self.generation = 0
        for scene in scenes or []:
            self.add(scene)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def scenes(self) -> List[Scene]:
        """Copy of the scene list in presentation order"""
        return list(self._scenes)

    def __len__(self) -> int:
        return len(self._scenes)

    def __iter__(self) -> Iterator[Scene]:
        return iter(list(self._scenes))

    def get(self, scene_id: str) -> Optional[Scene]:
        for scene in self._scenes:
            if scene.id == scene_id:
                return scene
        return None

    def index_of(self, scene_id: str) -> int:
        for i, scene in enumerate(self._scenes):
            if scene.id == scene_id:
                return i
        return -1

    @property
    def total_runtime(self) -> float:
        """Sum of scene durations, each floored at MIN_DURATION"""
        return sum(max(scene.duration, MIN_DURATION) for scene in self._scenes)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def random_gradient(self) -> Tuple[str, str]:
        return self._rng.choice(list(GRADIENT_PALETTE.values()))

    def create_scene(
        self,
        title: str,
        narration: str,
        emphasis: Optional[str] = None,
        gradient: Optional[Tuple[str, str]] = None,
    ) -> Scene:
        """Build a scene with a fresh id and a random palette gradient (not added)"""
        return Scene(
            title=title,
            narration=narration,
            emphasis=emphasis,
            gradient=gradient or self.random_gradient(),
        )

    def build_scenes_from_topic(self, topic: Optional[str]) -> List[Scene]:
        focus = resolve_topic(topic)
        scenes = []
        for title, template, emphasis in SCENE_BLUEPRINTS:
            narration = template.format(focus=focus, focus_lower=focus.lower())
            scenes.append(self.create_scene(title, narration, emphasis))
        return scenes

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _touch(self) -> None:
        self.generation += 1

    def seed(self, topic: Optional[str]) -> List[Scene]:
        """Replace the store contents with the standard six-scene outline for a topic."""
        self._scenes = self.build_scenes_from_topic(topic)
        self._touch()
        logger.debug(f"Seeded {len(self._scenes)} scenes for topic {resolve_topic(topic)!r}")
        return self.scenes

    def add(self, scene: Optional[Scene] = None) -> Scene:
        """Append a scene (or a default "New Scene") and return it."""
        if scene is None:
            scene = self.create_scene(NEW_SCENE_TITLE, NEW_SCENE_NARRATION, NEW_SCENE_EMPHASIS)
        if self.get(scene.id) is not None:
            raise ValueError(f"Scene id already present: {scene.id}")
        self._scenes.append(scene)
        self._touch()
        return scene

    def update(self, scene_id: str, **patch: Any) -> bool:
        """
        Shallow field-level merge into the scene with the given id.

        Unspecified fields keep their values. Returns False if the id is absent.
        """
        unknown = set(patch) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot patch scene fields: {', '.join(sorted(unknown))}")

        if "gradient" in patch:
            patch["gradient"] = validate_gradient(patch["gradient"])
        if "duration" in patch:
            patch["duration"] = validate_duration(patch["duration"])

        index = self.index_of(scene_id)
        if index < 0:
            return False

        self._scenes[index] = self._scenes[index].copy(**patch)
        self._touch()
        return True

    def remove(self, scene_id: str) -> bool:
        index = self.index_of(scene_id)
        if index < 0:
            return False
        del self._scenes[index]
        self._touch()
        return True

    def duplicate(self, scene_id: str) -> Optional[Scene]:
        """Append a clone with a new id and a derived title. No-op if the id is absent."""
        source = self.get(scene_id)
        if source is None:
            return None
        clone = source.copy(id=make_scene_id(), title=f"{source.title} (extended)")
        self._scenes.append(clone)
        self._touch()
        return clone

    def move(self, scene_id: str, index: int) -> bool:
        """Move a scene to a new position (index clamped into range)."""
        current = self.index_of(scene_id)
        if current < 0:
            return False
        scene = self._scenes.pop(current)
        index = max(0, min(index, len(self._scenes)))
        self._scenes.insert(index, scene)
        self._touch()
        return True

    def clear(self) -> None:
        self._scenes = []
        self._touch()

    # ------------------------------------------------------------------
    # Storyboard files
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {"scenes": [scene.to_dict() for scene in self._scenes]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any], rng: Optional[random.Random] = None) -> "SceneStore":
        return cls([Scene.from_dict(item) for item in data.get("scenes", [])], rng=rng)

    def save(self, path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))
        return path

    @classmethod
    def load(cls, path, rng: Optional[random.Random] = None) -> "SceneStore":
        with open(path) as f:
            return cls.from_dict(json.load(f), rng=rng)
