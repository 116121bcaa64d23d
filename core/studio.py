"""
Studio session - wires the scene store, render engine and publish workflow.

This is the calling boundary for render failures: they are turned into
notices instead of propagating, leaving the session interactive.
"""

import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from core.composition import RenderParams, build_composition
from core.errors import StudioError
from core.models.publish import PublishForm, PublishResult
from core.models.render import RenderResult
from core.providers.base import ProgressCallback, RenderService, UploadService
from core.publish import PublishWorkflow
from core.render_engine import RenderEngineAdapter
from core.scene_store import SceneStore, resolve_topic

logger = logging.getLogger(__name__)


def format_progress(ratio: float) -> str:
    """Progress ratio as a clamped whole percentage, e.g. "42%"."""
    value = min(100, max(0, round(ratio * 100)))
    return f"{value}%"


@dataclass
class Notice:
    """User-visible notification"""
    level: str  # "info", "error"
    message: str


class StudioSession:
    """
    One user's editing session.

    Attributes:
        store: Editable scene store
        engine: Render engine adapter (single-flight)
        publisher: Publish workflow holding the form state
        params: Render parameters for the next render
        notices: Notifications raised at this boundary, oldest first
    """

    def __init__(
        self,
        render_service: RenderService,
        upload_service: UploadService,
        topic: Optional[str] = None,
        output_dir: str = "artifacts/renders",
        rng: Optional[random.Random] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ):
        self.topic = resolve_topic(topic)
        self.store = SceneStore(rng=rng)
        self.store.seed(self.topic)
        self.engine = RenderEngineAdapter(render_service, output_dir=output_dir)
        self.publisher = PublishWorkflow(upload_service, PublishForm.for_topic(self.topic))
        self.params = RenderParams()
        self.notices: List[Notice] = []
        self._on_notice = on_notice

    def notify(self, level: str, message: str) -> None:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        if self._on_notice:
            self._on_notice(notice)

    # ------------------------------------------------------------------
    # Scenes
    # ------------------------------------------------------------------

    def regenerate(self, topic: Optional[str] = None) -> None:
        """Re-seed the scenes and reset the publish form for a topic."""
        if topic is not None:
            self.topic = resolve_topic(topic)
        self.store.seed(self.topic)
        self.publisher.reset_form(PublishForm.for_topic(self.topic))

    @property
    def total_runtime(self) -> float:
        return self.store.total_runtime

    def set_background_audio(self, path: Optional[str]) -> None:
        self.params.background_audio = path

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Load the render engine; failures become a notice."""
        try:
            await self.engine.load()
            return True
        except StudioError as e:
            self.notify("error", str(e))
            return False

    @property
    def render_result(self) -> Optional[RenderResult]:
        return self.engine.current_result

    async def render(self, on_progress: Optional[ProgressCallback] = None) -> Optional[RenderResult]:
        """
        Snapshot the current scenes and render them.

        Returns:
            The RenderResult, or None if the render could not start or failed
            (a notice explains why)
        """
        try:
            request = build_composition(self.store, self.params)
            return await self.engine.generate(request, on_progress=on_progress)
        except StudioError as e:
            logger.debug(f"Render not completed: {e}")
            self.notify("error", str(e))
            return None

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------

    @property
    def can_publish(self) -> bool:
        return self.publisher.can_submit(self.render_result)

    async def publish(self) -> PublishResult:
        result = await self.publisher.submit(self.render_result)
        self.notify("info" if result.success else "error", result.message)
        return result

    def close(self) -> None:
        self.engine.close()
