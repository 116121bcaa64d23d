"""
Render Engine Adapter

Owns the lifecycle of the encoding engine: load once, run one render at a
time, stream progress, and resolve to a RenderResult or a RenderFailed.

States:
    UNLOADED -> LOADING -> READY -> RENDERING -> READY
    LOADING -> FAILED (load error; load() may be retried)
"""

import asyncio
import logging
import time
import uuid
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from core.errors import EngineBusy, EngineNotReady, RenderFailed
from core.models.render import CompositionRequest, RenderResult
from core.providers.base import ProgressCallback, RenderService

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """Render engine lifecycle states"""
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    RENDERING = "rendering"
    FAILED = "failed"


class RenderEngineAdapter:
    """
    Single-flight wrapper around a RenderService.

    Progress is clamped to [0, 1] and never decreases within a render.
    Starting a render first invalidates the previous result, deleting its
    preview file, before any progress is reported.
    """

    def __init__(self, service: RenderService, output_dir: str = "artifacts/renders"):
        self.service = service
        self.output_dir = Path(output_dir)
        self.state = EngineState.UNLOADED
        self.generation = 0
        self.current_result: Optional[RenderResult] = None
        self.session_id = uuid.uuid4().hex[:8]

        self._progress = 0.0
        self._load_task: Optional[asyncio.Task] = None
        self._listeners: List[ProgressCallback] = []

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        return self.state == EngineState.READY

    @property
    def is_running(self) -> bool:
        return self.state == EngineState.RENDERING

    @property
    def progress(self) -> float:
        return self._progress

    def subscribe(self, listener: ProgressCallback) -> Callable[[], None]:
        """Register a progress listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """
        Initialize the engine. Idempotent.

        No-op when READY or RENDERING. Concurrent callers during LOADING
        await the same initialization.

        Raises:
            RenderFailed: If the engine cannot be initialized (state FAILED)
        """
        if self.state in (EngineState.READY, EngineState.RENDERING):
            return

        if self.state == EngineState.LOADING and self._load_task is not None:
            await self._load_task
            return

        self.state = EngineState.LOADING
        self._load_task = asyncio.ensure_future(self._load())
        await self._load_task

    async def _load(self) -> None:
        try:
            await self.service.load()
        except Exception as e:
            self.state = EngineState.FAILED
            logger.error(f"Render engine failed to load: {e}")
            raise RenderFailed(e, message=f"Render engine failed to load: {e}") from e
        else:
            self.state = EngineState.READY
            logger.info("Render engine ready")
        finally:
            self._load_task = None

    def invalidate(self) -> None:
        """Supersede the current result and delete its preview file."""
        result = self.current_result
        self.current_result = None
        self._progress = 0.0

        if result is None:
            return

        result.superseded = True
        try:
            Path(result.playable_reference).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove stale preview {result.playable_reference}: {e}")

    def close(self) -> None:
        """Release the current preview (session teardown)."""
        self.invalidate()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _report_progress(self, ratio: float, generation: int,
                         on_progress: Optional[ProgressCallback]) -> None:
        # Ignore late reports from an earlier render
        if generation != self.generation or self.state != EngineState.RENDERING:
            return

        ratio = min(max(float(ratio), 0.0), 1.0)
        if ratio < self._progress:
            return
        self._progress = ratio

        if on_progress:
            on_progress(ratio)
        for listener in list(self._listeners):
            listener(ratio)

    async def generate(
        self,
        request: CompositionRequest,
        on_progress: Optional[ProgressCallback] = None,
    ) -> RenderResult:
        """
        Render a composition.

        Args:
            request: Immutable composition snapshot
            on_progress: Called with non-decreasing ratios in [0, 1]

        Returns:
            RenderResult for the new generation

        Raises:
            EngineBusy: If a render is already in flight
            EngineNotReady: If load() has not completed
            RenderFailed: If the engine fails (state returns to READY)
        """
        if self.state == EngineState.RENDERING:
            raise EngineBusy()
        if self.state != EngineState.READY:
            raise EngineNotReady()

        self.invalidate()

        self.state = EngineState.RENDERING
        self.generation += 1
        generation = self.generation
        output_path = self.output_dir / f"{self.session_id}_{generation:03d}.mp4"
        started = time.time()

        def report(ratio: float) -> None:
            self._report_progress(ratio, generation, on_progress)

        logger.info(f"Render #{generation} started: {len(request.scenes)} scenes, "
                    f"{request.total_duration:.0f}s at {request.resolution}")

        try:
            path = await self.service.render(request, str(output_path), report)
            artifact = await asyncio.to_thread(Path(path).read_bytes)
            if not artifact:
                raise RuntimeError("Render produced an empty file")
        except asyncio.CancelledError:
            self.state = EngineState.READY
            logger.warning(f"Render #{generation} cancelled")
            raise
        except Exception as e:
            self.state = EngineState.READY
            logger.error(f"Render #{generation} failed: {e}")
            raise RenderFailed(e) from e

        report(1.0)
        result = RenderResult(
            artifact=artifact,
            playable_reference=str(path),
            generation=generation,
            duration=request.total_duration,
            render_time=time.time() - started,
        )
        self.current_result = result
        self.state = EngineState.READY
        logger.info(f"Render #{generation} complete: {result.file_size} bytes "
                    f"in {result.render_time:.1f}s")
        return result
