"""
FFmpeg-based slide renderer.

Turns a CompositionRequest into an MP4 in a single FFmpeg pass: one gradient
source per scene, drawtext headline and narration, concat, and an optional
background audio bed padded to the full runtime.
"""

import asyncio
import glob
import logging
import os
import shutil
import tempfile
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.models.render import CompositionRequest, RenderConfig
from core.models.scene import Scene
from core.providers.base import ProgressCallback, RenderService

logger = logging.getLogger(__name__)


class FFmpegNotFoundError(Exception):
    """Raised when FFmpeg is not installed or not in PATH."""
    pass


class RenderError(Exception):
    """Raised when rendering fails."""
    pass


def ffmpeg_color(color: str) -> str:
    """Convert #rgb / #rrggbb to FFmpeg's 0xRRGGBB form."""
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return f"0x{value.upper()}"


def escape_filter_path(path: str) -> str:
    """Escape a file path for use inside a filtergraph option."""
    return path.replace("\\", "/").replace(":", "\\:").replace("'", "'\\''")


def parse_progress_line(line: str, total_duration: float) -> Optional[float]:
    """
    Parse one line of ``-progress`` output into a ratio.

    Returns:
        Ratio in [0, 1] for out_time lines, 1.0 for ``progress=end``,
        otherwise None
    """
    key, _, value = line.strip().partition("=")
    if key == "progress" and value == "end":
        return 1.0
    # out_time_ms is reported in microseconds as well
    if key not in ("out_time_us", "out_time_ms") or total_duration <= 0:
        return None
    try:
        seconds = int(value) / 1_000_000
    except ValueError:
        return None
    return min(max(seconds / total_duration, 0.0), 1.0)


class FFmpegRenderer(RenderService):
    """
    FFmpeg-based renderer for slide-narration videos.

    Handles:
    - Gradient backgrounds per scene
    - Headline and narration text
    - Concatenation in playback order
    - Background audio mixed under the full runtime
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        """
        Initialize the renderer.

        Args:
            config: Encoder configuration (uses defaults if not provided)
        """
        self.config = config or RenderConfig()
        self._ffmpeg_path = self._find_ffmpeg()

    def _find_ffmpeg(self) -> str:
        """Find FFmpeg executable."""
        ffmpeg = shutil.which("ffmpeg")
        if ffmpeg:
            return ffmpeg

        # Check common locations on Windows
        common_paths = [
            r"C:\ffmpeg\bin\ffmpeg.exe",
            r"C:\Program Files\ffmpeg\bin\ffmpeg.exe",
            r"C:\Program Files (x86)\ffmpeg\bin\ffmpeg.exe",
        ]
        for path in common_paths:
            if os.path.exists(path):
                return path

        # Check WinGet installation location
        winget_base = os.path.expandvars(r"%LOCALAPPDATA%\Microsoft\WinGet\Packages")
        if os.path.exists(winget_base):
            patterns = [
                os.path.join(winget_base, "Gyan.FFmpeg*", "ffmpeg-*", "bin", "ffmpeg.exe"),
                os.path.join(winget_base, "*FFmpeg*", "*", "bin", "ffmpeg.exe"),
            ]
            for pattern in patterns:
                matches = glob.glob(pattern)
                if matches:
                    return matches[0]

        # FFmpeg not found - load() reports it
        return "ffmpeg"

    def _find_font(self) -> Optional[str]:
        """Find a suitable font file for slide text."""
        font_paths = [
            # Windows
            r"C:\Windows\Fonts\arial.ttf",
            r"C:\Windows\Fonts\segoeui.ttf",
            # Linux
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/TTF/DejaVuSans-Bold.ttf",
            # macOS
            "/System/Library/Fonts/Helvetica.ttc",
            "/Library/Fonts/Arial.ttf",
        ]

        for path in font_paths:
            if os.path.exists(path):
                return path

        return None

    async def check_ffmpeg_installed(self) -> Dict[str, Any]:
        """
        Check if FFmpeg is properly installed.

        Returns:
            Dict with installation status and version info
        """
        try:
            process = await asyncio.create_subprocess_exec(
                self._ffmpeg_path, "-version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
            stdout, stderr = await process.communicate()

            if process.returncode == 0:
                version_line = stdout.decode().split('\n')[0]
                return {
                    "installed": True,
                    "path": self._ffmpeg_path,
                    "version": version_line
                }
        except FileNotFoundError:
            pass

        return {
            "installed": False,
            "path": None,
            "version": None,
            "error": "FFmpeg not found. Please install FFmpeg and add it to your PATH."
        }

    async def load(self) -> None:
        info = await self.check_ffmpeg_installed()
        if not info["installed"]:
            raise FFmpegNotFoundError(info["error"])
        logger.info(f"FFmpeg ready: {info['version']}")

    # ------------------------------------------------------------------
    # Command construction
    # ------------------------------------------------------------------

    def _write_text_files(self, scene: Scene, index: int, work_dir: str) -> Dict[str, str]:
        """Write headline and wrapped narration to files for drawtext's textfile option."""
        title_path = os.path.join(work_dir, f"scene_{index:02d}_title.txt")
        narration_path = os.path.join(work_dir, f"scene_{index:02d}_narration.txt")

        Path(title_path).write_text(scene.title, encoding="utf-8")
        Path(narration_path).write_text(
            textwrap.fill(scene.narration, width=self.config.wrap_width),
            encoding="utf-8",
        )
        return {"title": title_path, "narration": narration_path}

    def _scene_source(self, scene: Scene, request: CompositionRequest) -> str:
        """lavfi gradients source for one scene (diagonal, first colour top-left)"""
        start, end = scene.gradient
        return (
            f"gradients=s={request.width}x{request.height}"
            f":c0={ffmpeg_color(start)}:c1={ffmpeg_color(end)}"
            f":x0=0:y0=0:x1={request.width}:y1={request.height}"
            f":d={scene.duration}:r={request.fps}"
        )

    def _drawtext(self, text_path: str, fontsize: int, y: str, font_path: Optional[str]) -> str:
        parts = [
            f"textfile='{escape_filter_path(text_path)}'",
            f"fontsize={fontsize}",
            "fontcolor=white",
            "x=(w-text_w)/2",
            f"y={y}",
            "borderw=2",
            "bordercolor=black@0.4",
            "line_spacing=10",
        ]
        if font_path:
            parts.append(f"fontfile='{escape_filter_path(font_path)}'")
        return f"drawtext={':'.join(parts)}"

    def _generate_filter_complex(
        self,
        request: CompositionRequest,
        text_files: List[Dict[str, str]],
    ) -> str:
        """
        Generate FFmpeg filter_complex for slide text, concat and audio padding.

        Args:
            request: Composition being rendered
            text_files: Per-scene title/narration text file paths

        Returns:
            Filter complex string for FFmpeg
        """
        font_path = self._find_font()
        scale = request.height / 720
        title_size = max(1, round(self.config.title_fontsize * scale))
        narration_size = max(1, round(self.config.narration_fontsize * scale))

        filters = []
        labels = []
        for i, files in enumerate(text_files):
            title = self._drawtext(files["title"], title_size, "h/5", font_path)
            narration = self._drawtext(files["narration"], narration_size, "h*2/5", font_path)
            filters.append(f"[{i}:v]{title},{narration}[v{i}]")
            labels.append(f"[v{i}]")

        filters.append(
            f"{''.join(labels)}concat=n={len(labels)}:v=1:a=0,"
            f"format={self.config.pixel_format}[vout]"
        )

        if request.background_audio:
            audio_index = len(request.scenes)
            filters.append(f"[{audio_index}:a]apad[aout]")

        return ";".join(filters)

    def build_command(
        self,
        request: CompositionRequest,
        output_path: str,
        text_files: List[Dict[str, str]],
    ) -> List[str]:
        """Full FFmpeg argument list for a composition."""
        cmd = [
            self._ffmpeg_path,
            "-y",
            "-hide_banner",
            "-loglevel", "error",
            "-nostats",
            "-progress", "pipe:1",
        ]

        for scene in request.scenes:
            cmd.extend(["-f", "lavfi", "-i", self._scene_source(scene, request)])

        if request.background_audio:
            cmd.extend(["-i", request.background_audio])

        cmd.extend([
            "-filter_complex", self._generate_filter_complex(request, text_files),
            "-map", "[vout]",
        ])

        if request.background_audio:
            cmd.extend([
                "-map", "[aout]",
                "-c:a", self.config.audio_codec,
                "-b:a", self.config.audio_bitrate,
            ])

        cmd.extend([
            "-c:v", self.config.video_codec,
            "-preset", self.config.preset,
            "-crf", str(self.config.crf),
            "-r", str(request.fps),
            "-t", str(request.total_duration),
            "-movflags", "+faststart",
            output_path,
        ])
        return cmd

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def render(
        self,
        request: CompositionRequest,
        output_path: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        """
        Render a composition to an MP4 file.

        Args:
            request: Composition snapshot
            output_path: Path for the rendered video
            on_progress: Called with progress ratios parsed from FFmpeg

        Returns:
            Path to the rendered video

        Raises:
            RenderError: If FFmpeg fails or produces no output
        """
        if request.background_audio and not os.path.exists(request.background_audio):
            raise RenderError(f"Background audio not found: {request.background_audio}")

        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
        work_dir = tempfile.mkdtemp(prefix="slide_render_")
        log_path = os.path.join(work_dir, "ffmpeg.log")
        total = request.total_duration

        try:
            text_files = [
                self._write_text_files(scene, i, work_dir)
                for i, scene in enumerate(request.scenes)
            ]
            cmd = self.build_command(request, output_path, text_files)
            logger.debug(f"Running FFmpeg with {len(request.scenes)} scenes, {total:.1f}s")

            with open(log_path, "wb") as log_file:
                process = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=log_file
                )
                try:
                    async for raw in process.stdout:
                        ratio = parse_progress_line(raw.decode(errors="replace"), total)
                        if ratio is not None and on_progress:
                            on_progress(ratio)
                    await process.wait()
                except BaseException:
                    if process.returncode is None:
                        logger.warning("Stopping FFmpeg after interrupted render")
                        process.kill()
                        await process.wait()
                    raise

            if process.returncode != 0:
                stderr = Path(log_path).read_text(errors="replace")
                raise RenderError(f"FFmpeg render failed: {stderr[-2000:].strip()}")

            if not os.path.exists(output_path) or os.path.getsize(output_path) == 0:
                raise RenderError("FFmpeg produced no output")

            return output_path

        finally:
            shutil.rmtree(work_dir, ignore_errors=True)
