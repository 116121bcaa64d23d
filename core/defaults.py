"""
Studio defaults

Named constants shared by the scene store, the composition builder and the
publish workflow. Nothing here is mutated at runtime.
"""

from typing import Dict, List, Tuple


DEFAULT_TOPIC = "Automating YouTube Videos with AI Assistants"

# Scene duration bounds (seconds, inclusive)
MIN_DURATION = 4
MAX_DURATION = 20
DEFAULT_SCENE_DURATION = 6

# Canonical render parameters
DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 720
DEFAULT_FPS = 30

GRADIENT_PALETTE: Dict[str, Tuple[str, str]] = {
    "Sky Surge": ("#2563eb", "#9333ea"),
    "Sunset Glow": ("#f97316", "#f43f5e"),
    "Aurora Mist": ("#22d3ee", "#6366f1"),
    "Forest Haze": ("#0ea5e9", "#22c55e"),
    "Neon Bloom": ("#facc15", "#ec4899"),
    "Deep Space": ("#0f172a", "#312e81"),
}

# Publishing
DEFAULT_TAGS: List[str] = ["automation", "youtube", "ai workflow"]
MAX_UPLOAD_SIZE_MB = 256
MAX_TAGS = 500
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
UPLOAD_ROUTE = "/api/youtube/upload"


def default_description(topic: str) -> str:
    """Starter video description for a topic"""
    return (
        f'Explore how to build an automated pipeline for YouTube videos around "{topic}". '
        "This guide shows how to script, assemble, and ship production-ready content "
        "without manual editing."
    )


def watch_url(video_id: str) -> str:
    return YOUTUBE_WATCH_URL.format(video_id=video_id)
