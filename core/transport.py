"""
Artifact Transport Encoder

Base64 encoding of rendered videos for JSON request bodies, and the
matching size-checked decode used by the upload endpoint.
"""

import asyncio
import base64
import binascii
from pathlib import Path
from typing import Union

from core.defaults import MAX_UPLOAD_SIZE_MB
from core.errors import EncodingFailed
from core.models.render import RenderResult

Artifact = Union[bytes, bytearray, str, Path, RenderResult]


def _read_artifact(artifact: Artifact) -> bytes:
    if isinstance(artifact, RenderResult):
        if artifact.superseded:
            raise EncodingFailed("The rendered video was replaced by a newer render.")
        return artifact.artifact
    if isinstance(artifact, (bytes, bytearray)):
        return bytes(artifact)
    if isinstance(artifact, (str, Path)):
        try:
            return Path(artifact).read_bytes()
        except OSError as e:
            raise EncodingFailed(f"Could not read video file: {e}") from e
    raise EncodingFailed(f"Unsupported artifact type: {type(artifact).__name__}")


def _encode(artifact: Artifact) -> str:
    data = _read_artifact(artifact)
    payload = base64.b64encode(data).decode("ascii")
    if not payload:
        raise EncodingFailed()
    return payload


async def encode_artifact(artifact: Artifact) -> str:
    """
    Encode a render artifact as base64 text, off the event loop.

    Args:
        artifact: Video bytes, a path to a video file, or a RenderResult

    Returns:
        Base64 string (standard alphabet, no data-URL prefix)

    Raises:
        EncodingFailed: If the artifact cannot be read or is empty
    """
    return await asyncio.to_thread(_encode, artifact)


def decode_artifact(payload: str, max_size_mb: int = MAX_UPLOAD_SIZE_MB) -> bytes:
    """
    Decode a base64 video payload and enforce the upload size limit.

    Raises:
        ValueError: If the payload is not base64 or exceeds the limit
    """
    # Cheap bound before decoding: 4 base64 chars carry 3 bytes
    limit = max_size_mb * 1024 * 1024
    if len(payload) * 3 // 4 > limit + 3:
        raise ValueError(f"Video too large. Limit is {max_size_mb}MB.")

    try:
        video = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("Invalid video payload.")

    if len(video) > limit:
        raise ValueError(f"Video too large. Limit is {max_size_mb}MB.")
    return video
