"""YouTube upload endpoint"""

import asyncio
import logging
from typing import Any, Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from core.providers.mock import MockYouTubeUploader
from core.providers.upload.youtube import YouTubeUploader
from core.transport import decode_artifact
from server.config import settings
from server.models.requests import ErrorResponse, UploadRequest, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def get_uploader_factory() -> Callable[..., Any]:
    """Uploader class for the configured provider mode (overridable in tests)"""
    if settings.provider_mode == "mock":
        return MockYouTubeUploader
    return YouTubeUploader


def parse_upload_request(data: Any) -> UploadRequest:
    """
    Validate a decoded JSON body.

    Raises:
        ValueError: With a user-facing message for the first problem found
    """
    if not data or not isinstance(data, dict):
        raise ValueError("Invalid payload.")

    try:
        payload = UploadRequest.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "payload"
        raise ValueError(f"Invalid {field}: {first.get('msg', 'invalid value')}.")

    payload.require_fields()
    return payload


def error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


@router.post(
    "/upload",
    response_model=UploadResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def upload_video(request: Request, uploader_factory=Depends(get_uploader_factory)):
    """Decode the posted video and upload it to YouTube with the caller's credentials"""
    try:
        try:
            data = await request.json()
        except ValueError:
            raise ValueError("Invalid payload.")

        payload = parse_upload_request(data)
        video = decode_artifact(payload.videoBase64, max_size_mb=settings.max_upload_size_mb)

        # Credentials live only for this request
        uploader = uploader_factory(payload.clientId, payload.clientSecret, payload.refreshToken)
        result = await asyncio.to_thread(
            uploader.upload_bytes,
            video,
            title=payload.title,
            description=payload.description,
            tags=payload.tags,
            privacy=payload.privacyStatus,
        )

        if not result.success:
            raise RuntimeError(result.error or "YouTube upload failed.")

        logger.info(f"Uploaded {len(video)} bytes as video {result.video_id}")
        return UploadResponse(videoId=result.video_id, videoUrl=result.video_url)

    except Exception as e:
        logger.error(f"YouTube upload failed: {e}")
        return error_response(str(e) or "Unknown error occurred.")
