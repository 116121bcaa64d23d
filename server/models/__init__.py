"""Pydantic models for API requests and responses"""

from .requests import (
    UploadRequest,
    UploadResponse,
    ErrorResponse,
)

__all__ = [
    "UploadRequest",
    "UploadResponse",
    "ErrorResponse",
]
