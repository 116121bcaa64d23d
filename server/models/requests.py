"""Pydantic models for the upload API"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadRequest(BaseModel):
    """Publish request body (POST /api/youtube/upload)"""
    model_config = ConfigDict(extra="ignore")

    videoBase64: Optional[str] = Field("", description="Base64-encoded MP4")
    title: Optional[str] = Field("", description="Video title")
    description: Optional[str] = Field("", description="Video description")
    tags: List[str] = Field(default_factory=list, description="Video tags")
    privacyStatus: Literal["public", "unlisted", "private"] = Field(
        "private", description="YouTube privacy status"
    )
    clientId: Optional[str] = Field("", description="OAuth2 client id")
    clientSecret: Optional[str] = Field("", description="OAuth2 client secret")
    refreshToken: Optional[str] = Field("", description="OAuth2 refresh token with youtube.upload scope")

    def require_fields(self) -> None:
        """Raise ValueError naming the first missing required field"""
        if not self.videoBase64:
            raise ValueError("Missing video payload.")
        if not self.title:
            raise ValueError("Missing title.")
        if not self.description:
            raise ValueError("Missing description.")
        if not self.clientId or not self.clientSecret or not self.refreshToken:
            raise ValueError("OAuth credentials are required.")

    def __repr__(self) -> str:
        return (
            f"UploadRequest(title={self.title!r}, tags={self.tags!r}, "
            f"privacyStatus={self.privacyStatus!r}, videoBase64=<{len(self.videoBase64 or '')} chars>)"
        )


class UploadResponse(BaseModel):
    """Successful upload"""
    videoId: Optional[str] = Field(None, description="YouTube video id")
    videoUrl: Optional[str] = Field(None, description="Watch URL (omitted without an id)")


class ErrorResponse(BaseModel):
    """Every failure is reported as HTTP 400 with this body"""
    error: str
