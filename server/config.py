"""Server configuration using pydantic-settings"""

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from core.defaults import MAX_UPLOAD_SIZE_MB


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SLIDE_STUDIO_",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    env: Literal["development", "production"] = "development"
    debug: bool = True

    # Provider mode: mock uploads never reach YouTube
    provider_mode: Literal["mock", "live"] = "live"

    # Storage
    artifact_dir: str = "artifacts"

    # Upload limits
    max_upload_size_mb: int = MAX_UPLOAD_SIZE_MB

    # CORS
    cors_origins: List[str] = ["*"]


# Global settings instance
settings = Settings()
