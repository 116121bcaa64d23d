"""Publish form state and publish result models"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from core.defaults import DEFAULT_TAGS, default_description


class PrivacyStatus(Enum):
    """YouTube privacy status"""
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"


def _mask_secret(value: str) -> str:
    """Mask a credential for safe display in logs/repr."""
    if not value:
        return "''"
    if len(value) <= 8:
        return "'***'"
    return f"'{value[:4]}...{value[-4:]}'"


def parse_tags(raw: str) -> List[str]:
    """Split comma-delimited tag input, trimming and dropping empty entries.

    Duplicates are kept.
    """
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


# Form field name -> wire (JSON body) key
WIRE_KEYS = {
    "title": "title",
    "description": "description",
    "tags": "tags",
    "privacy_status": "privacyStatus",
    "client_id": "clientId",
    "client_secret": "clientSecret",
    "refresh_token": "refreshToken",
}


@dataclass
class PublishForm:
    """
    User-entered upload metadata and remote-service credentials.

    Credentials live only in memory for the active session.
    """
    title: str = ""
    description: str = ""
    tags: List[str] = field(default_factory=list)
    privacy_status: PrivacyStatus = PrivacyStatus.PRIVATE
    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""

    @classmethod
    def for_topic(cls, topic: str) -> "PublishForm":
        """Initial form for a freshly composed topic"""
        return cls(
            title=topic,
            description=default_description(topic),
            tags=list(DEFAULT_TAGS),
        )

    def update_field(self, key: str, value: str) -> bool:
        """
        Apply one field edit from raw user input.

        Tags are re-parsed on every edit. An invalid privacy status is
        rejected and leaves the form unchanged.

        Returns:
            True if the form changed
        """
        if key not in WIRE_KEYS:
            raise ValueError(f"Unknown publish form field: {key}")

        if key == "tags":
            self.tags = parse_tags(value)
            return True

        if key == "privacy_status":
            try:
                self.privacy_status = PrivacyStatus(value)
            except ValueError:
                return False
            return True

        setattr(self, key, value)
        return True

    @property
    def tags_text(self) -> str:
        return ", ".join(self.tags)

    def missing_fields(self) -> List[str]:
        """Names of required fields that are still empty"""
        required = ["title", "description", "client_id", "client_secret", "refresh_token"]
        return [name for name in required if not getattr(self, name)]

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation (camelCase keys) without the video payload"""
        return {
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "privacyStatus": self.privacy_status.value,
            "clientId": self.client_id,
            "clientSecret": self.client_secret,
            "refreshToken": self.refresh_token,
        }

    def __repr__(self) -> str:
        return (
            f"PublishForm(title={self.title!r}, description={self.description[:40]!r}, "
            f"tags={self.tags!r}, privacy_status={self.privacy_status.value!r}, "
            f"client_id={_mask_secret(self.client_id)}, "
            f"client_secret={_mask_secret(self.client_secret)}, "
            f"refresh_token={_mask_secret(self.refresh_token)})"
        )


@dataclass
class PublishResult:
    """Terminal outcome of one publish attempt"""
    success: bool
    message: str
    url: Optional[str] = None
