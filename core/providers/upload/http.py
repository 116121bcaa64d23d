"""HTTP upload service - posts publish requests to the studio server's upload endpoint."""

import logging
from typing import Any, Dict, Optional

import httpx

from core.defaults import UPLOAD_ROUTE
from core.providers.base import UploadResponse, UploadService

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://127.0.0.1:8000"


class HttpUploadService(UploadService):
    """
    Dispatch publish requests as JSON to ``POST /api/youtube/upload``.

    Non-2xx responses are returned, not raised, so the publish workflow can
    surface the server's ``error`` message. Connection problems raise
    ``httpx.HTTPError``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ENDPOINT,
        timeout: float = 300.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{UPLOAD_ROUTE}"

    async def upload(self, body: Dict[str, Any]) -> UploadResponse:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, json=body)

        try:
            payload = response.json()
        except ValueError:
            logger.warning(f"Upload endpoint returned non-JSON body (HTTP {response.status_code})")
            payload = {}

        if not isinstance(payload, dict):
            payload = {}

        return UploadResponse(status_code=response.status_code, body=payload)
