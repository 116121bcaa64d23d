"""
Publish Workflow

Validates publish readiness, transport-encodes the rendered video, dispatches
the request to an UploadService and maps the outcome into a PublishResult.
Failures never escape submit(); they become PublishResult(success=False).
"""

import logging
from typing import Optional

from core.defaults import watch_url
from core.errors import NotReady, StudioError, UploadRejected
from core.models.publish import PublishForm, PublishResult, parse_tags
from core.models.render import RenderResult
from core.providers.base import UploadService
from core.transport import encode_artifact

logger = logging.getLogger(__name__)

__all__ = ["PublishWorkflow", "can_publish", "parse_tags"]

SUCCESS_MESSAGE = "Video uploaded successfully."
GENERIC_FAILURE = "Unable to upload video."
NO_ARTIFACT_MESSAGE = "Generate a video first."
IN_FLIGHT_MESSAGE = "An upload is already in progress."


def can_publish(form: PublishForm, has_artifact: bool) -> bool:
    """True iff an artifact exists and every required form field is non-empty."""
    return bool(
        has_artifact
        and form.client_id
        and form.client_secret
        and form.refresh_token
        and form.title
        and form.description
    )


def _has_artifact(render_result: Optional[RenderResult]) -> bool:
    return render_result is not None and render_result.has_artifact


class PublishWorkflow:
    """
    Multi-stage publish of one rendered video.

    A stale result is cleared the moment a new attempt starts, so a finished
    result is never visible next to an in-flight upload.
    """

    def __init__(self, upload_service: UploadService, form: Optional[PublishForm] = None):
        self.upload_service = upload_service
        self.form = form or PublishForm()
        self.in_flight = False
        self.result: Optional[PublishResult] = None

    def update_field(self, key: str, value: str) -> bool:
        """Edit one publish form field from raw input (see PublishForm.update_field)."""
        return self.form.update_field(key, value)

    def reset_form(self, form: PublishForm) -> None:
        self.form = form

    def can_submit(self, render_result: Optional[RenderResult]) -> bool:
        """Gate for the submit control: ready and no attempt in flight."""
        return not self.in_flight and can_publish(self.form, _has_artifact(render_result))

    def _check_ready(self, render_result: Optional[RenderResult]) -> None:
        if not _has_artifact(render_result):
            raise NotReady(NO_ARTIFACT_MESSAGE)
        if not can_publish(self.form, True):
            missing = ", ".join(self.form.missing_fields())
            raise NotReady(f"Missing required fields: {missing}.")

    async def _dispatch(self, render_result: RenderResult) -> PublishResult:
        video_base64 = await encode_artifact(render_result)
        body = {**self.form.to_payload(), "videoBase64": video_base64}

        try:
            response = await self.upload_service.upload(body)
        except Exception as e:
            raise UploadRejected(str(e) or "YouTube upload failed.") from e

        if not response.ok:
            raise UploadRejected(response.body.get("error") or GENERIC_FAILURE)

        video_id = response.body.get("videoId")
        url = response.body.get("videoUrl") or (watch_url(video_id) if video_id else None)
        return PublishResult(success=True, message=SUCCESS_MESSAGE, url=url)

    async def submit(self, render_result: Optional[RenderResult]) -> PublishResult:
        """
        Publish the rendered video with the current form state.

        Steps:
        1. Refuse a second submit while one is in flight
        2. Re-validate readiness (NotReady)
        3. Mark in flight, clear the previous result
        4. Encode the artifact (EncodingFailed)
        5. Dispatch the request body (UploadRejected on rejection)
        6. Build the success result from videoUrl / videoId
        7. Clear the in-flight flag on every path

        Returns:
            The PublishResult, also kept in ``self.result``
        """
        if self.in_flight:
            return PublishResult(success=False, message=IN_FLIGHT_MESSAGE)

        try:
            self._check_ready(render_result)
        except NotReady as e:
            self.result = PublishResult(success=False, message=str(e))
            return self.result

        self.in_flight = True
        self.result = None
        try:
            result = await self._dispatch(render_result)
            logger.info(f"Publish succeeded: {result.url}")
        except StudioError as e:
            logger.warning(f"Publish failed: {e}")
            result = PublishResult(success=False, message=str(e) or GENERIC_FAILURE)
        finally:
            self.in_flight = False

        self.result = result
        return result
