"""Unit tests for the publish form and publish workflow"""

import asyncio
import base64

import pytest

from core.defaults import DEFAULT_TAGS
from core.models.publish import PrivacyStatus, PublishForm, parse_tags
from core.providers.base import UploadResponse, UploadService
from core.publish import (
    GENERIC_FAILURE,
    IN_FLIGHT_MESSAGE,
    NO_ARTIFACT_MESSAGE,
    SUCCESS_MESSAGE,
    PublishWorkflow,
    can_publish,
)
from tests.mocks.fixtures import make_publish_form, make_render_result


class StaticUploadService(UploadService):
    """Upload service returning a canned response"""

    def __init__(self, status_code=200, body=None, error=None):
        self.status_code = status_code
        self.body = body if body is not None else {}
        self.error = error
        self.bodies = []

    async def upload(self, body):
        self.bodies.append(body)
        if self.error:
            raise self.error
        return UploadResponse(status_code=self.status_code, body=self.body)


class GatedUploadService(UploadService):
    """Upload service that waits until released"""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def upload(self, body):
        self.started.set()
        await self.release.wait()
        return UploadResponse(status_code=200, body={"videoId": "abc123"})


class TestParseTags:

    def test_trim_and_drop_empty(self):
        assert parse_tags("a, ,b,b ") == ["a", "b", "b"]

    def test_empty_input(self):
        assert parse_tags("") == []
        assert parse_tags(" , ,") == []


class TestPublishForm:

    def test_for_topic(self):
        form = PublishForm.for_topic("Home automation")
        assert form.title == "Home automation"
        assert "Home automation" in form.description
        assert form.tags == DEFAULT_TAGS
        assert form.tags is not DEFAULT_TAGS
        assert form.privacy_status == PrivacyStatus.PRIVATE
        assert form.client_id == form.client_secret == form.refresh_token == ""

    def test_tags_reparsed_on_every_edit(self):
        form = PublishForm()
        form.update_field("tags", "x,")
        assert form.tags == ["x"]
        form.update_field("tags", "x, y ,")
        assert form.tags == ["x", "y"]
        assert form.tags_text == "x, y"

    def test_privacy_update(self):
        form = PublishForm()
        assert form.update_field("privacy_status", "unlisted")
        assert form.privacy_status == PrivacyStatus.UNLISTED

    def test_invalid_privacy_leaves_form_unchanged(self):
        form = PublishForm(privacy_status=PrivacyStatus.PUBLIC)
        assert form.update_field("privacy_status", "secret") is False
        assert form.privacy_status == PrivacyStatus.PUBLIC

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            PublishForm().update_field("category", "27")

    def test_missing_fields(self):
        form = make_publish_form(title="", refresh_token="")
        assert form.missing_fields() == ["title", "refresh_token"]

    def test_payload_uses_wire_keys(self, sample_form):
        payload = sample_form.to_payload()
        assert payload == {
            "title": "Test Video",
            "description": "A test description",
            "tags": ["ai", "automation"],
            "privacyStatus": "private",
            "clientId": "client-id",
            "clientSecret": "client-secret",
            "refreshToken": "refresh-token",
        }

    def test_repr_masks_credentials(self):
        form = make_publish_form(client_secret="super-secret-value-1234", refresh_token="1//refresh-token-abcdef")
        text = repr(form)
        assert "super-secret-value-1234" not in text
        assert "1//refresh-token-abcdef" not in text
        assert "'supe...1234'" in text


class TestCanPublish:

    @pytest.mark.parametrize("field", ["client_id", "client_secret", "refresh_token", "title", "description"])
    def test_false_when_required_field_empty(self, field):
        form = make_publish_form(**{field: ""})
        assert can_publish(form, True) is False
        assert can_publish(form, False) is False

    def test_false_without_artifact(self, sample_form):
        assert can_publish(sample_form, False) is False

    def test_true_when_complete(self, sample_form):
        assert can_publish(sample_form, True) is True

    def test_tags_optional(self):
        assert can_publish(make_publish_form(tags=[]), True) is True


class TestSubmit:

    @pytest.mark.asyncio
    async def test_success(self, sample_form, sample_result, mock_upload_service):
        workflow = PublishWorkflow(mock_upload_service, sample_form)
        result = await workflow.submit(sample_result)
        assert result.success
        assert result.message == SUCCESS_MESSAGE
        assert result.url == "https://www.youtube.com/watch?v=mock0000001"
        assert workflow.result is result
        assert workflow.in_flight is False

    @pytest.mark.asyncio
    async def test_request_body(self, sample_result, mock_upload_service):
        form = make_publish_form()
        form.update_field("tags", "x,y")
        workflow = PublishWorkflow(mock_upload_service, form)
        await workflow.submit(sample_result)

        body = mock_upload_service.bodies[0]
        assert body["tags"] == ["x", "y"]
        assert body["videoBase64"]
        assert base64.b64decode(body["videoBase64"]) == sample_result.artifact
        assert body["clientId"] == "client-id"
        assert body["privacyStatus"] == "private"

    @pytest.mark.asyncio
    async def test_url_built_from_video_id(self, sample_form, sample_result):
        service = StaticUploadService(body={"videoId": "abc123"})
        result = await PublishWorkflow(service, sample_form).submit(sample_result)
        assert result.url == "https://www.youtube.com/watch?v=abc123"

    @pytest.mark.asyncio
    async def test_success_without_identifier(self, sample_form, sample_result):
        service = StaticUploadService(body={})
        result = await PublishWorkflow(service, sample_form).submit(sample_result)
        assert result.success
        assert result.url is None

    @pytest.mark.asyncio
    async def test_no_artifact(self, sample_form):
        service = StaticUploadService()
        workflow = PublishWorkflow(service, sample_form)
        result = await workflow.submit(None)
        assert not result.success
        assert result.message == NO_ARTIFACT_MESSAGE
        assert service.bodies == []

    @pytest.mark.asyncio
    async def test_superseded_artifact_not_published(self, sample_form):
        service = StaticUploadService()
        result = await PublishWorkflow(service, sample_form).submit(make_render_result(superseded=True))
        assert not result.success
        assert service.bodies == []

    @pytest.mark.asyncio
    async def test_missing_fields_not_dispatched(self, sample_result):
        service = StaticUploadService()
        workflow = PublishWorkflow(service, make_publish_form(refresh_token=""))
        result = await workflow.submit(sample_result)
        assert not result.success
        assert "refresh_token" in result.message
        assert service.bodies == []

    @pytest.mark.asyncio
    async def test_server_error_message_used(self, sample_form, sample_result):
        service = StaticUploadService(status_code=400, body={"error": "Video too large. Limit is 256MB."})
        result = await PublishWorkflow(service, sample_form).submit(sample_result)
        assert not result.success
        assert result.message == "Video too large. Limit is 256MB."

    @pytest.mark.asyncio
    async def test_generic_message_without_server_error(self, sample_form, sample_result):
        service = StaticUploadService(status_code=502, body={})
        result = await PublishWorkflow(service, sample_form).submit(sample_result)
        assert not result.success
        assert result.message == GENERIC_FAILURE

    @pytest.mark.asyncio
    async def test_transport_error_captured(self, sample_form, sample_result):
        service = StaticUploadService(error=ConnectionError("connection refused"))
        workflow = PublishWorkflow(service, sample_form)
        result = await workflow.submit(sample_result)
        assert not result.success
        assert "connection refused" in result.message
        assert workflow.in_flight is False

    @pytest.mark.asyncio
    async def test_encoding_failure_captured(self, sample_form):
        service = StaticUploadService()
        result = await PublishWorkflow(service, sample_form).submit(make_render_result(artifact=b""))
        assert not result.success
        assert service.bodies == []

    @pytest.mark.asyncio
    async def test_result_cleared_while_in_flight(self, sample_form, sample_result):
        service = GatedUploadService()
        workflow = PublishWorkflow(service, sample_form)
        workflow.result = await PublishWorkflow(StaticUploadService(), sample_form).submit(sample_result)
        assert workflow.result.success

        pending = asyncio.ensure_future(workflow.submit(sample_result))
        await service.started.wait()
        assert workflow.in_flight
        assert workflow.result is None
        assert workflow.can_submit(sample_result) is False

        service.release.set()
        result = await pending
        assert result.success
        assert workflow.in_flight is False

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight(self, sample_form, sample_result):
        service = GatedUploadService()
        workflow = PublishWorkflow(service, sample_form)

        pending = asyncio.ensure_future(workflow.submit(sample_result))
        await service.started.wait()
        second = await workflow.submit(sample_result)
        assert not second.success
        assert second.message == IN_FLIGHT_MESSAGE

        service.release.set()
        await pending
        assert workflow.result.success

    def test_can_submit(self, sample_form, sample_result, mock_upload_service):
        workflow = PublishWorkflow(mock_upload_service, sample_form)
        assert workflow.can_submit(sample_result)
        assert not workflow.can_submit(None)
