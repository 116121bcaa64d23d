"""End-to-end tests for StudioSession over the mock providers"""

import base64
import random
from pathlib import Path

import pytest

from core.defaults import DEFAULT_TAGS, DEFAULT_TOPIC
from core.providers.base import RenderService
from core.studio import StudioSession, format_progress


class BrokenRenderService(RenderService):

    async def load(self):
        raise RuntimeError("ffmpeg: command not found")

    async def render(self, request, output_path, on_progress=None):
        raise RuntimeError("unreachable")


@pytest.fixture
def session(mock_render_service, mock_upload_service, tmp_path):
    studio = StudioSession(
        mock_render_service,
        mock_upload_service,
        topic="Test Topic",
        output_dir=str(tmp_path / "renders"),
        rng=random.Random(1),
    )
    yield studio
    studio.close()


def fill_credentials(studio):
    studio.publisher.update_field("client_id", "cid")
    studio.publisher.update_field("client_secret", "secret")
    studio.publisher.update_field("refresh_token", "1//token")


@pytest.mark.parametrize("ratio,expected", [(0, "0%"), (0.424, "42%"), (1, "100%"), (1.5, "100%"), (-1, "0%")])
def test_format_progress(ratio, expected):
    assert format_progress(ratio) == expected


class TestSessionSetup:

    def test_seeded_for_topic(self, session):
        assert len(session.store) == 6
        assert session.total_runtime == 36
        assert session.publisher.form.title == "Test Topic"
        assert session.publisher.form.tags == DEFAULT_TAGS

    def test_blank_topic_uses_default(self, mock_render_service, mock_upload_service, tmp_path):
        studio = StudioSession(mock_render_service, mock_upload_service, topic="  ",
                               output_dir=str(tmp_path))
        assert studio.topic == DEFAULT_TOPIC

    def test_regenerate_resets_form(self, session):
        session.publisher.update_field("title", "Custom")
        session.regenerate("Other Topic")
        assert session.topic == "Other Topic"
        assert session.publisher.form.title == "Other Topic"
        assert "Other Topic" in session.store.scenes[0].narration


class TestSessionRender:

    @pytest.mark.asyncio
    async def test_render_after_load(self, session, mock_render_service):
        assert await session.load()
        seen = []
        result = await session.render(on_progress=seen.append)
        assert result is not None
        assert result.has_artifact
        assert session.render_result is result
        assert seen[-1] == 1.0
        assert mock_render_service.requests[0].total_duration == 36

    @pytest.mark.asyncio
    async def test_render_uses_background_audio(self, session, mock_render_service):
        await session.load()
        session.set_background_audio("/music/bed.mp3")
        await session.render()
        assert mock_render_service.requests[0].background_audio == "/music/bed.mp3"

    @pytest.mark.asyncio
    async def test_render_before_load_becomes_notice(self, session):
        assert await session.render() is None
        assert session.notices[-1].level == "error"

    @pytest.mark.asyncio
    async def test_empty_storyboard_becomes_notice(self, session):
        await session.load()
        session.store.clear()
        assert await session.render() is None
        assert "at least one scene" in session.notices[-1].message

    @pytest.mark.asyncio
    async def test_load_failure_becomes_notice(self, mock_upload_service, tmp_path):
        notices = []
        studio = StudioSession(BrokenRenderService(), mock_upload_service,
                               output_dir=str(tmp_path), on_notice=notices.append)
        assert await studio.load() is False
        assert "command not found" in notices[0].message

    @pytest.mark.asyncio
    async def test_rerender_replaces_preview(self, session):
        await session.load()
        first = await session.render()
        second = await session.render()
        assert first.superseded
        assert not Path(first.playable_reference).exists()
        assert Path(second.playable_reference).exists()


class TestSessionPublish:

    @pytest.mark.asyncio
    async def test_cannot_publish_before_render(self, session):
        fill_credentials(session)
        assert session.can_publish is False
        result = await session.publish()
        assert not result.success
        assert result.message == "Generate a video first."

    @pytest.mark.asyncio
    async def test_cannot_publish_without_credentials(self, session):
        await session.load()
        await session.render()
        assert session.can_publish is False

    @pytest.mark.asyncio
    async def test_end_to_end(self, session, mock_upload_service):
        await session.load()
        session.store.update(session.store.scenes[0].id, duration=12)
        await session.render()

        fill_credentials(session)
        session.publisher.update_field("tags", "x,y")
        assert session.can_publish

        result = await session.publish()
        assert result.success
        assert result.url.startswith("https://www.youtube.com/watch?v=")
        assert session.notices[-1].level == "info"

        body = mock_upload_service.bodies[0]
        assert body["tags"] == ["x", "y"]
        assert body["videoBase64"]
        assert body["title"] == "Test Topic"

    @pytest.mark.asyncio
    async def test_publish_after_rerender_uses_new_artifact(self, session, mock_upload_service):
        await session.load()
        await session.render()
        session.store.update(session.store.scenes[0].id, title="Changed")
        second = await session.render()

        fill_credentials(session)
        await session.publish()

        sent = base64.b64decode(mock_upload_service.bodies[0]["videoBase64"])
        assert sent == second.artifact
