"""Shared pytest fixtures"""

import random

import pytest

from core.providers.mock import MockRenderService, MockUploadService
from core.render_engine import RenderEngineAdapter
from core.scene_store import SceneStore
from tests.mocks.fixtures import (
    make_scene,
    make_scene_list,
    make_publish_form,
    make_render_result,
)


# ============================================================
# Mock Providers
# ============================================================

@pytest.fixture
def mock_render_service():
    """Fresh mock render service for each test"""
    service = MockRenderService()
    yield service
    service.reset()


@pytest.fixture
def mock_upload_service():
    """Mock upload service that always succeeds"""
    return MockUploadService()


@pytest.fixture
def engine(mock_render_service, tmp_path):
    """Render engine adapter over the mock service, not yet loaded"""
    adapter = RenderEngineAdapter(mock_render_service, output_dir=str(tmp_path / "renders"))
    yield adapter
    adapter.close()


# ============================================================
# Test Data Fixtures
# ============================================================

@pytest.fixture
def sample_scene():
    """Single sample scene"""
    return make_scene()


@pytest.fixture
def sample_scenes():
    """List of 3 sample scenes"""
    return make_scene_list(3)


@pytest.fixture
def seeded_store():
    """Store seeded with the six-scene outline for a test topic"""
    store = SceneStore(rng=random.Random(7))
    store.seed("Test Topic")
    return store


@pytest.fixture
def sample_form():
    """Publish form with every required field filled"""
    return make_publish_form()


@pytest.fixture
def sample_result():
    """Render result holding a small artifact"""
    return make_render_result()


# ============================================================
# Markers Configuration
# ============================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks integration tests"
    )
    config.addinivalue_line(
        "markers", "live_api: marks tests that hit real APIs (requires keys)"
    )
