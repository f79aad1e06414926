"""Fixtures for route tests: the app with every injected collaborator swapped
for a test-local instance.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from roastbot.config import Settings
from roastbot.dependencies import (
    get_analytics_repository,
    get_meme_service,
    get_settings,
    get_template_catalog,
)
from roastbot.main import app


@pytest.fixture
def test_settings(templates_dir) -> Settings:
    return Settings(
        templates_dir=templates_dir,
        custom_templates_dir=templates_dir / "custom",
        viral_threshold=2,
    )


@pytest.fixture
def client(meme_service, catalog, analytics_repo, test_settings):
    app.dependency_overrides[get_meme_service] = lambda: meme_service
    app.dependency_overrides[get_template_catalog] = lambda: catalog
    app.dependency_overrides[get_analytics_repository] = lambda: analytics_repo
    app.dependency_overrides[get_settings] = lambda: test_settings
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()
