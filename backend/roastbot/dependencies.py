"""FastAPI dependency injection.

Process-wide collaborators are built lazily once; tests swap them out through
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache

from roastbot.analytics.repository import AnalyticsRepository, create_repository
from roastbot.config import settings
from roastbot.meme.service import MemeService, create_meme_service
from roastbot.meme.templates import TemplateCatalog


def get_settings():
    return settings


@lru_cache(maxsize=1)
def get_template_catalog() -> TemplateCatalog:
    return TemplateCatalog(settings.templates_dir, settings.custom_templates_dir)


@lru_cache(maxsize=1)
def get_meme_service() -> MemeService:
    return create_meme_service(settings, catalog=get_template_catalog())


@lru_cache(maxsize=1)
def get_analytics_repository() -> AnalyticsRepository:
    return create_repository(settings.analytics_backend, settings.analytics_data_dir)
