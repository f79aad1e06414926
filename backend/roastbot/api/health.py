"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from roastbot.dependencies import get_meme_service, get_template_catalog
from roastbot.meme.service import MemeService
from roastbot.meme.templates import TemplateCatalog
from roastbot.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(
    service: MemeService = Depends(get_meme_service),
    catalog: TemplateCatalog = Depends(get_template_catalog),
) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        cache_entries=len(service.cache),
        templates=len(catalog.all()),
    )


@router.get("/prompts")
async def prompts() -> dict[str, str]:
    from roastbot.llm.prompts import get_all_prompts

    return get_all_prompts()
