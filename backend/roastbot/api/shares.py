"""Share tracking: POST records a share, GET returns the running totals."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from roastbot.analytics.repository import AnalyticsRepository
from roastbot.config import Settings
from roastbot.dependencies import get_analytics_repository, get_settings
from roastbot.models.requests import ShareRequest
from roastbot.models.responses import (
    ShareAnalytics,
    ShareResponse,
    ShareTotals,
    ShareTotalsResponse,
)

router = APIRouter()


@router.post("/track-share", response_model=ShareResponse)
async def track_share(
    req: ShareRequest,
    repo: AnalyticsRepository = Depends(get_analytics_repository),
    settings: Settings = Depends(get_settings),
) -> ShareResponse:
    stats = repo.record_share(req.type, req.platform, meme_id=req.meme_id)
    return ShareResponse(
        success=True,
        analytics=ShareAnalytics(
            platform=stats.platforms[req.platform],
            total=stats.total,
            is_viral=stats.total >= settings.viral_threshold,
        ),
    )


@router.get("/track-share", response_model=ShareTotalsResponse)
async def share_totals(
    repo: AnalyticsRepository = Depends(get_analytics_repository),
    settings: Settings = Depends(get_settings),
) -> ShareTotalsResponse:
    stats = repo.share_stats()
    return ShareTotalsResponse(
        analytics=ShareTotals(
            twitter=stats.platforms["twitter"],
            facebook=stats.platforms["facebook"],
            copy_=stats.platforms["copy"],
            total=stats.total,
            viral_threshold=settings.viral_threshold,
        )
    )
