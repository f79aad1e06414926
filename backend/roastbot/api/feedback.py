"""Reaction feedback on generated content, plus per-roast like/dislike records."""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends

from roastbot.analytics.repository import AnalyticsRepository, RoastFeedback
from roastbot.dependencies import get_analytics_repository
from roastbot.models.requests import FeedbackRequest, RoastFeedbackRequest
from roastbot.models.responses import (
    FeedbackAnalytics,
    FeedbackAnalyticsResponse,
    FeedbackResponse,
    PromptUsageOut,
    ReactionAnalytics,
    RoastFeedbackListResponse,
    RoastFeedbackOut,
    RoastFeedbackResponse,
    RoastFeedbackStats,
    RoastFeedbackStatsResponse,
)

router = APIRouter()


def _feedback_out(record: RoastFeedback) -> RoastFeedbackOut:
    return RoastFeedbackOut(**asdict(record))


@router.post("/feedback", response_model=FeedbackResponse)
async def submit_feedback(
    req: FeedbackRequest,
    repo: AnalyticsRepository = Depends(get_analytics_repository),
) -> FeedbackResponse:
    stats = repo.record_reaction(
        content_id=req.content_id,
        content_type=req.type,
        reaction=req.reaction,
        prompt_used=req.prompt_used,
    )
    return FeedbackResponse(
        success=True,
        analytics=ReactionAnalytics(reactions=stats.reactions, total=stats.total),
    )


@router.get("/feedback", response_model=FeedbackAnalyticsResponse)
async def feedback_analytics(
    repo: AnalyticsRepository = Depends(get_analytics_repository),
) -> FeedbackAnalyticsResponse:
    stats = repo.reaction_stats()
    return FeedbackAnalyticsResponse(
        analytics=FeedbackAnalytics(
            reactions=stats.reactions,
            total=stats.total,
            prompts={
                prompt: PromptUsageOut(uses=usage.uses, reactions=usage.reactions)
                for prompt, usage in stats.prompts.items()
            },
        )
    )


@router.put("/roasts/{roast_id}/feedback", response_model=RoastFeedbackResponse)
async def submit_roast_feedback(
    roast_id: str,
    req: RoastFeedbackRequest,
    repo: AnalyticsRepository = Depends(get_analytics_repository),
) -> RoastFeedbackResponse:
    """Upsert like/dislike + suggestion; clearing both removes the record."""
    record = repo.submit_roast_feedback(roast_id, reaction=req.reaction, suggestion=req.suggestion)
    return RoastFeedbackResponse(success=True, feedback=_feedback_out(record) if record else None)


@router.get("/roasts/{roast_id}/feedback", response_model=RoastFeedbackListResponse)
async def get_roast_feedback(
    roast_id: str,
    repo: AnalyticsRepository = Depends(get_analytics_repository),
) -> RoastFeedbackListResponse:
    return RoastFeedbackListResponse(
        data=[_feedback_out(r) for r in repo.get_roast_feedback(roast_id)],
    )


@router.get("/roasts/{roast_id}/feedback/stats", response_model=RoastFeedbackStatsResponse)
async def get_roast_feedback_stats(
    roast_id: str,
    repo: AnalyticsRepository = Depends(get_analytics_repository),
) -> RoastFeedbackStatsResponse:
    return RoastFeedbackStatsResponse(data=RoastFeedbackStats(**repo.roast_feedback_stats(roast_id)))
