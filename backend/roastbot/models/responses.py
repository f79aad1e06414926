"""API response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(_CamelModel):
    status: str = "ok"
    version: str = "0.1.0"
    cache_entries: int = Field(0, alias="cacheEntries")
    templates: int = 0


class MemeResponse(_CamelModel):
    image_url: str = Field(..., alias="imageUrl")
    from_cache: bool = Field(False, alias="fromCache")


class GenerateResponse(_CamelModel):
    generated_text: str = Field(..., alias="generatedText")


class ReactionAnalytics(_CamelModel):
    reactions: dict[str, int] = Field(default_factory=dict)
    total: int = 0


class FeedbackResponse(_CamelModel):
    success: bool = True
    analytics: ReactionAnalytics


class PromptUsageOut(_CamelModel):
    uses: int = 0
    reactions: dict[str, int] = Field(default_factory=dict)


class FeedbackAnalytics(ReactionAnalytics):
    prompts: dict[str, PromptUsageOut] = Field(default_factory=dict)


class FeedbackAnalyticsResponse(_CamelModel):
    analytics: FeedbackAnalytics


class ShareAnalytics(_CamelModel):
    platform: dict[str, int] = Field(default_factory=dict)
    total: int = 0
    is_viral: bool = Field(False, alias="isViral")


class ShareResponse(_CamelModel):
    success: bool = True
    analytics: ShareAnalytics


class ShareTotals(_CamelModel):
    twitter: dict[str, int] = Field(default_factory=dict)
    facebook: dict[str, int] = Field(default_factory=dict)
    copy_: dict[str, int] = Field(default_factory=dict, alias="copy")
    total: int = 0
    viral_threshold: int = Field(100, alias="viralThreshold")


class ShareTotalsResponse(_CamelModel):
    analytics: ShareTotals


class RoastFeedbackOut(_CamelModel):
    roast_id: str = Field(..., alias="roastId")
    reaction: str | None = None
    suggestion: str | None = None
    updated_at: float = Field(0.0, alias="updatedAt")


class RoastFeedbackResponse(_CamelModel):
    success: bool = True
    feedback: RoastFeedbackOut | None = None


class RoastFeedbackListResponse(_CamelModel):
    success: bool = True
    data: list[RoastFeedbackOut] = Field(default_factory=list)


class RoastFeedbackStats(_CamelModel):
    likes: int = 0
    dislikes: int = 0


class RoastFeedbackStatsResponse(_CamelModel):
    success: bool = True
    data: RoastFeedbackStats


class TemplateOut(_CamelModel):
    id: str
    name: str
    filename: str
    type: str
    style: str
    theme: str
    tags: list[str] = Field(default_factory=list)
    description: str = ""
    custom: bool = False
    available: bool = False
    width: int = 0
    height: int = 0
    box_count: int = Field(1, alias="boxCount")
    captions: list[str] = Field(default_factory=list)


class TemplateListResponse(_CamelModel):
    templates: list[TemplateOut] = Field(default_factory=list)
    count: int = 0


class TemplateUploadResponse(_CamelModel):
    success: bool = True
    template: TemplateOut


class TemplateDeleteResponse(_CamelModel):
    success: bool = True
    id: str
