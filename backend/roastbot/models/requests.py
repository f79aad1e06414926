"""API request models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["roast", "compliment"]

MAX_TEXT_LENGTH = 500
_DATA_URL_PREFIX = "data:image/"


def _check_data_url(value: str | None) -> str | None:
    if value is None:
        return None
    if not value.startswith(_DATA_URL_PREFIX) or ";base64," not in value:
        raise ValueError("imageData must be a base64 data URL (data:image/...;base64,...)")
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MemeRequest(_CamelModel):
    text: str = Field(..., max_length=MAX_TEXT_LENGTH, description="Caption to render")
    type: ContentType
    image_data: str | None = Field(None, alias="imageData", description="Inline image as a data URL")
    template: str | None = Field(None, description="Template id or filename")

    @field_validator("image_data")
    @classmethod
    def _image_data_is_data_url(cls, v: str | None) -> str | None:
        return _check_data_url(v)


class GenerateRequest(_CamelModel):
    type: ContentType
    input_type: Literal["text", "image"] = Field(..., alias="inputType")
    text: str | None = None
    image_data: str | None = Field(None, alias="imageData")
    severity: Literal["mild", "medium", "nuclear"] = "medium"
    style: Literal["formal", "sarcastic", "shakespearean", "rapBattle"] = "sarcastic"


class FeedbackRequest(_CamelModel):
    content_id: str = Field(..., alias="contentId")
    type: ContentType
    reaction: Literal["love", "funny", "meh", "bad"]
    prompt_used: str | None = Field(None, alias="promptUsed")


class ShareRequest(_CamelModel):
    type: ContentType
    platform: Literal["twitter", "facebook", "copy"]
    meme_id: str | None = Field(None, alias="memeId")


class RoastFeedbackRequest(_CamelModel):
    reaction: Literal["like", "dislike"] | None = None
    suggestion: str | None = Field(None, max_length=2000)


class TemplateUploadRequest(_CamelModel):
    name: str = Field(..., min_length=1)
    type: Literal["custom", "imgflip"]
    tags: list[str] = Field(default_factory=list)
    box_count: int = Field(..., alias="boxCount", ge=1)
    captions: list[str] = Field(default_factory=list)
    image_data: str = Field(..., alias="imageData")

    @field_validator("image_data")
    @classmethod
    def _image_data_is_data_url(cls, v: str) -> str:
        if not v.startswith(_DATA_URL_PREFIX):
            raise ValueError("imageData must start with data:image/")
        return v
