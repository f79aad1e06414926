"""POST /api/generate-meme — caption composited onto a template or selfie."""

from __future__ import annotations

import base64

from fastapi import APIRouter, Depends

from roastbot.dependencies import get_meme_service
from roastbot.meme.service import MemeService, RenderRequest
from roastbot.models.requests import MemeRequest
from roastbot.models.responses import MemeResponse

router = APIRouter()


def png_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")


@router.post("/generate-meme", response_model=MemeResponse)
async def generate_meme(
    req: MemeRequest,
    service: MemeService = Depends(get_meme_service),
) -> MemeResponse:
    result = await service.render(RenderRequest(
        text=req.text,
        content_type=req.type,
        image_data=req.image_data,
        template=req.template,
    ))
    return MemeResponse(image_url=png_data_url(result.png), from_cache=result.from_cache)
