"""POST /api/generate — roast / compliment text from a description or selfie."""

from __future__ import annotations

from fastapi import APIRouter

from roastbot.errors import ValidationError
from roastbot.models.requests import GenerateRequest
from roastbot.models.responses import GenerateResponse

router = APIRouter()


@router.post("/generate", response_model=GenerateResponse)
async def generate(req: GenerateRequest) -> GenerateResponse:
    from roastbot.llm.client import generate_roast_or_compliment

    if req.input_type == "text" and not req.text:
        raise ValidationError(error="Text input required for text mode")
    if req.input_type == "image" and not req.image_data:
        raise ValidationError(error="Image data required for image mode")

    generated = await generate_roast_or_compliment(
        content_type=req.type,
        input_type=req.input_type,
        text=req.text,
        image_data=req.image_data,
        severity=req.severity,
        style=req.style,
    )
    return GenerateResponse(generated_text=generated)
