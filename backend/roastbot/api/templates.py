"""Template catalog endpoints: listing with filters, custom uploads, removal."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from dataclasses import asdict
from functools import partial
from pathlib import Path

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from roastbot.config import Settings
from roastbot.dependencies import get_settings, get_template_catalog
from roastbot.errors import ImageProcessingError, TemplateNotFound
from roastbot.meme.processing import process_image, validate_image_size
from roastbot.meme.templates import MemeTemplate, TemplateCatalog, filter_templates
from roastbot.models.requests import TemplateUploadRequest
from roastbot.models.responses import (
    TemplateDeleteResponse,
    TemplateListResponse,
    TemplateOut,
    TemplateUploadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Custom templates are normalised to fit a 800x600 box.
_UPLOAD_MAX_WIDTH = 800
_UPLOAD_MAX_HEIGHT = 600
_UPLOAD_QUALITY = 80
_UPLOAD_MIN_DIMENSION = 200


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "-", name.lower())


def _write_upload(directory: Path, filename: str, data: bytes) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / filename).write_bytes(data)


def _template_out(catalog: TemplateCatalog, template: MemeTemplate) -> TemplateOut:
    return TemplateOut(**asdict(template), available=catalog.is_available(template))


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(
    type: str | None = Query(None, pattern="^(roast|compliment)$"),
    search: str = "",
    style: str = "",
    theme: str = "",
    catalog: TemplateCatalog = Depends(get_template_catalog),
) -> TemplateListResponse:
    templates = catalog.for_type(type) if type else catalog.all()
    templates = filter_templates(templates, search=search, style=style, theme=theme)
    return TemplateListResponse(
        templates=[_template_out(catalog, t) for t in templates],
        count=len(templates),
    )


@router.post("/templates", response_model=TemplateUploadResponse)
async def upload_template(
    req: TemplateUploadRequest,
    catalog: TemplateCatalog = Depends(get_template_catalog),
    settings: Settings = Depends(get_settings),
):
    loop = asyncio.get_running_loop()
    try:
        processed = await loop.run_in_executor(None, partial(
            process_image,
            req.image_data,
            max_width=_UPLOAD_MAX_WIDTH,
            max_height=_UPLOAD_MAX_HEIGHT,
            quality=_UPLOAD_QUALITY,
            min_dimension=_UPLOAD_MIN_DIMENSION,
        ))
        validate_image_size(processed.metadata.size, settings.max_upload_mb)
    except ImageProcessingError as e:
        return JSONResponse(status_code=400, content={"success": False, "error": e.details})

    timestamp = int(time.time() * 1000)
    slug = _slugify(req.name)
    filename = f"{timestamp}-{slug}.jpg"
    await loop.run_in_executor(None, _write_upload, catalog.custom_dir, filename, processed.buffer)

    template = catalog.add_custom(MemeTemplate(
        id=f"custom-{timestamp}-{slug}",
        name=req.name,
        filename=filename,
        type="both",
        tags=req.tags,
        description=f"Custom {req.type} template",
        width=processed.metadata.width,
        height=processed.metadata.height,
        box_count=req.box_count,
        captions=req.captions,
    ))
    return TemplateUploadResponse(success=True, template=_template_out(catalog, template))


@router.delete("/templates/{template_id}", response_model=TemplateDeleteResponse)
async def delete_template(
    template_id: str,
    catalog: TemplateCatalog = Depends(get_template_catalog),
) -> TemplateDeleteResponse:
    removed = catalog.remove_custom(template_id)
    if removed is None:
        raise TemplateNotFound(f"No custom template with id {template_id!r}")
    return TemplateDeleteResponse(success=True, id=template_id)
