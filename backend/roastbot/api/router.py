"""Master API router. Mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from roastbot.api import feedback, generate, health, meme, shares, templates

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(generate.router)
api_router.include_router(meme.router)
api_router.include_router(feedback.router)
api_router.include_router(shares.router)
api_router.include_router(templates.router)
