"""FastAPI application factory."""
from __future__ import annotations

from typing import List

from fastapi import FastAPI, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from lwl.api.v1 import api_router
from lwl.config import settings
from lwl.core.sitemap import build_sitemap
from lwl.utils.cache import build_cache_key, cache_backend

SITEMAP_CACHE_TTL_SECONDS = 60 * 60

tags_metadata: List[dict[str, str]] = [
    {"name": "auth", "description": "Register users and issue authentication tokens."},
    {"name": "users", "description": "Manage learner profiles."},
    {"name": "exercises", "description": "Dictation exercises built from learner-selected text."},
    {"name": "vocabulary", "description": "Saved words with definitions and exports."},
    {"name": "mastery", "description": "Spaced repetition, mastery statistics and vocabulary levels."},
    {"name": "sentence-mining", "description": "Cloze practice sessions."},
    {"name": "bidirectional", "description": "Forward and backward translation recall."},
    {"name": "progress", "description": "Daily streaks and shadowing progress."},
    {"name": "billing", "description": "Stripe subscriptions, promo codes and banners."},
    {"name": "messaging", "description": "Feedback, mailing list, transcription and visitor tracking."},
    {"name": "utilities", "description": "Input validation, text analysis and pricing."},
    {"name": "admin", "description": "Administrative reports and maintenance."},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Backend for the lwlnow language learning platform.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.debug("Request validation failed", path=request.url.path)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors()), "message": "Validation failed"},
        )

    @app.get("/sitemap.xml", include_in_schema=False)
    def sitemap() -> Response:
        cache_key = build_cache_key(site=settings.SITE_URL)
        body = cache_backend.get("sitemap", cache_key)
        if body is None:
            body = build_sitemap(settings.SITE_URL)
            cache_backend.set("sitemap", cache_key, body, ttl_seconds=SITEMAP_CACHE_TTL_SECONDS)
        return Response(content=body, media_type="application/xml")

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
