"""pr-remediator HTTP API — FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from remediator.api.deps import get_settings
from remediator.api.errors import register_error_handlers
from remediator.api.middleware.request_id import RequestIDMiddleware
from remediator.api.routers import webhook
from remediator.core.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging(get_settings())

    app = FastAPI(
        title="pr-remediator",
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    register_error_handlers(app)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(webhook.router, tags=["webhook"])

    return app
