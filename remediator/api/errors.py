"""Unified error handling — ServiceError → JSON ``{"detail": ...}``."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from remediator.services import BadRequestError, ServiceError, UpstreamError

log = structlog.get_logger("remediator.api")

_STATUS_MAP: dict[type[ServiceError], int] = {
    BadRequestError: 400,
    UpstreamError: 500,
}


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    status = 500
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            status = _STATUS_MAP[cls]
            break
    log.warning("request.rejected", status_code=status, detail=str(exc))
    return JSONResponse(status_code=status, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
