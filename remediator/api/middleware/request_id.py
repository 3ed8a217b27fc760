"""Request ID middleware — bind a request id and the GitHub delivery to every log line."""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger("remediator.api")


def _is_valid_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
        return True
    except (ValueError, AttributeError):
        return False


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach ``request_id`` (and ``delivery`` / ``github_event`` when present) via contextvars.

    GitHub sends a UUID in ``X-GitHub-Delivery``; it is reused as the
    request id so log lines can be matched against the webhook's delivery log.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        delivery = request.headers.get("x-github-delivery", "")
        raw_id = request.headers.get("x-request-id", "") or delivery
        request_id = raw_id if _is_valid_uuid(raw_id) else str(uuid.uuid4())

        context = {"request_id": request_id, "method": request.method, "path": request.url.path}
        github_event = request.headers.get("x-github-event")
        if github_event:
            context["github_event"] = github_event
        if delivery:
            context["delivery"] = delivery
        tokens = structlog.contextvars.bind_contextvars(**context)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("request.failed", duration_ms=_elapsed_ms(start))
            raise
        else:
            log.info(
                "request.completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start),
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            structlog.contextvars.reset_contextvars(**tokens)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 1)
