"""GitHub webhook router."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Header, Request

from remediator.api.deps import get_pull_request_service, get_settings
from remediator.api.schemas.webhook import RemediationResponse, StatusResponse
from remediator.core.config import MissingParameterError, Settings, WebhookParams
from remediator.engines.github.events import WebhookPayloadError, parse_webhook_payload
from remediator.services import BadRequestError
from remediator.services.pull_request_service import PullRequestService

log = structlog.get_logger("remediator.api")

router = APIRouter()

_HANDLED_ACTIONS = frozenset({"opened", "synchronize", "reopened"})


@router.post("/webhook", response_model=None)
@router.post("/", response_model=None, include_in_schema=False)
async def receive_webhook(
    request: Request,
    x_github_event: str | None = Header(None),
    settings: Settings = Depends(get_settings),
    svc: PullRequestService = Depends(get_pull_request_service),
) -> StatusResponse | RemediationResponse:
    event_type = (x_github_event or "").strip()
    if not event_type:
        raise BadRequestError("could not parse request headers: missing X-GitHub-Event")
    if event_type == "ping":
        return StatusResponse(status="pong")
    if event_type != "pull_request":
        log.warning("webhook.unsupported_event", github_event=event_type)
        raise BadRequestError("did not receive a supported github event")

    try:
        event = parse_webhook_payload(await request.body())
    except WebhookPayloadError as exc:
        raise BadRequestError(str(exc)) from exc

    if event.action is not None and event.action not in _HANDLED_ACTIONS:
        log.info("webhook.action_ignored", action=event.action)
        return StatusResponse(status="ignored")

    try:
        params = WebhookParams.resolve(request.query_params, settings)
    except MissingParameterError as exc:
        raise BadRequestError(str(exc)) from exc

    log.info(
        "webhook.pull_request",
        repository=event.repository.full_name,
        pull_request=event.pr_number,
        html_url=event.repository.html_url,
    )
    report = await svc.process(event, params)
    return RemediationResponse.from_report(report)
