"""GitHub webhook payload models and decoding."""

from __future__ import annotations

from urllib.parse import unquote_plus

import pydantic
from pydantic import BaseModel, ConfigDict

_FORM_PREFIX = "payload="


class WebhookPayloadError(ValueError):
    """Webhook body cannot be decoded into a pull-request event."""


class _GitHubModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Account(_GitHubModel):
    login: str


class Repository(_GitHubModel):
    name: str
    full_name: str
    html_url: str | None = None
    owner: Account


class PullRequestHead(_GitHubModel):
    ref: str | None = None
    sha: str | None = None


class PullRequest(_GitHubModel):
    number: int
    title: str | None = None
    html_url: str | None = None
    head: PullRequestHead | None = None


class PullRequestEvent(_GitHubModel):
    """The parts of a ``pull_request`` webhook payload this service uses."""

    action: str | None = None
    number: int | None = None
    pull_request: PullRequest
    repository: Repository

    @property
    def owner(self) -> str:
        return self.repository.owner.login

    @property
    def repo(self) -> str:
        return self.repository.name

    @property
    def pr_number(self) -> int:
        return self.number if self.number is not None else self.pull_request.number


def parse_webhook_payload(body: bytes | str) -> PullRequestEvent:
    """Decode a webhook body into a :class:`PullRequestEvent`.

    Accepts both delivery content types GitHub offers: raw JSON, and
    ``application/x-www-form-urlencoded`` with the JSON in ``payload=``.
    """
    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else body
    except UnicodeDecodeError as exc:
        raise WebhookPayloadError(f"payload is not valid utf-8: {exc}") from exc

    payload = text.strip()
    if not payload.startswith("{"):
        payload = unquote_plus(payload)
        if payload.startswith(_FORM_PREFIX):
            payload = payload[len(_FORM_PREFIX) :]

    if not payload:
        raise WebhookPayloadError("empty payload")

    try:
        return PullRequestEvent.model_validate_json(payload)
    except pydantic.ValidationError as exc:
        raise WebhookPayloadError(f"could not unmarshal payload as json: {exc}") from exc
