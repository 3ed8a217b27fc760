"""Async client for the policy engine's remediation API."""

from __future__ import annotations

from typing import Any

import httpx
import pydantic
import structlog

from remediator.engines.policy.errors import (
    ApplicationNotFoundError,
    PolicyAuthenticationError,
    PolicyConfigurationError,
    PolicyResponseError,
    PolicyTransportError,
)
from remediator.engines.policy.models import (
    RemediationDecision,
    RemediationResponse,
    Stage,
    remediation_request_body,
)
from remediator.models.component import Component

log = structlog.get_logger("remediator.policy")

_DEFAULT_TIMEOUT = 30.0


def parse_credentials(auth: str) -> tuple[str, str]:
    """Split a ``user:password`` pair. The password may itself contain colons."""
    user, sep, password = auth.partition(":")
    if not sep or not user:
        raise PolicyConfigurationError("policy engine credentials must be 'user:password'")
    return user, password


class PolicyClient:
    """Thin async wrapper around the policy engine's REST API.

    Each :meth:`evaluate` call is an independent round-trip; the client never
    retries and never caches evaluations. Only the application id lookup is
    memoized for the lifetime of the instance.
    """

    def __init__(
        self,
        base_url: str,
        user: str,
        password: str,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not base_url or not base_url.startswith(("http://", "https://")):
            raise PolicyConfigurationError(f"invalid policy engine url: {base_url!r}")
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=(user, password),
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        self._app_ids: dict[str, str] = {}

    @classmethod
    def from_credentials(
        cls,
        base_url: str,
        auth: str,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PolicyClient:
        user, password = parse_credentials(auth)
        return cls(base_url, user, password, timeout=timeout, transport=transport)

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> PolicyClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def evaluate(
        self,
        component: Component,
        stage: Stage,
        application: str,
    ) -> RemediationDecision:
        """Ask the policy engine for remediation options for *component*.

        Raises a :class:`PolicyEngineError` subclass on transport, auth or
        response-shape failures.
        """
        app_id = await self.application_internal_id(application)
        purl = component.to_package_url()
        stage_id = stage.value if isinstance(stage, Stage) else str(stage)

        data = await self._request(
            "POST",
            f"/api/v2/components/remediation/application/{app_id}",
            params={"stageId": stage_id},
            json=remediation_request_body(purl),
        )
        try:
            response = RemediationResponse.model_validate(data)
        except pydantic.ValidationError as exc:
            raise PolicyResponseError(f"malformed remediation response for {purl}: {exc}") from exc

        log.debug(
            "policy.evaluated",
            package_url=purl,
            application=application,
            stage=stage_id,
            version_changes=len(response.remediation.version_changes),
        )
        return response.remediation

    async def application_internal_id(self, public_id: str) -> str:
        """Resolve an application's public id to the engine's internal id."""
        cached = self._app_ids.get(public_id)
        if cached is not None:
            return cached

        data = await self._request("GET", "/api/v2/applications", params={"publicId": public_id})
        applications = data.get("applications") if isinstance(data, dict) else None
        if not isinstance(applications, list):
            raise PolicyResponseError("malformed applications response")
        if not applications:
            raise ApplicationNotFoundError(f"policy application not found: {public_id!r}")

        internal_id = applications[0].get("id") if isinstance(applications[0], dict) else None
        if not internal_id:
            raise PolicyResponseError(f"application {public_id!r} has no internal id")

        self._app_ids[public_id] = internal_id
        return internal_id

    # ── internal ───────────────────────────────────────────────────────────

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise PolicyTransportError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code in (401, 403):
            raise PolicyAuthenticationError(
                f"policy engine rejected credentials ({resp.status_code})"
            )
        if resp.status_code >= 400:
            raise PolicyTransportError(
                f"{method} {path} returned {resp.status_code}: {resp.text[:200]}"
            )

        try:
            return resp.json()
        except ValueError as exc:
            raise PolicyResponseError(f"{method} {path} returned non-JSON body") from exc
