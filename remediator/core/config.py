"""Runtime configuration — environment variables and webhook query parameters."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_TRUTHY = frozenset({"1", "true", "yes", "on"})


class MissingParameterError(ValueError):
    """A required webhook parameter is absent from both the query and the environment."""

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"missing required parameter(s): {', '.join(names)}")


def _env_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None


def _env_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once from ``REMEDIATOR_*`` environment variables."""

    log_level: str = "INFO"
    log_format: str = "console"
    iq_timeout: float = 30.0
    github_api_url: str = "https://api.github.com"
    concurrency: int = 1
    memoize: bool = False
    # fallbacks for the webhook query parameters
    iq_server: str | None = None
    iq_auth: str | None = None
    iq_app: str | None = None
    github_token: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return cls(
            log_level=env.get("REMEDIATOR_LOG_LEVEL", "INFO").upper(),
            log_format=env.get("REMEDIATOR_LOG_FORMAT", "console").lower(),
            iq_timeout=_env_float(env, "REMEDIATOR_IQ_TIMEOUT", 30.0),
            github_api_url=env.get("REMEDIATOR_GITHUB_API_URL", "https://api.github.com"),
            concurrency=max(_env_int(env, "REMEDIATOR_CONCURRENCY", 1), 1),
            memoize=env.get("REMEDIATOR_MEMOIZE", "false").strip().lower() in _TRUTHY,
            iq_server=env.get("REMEDIATOR_IQ_SERVER") or None,
            iq_auth=env.get("REMEDIATOR_IQ_AUTH") or None,
            iq_app=env.get("REMEDIATOR_IQ_APP") or None,
            github_token=env.get("GITHUB_TOKEN") or None,
        )


@dataclass(frozen=True)
class WebhookParams:
    """Per-request parameters: source-control token and policy engine target."""

    iq_server: str
    iq_auth: str
    iq_app: str
    token: str | None = None

    @classmethod
    def resolve(cls, query: Mapping[str, str], settings: Settings) -> WebhookParams:
        """Merge query parameters over the settings fallbacks.

        Raises :class:`MissingParameterError` naming every absent parameter.
        """
        iq_server = query.get("iq_server") or settings.iq_server
        iq_auth = query.get("iq_auth") or settings.iq_auth
        iq_app = query.get("iq_app") or settings.iq_app

        missing = [
            name
            for name, value in (("iq_server", iq_server), ("iq_auth", iq_auth), ("iq_app", iq_app))
            if not value
        ]
        if missing:
            raise MissingParameterError(missing)

        return cls(
            iq_server=iq_server,  # type: ignore[arg-type]
            iq_auth=iq_auth,  # type: ignore[arg-type]
            iq_app=iq_app,  # type: ignore[arg-type]
            token=query.get("token") or settings.github_token,
        )
