"""Dependency injection — settings and service singletons."""

from __future__ import annotations

from functools import lru_cache

from remediator.core.config import Settings
from remediator.services.pull_request_service import PullRequestService


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def get_pull_request_service() -> PullRequestService:
    return PullRequestService(get_settings())
