"""GitHub engine — pull-request files and comments."""

from remediator.engines.github.client import GitHubClient, RateLimitError
from remediator.engines.github.events import PullRequestEvent, parse_webhook_payload

__all__ = ["GitHubClient", "PullRequestEvent", "RateLimitError", "parse_webhook_payload"]
