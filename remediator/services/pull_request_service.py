"""Pull-request service — files → manifests → policy evaluation → comment."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import structlog

from remediator.core.config import Settings, WebhookParams
from remediator.engines.comment import render_remediation_comment
from remediator.engines.github.client import GitHubClient
from remediator.engines.github.events import PullRequestEvent
from remediator.engines.manifest import find_manifest_components
from remediator.engines.policy.client import PolicyClient
from remediator.engines.policy.errors import PolicyEngineError
from remediator.engines.remediation.models import RemediationReport
from remediator.engines.remediation.pipeline import RemediationPipeline
from remediator.models.manifest import ManifestComponents
from remediator.services import UpstreamError

log = structlog.get_logger("remediator.service")

GitHubClientFactory = Callable[[WebhookParams], GitHubClient]
PolicyClientFactory = Callable[[WebhookParams], PolicyClient]


class PullRequestService:
    """Handle one validated pull-request event end to end.

    Clients are created per call and closed before returning; nothing is
    shared between invocations.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        github_factory: GitHubClientFactory | None = None,
        policy_factory: PolicyClientFactory | None = None,
    ) -> None:
        self._settings = settings
        self._github_factory = github_factory or self._default_github_client
        self._policy_factory = policy_factory or self._default_policy_client

    async def process(self, event: PullRequestEvent, params: WebhookParams) -> RemediationReport:
        """Evaluate the manifests changed by *event* and comment the remediations.

        Raises :class:`UpstreamError` when GitHub or the policy engine cannot
        be used at all. Per-component failures only show up as skipped
        outcomes in the returned report.
        """
        tokens = structlog.contextvars.bind_contextvars(
            repository=event.repository.full_name, pull_request=event.pr_number
        )
        github = self._github_factory(params)
        try:
            try:
                files = await github.list_pull_request_files(
                    event.owner, event.repo, event.pr_number
                )
            except httpx.HTTPError as exc:
                log.error("pull_request.files_failed", error=str(exc))
                raise UpstreamError(f"could not get files from pull request: {exc}") from exc

            manifests = find_manifest_components(files)
            if not manifests:
                log.info("pull_request.no_manifest_changes", files=len(files))
                return RemediationReport()

            report = await self._evaluate(manifests, params)

            if report.result:
                body = render_remediation_comment(report.result, manifests)
                try:
                    await github.create_issue_comment(
                        event.owner, event.repo, event.pr_number, body
                    )
                except httpx.HTTPError as exc:
                    log.error("pull_request.comment_failed", error=str(exc))
                    raise UpstreamError(f"could not comment on pull request: {exc}") from exc
            return report
        finally:
            await github.close()
            structlog.contextvars.reset_contextvars(**tokens)

    async def _evaluate(
        self, manifests: ManifestComponents, params: WebhookParams
    ) -> RemediationReport:
        try:
            policy = self._policy_factory(params)
        except PolicyEngineError as exc:
            log.error("pull_request.policy_client_failed", error=str(exc))
            raise UpstreamError(f"could not create policy engine client: {exc}") from exc

        try:
            # unknown application or rejected credentials fail the request, not each component
            try:
                await policy.application_internal_id(params.iq_app)
            except PolicyEngineError as exc:
                log.error("pull_request.policy_unavailable", error=str(exc))
                raise UpstreamError(f"could not evaluate components: {exc}") from exc

            pipeline = RemediationPipeline(
                policy,
                params.iq_app,
                memoize=self._settings.memoize,
                concurrency=self._settings.concurrency,
            )
            return await pipeline.run(manifests)
        finally:
            await policy.close()

    # ── default client construction ───────────────────────────────────────

    def _default_github_client(self, params: WebhookParams) -> GitHubClient:
        return GitHubClient(params.token, base_url=self._settings.github_api_url)

    def _default_policy_client(self, params: WebhookParams) -> PolicyClient:
        return PolicyClient.from_credentials(
            params.iq_server, params.iq_auth, timeout=self._settings.iq_timeout
        )
