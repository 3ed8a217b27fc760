"""RemediationPipeline — evaluate declared components, collect safe replacements."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol, runtime_checkable

import structlog

from remediator.engines.policy.models import RemediationDecision, Stage
from remediator.engines.remediation.errors import (
    MissingIdentityError,
    RemediationError,
    RemediationNotFoundError,
)
from remediator.engines.remediation.extractor import select_no_violation_remediation
from remediator.engines.remediation.models import ComponentOutcome, RemediationReport, SkipReason
from remediator.models.component import Component
from remediator.models.manifest import (
    ManifestComponents,
    ManifestReference,
    Position,
    RemediationResult,
)

log = structlog.get_logger("remediator.engine")

OutcomeCallback = Callable[[ComponentOutcome], None]

# (remediation, skip reason, detail)
_Resolution = tuple[Component | None, SkipReason | None, str | None]


@runtime_checkable
class Evaluator(Protocol):
    """Anything that can ask a policy engine about one component."""

    async def evaluate(
        self, component: Component, stage: Stage, application: str
    ) -> RemediationDecision: ...


class RemediationPipeline:
    """Evaluate every ``(manifest, position, component)`` and keep the remediations.

    A failure for one component is logged, reported as a skipped outcome and
    never aborts the manifest or the batch.
    """

    def __init__(
        self,
        client: Evaluator,
        application: str,
        *,
        stage: Stage = Stage.BUILD,
        memoize: bool = False,
        concurrency: int = 1,
    ) -> None:
        self._client = client
        self._application = application
        self._stage = stage
        self._memoize = memoize
        self._concurrency = max(concurrency, 1)

    async def run(
        self,
        manifests: ManifestComponents,
        on_outcome: OutcomeCallback | None = None,
    ) -> RemediationReport:
        """Process *manifests* and return the accumulated :class:`RemediationReport`.

        Outcomes are reported (and *on_outcome* invoked) in input order
        regardless of ``concurrency``.
        """
        jobs = [
            (manifest, position, component)
            for manifest, components in manifests.items()
            for position, component in components.items()
        ]
        cache: dict[Component, asyncio.Task[_Resolution]] = {}

        report = RemediationReport()
        if self._concurrency == 1:
            for manifest, position, component in jobs:
                resolution = await self._resolve(component, cache)
                self._record(report, manifest, position, component, resolution, on_outcome)
        else:
            sem = asyncio.Semaphore(self._concurrency)

            async def _bounded(component: Component) -> _Resolution:
                async with sem:
                    return await self._resolve(component, cache)

            resolutions = await asyncio.gather(*(_bounded(c) for _, _, c in jobs))
            for (manifest, position, component), resolution in zip(jobs, resolutions):
                self._record(report, manifest, position, component, resolution, on_outcome)

        log.info(
            "pipeline.completed",
            application=self._application,
            components=len(jobs),
            remediated=len(report.remediated),
            skipped=len(report.skipped),
            manifests=len(report.result),
        )
        return report

    # ── internal ───────────────────────────────────────────────────────────

    async def _resolve(
        self,
        component: Component,
        cache: dict[Component, asyncio.Task[_Resolution]],
    ) -> _Resolution:
        if not self._memoize:
            return await self._evaluate_one(component)
        task = cache.get(component)
        if task is None:
            task = asyncio.ensure_future(self._evaluate_one(component))
            cache[component] = task
        else:
            log.debug("pipeline.memoized", component=str(component))
        return await task

    async def _evaluate_one(self, component: Component) -> _Resolution:
        purl = component.to_package_url()
        log.debug("pipeline.evaluating", package_url=purl, application=self._application)

        try:
            decision = await self._client.evaluate(component, self._stage, self._application)
        except Exception as exc:
            log.warning(
                "pipeline.evaluation_failed",
                package_url=purl,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return None, "evaluation_failed", str(exc)

        try:
            remediation = select_no_violation_remediation(decision)
        except RemediationNotFoundError as exc:
            log.info("pipeline.no_remediation", package_url=purl)
            return None, "no_remediation", str(exc)
        except MissingIdentityError as exc:
            log.warning("pipeline.missing_identity", package_url=purl, error=str(exc))
            return None, "missing_identity", str(exc)
        except RemediationError as exc:
            log.warning("pipeline.extraction_failed", package_url=purl, error=str(exc))
            return None, "extraction_failed", str(exc)

        log.info(
            "pipeline.remediated",
            package_url=purl,
            remediation=remediation.to_package_url(),
        )
        return remediation, None, None

    @staticmethod
    def _record(
        report: RemediationReport,
        manifest: ManifestReference,
        position: Position,
        component: Component,
        resolution: _Resolution,
        on_outcome: OutcomeCallback | None,
    ) -> None:
        remediation, reason, detail = resolution
        if remediation is not None:
            report.result.setdefault(manifest, {})[position] = remediation
            outcome = ComponentOutcome(
                manifest=manifest,
                position=position,
                component=component,
                status="remediated",
                remediation=remediation,
            )
        else:
            outcome = ComponentOutcome(
                manifest=manifest,
                position=position,
                component=component,
                status="skipped",
                reason=reason,
                detail=detail,
            )
        report.outcomes.append(outcome)
        if on_outcome is not None:
            on_outcome(outcome)


async def evaluate_components(
    client: Evaluator,
    application: str,
    manifests: ManifestComponents,
    *,
    stage: Stage = Stage.BUILD,
    memoize: bool = False,
    concurrency: int = 1,
) -> RemediationResult:
    """Return ``manifest → position → remediated component`` for *manifests*.

    Manifests without a single successful remediation are omitted.
    """
    pipeline = RemediationPipeline(
        client, application, stage=stage, memoize=memoize, concurrency=concurrency
    )
    report = await pipeline.run(manifests)
    return report.result
