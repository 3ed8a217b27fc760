"""Data models for the remediation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from remediator.models.component import Component
from remediator.models.manifest import ManifestReference, Position, RemediationResult

OutcomeStatus = Literal["remediated", "skipped"]
SkipReason = Literal["evaluation_failed", "no_remediation", "missing_identity", "extraction_failed"]


@dataclass(frozen=True)
class ComponentOutcome:
    """What happened to one declared component during a pipeline run.

    Pure data, no I/O.
    """

    manifest: ManifestReference
    position: Position
    component: Component
    status: OutcomeStatus
    remediation: Component | None = None
    reason: SkipReason | None = None
    detail: str | None = None

    @property
    def remediated(self) -> bool:
        return self.status == "remediated"


@dataclass
class RemediationReport:
    """Result of a single pipeline run."""

    result: RemediationResult = field(default_factory=dict)
    outcomes: list[ComponentOutcome] = field(default_factory=list)

    @property
    def remediated(self) -> list[ComponentOutcome]:
        return [o for o in self.outcomes if o.remediated]

    @property
    def skipped(self) -> list[ComponentOutcome]:
        return [o for o in self.outcomes if not o.remediated]
