"""Webhook response schemas."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from remediator.engines.remediation.models import RemediationReport


class StatusResponse(BaseModel):
    status: Literal["ok", "pong", "ignored"]


class SkippedComponent(BaseModel):
    filename: str
    position: int
    package_url: str
    reason: str
    detail: str | None = None


class RemediationResponse(BaseModel):
    status: Literal["processed"] = "processed"
    remediated: int
    skipped: int
    # filename → position (as string key) → remediation package-url
    manifests: dict[str, dict[str, str]]
    skipped_components: list[SkippedComponent]

    @classmethod
    def from_report(cls, report: RemediationReport) -> RemediationResponse:
        return cls(
            remediated=len(report.remediated),
            skipped=len(report.skipped),
            manifests={
                manifest.filename: {
                    str(position): component.to_package_url()
                    for position, component in sorted(positions.items())
                }
                for manifest, positions in report.result.items()
            },
            skipped_components=[
                SkippedComponent(
                    filename=o.manifest.filename,
                    position=o.position,
                    package_url=o.component.to_package_url(),
                    reason=o.reason or "unknown",
                    detail=o.detail,
                )
                for o in report.skipped
            ],
        )
