"""Policy engine request/response models (Nexus IQ remediation API)."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Stage(str, Enum):
    """Lifecycle stage at which a policy evaluation is requested."""

    DEVELOP = "develop"
    SOURCE = "source"
    BUILD = "build"
    STAGE_RELEASE = "stage-release"
    RELEASE = "release"
    OPERATE = "operate"


class RemediationType(str, Enum):
    NO_VIOLATIONS = "next-no-violations"
    NON_FAILING = "next-non-failing"


class _PolicyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ComponentIdentifier(_PolicyModel):
    format: str | None = None
    coordinates: dict[str, str | None] = Field(default_factory=dict)


class PolicyComponent(_PolicyModel):
    package_url: str | None = Field(default=None, alias="packageUrl")
    hash: str | None = None
    component_identifier: ComponentIdentifier | None = Field(
        default=None, alias="componentIdentifier"
    )


class VersionChangeData(_PolicyModel):
    component: PolicyComponent | None = None


class VersionChange(_PolicyModel):
    type: str
    data: VersionChangeData = Field(default_factory=VersionChangeData)


class RemediationDecision(_PolicyModel):
    """The ``remediation`` object returned by the policy engine."""

    version_changes: list[VersionChange] = Field(default_factory=list, alias="versionChanges")


class RemediationResponse(_PolicyModel):
    remediation: RemediationDecision = Field(default_factory=RemediationDecision)


def remediation_request_body(package_url: str) -> dict[str, Any]:
    return {"packageUrl": package_url}
