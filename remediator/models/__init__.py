"""Value types shared across engines — components and manifest references."""

from remediator.models.component import (
    Component,
    MissingIdentityError,
    from_policy_identity,
    normalize_pypi_name,
    parse_package_url,
    to_package_url,
)
from remediator.models.manifest import (
    ManifestComponents,
    ManifestReference,
    Position,
    RemediationResult,
)

__all__ = [
    "Component",
    "ManifestComponents",
    "ManifestReference",
    "MissingIdentityError",
    "Position",
    "RemediationResult",
    "from_policy_identity",
    "normalize_pypi_name",
    "parse_package_url",
    "to_package_url",
]
