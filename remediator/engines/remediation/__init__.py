"""Remediation engine — turn policy decisions into safe replacement components."""

from remediator.engines.remediation.errors import (
    MissingIdentityError,
    RemediationError,
    RemediationNotFoundError,
)
from remediator.engines.remediation.extractor import (
    select_no_violation_remediation,
    select_remediation,
)
from remediator.engines.remediation.models import ComponentOutcome, RemediationReport
from remediator.engines.remediation.pipeline import RemediationPipeline, evaluate_components

__all__ = [
    "ComponentOutcome",
    "MissingIdentityError",
    "RemediationError",
    "RemediationNotFoundError",
    "RemediationPipeline",
    "RemediationReport",
    "evaluate_components",
    "select_no_violation_remediation",
    "select_remediation",
]
