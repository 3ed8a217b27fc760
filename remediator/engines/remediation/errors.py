"""Remediation extraction exceptions."""

from remediator.models.component import MissingIdentityError


class RemediationError(Exception):
    """Base remediation extraction exception."""


class RemediationNotFoundError(RemediationError):
    """Decision carries no variant of the requested remediation type."""


__all__ = ["MissingIdentityError", "RemediationError", "RemediationNotFoundError"]
