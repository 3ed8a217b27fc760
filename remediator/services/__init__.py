"""Service layer — request-level orchestration."""


class ServiceError(Exception):
    """Base service exception."""


class BadRequestError(ServiceError):
    """Malformed or unsupported webhook request (-> HTTP 400)."""


class UpstreamError(ServiceError):
    """A downstream system failed: GitHub or the policy engine (-> HTTP 500)."""
