"""Policy engine client exceptions."""


class PolicyEngineError(Exception):
    """Base policy engine exception."""


class PolicyConfigurationError(PolicyEngineError):
    """Client cannot be constructed (bad URL or credential format)."""


class PolicyTransportError(PolicyEngineError):
    """Network failure or unexpected HTTP status from the policy engine."""


class PolicyAuthenticationError(PolicyTransportError):
    """Policy engine rejected the credentials (401/403)."""


class PolicyResponseError(PolicyEngineError):
    """Policy engine returned a body that is not a valid remediation response."""


class ApplicationNotFoundError(PolicyEngineError):
    """No application with the given public id exists on the policy engine."""
