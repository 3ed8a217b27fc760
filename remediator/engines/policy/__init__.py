"""Policy engine adapter — evaluate components, get remediation decisions."""

from remediator.engines.policy.client import PolicyClient, parse_credentials
from remediator.engines.policy.errors import (
    ApplicationNotFoundError,
    PolicyAuthenticationError,
    PolicyConfigurationError,
    PolicyEngineError,
    PolicyResponseError,
    PolicyTransportError,
)
from remediator.engines.policy.models import (
    ComponentIdentifier,
    PolicyComponent,
    RemediationDecision,
    RemediationType,
    Stage,
    VersionChange,
)

__all__ = [
    "ApplicationNotFoundError",
    "ComponentIdentifier",
    "PolicyAuthenticationError",
    "PolicyClient",
    "PolicyComponent",
    "PolicyConfigurationError",
    "PolicyEngineError",
    "PolicyResponseError",
    "PolicyTransportError",
    "RemediationDecision",
    "RemediationType",
    "Stage",
    "VersionChange",
    "parse_credentials",
]
