"""Pick a remediation variant out of a policy decision."""

from __future__ import annotations

from remediator.engines.policy.models import (
    PolicyComponent,
    RemediationDecision,
    RemediationType,
)
from remediator.engines.remediation.errors import (
    MissingIdentityError,
    RemediationNotFoundError,
)
from remediator.models.component import Component, from_policy_identity, parse_package_url


def component_from_policy(policy_component: PolicyComponent | None) -> Component:
    """Convert a policy component to a local :class:`Component`.

    The structured identifier wins; ``packageUrl`` is the fallback.
    Raises :class:`MissingIdentityError` when neither yields a component.
    """
    if policy_component is None:
        raise MissingIdentityError("remediation variant carries no component")

    if policy_component.component_identifier is not None:
        return from_policy_identity(policy_component.component_identifier)

    if policy_component.package_url:
        try:
            comp = parse_package_url(policy_component.package_url)
        except ValueError as exc:
            raise MissingIdentityError(str(exc)) from exc
        if comp.artifact and comp.version:
            return comp

    raise MissingIdentityError("policy component carries no structured identity")


def select_remediation(
    decision: RemediationDecision,
    remediation_type: RemediationType | str,
) -> Component:
    """Return the component of the first variant tagged *remediation_type*."""
    wanted = (
        remediation_type.value
        if isinstance(remediation_type, RemediationType)
        else remediation_type
    )
    for change in decision.version_changes:
        if change.type == wanted:
            return component_from_policy(change.data.component)
    raise RemediationNotFoundError(f"no {wanted!r} remediation in decision")


def select_no_violation_remediation(decision: RemediationDecision) -> Component:
    """Return the minimal change that clears every policy violation.

    Raises :class:`RemediationNotFoundError` if the engine offered none.
    """
    return select_remediation(decision, RemediationType.NO_VIOLATIONS)
