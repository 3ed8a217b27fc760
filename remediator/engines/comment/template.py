"""Markdown rendering of remediation results for pull-request comments."""

from __future__ import annotations

from remediator.models.component import Component
from remediator.models.manifest import ManifestComponents, RemediationResult

COMMENT_HEADING = "### Dependency remediation"


def render_remediation_comment(
    result: RemediationResult,
    declared: ManifestComponents | None = None,
) -> str:
    """Return a markdown comment body for *result*.

    *declared* (the pipeline input) adds the currently declared version of
    each component when given.
    """
    if not result:
        return f"{COMMENT_HEADING}\n\nNo policy-compliant remediations were found."

    count = sum(len(positions) for positions in result.values())
    noun = "component" if count == 1 else "components"
    lines = [
        COMMENT_HEADING,
        "",
        f"The policy engine suggests replacing {count} {noun} "
        "with versions that have no policy violations.",
    ]

    for manifest in sorted(result, key=lambda m: m.filename):
        current = (declared or {}).get(manifest, {})
        lines += [
            "",
            f"#### `{_esc(manifest.filename)}`",
            "",
            "| Patch line | Component | Declared | Remediation |",
            "|---:|---|---|---|",
        ]
        for position, remediation in sorted(result[manifest].items()):
            lines.append(_format_row(position, remediation, current.get(position)))

    return "\n".join(lines) + "\n"


def _format_row(position: int, remediation: Component, declared: Component | None) -> str:
    declared_version = f"`{_esc(declared.version)}`" if declared is not None else "N/A"
    return (
        f"| {position + 1} "
        f"| `{_esc(remediation.name)}` "
        f"| {declared_version} "
        f"| `{_esc(remediation.version)}` |"
    )


def _esc(text: str) -> str:
    """Minimal markdown table escaping."""
    return text.replace("|", "\\|").replace("`", "'").replace("\n", " ")
