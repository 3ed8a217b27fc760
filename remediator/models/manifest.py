"""Manifest references and the position-keyed component mappings built from them."""

from __future__ import annotations

from dataclasses import dataclass

from remediator.models.component import Component


@dataclass(frozen=True)
class ManifestReference:
    """A file changed by a pull request, with its unified-diff patch."""

    filename: str
    patch: str = ""

    @property
    def basename(self) -> str:
        return self.filename.rsplit("/", 1)[-1]


Position = int

ManifestComponents = dict[ManifestReference, dict[Position, Component]]
RemediationResult = dict[ManifestReference, dict[Position, Component]]
