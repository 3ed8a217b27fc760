"""Find changed manifests in a pull request and the components they declare."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

# Ensure parsers are registered before any lookup runs.
import remediator.engines.manifest.parsers  # noqa: F401
from remediator.engines.manifest.registry import match_parser
from remediator.models.manifest import ManifestComponents, ManifestReference

log = structlog.get_logger("remediator.engine")


def find_manifest_components(files: Iterable[ManifestReference]) -> ManifestComponents:
    """Parse every recognised manifest among *files*.

    Manifests that declare no component in their diff are left out.
    """
    manifests: ManifestComponents = {}
    for f in files:
        parser = match_parser(f)
        if parser is None:
            continue
        if not f.patch:
            log.debug("manifest.no_patch", filename=f.filename)
            continue

        components = parser.parse(f.patch)
        log.debug(
            "manifest.parsed",
            filename=f.filename,
            parser=parser.detection_method,
            components=len(components),
        )
        if components:
            manifests[f] = components
    return manifests
