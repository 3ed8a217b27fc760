"""Manifest-diff parsers — auto-registered on import."""

from remediator.engines.manifest.parsers import (
    package_json,  # noqa: F401
    pip_requirements,  # noqa: F401
)
