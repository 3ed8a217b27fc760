"""Parser registry — match changed files to manifest-diff parsers."""

from __future__ import annotations

from fnmatch import fnmatch
from typing import Protocol, runtime_checkable

from remediator.models.component import Component
from remediator.models.manifest import ManifestReference, Position


@runtime_checkable
class ManifestParser(Protocol):
    """Interface that every manifest-diff parser must satisfy."""

    detection_method: str
    file_patterns: list[str]

    def parse(self, patch: str) -> dict[Position, Component]: ...


PARSER_REGISTRY: dict[str, ManifestParser] = {}


def register_parser(parser: ManifestParser) -> None:
    """Register a parser instance by its detection_method."""
    PARSER_REGISTRY[parser.detection_method] = parser


def match_parser(manifest: ManifestReference) -> ManifestParser | None:
    """Return the first registered parser whose pattern matches the file's basename."""
    for parser in PARSER_REGISTRY.values():
        for pattern in parser.file_patterns:
            if fnmatch(manifest.basename, pattern):
                return parser
    return None
