"""Manifest engine — extract declared components from manifest diffs."""

from remediator.engines.manifest.finder import find_manifest_components
from remediator.engines.manifest.registry import PARSER_REGISTRY, ManifestParser, match_parser

__all__ = ["PARSER_REGISTRY", "ManifestParser", "find_manifest_components", "match_parser"]
