"""Parser for package.json diffs (npm)."""

from __future__ import annotations

import re

from remediator.engines.manifest.registry import register_parser
from remediator.models.component import Component
from remediator.models.manifest import Position

_DEPENDENCY_SECTIONS = frozenset(
    {
        "dependencies",
        "devDependencies",
        "peerDependencies",
        "optionalDependencies",
    }
)

# Top-level package.json keys that look like "key": "value" but are not dependencies.
_TOP_LEVEL_KEYS = frozenset(
    {
        "name",
        "version",
        "description",
        "main",
        "module",
        "types",
        "typings",
        "license",
        "author",
        "homepage",
        "type",
        "private",
    }
)

_ENTRY_RE = re.compile(r'^\s*"(?P<name>[^"]+)"\s*:\s*"(?P<spec>[^"]*)"\s*,?\s*$')
_SECTION_OPEN_RE = re.compile(r'^\s*"(?P<key>[^"]+)"\s*:\s*\{\s*$')
_SECTION_CLOSE_RE = re.compile(r"^\s*\}\s*,?\s*$")
_VERSION_RE = re.compile(r"^\d+(\.\d+){0,2}([-+][0-9A-Za-z.+-]+)?$")


def _clean_version(spec: str) -> str | None:
    """``^1.2.3`` → ``1.2.3``. Returns None for ranges, tags and URLs."""
    version = spec.strip().lstrip("^~=v").strip()
    if _VERSION_RE.match(version):
        return version
    return None


def _split_name(name: str) -> tuple[str, str]:
    if name.startswith("@") and "/" in name:
        scope, artifact = name[1:].split("/", 1)
        return scope, artifact
    return "", name


class PackageJsonParser:
    detection_method = "npm-package-json"
    file_patterns = ["package.json"]

    def parse(self, patch: str) -> dict[Position, Component]:
        components: dict[Position, Component] = {}
        # None = hunk started somewhere we cannot place yet
        section: str | None = None

        for idx, raw_line in enumerate(patch.splitlines()):
            if raw_line.startswith("@@"):
                section = None
                continue
            if raw_line.startswith(("+++", "---")) or raw_line.startswith("\\"):
                continue

            marker, line = raw_line[:1], raw_line[1:]
            if marker == "-":
                continue

            opened = _SECTION_OPEN_RE.match(line)
            if opened:
                section = opened.group("key")
                continue
            if _SECTION_CLOSE_RE.match(line):
                section = ""
                continue

            if marker != "+":
                continue

            entry = _ENTRY_RE.match(line)
            if not entry:
                continue

            name = entry.group("name")
            if section is None:
                if name in _TOP_LEVEL_KEYS:
                    continue
            elif section not in _DEPENDENCY_SECTIONS:
                continue

            version = _clean_version(entry.group("spec"))
            if version is None:
                continue

            group, artifact = _split_name(name)
            components[idx] = Component("npm", group, artifact, version)

        return components


register_parser(PackageJsonParser())
