"""Parser for pip requirements.txt diffs."""

from __future__ import annotations

import re

from remediator.engines.manifest.registry import register_parser
from remediator.models.component import Component, normalize_pypi_name
from remediator.models.manifest import Position

# Matches: package_name[extras] == version
_PINNED_RE = re.compile(
    r"^(?P<name>[A-Za-z0-9]([A-Za-z0-9._-]*[A-Za-z0-9])?)"  # package name
    r"(\[[^\]]*\])?"  # optional extras
    r"\s*==\s*(?P<version>[^\s,;#]+)\s*$"
)


class PipRequirementsParser:
    detection_method = "pip-requirements"
    file_patterns = ["requirements.txt", "requirements-*.txt", "requirements_*.txt"]

    def parse(self, patch: str) -> dict[Position, Component]:
        components: dict[Position, Component] = {}

        for idx, raw_line in enumerate(patch.splitlines()):
            if not raw_line.startswith("+") or raw_line.startswith("+++"):
                continue

            line = raw_line[1:].split("#", 1)[0].split(";", 1)[0].strip()
            if not line or line.startswith(("-r", "-c", "-e", "--")):
                continue

            m = _PINNED_RE.match(line)
            if not m:
                continue

            name = normalize_pypi_name(m.group("name"))
            components[idx] = Component("pypi", "", name, m.group("version"))

        return components


register_parser(PipRequirementsParser())
