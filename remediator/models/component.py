"""Component identity — ecosystem coordinates and package-URL serialization."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import quote, unquote

if TYPE_CHECKING:
    from remediator.engines.policy.models import ComponentIdentifier

_PURL_SCHEME = "pkg:"

# Unreserved characters kept as-is inside namespace / name / version segments.
_SAFE_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789._-~+"

_PYPI_SEPARATOR_RE = re.compile(r"[-_.]+")


class MissingIdentityError(ValueError):
    """Raised when a policy identity carries no usable coordinates."""


@dataclass(frozen=True)
class Component:
    """A single third-party dependency.

    npm scopes are stored without their ``@`` (``@babel/core`` is group
    ``babel``, artifact ``core``).
    """

    format: str
    group: str
    artifact: str
    version: str

    def to_package_url(self) -> str:
        return to_package_url(self)

    @property
    def name(self) -> str:
        """Display name: ``group/artifact`` (npm scopes rendered as ``@scope/name``)."""
        if not self.group:
            return self.artifact
        if self.format == "npm":
            return f"@{self.group}/{self.artifact}"
        if self.format == "maven":
            return f"{self.group}:{self.artifact}"
        return f"{self.group}/{self.artifact}"

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


def _encode(segment: str) -> str:
    return quote(segment, safe=_SAFE_CHARS)


def normalize_pypi_name(name: str) -> str:
    """PEP 503 form: lowercase, runs of ``-_.`` collapsed to ``-``."""
    return _PYPI_SEPARATOR_RE.sub("-", name.lower())


def to_package_url(component: Component) -> str:
    """Serialize *component* as ``pkg:<format>/<namespace>/<name>@<version>``.

    The namespace segment is omitted when ``group`` is empty. npm scopes get
    their ``@`` back (``pkg:npm/%40babel/core@7.1.0``) and PyPI names are
    normalized.
    """
    fmt = component.format.lower()
    artifact = component.artifact
    parts = [fmt]
    if component.group:
        namespace = f"@{component.group}" if fmt == "npm" else component.group
        parts.append(_encode(namespace))
    if fmt == "pypi":
        artifact = normalize_pypi_name(artifact)
    parts.append(_encode(artifact))
    purl = _PURL_SCHEME + "/".join(parts)
    if component.version:
        purl += "@" + _encode(component.version)
    return purl


def parse_package_url(purl: str) -> Component:
    """Parse a package-URL back into a :class:`Component`.

    Qualifiers (``?...``) and subpaths (``#...``) are ignored.
    Raises ``ValueError`` if *purl* is not a package-URL.
    """
    if not purl.startswith(_PURL_SCHEME):
        raise ValueError(f"not a package-url: {purl!r}")
    body = purl[len(_PURL_SCHEME) :].lstrip("/")
    body = body.split("#", 1)[0].split("?", 1)[0]

    version = ""
    if "@" in body:
        body, version = body.rsplit("@", 1)

    segments = [s for s in body.split("/") if s]
    if len(segments) < 2:
        raise ValueError(f"package-url has no name: {purl!r}")

    fmt = segments[0].lower()
    artifact = unquote(segments[-1])
    group = "/".join(unquote(s) for s in segments[1:-1])
    if fmt == "npm":
        group = group.lstrip("@")
    return Component(fmt, group, artifact, unquote(version))


def _split_npm_package_id(package_id: str) -> tuple[str, str]:
    """``@scope/name`` → ``("scope", "name")``; ``name`` → ``("", "name")``."""
    if package_id.startswith("@") and "/" in package_id:
        scope, name = package_id[1:].split("/", 1)
        return scope, name
    return "", package_id


def from_policy_identity(identifier: ComponentIdentifier | None) -> Component:
    """Map a policy-engine component identifier back to a :class:`Component`.

    Coordinate keys differ per format:
      - maven: ``groupId`` / ``artifactId``
      - npm: ``packageId`` (``@scope/name`` splits into group + artifact)
      - pypi, nuget, gem, golang, ...: ``name`` or ``packageId``

    Generic ``groupId`` / ``artifactId`` are accepted for every format.
    Raises :class:`MissingIdentityError` if the identifier is absent or
    lacks an artifact or version.
    """
    if identifier is None:
        raise MissingIdentityError("policy component carries no structured identity")

    fmt = (identifier.format or "").lower()
    coords = identifier.coordinates or {}

    group = coords.get("groupId") or ""
    artifact = coords.get("artifactId") or ""
    if not artifact:
        package_id = coords.get("packageId") or coords.get("name") or ""
        if fmt == "npm":
            scope, artifact = _split_npm_package_id(package_id)
            group = group or scope
        else:
            artifact = package_id
    version = coords.get("version") or ""

    if not fmt or not artifact or not version:
        raise MissingIdentityError(
            f"incomplete policy identity: format={fmt!r} coordinates={coords!r}"
        )
    return Component(fmt, group, artifact, version)
