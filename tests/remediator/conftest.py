"""Shared fixtures for remediator tests (no network required)."""

from __future__ import annotations

import pytest

from remediator.models.manifest import ManifestReference
from tests.remediator.helpers import PACKAGE_JSON_PATCH


@pytest.fixture
def package_json() -> ManifestReference:
    return ManifestReference(filename="package.json", patch=PACKAGE_JSON_PATCH)
