"""Tests for the pull-request comment renderer."""

from __future__ import annotations

from remediator.engines.comment import render_remediation_comment
from remediator.engines.comment.template import COMMENT_HEADING
from remediator.models.component import Component
from remediator.models.manifest import ManifestReference

PKG = ManifestReference("web/package.json", "+")
REQS = ManifestReference("requirements.txt", "+")


def test_empty_result():
    body = render_remediation_comment({})
    assert body.startswith(COMMENT_HEADING)
    assert "No policy-compliant remediations" in body


def test_single_remediation_with_declared_version():
    result = {PKG: {6: Component("npm", "", "left-pad", "1.3.0")}}
    declared = {PKG: {6: Component("npm", "", "left-pad", "1.0.0")}}

    body = render_remediation_comment(result, declared)

    assert "replacing 1 component with" in body
    assert "#### `web/package.json`" in body
    assert "| 7 | `left-pad` | `1.0.0` | `1.3.0` |" in body
    assert body.endswith("\n")


def test_manifests_sorted_and_scoped_names():
    result = {
        PKG: {
            7: Component("npm", "babel", "core", "7.2.0"),
            2: Component("npm", "", "lodash", "4.17.21"),
        },
        REQS: {0: Component("pypi", "", "requests", "2.32.0")},
    }

    body = render_remediation_comment(result)

    assert "replacing 3 components with" in body
    assert body.index("`requirements.txt`") < body.index("`web/package.json`")
    assert body.index("`lodash`") < body.index("`@babel/core`")
    # no declared map → no current version
    assert "| 1 | `requests` | N/A | `2.32.0` |" in body


def test_table_cells_escaped():
    odd = ManifestReference("a|b.json", "+")
    body = render_remediation_comment({odd: {0: Component("npm", "", "x`y", "1.0.0")}})
    assert "`a\\|b.json`" in body
    assert "`x'y`" in body
