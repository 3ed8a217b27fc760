"""Tests for the policy engine client (httpx.MockTransport, no network)."""

from __future__ import annotations

import json

import httpx
import pytest

from remediator.engines.manifest import find_manifest_components
from remediator.engines.policy.client import PolicyClient, parse_credentials
from remediator.engines.policy.errors import (
    ApplicationNotFoundError,
    PolicyAuthenticationError,
    PolicyConfigurationError,
    PolicyResponseError,
    PolicyTransportError,
)
from remediator.engines.policy.models import Stage
from remediator.engines.remediation.extractor import select_no_violation_remediation
from remediator.models.component import Component
from remediator.models.manifest import ManifestReference

IQ_URL = "https://iq.example.com"
LEFT_PAD = Component("npm", "", "left-pad", "1.0.0")

APPS_RESPONSE = {"applications": [{"id": "4bb67dcf", "publicId": "my-app", "name": "My App"}]}

REMEDIATION_RESPONSE = {
    "remediation": {
        "versionChanges": [
            {
                "type": "next-non-failing",
                "data": {
                    "component": {
                        "packageUrl": "pkg:npm/left-pad@1.1.0",
                        "hash": "aaa",
                        "componentIdentifier": {
                            "format": "npm",
                            "coordinates": {"packageId": "left-pad", "version": "1.1.0"},
                        },
                    }
                },
            },
            {
                "type": "next-no-violations",
                "data": {
                    "component": {
                        "packageUrl": "pkg:npm/left-pad@1.3.0",
                        "hash": "bbb",
                        "componentIdentifier": {
                            "format": "npm",
                            "coordinates": {"packageId": "left-pad", "version": "1.3.0"},
                        },
                    }
                },
            },
        ]
    }
}


class _Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, remediation=REMEDIATION_RESPONSE, apps=APPS_RESPONSE, status=200):
        self.requests: list[httpx.Request] = []
        self.remediation = remediation
        self.apps = apps
        self.status = status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status != 200:
            return httpx.Response(self.status, text="nope")
        if request.url.path == "/api/v2/applications":
            return httpx.Response(200, json=self.apps)
        if isinstance(self.remediation, str):
            return httpx.Response(200, text=self.remediation)
        return httpx.Response(200, json=self.remediation)


def _client(handler) -> PolicyClient:
    return PolicyClient(IQ_URL, "admin", "admin123", transport=httpx.MockTransport(handler))


# ── credentials & construction ───────────────────────────────────────────


class TestConstruction:
    def test_parse_credentials(self):
        assert parse_credentials("admin:admin123") == ("admin", "admin123")

    def test_password_may_contain_colons(self):
        assert parse_credentials("admin:a:b:c") == ("admin", "a:b:c")

    @pytest.mark.parametrize("bad", ["admin", "", ":secret"])
    def test_malformed_credentials(self, bad):
        with pytest.raises(PolicyConfigurationError):
            parse_credentials(bad)

    def test_invalid_url(self):
        with pytest.raises(PolicyConfigurationError):
            PolicyClient("iq.example.com", "admin", "pw")

    def test_from_credentials(self):
        client = PolicyClient.from_credentials(IQ_URL, "admin:admin123")
        assert isinstance(client, PolicyClient)


# ── evaluate ─────────────────────────────────────────────────────────────


class TestEvaluate:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        rec = _Recorder()
        async with _client(rec) as client:
            await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")

        lookup, evaluation = rec.requests
        assert lookup.method == "GET"
        assert lookup.url.params["publicId"] == "my-app"

        assert evaluation.method == "POST"
        assert evaluation.url.path == "/api/v2/components/remediation/application/4bb67dcf"
        assert evaluation.url.params["stageId"] == "build"
        assert json.loads(evaluation.content) == {"packageUrl": "pkg:npm/left-pad@1.0.0"}
        assert evaluation.headers["Authorization"].startswith("Basic ")

    @pytest.mark.asyncio
    async def test_scoped_dependency_from_diff_sent_with_scope(self):
        patch = '@@ -1,3 +1,4 @@\n   "dependencies": {\n+    "@babel/core": "^7.1.0"\n   }\n'
        manifests = find_manifest_components([ManifestReference("package.json", patch)])
        (component,) = next(iter(manifests.values())).values()

        rec = _Recorder()
        async with _client(rec) as client:
            await client.evaluate(component, Stage.BUILD, "my-app")

        body = json.loads(rec.requests[-1].content)
        assert body == {"packageUrl": "pkg:npm/%40babel/core@7.1.0"}

    @pytest.mark.asyncio
    async def test_parses_decision(self):
        async with _client(_Recorder()) as client:
            decision = await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")
        assert [c.type for c in decision.version_changes] == [
            "next-non-failing",
            "next-no-violations",
        ]
        assert select_no_violation_remediation(decision) == Component(
            "npm", "", "left-pad", "1.3.0"
        )

    @pytest.mark.asyncio
    async def test_application_lookup_memoized(self):
        rec = _Recorder()
        async with _client(rec) as client:
            await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")
            await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")
        paths = [r.url.path for r in rec.requests]
        assert paths.count("/api/v2/applications") == 1
        # evaluations themselves are never cached
        assert len(paths) == 3

    @pytest.mark.asyncio
    async def test_empty_remediation(self):
        async with _client(_Recorder(remediation={"remediation": {"versionChanges": []}})) as c:
            decision = await c.evaluate(LEFT_PAD, Stage.BUILD, "my-app")
        assert decision.version_changes == []


# ── errors ───────────────────────────────────────────────────────────────


class TestErrors:
    @pytest.mark.asyncio
    async def test_unknown_application(self):
        async with _client(_Recorder(apps={"applications": []})) as client:
            with pytest.raises(ApplicationNotFoundError):
                await client.evaluate(LEFT_PAD, Stage.BUILD, "nope")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure(self, status):
        async with _client(_Recorder(status=status)) as client:
            with pytest.raises(PolicyAuthenticationError):
                await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")

    @pytest.mark.asyncio
    async def test_server_error(self):
        async with _client(_Recorder(status=500)) as client:
            with pytest.raises(PolicyTransportError):
                await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(PolicyTransportError):
                await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        async with _client(_Recorder(remediation="<html>")) as client:
            with pytest.raises(PolicyResponseError):
                await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")

    @pytest.mark.asyncio
    async def test_malformed_shape(self):
        bad = {"remediation": {"versionChanges": [{"data": {}}]}}  # missing "type"
        async with _client(_Recorder(remediation=bad)) as client:
            with pytest.raises(PolicyResponseError):
                await client.evaluate(LEFT_PAD, Stage.BUILD, "my-app")

    @pytest.mark.asyncio
    async def test_malformed_applications(self):
        async with _client(_Recorder(apps={"unexpected": True})) as client:
            with pytest.raises(PolicyResponseError):
                await client.application_internal_id("my-app")
