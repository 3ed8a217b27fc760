"""Builders shared by remediator tests."""

from __future__ import annotations

from remediator.engines.policy.errors import PolicyTransportError
from remediator.engines.policy.models import RemediationDecision, Stage
from remediator.models.component import Component

PACKAGE_JSON_PATCH = """\
@@ -1,7 +1,8 @@
 {
   "name": "demo",
   "version": "1.0.0",
   "dependencies": {
-    "left-pad": "^0.0.9",
+    "left-pad": "^1.0.0",
+    "@babel/core": "~7.1.0",
     "lodash": "4.17.21"
   }
 }
"""


def version_change(change_type: str, component: Component | None) -> dict:
    data: dict = {}
    if component is not None:
        coords = {"version": component.version}
        if component.format == "npm":
            coords["packageId"] = (
                f"@{component.group}/{component.artifact}" if component.group else component.artifact
            )
        else:
            coords["groupId"] = component.group
            coords["artifactId"] = component.artifact
        data["component"] = {
            "packageUrl": component.to_package_url(),
            "componentIdentifier": {"format": component.format, "coordinates": coords},
        }
    return {"type": change_type, "data": data}


def decision(*changes: dict) -> RemediationDecision:
    return RemediationDecision.model_validate({"versionChanges": list(changes)})


class StubEvaluator:
    """In-memory policy engine keyed by package-url.

    Values are either a :class:`RemediationDecision` or an exception to raise.
    """

    def __init__(self, responses: dict[str, RemediationDecision | Exception]) -> None:
        self.responses = responses
        self.calls: list[tuple[Component, Stage, str]] = []

    async def evaluate(
        self, component: Component, stage: Stage, application: str
    ) -> RemediationDecision:
        self.calls.append((component, stage, application))
        response = self.responses.get(component.to_package_url())
        if response is None:
            raise PolicyTransportError(f"unexpected component {component}")
        if isinstance(response, Exception):
            raise response
        return response
