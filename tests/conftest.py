"""Shared fixtures.

Unit tests here are:
- Isolated (no network: manifest sources are fakes or httpx.MockTransport)
- Filesystem-local (every project lives under tmp_path)
"""

from __future__ import annotations

import json
import plistlib
from pathlib import Path
from typing import Any

import pytest

from adapters.project_store import JsonProject
from core.domain.models import FetchResult


def aasa(*app_ids: str) -> bytes:
    return json.dumps(
        {"applinks": {"apps": [], "details": [{"appID": app_id, "paths": ["*"]} for app_id in app_ids]}}
    ).encode("utf-8")


class StaticSource:
    """`ManifestSource` returning canned results and recording requests."""

    def __init__(self, manifests: dict[str, bytes | None] | None = None) -> None:
        self.manifests = manifests or {}
        self.requests: list[str] = []

    def fetch(self, domain: str) -> FetchResult:
        self.requests.append(domain)
        data = self.manifests.get(domain)
        if data is None:
            return FetchResult(domain=domain, diagnostics=[f"[{domain}] Failed to retrieve AASA file"])
        return FetchResult(domain=domain, data=data)


@pytest.fixture
def project_data() -> dict[str, Any]:
    return {
        "configurations": ["Debug", "Release"],
        "settings": {"Release": {"PRODUCT_NAME": "Sample"}},
        "targets": [
            {
                "name": "SampleTests",
                "kind": "unit-test",
                "settings": {"Release": {"DEVELOPMENT_TEAM": "OLDTEAM"}},
            },
            {
                "name": "Sample",
                "kind": "application",
                "settings": {
                    "Debug": {
                        "DEVELOPMENT_TEAM": "TEAM123",
                        "PRODUCT_BUNDLE_IDENTIFIER": "io.example.sample.debug",
                    },
                    "Release": {
                        "DEVELOPMENT_TEAM": "TEAM123",
                        "PRODUCT_BUNDLE_IDENTIFIER": "io.example.$(PRODUCT_NAME:lower)",
                        "INFOPLIST_FILE": "$(SRCROOT)/Sample/Info.plist",
                    },
                },
            },
            {"name": "Widget", "kind": "app-extension", "settings": {}},
        ],
        "files": [],
    }


@pytest.fixture
def make_project(tmp_path: Path, project_data: dict[str, Any]):
    """Write a project document (plus optional plists) and load it."""

    def _make(
        data: dict[str, Any] | None = None,
        *,
        plists: dict[str, dict[str, Any]] | None = None,
    ) -> JsonProject:
        path = tmp_path / "Sample.json"
        path.write_text(json.dumps(data or project_data), encoding="utf-8")
        for relative, content in (plists or {}).items():
            plist_path = tmp_path / relative
            plist_path.parent.mkdir(parents=True, exist_ok=True)
            plist_path.write_bytes(plistlib.dumps(content))
        return JsonProject.load(path)

    return _make


@pytest.fixture
def sample_project(make_project, project_data):
    """Project whose app target has an entitlements file and an Info.plist."""

    release = project_data["targets"][1]["settings"]["Release"]
    release["PRODUCT_BUNDLE_IDENTIFIER"] = "io.example.sample"
    release["CODE_SIGN_ENTITLEMENTS"] = "Sample/Sample.entitlements"
    return make_project(
        project_data,
        plists={
            "Sample/Sample.entitlements": {
                "com.apple.developer.associated-domains": [
                    "applinks:example.com",
                    "webcredentials:example.com",
                    "applinks:example.app.link",
                ],
            },
            "Sample/Info.plist": {"CFBundleName": "Sample"},
        },
    )


def read_plist(path: Path) -> dict[str, Any]:
    return plistlib.loads(path.read_bytes())
