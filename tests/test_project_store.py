from __future__ import annotations

import json

import pytest

from adapters.project_store import JsonProject
from core.domain.errors import ConfigurationError
from core.interfaces.project import ProjectModel, ProjectTarget


def test_loaded_project_satisfies_contracts(make_project):
    project = make_project()
    assert isinstance(project, ProjectModel)
    assert all(isinstance(target, ProjectTarget) for target in project.targets)


def test_target_kinds(make_project):
    tests, app, widget = make_project().targets
    assert (tests.is_test_kind, tests.is_extension_kind) == (True, False)
    assert (app.is_test_kind, app.is_extension_kind) == (False, False)
    assert (widget.is_test_kind, widget.is_extension_kind) == (False, True)


def test_target_value_overrides_project_value(make_project, project_data):
    project_data["targets"][1]["settings"]["Release"]["PRODUCT_NAME"] = "Override"
    app = make_project(project_data).targets[1]
    assert app.resolved_setting("PRODUCT_NAME") == {"Debug": None, "Release": "Override"}


def test_register_file_is_idempotent(make_project):
    project = make_project()
    project.register_file("Sample/Sample.entitlements")
    project.register_file("Sample/Sample.entitlements")
    assert project.document.files == ["Sample/Sample.entitlements"]


def test_save_round_trips_document(make_project):
    project = make_project()
    project.targets[1].set_setting("DEVELOPMENT_TEAM", "NEW")
    project.save()

    reloaded = JsonProject.load(project.path)
    assert reloaded.targets[1].resolved_setting("DEVELOPMENT_TEAM") == {"Debug": "NEW", "Release": "NEW"}


def test_missing_project_raises(tmp_path):
    with pytest.raises(ConfigurationError, match="Failed to open project"):
        JsonProject.load(tmp_path / "missing.json")


@pytest.mark.parametrize(
    "content",
    ["{broken", json.dumps({"targets": [{"kind": "application"}]}), json.dumps({"targets": [{"name": "A", "kind": "bogus"}]})],
)
def test_malformed_project_raises(tmp_path, content):
    path = tmp_path / "project.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigurationError, match="Failed to parse project"):
        JsonProject.load(path)
