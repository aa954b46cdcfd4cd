from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from modforge_common.errors import WorkspaceError
from modforge_common.settings import ModforgeSettings

from modforge import jsonc
from modforge.host import Host
from modforge.workspace import (
    Workspace,
    WorkspaceProject,
    build_default_path,
    get_project,
    is_project_using_ivy,
    load_workspace,
)

WriteFile = Callable[[str, str], Path]


def test_jsonc_accepts_comments() -> None:
    data = b'// header\n{\n  /* block */ "a": [1, 2.5, true, null],\n  "b": {"c": "d\\n"}\n}\n'

    assert jsonc.loads(data) == {"a": [1, 2.5, True, None], "b": {"c": "d\n"}}


def test_jsonc_rejects_empty_documents() -> None:
    with pytest.raises(WorkspaceError, match="does not contain a JSON value"):
        jsonc.loads(b"// nothing\n", source="/tsconfig.json")


def test_load_workspace_reads_projects(host: Host, settings: ModforgeSettings) -> None:
    workspace = load_workspace(host, settings)

    assert workspace.default_project == "app"
    project = workspace.projects["app"]
    assert project.source_root == "src"
    assert project.prefix == "app"
    assert project.build_target is not None
    assert project.build_target.options["tsConfig"] == "tsconfig.app.json"


def test_load_workspace_falls_back_to_dot_file(
    workspace: Path, host: Host, settings: ModforgeSettings
) -> None:
    (workspace / "angular.json").rename(workspace / ".angular.json")

    assert "app" in load_workspace(host, settings).projects


def test_load_workspace_missing(tmp_path: Path, settings: ModforgeSettings) -> None:
    with pytest.raises(WorkspaceError, match="Could not find a workspace configuration"):
        load_workspace(Host(tmp_path), settings)


def test_load_workspace_invalid(
    write_file: WriteFile, host: Host, settings: ModforgeSettings
) -> None:
    write_file("/angular.json", json.dumps({"projects": {"app": {"root": 3}}}))

    with pytest.raises(WorkspaceError, match="Invalid workspace configuration"):
        load_workspace(host, settings)


def test_get_project_default_sole_and_unknown() -> None:
    project = WorkspaceProject(root="")
    workspace = Workspace(projects={"only": project})

    assert get_project(workspace, None).name == "only"
    with pytest.raises(WorkspaceError, match='Project "other" does not exist.'):
        get_project(workspace, "other")

    crowded = Workspace(projects={"a": project, "b": project})
    with pytest.raises(WorkspaceError, match="No project was specified"):
        get_project(crowded, None)
    assert get_project(crowded.model_copy(update={"default_project": "b"}), None).name == "b"


@pytest.mark.parametrize(
    ("project", "expected"),
    [
        (WorkspaceProject(root="", sourceRoot="src"), "/src/app"),
        (WorkspaceProject(root="projects/admin"), "/projects/admin/src/app"),
        (WorkspaceProject(root="projects/ui", projectType="library"), "/projects/ui/src/lib"),
        (
            WorkspaceProject(
                root="projects/ui", sourceRoot="projects/ui/src", projectType="library"
            ),
            "/projects/ui/src/lib",
        ),
    ],
)
def test_build_default_path(project: WorkspaceProject, expected: str) -> None:
    assert build_default_path(project) == expected


def _project(host: Host, settings: ModforgeSettings) -> WorkspaceProject:
    return get_project(load_workspace(host, settings), None)


def test_ivy_defaults_on(host: Host, settings: ModforgeSettings) -> None:
    assert is_project_using_ivy(host, _project(host, settings))


@pytest.mark.usefixtures("legacy_compiler")
def test_ivy_disabled_through_extends(host: Host, settings: ModforgeSettings) -> None:
    assert not is_project_using_ivy(host, _project(host, settings))


def test_ivy_closest_setting_wins(
    write_file: WriteFile, host: Host, settings: ModforgeSettings
) -> None:
    write_file(
        "/tsconfig.app.json",
        '{ "extends": "./tsconfig.json", "angularCompilerOptions": { "enableIvy": true } }',
    )
    write_file("/tsconfig.json", '{ "angularCompilerOptions": { "enableIvy": false } }')

    assert is_project_using_ivy(host, _project(host, settings))


def test_ivy_extends_cycle_terminates(
    write_file: WriteFile, host: Host, settings: ModforgeSettings
) -> None:
    write_file("/tsconfig.app.json", '{ "extends": "./tsconfig.json" }')
    write_file("/tsconfig.json", '{ "extends": "./tsconfig.app.json" }')

    assert is_project_using_ivy(host, _project(host, settings))


def test_ivy_without_build_target() -> None:
    assert is_project_using_ivy(Host(Path("/nonexistent")), WorkspaceProject(root=""))
