"""Shared pytest fixtures: on-disk Angular-style workspaces and staged hosts."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from modforge_common.settings import ModforgeSettings, load_settings

from modforge.host import Host
from tests.samples import APP_MODULE, TSCONFIG, TSCONFIG_APP, angular_json

if TYPE_CHECKING:
    from collections.abc import Callable

type WriteFile = Callable[[str, str], Path]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Workspace root holding ``angular.json``, tsconfigs and ``src/app/app.module.ts``."""
    root = tmp_path / "workspace"
    (root / "src" / "app").mkdir(parents=True)
    (root / "angular.json").write_text(angular_json(), encoding="utf-8")
    (root / "tsconfig.json").write_text(TSCONFIG, encoding="utf-8")
    (root / "tsconfig.app.json").write_text(TSCONFIG_APP, encoding="utf-8")
    (root / "src" / "app" / "app.module.ts").write_text(APP_MODULE, encoding="utf-8")
    return root


@pytest.fixture
def write_file(workspace: Path) -> WriteFile:
    """Write a file below the workspace root from a virtual path."""

    def _write(path: str, content: str) -> Path:
        target = workspace / path.lstrip("/")
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return target

    return _write


@pytest.fixture
def host(workspace: Path) -> Host:
    return Host(workspace)


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> ModforgeSettings:
    for name in ("MODFORGE_MODULE_EXT", "MODFORGE_ROUTING_MODULE_EXT", "MODFORGE_STYLE_EXT"):
        monkeypatch.delenv(name, raising=False)
    return load_settings()


@pytest.fixture
def legacy_compiler(write_file: WriteFile) -> None:
    """Turn Ivy off through the base tsconfig."""
    write_file(
        "/tsconfig.json",
        TSCONFIG.replace(
            '"compileOnSave": false,',
            '"compileOnSave": false,\n  "angularCompilerOptions": { "enableIvy": false },',
        ),
    )
