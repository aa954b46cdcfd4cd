from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from modforge.cli import app
from tests.samples import APP_MODULE


@pytest.fixture(name="runner")
def fixture_runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    for name in ("MODFORGE_MODULE_EXT", "MODFORGE_ROUTING_MODULE_EXT", "MODFORGE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _problem(output: str) -> dict[str, object]:
    line = next(line for line in output.splitlines() if line.startswith('{"type"'))
    return json.loads(line)


def test_module_command_writes_files(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(
        app, ["module", "widget", "--module", "app.module.ts", "--root", str(workspace)]
    )

    assert result.exit_code == 0, result.output
    assert "UPDATE src/app/app.module.ts" in result.output
    assert "CREATE src/app/widget/widget.module.ts" in result.output
    assert (workspace / "src/app/widget/widget.module.ts").is_file()
    updated = (workspace / "src/app/app.module.ts").read_text(encoding="utf-8")
    assert "import { WidgetModule } from './widget/widget.module';" in updated


def test_route_without_module_exits_with_configuration_code(
    runner: CliRunner, workspace: Path
) -> None:
    result = runner.invoke(
        app, ["module", "widget", "--route", "widgets", "--root", str(workspace)]
    )

    assert result.exit_code == 2
    assert "Module option required when creating a lazy loaded routing module." in result.output
    assert _problem(result.output)["code"] == "configuration-error"
    assert (workspace / "src/app/app.module.ts").read_text(encoding="utf-8") == APP_MODULE
    assert not (workspace / "src/app/widget").exists()


def test_unknown_module_exits_with_configuration_code(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(
        app, ["module", "widget", "--module", "nope", "--root", str(workspace)]
    )

    assert result.exit_code == 2
    assert "Specified module 'nope' does not exist." in result.output
    problem = _problem(result.output)
    assert problem["code"] == "module-resolution-failure"
    assert str(problem["instance"]).startswith("urn:modforge:module:")


def test_dry_run_writes_nothing(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(
        app,
        ["module", "widget", "-m", "app", "--routing", "--dry-run", "--root", str(workspace)],
    )

    assert result.exit_code == 0, result.output
    assert "CREATE src/app/widget/widget-routing.module.ts" in result.output
    assert 'NOTE: The "--dry-run" option means no changes were made.' in result.output
    assert not (workspace / "src/app/widget").exists()
    assert (workspace / "src/app/app.module.ts").read_text(encoding="utf-8") == APP_MODULE


def test_component_command(runner: CliRunner, workspace: Path) -> None:
    result = runner.invoke(
        app,
        ["component", "widget", "--skip-tests", "--style", "scss", "--root", str(workspace)],
    )

    assert result.exit_code == 0, result.output
    directory = workspace / "src/app/widget"
    assert sorted(path.name for path in directory.iterdir()) == [
        "widget.component.html",
        "widget.component.scss",
        "widget.component.ts",
    ]
    updated = (workspace / "src/app/app.module.ts").read_text(encoding="utf-8")
    assert "    AppComponent,\n    WidgetComponent\n" in updated


def test_missing_workspace_is_a_configuration_error(runner: CliRunner, tmp_path: Path) -> None:
    result = runner.invoke(app, ["module", "widget", "--root", str(tmp_path)])

    assert result.exit_code == 2
    assert "Could not find a workspace configuration" in result.output


@pytest.mark.parametrize("command", ["module", "component"])
def test_invalid_option_is_a_configuration_error(
    runner: CliRunner, workspace: Path, command: str
) -> None:
    result = runner.invoke(app, [command, "", "--root", str(workspace)])

    assert result.exit_code == 2
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Invalid options: name:" in result.output
    problem = _problem(result.output)
    assert problem["code"] == "configuration-error"
    assert (workspace / "src/app/app.module.ts").read_text(encoding="utf-8") == APP_MODULE
