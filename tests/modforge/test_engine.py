from __future__ import annotations

from pathlib import Path

import pytest

from modforge_common.errors import LintFixError
from modforge_common.settings import ModforgeSettings
from modforge_common.subprocess_utils import SubprocessError, SubprocessTimeoutError

from modforge.engine import execute_plan
from modforge.plan import Action, CreateFile, GenerationPlan, LintFix, OverwriteFile


def _plan() -> GenerationPlan:
    return GenerationPlan(
        (
            OverwriteFile(path="/src/app/app.module.ts", content=b"export class AppModule { }\n"),
            CreateFile(path="/src/app/widget/widget.module.ts", content=b"// widget\n"),
        )
    )


def test_writes_every_file(workspace: Path, settings: ModforgeSettings) -> None:
    report = execute_plan(_plan(), workspace, settings)

    assert report.written == ["/src/app/app.module.ts", "/src/app/widget/widget.module.ts"]
    assert report.linted == []
    assert (workspace / "src/app/widget/widget.module.ts").read_bytes() == b"// widget\n"
    assert (workspace / "src/app/app.module.ts").read_text(encoding="utf-8") == (
        "export class AppModule { }\n"
    )


def test_dry_run_reports_without_writing(workspace: Path, settings: ModforgeSettings) -> None:
    seen: list[Action] = []
    plan = _plan().extend(LintFix(path="/src/app"))

    report = execute_plan(plan, workspace, settings, dry_run=True, on_action=seen.append)

    assert seen == list(plan.actions)
    assert report.dry_run
    assert report.written == []
    assert not (workspace / "src/app/widget").exists()


def test_lint_fix_runs_configured_command(
    workspace: Path, settings: ModforgeSettings, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[tuple[list[str], int | None, Path | None]] = []

    def fake_run(cmd: list[str], *, timeout: int | None = None, cwd: Path | None = None) -> str:
        calls.append((list(cmd), timeout, cwd))
        return "fixed\n"

    monkeypatch.setattr("modforge.lint.run_subprocess", fake_run)

    report = execute_plan(_plan().extend(LintFix(path="/src/app")), workspace, settings)

    assert report.linted == ["/src/app"]
    assert calls == [
        (
            [*settings.lint_command, str(workspace / "src/app")],
            settings.lint_timeout,
            workspace,
        )
    ]


@pytest.mark.parametrize(
    ("error", "fragment"),
    [
        (SubprocessError("boom", returncode=1, stderr="bad"), "Lint fix failed on /src/app"),
        (SubprocessTimeoutError("slow", timeout_seconds=1), "Lint fix timed out"),
    ],
)
def test_lint_failure_keeps_written_files(
    workspace: Path,
    settings: ModforgeSettings,
    monkeypatch: pytest.MonkeyPatch,
    error: Exception,
    fragment: str,
) -> None:
    def failing_run(cmd: list[str], *, timeout: int | None = None, cwd: Path | None = None) -> str:
        raise error

    monkeypatch.setattr("modforge.lint.run_subprocess", failing_run)

    with pytest.raises(LintFixError, match=fragment) as exc_info:
        execute_plan(_plan().extend(LintFix(path="/src/app")), workspace, settings)

    assert exc_info.value.context["path"] == "/src/app"
    assert (workspace / "src/app/widget/widget.module.ts").is_file()
