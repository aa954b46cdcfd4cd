"""Execution of a :class:`~modforge.plan.GenerationPlan` against the disk."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from modforge_common.fs import atomic_write
from modforge_common.logging import get_logger

from modforge.lint import apply_lint_fix
from modforge.paths import normalize
from modforge.plan import CreateFile, LintFix, OverwriteFile

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from modforge_common.settings import ModforgeSettings

    from modforge.plan import Action, GenerationPlan

__all__ = ["ExecutionReport", "execute_plan"]

logger = get_logger(__name__)


@dataclass(slots=True)
class ExecutionReport:
    """What :func:`execute_plan` did."""

    written: list[str] = field(default_factory=list)
    linted: list[str] = field(default_factory=list)
    dry_run: bool = False


def execute_plan(
    plan: GenerationPlan,
    root: Path,
    settings: ModforgeSettings,
    *,
    dry_run: bool = False,
    on_action: Callable[[Action], None] | None = None,
) -> ExecutionReport:
    """Run the plan's actions in order.

    File actions are written with :func:`~modforge_common.fs.atomic_write`.
    Lint-fix actions run the configured command. In dry-run mode every action
    is reported through ``on_action`` but nothing is executed.

    Raises
    ------
    LintFixError
        If a lint-fix command fails. Files written before it stay written.
    OSError
        If a file cannot be written.
    """
    report = ExecutionReport(dry_run=dry_run)
    for action in plan:
        if on_action is not None:
            on_action(action)
        if dry_run:
            continue
        match action:
            case CreateFile(path=path, content=content) | OverwriteFile(
                path=path, content=content
            ):
                atomic_write(root / normalize(path).lstrip("/"), content)
                report.written.append(path)
            case LintFix(path=path):
                apply_lint_fix(root, path, settings)
                report.linted.append(path)
    logger.info(
        "Plan executed",
        extra={
            "operation": "execute_plan",
            "written": len(report.written),
            "linted": len(report.linted),
            "dry_run": dry_run,
        },
    )
    return report
