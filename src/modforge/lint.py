"""Post-generation lint-fix pass."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modforge_common.errors import LintFixError
from modforge_common.logging import get_logger
from modforge_common.subprocess_utils import (
    SubprocessError,
    SubprocessTimeoutError,
    run_subprocess,
)

from modforge.paths import normalize

if TYPE_CHECKING:
    from pathlib import Path

    from modforge_common.settings import ModforgeSettings

__all__ = ["apply_lint_fix"]

logger = get_logger(__name__)


def apply_lint_fix(root: Path, path: str, settings: ModforgeSettings) -> str:
    """Run the configured lint-fix command over the virtual directory ``path``.

    Parameters
    ----------
    root : Path
        Workspace directory; the command runs from here.
    path : str
        Virtual directory to fix, appended to ``settings.lint_command``.
    settings : ModforgeSettings
        Provides the command and its timeout.

    Returns
    -------
    str
        Captured stdout of the command.

    Raises
    ------
    LintFixError
        If the command cannot start, exits non-zero, or times out.
    """
    target = root / normalize(path).lstrip("/")
    command = [*settings.lint_command, str(target)]
    try:
        output = run_subprocess(command, timeout=settings.lint_timeout, cwd=root)
    except SubprocessTimeoutError as exc:
        msg = f"Lint fix timed out after {settings.lint_timeout}s on {path}."
        raise LintFixError(msg, cause=exc, context={"path": path, "command": command}) from exc
    except SubprocessError as exc:
        msg = f"Lint fix failed on {path}: {exc}"
        context: dict[str, object] = {"path": path, "command": command}
        if exc.returncode is not None:
            context["returncode"] = exc.returncode
        raise LintFixError(msg, cause=exc, context=context) from exc
    logger.info("Lint fix applied", extra={"operation": "lint_fix", "path": path})
    return output
