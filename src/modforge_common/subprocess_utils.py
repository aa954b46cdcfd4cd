"""Subprocess execution with timeouts, path sanitization, and error handling.

Examples
--------
>>> from pathlib import Path
>>> from modforge_common.subprocess_utils import run_subprocess
>>> run_subprocess(["echo", "hello"], timeout=10, cwd=Path("/tmp"))
'hello\\n'
"""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING, Final

from modforge_common.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

__all__ = [
    "DEFAULT_TIMEOUT",
    "SubprocessError",
    "SubprocessTimeoutError",
    "run_subprocess",
]

logger = get_logger(__name__)

DEFAULT_TIMEOUT: Final[int] = 300
MIN_TIMEOUT: Final[int] = 1
MAX_TIMEOUT: Final[int] = 3600


class SubprocessTimeoutError(TimeoutError):
    """Raised when a subprocess exceeds its timeout.

    Parameters
    ----------
    message : str
        Error description.
    command : list[str] | None, optional
        The command that timed out.
    timeout_seconds : int | None, optional
        The configured timeout.
    """

    def __init__(
        self, message: str, command: list[str] | None = None, timeout_seconds: int | None = None
    ) -> None:
        super().__init__(message)
        self.command = command
        self.timeout_seconds = timeout_seconds


class SubprocessError(RuntimeError):
    """Raised when a subprocess cannot be started or exits non-zero.

    Parameters
    ----------
    message : str
        Error description.
    returncode : int | None, optional
        Exit code from the subprocess.
    stderr : str | None, optional
        Captured stderr output.
    """

    def __init__(
        self, message: str, returncode: int | None = None, stderr: str | None = None
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def run_subprocess(
    cmd: Sequence[str],
    *,
    timeout: int | None = None,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> str:
    """Execute a command with a timeout and return its stdout.

    Parameters
    ----------
    cmd : Sequence[str]
        Command and arguments. Arguments are passed literally (no shell).
    timeout : int | None, optional
        Maximum execution time in seconds. Defaults to ``DEFAULT_TIMEOUT``.
    cwd : Path | None, optional
        Working directory, resolved to an absolute path.
    env : Mapping[str, str] | None, optional
        Environment for the child. Inherits the parent environment when None.

    Returns
    -------
    str
        Captured stdout.

    Raises
    ------
    SubprocessTimeoutError
        If the command exceeds ``timeout``.
    SubprocessError
        If the command cannot be started or exits with a non-zero status.
    ValueError
        If ``timeout`` is outside the accepted range.
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUT
    if not MIN_TIMEOUT <= timeout <= MAX_TIMEOUT:
        msg = f"Timeout must be between {MIN_TIMEOUT} and {MAX_TIMEOUT}, got {timeout}"
        raise ValueError(msg)

    if cwd is not None:
        cwd = cwd.resolve()

    args = list(cmd)
    command_text = " ".join(args)
    logger.debug(
        "Executing subprocess",
        extra={"command": command_text, "timeout": timeout, "cwd": str(cwd) if cwd else None},
    )
    try:
        completed = subprocess.run(  # noqa: S603 - arguments are never shell-interpreted
            args,
            cwd=cwd,
            env=dict(env) if env is not None else None,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        msg = f"Subprocess exceeded timeout of {timeout} seconds: {command_text}"
        logger.exception(msg, extra={"command": command_text, "status": "error"})
        raise SubprocessTimeoutError(msg, command=args, timeout_seconds=timeout) from exc
    except OSError as exc:
        msg = f"Unable to start subprocess: {command_text}: {exc}"
        logger.exception(msg, extra={"command": command_text, "status": "error"})
        raise SubprocessError(msg) from exc

    if completed.returncode != 0:
        msg = f"Subprocess failed with exit code {completed.returncode}: {command_text}"
        logger.error(
            msg,
            extra={
                "command": command_text,
                "returncode": completed.returncode,
                "stderr": completed.stderr,
            },
        )
        raise SubprocessError(msg, returncode=completed.returncode, stderr=completed.stderr)

    logger.debug("Subprocess completed successfully", extra={"returncode": completed.returncode})
    return completed.stdout
