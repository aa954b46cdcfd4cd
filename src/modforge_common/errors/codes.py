"""Error code registry and type URIs for Problem Details.

Codes are stable identifiers surfaced in RFC 9457 Problem Details payloads and
in CLI failure output.

Examples
--------
>>> from modforge_common.errors.codes import ErrorCode, get_type_uri
>>> get_type_uri(ErrorCode.ROUTE_HOST_NOT_FOUND)
'https://modforge.dev/problems/route-host-not-found'
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

__all__ = [
    "BASE_TYPE_URI",
    "ErrorCode",
    "get_type_uri",
]

BASE_TYPE_URI: Final[str] = "https://modforge.dev/problems"


class ErrorCode(StrEnum):
    """Stable error codes for modforge exceptions.

    Codes are grouped by the stage that raises them:

    - Configuration: invalid options, settings, grammars, or workspace files.
    - Resolution: descriptors that cannot be found or read.
    - Transformation: route hosts and patches that cannot be applied.
    - Execution: scaffolding collisions and lint-fix failures.
    """

    # Configuration
    CONFIGURATION_ERROR = "configuration-error"
    WORKSPACE_ERROR = "workspace-error"

    # Resolution
    SOURCE_NOT_FOUND = "source-not-found"
    MODULE_RESOLUTION_FAILURE = "module-resolution-failure"

    # Transformation
    ROUTE_HOST_NOT_FOUND = "route-host-not-found"
    PATCH_CONFLICT = "patch-conflict"

    # Execution
    FILE_EXISTS = "file-exists"
    LINT_FIX_FAILED = "lint-fix-failed"
    RUNTIME_ERROR = "runtime-error"

    def __str__(self) -> str:
        """Return the code value as a string.

        Returns
        -------
        str
            The error code value (e.g., "source-not-found").
        """
        return self.value


def get_type_uri(code: ErrorCode) -> str:
    """Get the RFC 9457 type URI for an error code.

    Parameters
    ----------
    code : ErrorCode
        Error code enum value.

    Returns
    -------
    str
        Complete type URI (e.g., "https://modforge.dev/problems/file-exists").
    """
    return f"{BASE_TYPE_URI}/{code.value}"
