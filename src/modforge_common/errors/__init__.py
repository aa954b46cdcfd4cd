"""Exception hierarchy and Problem Details support.

Examples
--------
>>> from modforge_common.errors import ErrorCode, ModforgeError
>>> try:
...     raise ModforgeError("Operation failed")
... except ModforgeError as e:
...     details = e.to_problem_details(instance="urn:modforge:module")
...     assert details["type"] == "https://modforge.dev/problems/runtime-error"
"""

from __future__ import annotations

from modforge_common.errors.codes import BASE_TYPE_URI, ErrorCode, get_type_uri
from modforge_common.errors.exceptions import (
    ConfigurationError,
    FileAlreadyExistsError,
    LintFixError,
    ModforgeError,
    ModforgeErrorConfig,
    ModuleResolutionError,
    PatchError,
    RouteHostNotFoundError,
    SettingsError,
    SourceNotFoundError,
    WorkspaceError,
)

__all__ = [
    "BASE_TYPE_URI",
    "ConfigurationError",
    "ErrorCode",
    "FileAlreadyExistsError",
    "LintFixError",
    "ModforgeError",
    "ModforgeErrorConfig",
    "ModuleResolutionError",
    "PatchError",
    "RouteHostNotFoundError",
    "SettingsError",
    "SourceNotFoundError",
    "WorkspaceError",
    "get_type_uri",
]
