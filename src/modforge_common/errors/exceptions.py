"""Typed exception hierarchy with Problem Details support.

All modforge exceptions inherit from :class:`ModforgeError`, which carries a
stable :class:`~modforge_common.errors.codes.ErrorCode`, a status, a log level,
an optional cause, and a free-form context mapping.

Examples
--------
>>> from modforge_common.errors import ErrorCode, SourceNotFoundError
>>> try:
...     raise SourceNotFoundError("File /src/app/app.module.ts does not exist.")
... except SourceNotFoundError as e:
...     assert e.code == ErrorCode.SOURCE_NOT_FOUND
...     details = e.to_problem_details(instance="urn:modforge:module")
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from modforge_common.errors.codes import ErrorCode, get_type_uri
from modforge_common.problem_details import ProblemDetails, build_problem_details

__all__ = [
    "ConfigurationError",
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
]


@dataclass(slots=True)
class ModforgeErrorConfig:
    """Configuration options used when instantiating :class:`ModforgeError`."""

    code: ErrorCode = ErrorCode.RUNTIME_ERROR
    http_status: int = 500
    log_level: int = logging.ERROR
    cause: Exception | None = None
    context: Mapping[str, object] | None = None


class ModforgeError(Exception):
    """Base exception for all modforge errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    config : ModforgeErrorConfig | None, optional
        Structured configuration for the error. Defaults to None.

    Attributes
    ----------
    message : str
        Human-readable error message.
    code : ErrorCode
        Error code enum value.
    http_status : int
        Status code used in Problem Details payloads.
    log_level : int
        Logging level used when the error is reported.
    context : dict[str, object]
        Additional context for error details.
    """

    def __init__(self, message: str, *, config: ModforgeErrorConfig | None = None) -> None:
        resolved = config or ModforgeErrorConfig()
        super().__init__(message)
        self.message = message
        self.code = resolved.code
        self.http_status = resolved.http_status
        self.log_level = resolved.log_level
        self.context = dict(resolved.context) if resolved.context else {}
        if resolved.cause is not None:
            self.__cause__ = resolved.cause

    def to_problem_details(
        self,
        instance: str | None = None,
        title: str | None = None,
    ) -> ProblemDetails:
        """Convert to RFC 9457 Problem Details.

        Parameters
        ----------
        instance : str | None, optional
            URI identifying the specific occurrence. Defaults to None.
        title : str | None, optional
            Short summary. Defaults to the exception class name.

        Returns
        -------
        ProblemDetails
            Problem Details payload with type, title, status, detail, code,
            instance, and optional context extensions.
        """
        return build_problem_details(
            problem_type=get_type_uri(self.code),
            title=title or self.__class__.__name__,
            status=self.http_status,
            detail=self.message,
            instance=instance or "urn:modforge:error",
            code=self.code.value,
            extensions=self.context or None,
        )

    def __str__(self) -> str:
        """Return formatted error string.

        Returns
        -------
        str
            Formatted error string (e.g., "PatchError[patch-conflict]: ...").
        """
        base = f"{self.__class__.__name__}[{self.code.value}]: {self.message}"
        if self.__cause__:
            base += f" (caused by: {type(self.__cause__).__name__})"
        return base


def _config(
    code: ErrorCode,
    http_status: int,
    cause: Exception | None,
    context: Mapping[str, object] | None,
    log_level: int = logging.ERROR,
) -> ModforgeErrorConfig:
    return ModforgeErrorConfig(
        code=code,
        http_status=http_status,
        log_level=log_level,
        cause=cause,
        context=context,
    )


class ConfigurationError(ModforgeError):
    """Invalid options, settings, or environment.

    Raised before any file is touched, e.g. when a route is requested without a
    target module, or when a Tree-sitter grammar package is missing.
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=_config(
                ErrorCode.CONFIGURATION_ERROR, 400, cause, context, log_level=logging.CRITICAL
            ),
        )


class SettingsError(ConfigurationError):
    """Runtime settings failed validation."""


class WorkspaceError(ConfigurationError):
    """The workspace file is missing, malformed, or lacks the requested project."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, cause=cause, context=context)
        self.code = ErrorCode.WORKSPACE_ERROR


class SourceNotFoundError(ModforgeError):
    """A module descriptor could not be read."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, config=_config(ErrorCode.SOURCE_NOT_FOUND, 404, cause, context))


class ModuleResolutionError(ConfigurationError):
    """An explicit ``module`` option did not match exactly one descriptor."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, cause=cause, context=context)
        self.code = ErrorCode.MODULE_RESOLUTION_FAILURE
        self.http_status = 404


class RouteHostNotFoundError(ModforgeError):
    """No recognizable route table exists in the chosen descriptor."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=_config(ErrorCode.ROUTE_HOST_NOT_FOUND, 422, cause, context),
        )


class PatchError(ModforgeError):
    """A pending insert cannot be applied to the staged text."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, config=_config(ErrorCode.PATCH_CONFLICT, 409, cause, context))


class FileAlreadyExistsError(ModforgeError):
    """Scaffolding would overwrite an existing file."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(message, config=_config(ErrorCode.FILE_EXISTS, 409, cause, context))


class LintFixError(ModforgeError):
    """The post-generation lint-fix command failed or timed out."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        super().__init__(
            message,
            config=_config(
                ErrorCode.LINT_FIX_FAILED, 500, cause, context, log_level=logging.WARNING
            ),
        )
