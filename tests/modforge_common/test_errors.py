"""Tests for the modforge_common.errors hierarchy."""

from __future__ import annotations

import logging

import pytest

from modforge_common.errors import (
    ConfigurationError,
    ErrorCode,
    FileAlreadyExistsError,
    LintFixError,
    ModforgeError,
    ModuleResolutionError,
    PatchError,
    RouteHostNotFoundError,
    SettingsError,
    SourceNotFoundError,
    WorkspaceError,
    get_type_uri,
)
from modforge_common.problem_details import render_problem


class TestErrorCodes:
    """Each exception carries a stable code and status."""

    @pytest.mark.parametrize(
        ("exc_type", "code", "status"),
        [
            (ConfigurationError, ErrorCode.CONFIGURATION_ERROR, 400),
            (SettingsError, ErrorCode.CONFIGURATION_ERROR, 400),
            (WorkspaceError, ErrorCode.WORKSPACE_ERROR, 400),
            (SourceNotFoundError, ErrorCode.SOURCE_NOT_FOUND, 404),
            (ModuleResolutionError, ErrorCode.MODULE_RESOLUTION_FAILURE, 404),
            (RouteHostNotFoundError, ErrorCode.ROUTE_HOST_NOT_FOUND, 422),
            (PatchError, ErrorCode.PATCH_CONFLICT, 409),
            (FileAlreadyExistsError, ErrorCode.FILE_EXISTS, 409),
            (LintFixError, ErrorCode.LINT_FIX_FAILED, 500),
        ],
    )
    def test_code_and_status(
        self, exc_type: type[ModforgeError], code: ErrorCode, status: int
    ) -> None:
        """Subclasses map to their registered code."""
        exc = exc_type("failed")
        assert exc.code is code
        assert exc.http_status == status
        assert isinstance(exc, ModforgeError)

    def test_configuration_errors_are_critical(self) -> None:
        """Option errors are logged louder than lint failures."""
        assert ConfigurationError("x").log_level == logging.CRITICAL
        assert LintFixError("x").log_level == logging.WARNING

    def test_option_errors_are_configuration_errors(self) -> None:
        """The CLI maps these to the configuration exit code."""
        assert issubclass(WorkspaceError, ConfigurationError)
        assert issubclass(SettingsError, ConfigurationError)
        assert issubclass(ModuleResolutionError, ConfigurationError)

    def test_type_uri(self) -> None:
        """Type URIs live under the problems base."""
        assert get_type_uri(ErrorCode.FILE_EXISTS) == "https://modforge.dev/problems/file-exists"


class TestProblemDetails:
    """Conversion to RFC 9457 payloads."""

    def test_payload_fields(self) -> None:
        """Context becomes the extensions member."""
        exc = RouteHostNotFoundError(
            "Couldn't find a route declaration in /src/app/app.module.ts.",
            context={"path": "/src/app/app.module.ts", "line": 3},
        )
        problem = exc.to_problem_details(instance="urn:modforge:module:1")

        assert problem["type"] == "https://modforge.dev/problems/route-host-not-found"
        assert problem["title"] == "RouteHostNotFoundError"
        assert problem["status"] == 422
        assert problem["code"] == "route-host-not-found"
        assert problem["instance"] == "urn:modforge:module:1"
        assert problem["extensions"] == {"path": "/src/app/app.module.ts", "line": 3}

    def test_render_is_single_line_json(self) -> None:
        """Rendered payloads fit one stderr line."""
        rendered = render_problem(PatchError("stale").to_problem_details())
        assert "\n" not in rendered
        assert rendered.startswith('{"type": "https://modforge.dev/problems/patch-conflict"')


class TestStringForm:
    """``str()`` of an error includes its class and code."""

    def test_includes_code(self) -> None:
        """The message follows the class name and code."""
        assert str(SourceNotFoundError("File /a.ts does not exist.")) == (
            "SourceNotFoundError[source-not-found]: File /a.ts does not exist."
        )

    def test_includes_cause(self) -> None:
        """A cause is appended after the message."""
        exc = LintFixError("Lint fix failed.", cause=RuntimeError("exit 1"))
        assert exc.__cause__ is not None
        assert str(exc).endswith("(caused by: RuntimeError)")
