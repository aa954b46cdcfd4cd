"""Runtime settings with typed configuration and fail-fast validation.

Settings are read from ``MODFORGE_*`` environment variables and may be
overridden by keyword arguments (the CLI passes its flags through here).

Examples
--------
>>> from modforge_common.settings import load_settings
>>> settings = load_settings(module_ext=".module.ts")
>>> settings.routing_module_ext
'-routing.module.ts'
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from modforge_common.errors import SettingsError
from modforge_common.logging import get_logger

__all__ = [
    "ModforgeSettings",
    "load_settings",
]

logger = get_logger(__name__)


class ModforgeSettings(BaseSettings):
    """Generator configuration (``MODFORGE_*`` namespace)."""

    model_config = SettingsConfigDict(
        env_prefix="MODFORGE_",
        extra="forbid",
        case_sensitive=False,
        frozen=True,
    )

    workspace_files: tuple[str, ...] = Field(
        default=("angular.json", ".angular.json"),
        description="Workspace file names probed at the workspace root, in order",
    )
    module_ext: str = Field(default=".module.ts", description="Module descriptor suffix")
    routing_module_ext: str = Field(
        default="-routing.module.ts", description="Routing descriptor suffix"
    )
    style_ext: str = Field(default="css", description="Stylesheet extension for components")
    lint_command: tuple[str, ...] = Field(
        default=("npx", "eslint", "--fix"),
        description="Command run by the lint-fix pass; the target directory is appended",
    )
    lint_timeout: int = Field(default=300, ge=1, le=3600, description="Lint-fix timeout (s)")
    log_level: str = Field(default="WARNING", description="Logging level for the CLI")

    @field_validator("log_level")
    @classmethod
    def _normalise_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"Unknown log level: {value}"
            raise ValueError(msg)
        return level

    @field_validator("module_ext", "routing_module_ext")
    @classmethod
    def _require_extension(cls, value: str) -> str:
        if not value.endswith(".ts"):
            msg = f"Descriptor suffix must end with '.ts': {value}"
            raise ValueError(msg)
        return value


def load_settings(**overrides: object) -> ModforgeSettings:
    """Load :class:`ModforgeSettings` with optional overrides.

    Parameters
    ----------
    **overrides : object
        Field values taking precedence over the environment.

    Returns
    -------
    ModforgeSettings
        Validated settings.

    Raises
    ------
    SettingsError
        If validation fails.
    """
    try:
        return ModforgeSettings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        msg = f"Configuration validation failed: {exc}"
        logger.exception(
            "Settings validation failed",
            extra={"operation": "load_settings", "error_type": type(exc).__name__},
        )
        raise SettingsError(msg, cause=exc, context={"validation_error": str(exc)}) from exc
