"""Generator options.

Options are frozen pydantic models. Generators derive resolved copies with
``model_copy(update=...)`` and never mutate the caller's instance.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "ComponentOptions",
    "ModuleOptions",
    "RegistrationMode",
    "RoutingScope",
]


class RoutingScope(StrEnum):
    """Router registration method used by a generated routing module."""

    ROOT = "Root"
    CHILD = "Child"


class RegistrationMode(StrEnum):
    """How a generated module is wired into its parent descriptor.

    ``DIRECT_IMPORT`` adds an import line and an ``imports`` entry.
    ``LAZY_ROUTE`` adds a lazily loaded route instead and no import.
    """

    DIRECT_IMPORT = "direct-import"
    LAZY_ROUTE = "lazy-route"


class ModuleOptions(BaseModel):
    """Options of the module generator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1, description="Name of the module, may include directories")
    path: str | None = Field(default=None, description="Directory the module is created under")
    project: str | None = Field(default=None, description="Workspace project name")
    module: str | None = Field(default=None, description="Descriptor to register the module in")
    route: str | None = Field(default=None, description="Route path of a lazy loaded module")
    routing_scope: RoutingScope = RoutingScope.CHILD
    flat: bool = False
    routing: bool = False
    lint_fix: bool = False
    skip_import: bool = False
    common_module: bool = True

    @property
    def registration_mode(self) -> RegistrationMode:
        """``LAZY_ROUTE`` when both ``route`` and ``module`` are set."""
        if self.route and self.module:
            return RegistrationMode.LAZY_ROUTE
        return RegistrationMode.DIRECT_IMPORT


class ComponentOptions(BaseModel):
    """Options of the component generator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    path: str | None = None
    project: str | None = None
    module: str | None = None
    flat: bool = False
    skip_import: bool = False
    skip_tests: bool = False
    prefix: str | None = None
    selector: str | None = None
    style: str | None = None
    lint_fix: bool = False
