"""Workspace configuration: projects, default paths and the Ivy capability flag."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from modforge_common.errors import WorkspaceError
from modforge_common.logging import get_logger

from modforge import jsonc
from modforge.paths import dirname, join, normalize

if TYPE_CHECKING:
    from modforge_common.settings import ModforgeSettings

    from modforge.host import Host

__all__ = [
    "TargetDefinition",
    "Workspace",
    "WorkspaceProject",
    "build_default_path",
    "get_project",
    "is_project_using_ivy",
    "load_workspace",
]

logger = get_logger(__name__)


class TargetDefinition(BaseModel):
    """One architect target (``build``, ``test``, ...)."""

    model_config = ConfigDict(extra="allow")

    builder: str | None = None
    options: dict[str, Any] = Field(default_factory=dict)
    configurations: dict[str, dict[str, Any]] = Field(default_factory=dict)


class WorkspaceProject(BaseModel):
    """A project entry of the workspace file."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    root: str = ""
    source_root: str | None = Field(default=None, alias="sourceRoot")
    project_type: str = Field(default="application", alias="projectType")
    prefix: str | None = None
    architect: dict[str, TargetDefinition] = Field(default_factory=dict)
    targets: dict[str, TargetDefinition] = Field(default_factory=dict)

    @property
    def build_target(self) -> TargetDefinition | None:
        """Return the ``build`` target from ``architect`` or ``targets``."""
        return self.architect.get("build") or self.targets.get("build")


class Workspace(BaseModel):
    """Parsed ``angular.json``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: int = 1
    default_project: str | None = Field(default=None, alias="defaultProject")
    projects: dict[str, WorkspaceProject] = Field(default_factory=dict)


def load_workspace(host: Host, settings: ModforgeSettings) -> Workspace:
    """Read and validate the first workspace file found at the workspace root.

    Raises
    ------
    WorkspaceError
        If no workspace file exists or its content does not validate.
    """
    for name in settings.workspace_files:
        path = normalize(name)
        data = host.read(path)
        if data is None:
            continue
        raw = jsonc.loads(data, source=path)
        try:
            workspace = Workspace.model_validate(raw)
        except ValidationError as exc:
            msg = f"Invalid workspace configuration in {path}: {exc}"
            raise WorkspaceError(msg, cause=exc, context={"path": path}) from exc
        logger.debug(
            "Workspace loaded",
            extra={
                "operation": "load_workspace",
                "path": path,
                "projects": len(workspace.projects),
            },
        )
        return workspace

    msg = f"Could not find a workspace configuration ({', '.join(settings.workspace_files)})."
    raise WorkspaceError(msg, context={"looked_for": list(settings.workspace_files)})


def get_project(workspace: Workspace, name: str | None) -> WorkspaceProject:
    """Return the project called ``name`` (default or sole project when None).

    Raises
    ------
    WorkspaceError
        If the project does not exist or none can be chosen.
    """
    project_name = name or workspace.default_project
    if project_name is None:
        if len(workspace.projects) != 1:
            msg = (
                f"No project was specified and the workspace defines {len(workspace.projects)} "
                "projects. Use the project option."
            )
            raise WorkspaceError(msg, context={"projects": sorted(workspace.projects)})
        project_name = next(iter(workspace.projects))

    project = workspace.projects.get(project_name)
    if project is None:
        msg = f'Project "{project_name}" does not exist.'
        raise WorkspaceError(msg, context={"project": project_name})
    return project.model_copy(update={"name": project_name})


def build_default_path(project: WorkspaceProject) -> str:
    """Return the directory new units are generated in by default.

    >>> build_default_path(WorkspaceProject(root="", sourceRoot="src"))
    '/src/app'
    >>> build_default_path(WorkspaceProject(root="projects/lib", projectType="library"))
    '/projects/lib/src/lib'
    """
    root = f"/{project.source_root}/" if project.source_root else f"/{project.root}/src/"
    kind = "app" if project.project_type == "application" else "lib"
    return normalize(root + kind)


def _enable_ivy(config: object) -> bool | None:
    if not isinstance(config, dict):
        return None
    compiler = config.get("angularCompilerOptions")
    if isinstance(compiler, dict) and "enableIvy" in compiler:
        return compiler["enableIvy"] is not False
    return None


def is_project_using_ivy(host: Host, project: WorkspaceProject) -> bool:
    """Return whether the project compiles with Ivy.

    Reads the build target's ``tsConfig`` and follows its ``extends`` chain
    until ``angularCompilerOptions.enableIvy`` is found. Ivy is on unless that
    option is explicitly ``false``; a missing tsconfig counts as on.
    """
    target = project.build_target
    ts_config = target.options.get("tsConfig") if target is not None else None
    if not isinstance(ts_config, str):
        return True

    seen: set[str] = set()
    path: str | None = normalize(ts_config)
    while path is not None and path not in seen:
        seen.add(path)
        data = host.read(path)
        if data is None:
            logger.debug(
                "tsconfig not found; assuming Ivy",
                extra={"operation": "is_project_using_ivy", "path": path},
            )
            return True
        config = jsonc.loads(data, source=path)
        enabled = _enable_ivy(config)
        if enabled is not None:
            return enabled
        parent = config.get("extends") if isinstance(config, dict) else None
        path = join(dirname(path), parent) if isinstance(parent, str) else None
    return True
