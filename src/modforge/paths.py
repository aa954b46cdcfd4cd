"""Virtual path helpers and module descriptor resolution.

Virtual paths are POSIX strings rooted at the workspace (``/src/app``). The
resolution helpers locate the module descriptor a generated unit registers
into, and the optional ``-routing`` sibling that holds its route table.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from modforge_common.errors import ModuleResolutionError
from modforge_common.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = [
    "MODULE_EXT",
    "ROUTING_MODULE_EXT",
    "Location",
    "ModuleLookup",
    "Resolution",
    "Resolved",
    "Unresolved",
    "basename",
    "build_relative_path",
    "dirname",
    "find_module",
    "find_module_from_options",
    "join",
    "normalize",
    "parse_name",
    "resolve_routing_sibling",
    "routing_sibling_identifier",
]

logger = get_logger(__name__)

MODULE_EXT = ".module.ts"
ROUTING_MODULE_EXT = "-routing.module.ts"


class FileTree(Protocol):
    """Read-only view of the staged workspace used during resolution."""

    def exists(self, path: str) -> bool: ...

    def list_files(self, directory: str) -> list[str]: ...


class ModuleLookup(Protocol):
    """Option fields consulted by :func:`find_module_from_options`."""

    @property
    def name(self) -> str: ...

    @property
    def path(self) -> str | None: ...

    @property
    def module(self) -> str | None: ...

    @property
    def skip_import(self) -> bool: ...


def normalize(path: str) -> str:
    """Return ``path`` as an absolute, collapsed POSIX path.

    >>> normalize("src//app/./widget/../")
    '/src/app'
    """
    collapsed = posixpath.normpath("/" + path.replace("\\", "/"))
    while collapsed.startswith("//"):
        collapsed = collapsed[1:]
    return collapsed


def join(*parts: str) -> str:
    """Concatenate and normalize path segments.

    A segment starting with ``/`` does not discard the ones before it.

    >>> join("/src/app", "/admin/users")
    '/src/app/admin/users'
    """
    return normalize("/".join(part for part in parts if part))


def dirname(path: str) -> str:
    """Return the parent of a virtual path (``/`` for the root)."""
    return posixpath.dirname(normalize(path)) or "/"


def basename(path: str) -> str:
    """Return the final component of a virtual path."""
    return posixpath.basename(normalize(path))


def _ancestors(path: str) -> Iterator[str]:
    current = normalize(path)
    while current != "/":
        yield current
        current = dirname(current)


@dataclass(frozen=True, slots=True)
class Location:
    """A generated unit's leaf name and the directory it is generated in."""

    name: str
    path: str


def parse_name(path: str, name: str) -> Location:
    """Split ``name`` (which may carry directories) against base ``path``.

    >>> parse_name("/src/app", "admin/users")
    Location(name='users', path='/src/app/admin')
    """
    leaf = basename(name)
    directory = dirname(join(path, name))
    return Location(name=leaf, path=directory)


def build_relative_path(from_path: str, to_path: str) -> str:
    """Return the import specifier leading from file ``from_path`` to ``to_path``.

    >>> build_relative_path("/src/app/app.module.ts", "/src/app/widget/widget.module")
    './widget/widget.module'
    >>> build_relative_path("/src/app/a/a.module.ts", "/src/app/b/b.module")
    '../b/b.module'
    """
    from_dir = dirname(from_path)
    to_norm = normalize(to_path)
    to_dir = dirname(to_norm)
    to_file = basename(to_norm)

    relative = posixpath.relpath(to_dir, from_dir)
    if relative == ".":
        relative = ""
    prefix = "./" if not relative or not relative.startswith(".") else ""
    return prefix + (f"{relative}/" if relative else "") + to_file


def find_module(
    host: FileTree,
    generate_dir: str,
    module_ext: str = MODULE_EXT,
    routing_module_ext: str = ROUTING_MODULE_EXT,
) -> str:
    """Find the closest module descriptor walking up from ``generate_dir``.

    Raises
    ------
    ModuleResolutionError
        If a directory holds more than one candidate, or no ancestor holds one.
    """
    directory: str | None = normalize(generate_dir)
    while directory is not None:
        matches = [
            name
            for name in host.list_files(directory)
            if name.endswith(module_ext) and not name.endswith(routing_module_ext)
        ]
        if len(matches) == 1:
            return join(directory, matches[0])
        if len(matches) > 1:
            msg = (
                "More than one module matches. Use the skip-import option to skip importing "
                "the component into the closest module or use the module option to specify "
                "a module."
            )
            raise ModuleResolutionError(msg, context={"directory": directory, "matches": matches})
        directory = None if directory == "/" else dirname(directory)

    msg = (
        "Could not find an NgModule. Use the skip-import option to skip importing in NgModule."
    )
    raise ModuleResolutionError(msg, context={"directory": normalize(generate_dir)})


def find_module_from_options(
    host: FileTree,
    options: ModuleLookup,
    module_ext: str = MODULE_EXT,
    routing_module_ext: str = ROUTING_MODULE_EXT,
) -> str | None:
    """Resolve the descriptor named by ``options.module``.

    Returns ``None`` when ``skip_import`` is set. Without a ``module`` option the
    closest descriptor above ``path/name`` is used.

    Raises
    ------
    ModuleResolutionError
        If no candidate file exists.
    """
    if options.skip_import:
        return None

    base_path = options.path or "/"
    if not options.module:
        return find_module(host, join(base_path, options.name), module_ext, routing_module_ext)

    module_path = join(base_path, options.module)
    component_path = join(base_path, options.name)
    module_base_name = basename(module_path)

    candidates: dict[str, None] = {normalize(base_path): None}
    for directory in _ancestors(module_path):
        candidates.setdefault(directory, None)
    for directory in _ancestors(component_path):
        candidates.setdefault(directory, None)

    candidate_dirs = sorted(candidates, key=len, reverse=True)
    for directory in candidate_dirs:
        for suffix in ("", ".ts", module_ext):
            candidate = join(directory, module_base_name + suffix)
            if host.exists(candidate):
                return candidate

    searched = "\n    ".join(candidate_dirs)
    msg = (
        f"Specified module '{options.module}' does not exist.\n"
        f"Looked in the following directories:\n    {searched}"
    )
    raise ModuleResolutionError(msg, context={"module": options.module, "searched": candidate_dirs})


@dataclass(frozen=True, slots=True)
class Resolved:
    """A lookup that found a file."""

    path: str

    def unwrap_or(self, default: str) -> str:
        del default
        return self.path


@dataclass(frozen=True, slots=True)
class Unresolved:
    """A lookup that found nothing; ``reason`` says why."""

    identifier: str
    reason: str

    def unwrap_or(self, default: str) -> str:
        return default


type Resolution = Resolved | Unresolved


def routing_sibling_identifier(module_path: str) -> str:
    """Return the identifier of the routing sibling of ``module_path``.

    >>> routing_sibling_identifier("/src/app/foo.module.ts")
    'foo-routing'
    """
    return basename(module_path).split(".", 1)[0] + "-routing"


@dataclass(frozen=True, slots=True)
class _SiblingLookup:
    name: str
    path: str | None
    module: str | None
    skip_import: bool = False


def resolve_routing_sibling(
    host: FileTree,
    options: ModuleLookup,
    module_ext: str = MODULE_EXT,
    routing_module_ext: str = ROUTING_MODULE_EXT,
) -> Resolution:
    """Locate the ``-routing`` sibling of the resolved ``options.module``.

    A miss is returned as :class:`Unresolved`, never raised.
    """
    if not options.module:
        return Unresolved(identifier="", reason="no module to derive a routing sibling from")

    identifier = routing_sibling_identifier(options.module)
    lookup = _SiblingLookup(
        name=options.name,
        path=dirname(options.module),
        module=identifier,
    )
    try:
        found = find_module_from_options(host, lookup, module_ext, routing_module_ext)
    except ModuleResolutionError as exc:
        logger.debug(
            "Routing sibling not found",
            extra={"operation": "resolve_routing_sibling", "identifier": identifier},
        )
        return Unresolved(identifier=identifier, reason=exc.message)
    if found is None:
        return Unresolved(identifier=identifier, reason="lookup skipped")
    return Resolved(path=found)
