"""Module generator.

Creates ``<name>.module.ts`` (and optionally its routing module) and wires the
new module into an existing descriptor. The run is a fixed sequence of states:

``ValidateOptions`` → ``ResolvePaths`` → ``DecideLazyRouting`` →
``ConditionallyAddImport`` → ``ConditionallyAddRoute`` →
``ConditionallyGenerateSubUnit`` → ``ApplyTemplate`` →
``ConditionallyLintFix`` → ``Done``.

A direct registration imports the module into the target descriptor. A lazy
registration (``route`` and ``module`` both set) adds a ``loadChildren`` route
to the target's routing sibling, or to the target itself, and generates a
companion component serving as the route's landing page.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modforge_common.errors import ConfigurationError
from modforge_common.logging import LoggerAdapter, get_logger, measure_duration, with_fields
from modforge_common.settings import load_settings

from modforge.analyzer import route_insertion
from modforge.generators.common import read_source, register_symbol, unit_directory
from modforge.generators.component import generate_component
from modforge.options import ComponentOptions, ModuleOptions, RegistrationMode, RoutingScope
from modforge.paths import (
    Resolution,
    Resolved,
    Unresolved,
    build_relative_path,
    find_module_from_options,
    join,
    parse_name,
    resolve_routing_sibling,
)
from modforge.plan import GenerationPlan, LintFix
from modforge.render import scaffold
from modforge.strings import classify, dasherize
from modforge.synth import SynthesisContext, route_entry
from modforge.workspace import (
    build_default_path,
    get_project,
    is_project_using_ivy,
    load_workspace,
)

if TYPE_CHECKING:
    from modforge_common.settings import ModforgeSettings

    from modforge.host import Host

__all__ = ["generate_module", "validate_options"]

logger = get_logger(__name__)

ROUTE_WITHOUT_MODULE = "Module option required when creating a lazy loaded routing module."


def validate_options(options: ModuleOptions) -> None:
    """Reject option combinations that cannot be generated.

    Raises
    ------
    ConfigurationError
        If ``route`` is set without ``module``.
    """
    if options.route and not options.module:
        raise ConfigurationError(ROUTE_WITHOUT_MODULE, context={"route": options.route})


def _enter(log: LoggerAdapter, state: str) -> None:
    log.debug("Entering state", extra={"state": state})


def _module_target(options: ModuleOptions, settings: ModforgeSettings) -> str:
    """Return the generated module's path without its ``.ts`` extension."""
    stem = dasherize(options.name) + settings.module_ext.removesuffix(".ts")
    return join(unit_directory(options.path or "/", options.name, flat=options.flat), stem)


def _add_route(
    host: Host,
    route_host: str,
    options: ModuleOptions,
    target: str,
    context: SynthesisContext,
) -> None:
    source = read_source(
        host, route_host, missing="Couldn't find the module nor its routing module."
    )
    entry = route_entry(
        context,
        options.route or "",
        build_relative_path(route_host, target),
        f"{classify(options.name)}Module",
    )
    host.commit_edits(route_host, [route_insertion(source, entry)])


def _template_files(
    options: ModuleOptions, settings: ModforgeSettings, *, with_routing: bool
) -> list[tuple[str, str]]:
    directory = unit_directory(options.path or "/", options.name, flat=options.flat)
    stem = dasherize(options.name)
    files = [("module/module.ts.j2", join(directory, stem + settings.module_ext))]
    if with_routing:
        files.append(
            ("module/routing.module.ts.j2", join(directory, stem + settings.routing_module_ext))
        )
    return files


def _module_imports(
    options: ModuleOptions, *, routing_module: bool, inline_routes: bool
) -> list[str]:
    imports: list[str] = []
    if options.common_module:
        imports.append("CommonModule")
    if routing_module:
        imports.append(f"{classify(options.name)}RoutingModule")
    if inline_routes:
        imports.append("RouterModule.forChild(routes)")
    return imports


def generate_module(
    host: Host,
    options: ModuleOptions,
    settings: ModforgeSettings | None = None,
) -> GenerationPlan:
    """Generate a module and register it.

    Parameters
    ----------
    host : Host
        Staged workspace. All edits and new files are staged on it.
    options : ModuleOptions
        Caller options; never mutated.
    settings : ModforgeSettings | None, optional
        Runtime settings. Loaded from the environment when None.

    Returns
    -------
    GenerationPlan
        Every file the host staged, followed by a lint-fix action when
        ``options.lint_fix`` is set.

    Raises
    ------
    ConfigurationError
        If ``route`` is given without ``module``. Nothing has been read yet.
    WorkspaceError
        If the workspace file or project cannot be loaded.
    ModuleResolutionError
        If an explicit ``module`` does not resolve.
    SourceNotFoundError
        If a descriptor to edit cannot be read.
    RouteHostNotFoundError
        If the route host has no recognizable route table.
    FileAlreadyExistsError
        If a generated file already exists.
    """
    started = measure_duration()
    with with_fields(logger, operation="generate_module", unit=options.name) as log:
        _enter(log, "ValidateOptions")
        validate_options(options)
        settings = settings or load_settings()
        exts = (settings.module_ext, settings.routing_module_ext)

        _enter(log, "ResolvePaths")
        project = get_project(load_workspace(host, settings), options.project)
        resolved = options.model_copy(
            update={"path": options.path or build_default_path(project), "project": project.name}
        )
        if resolved.module:
            module_path = find_module_from_options(host, resolved, *exts)
            resolved = resolved.model_copy(update={"module": module_path})
        location = parse_name(resolved.path or "/", resolved.name)
        resolved = resolved.model_copy(update={"name": location.name, "path": location.path})
        context = SynthesisContext.from_capability(is_project_using_ivy(host, project))

        _enter(log, "DecideLazyRouting")
        mode = resolved.registration_mode
        sibling: Resolution = Unresolved(identifier="", reason="not a lazy route")
        if mode is RegistrationMode.LAZY_ROUTE:
            resolved = resolved.model_copy(update={"routing_scope": RoutingScope.CHILD})
            sibling = resolve_routing_sibling(host, resolved, *exts)
        log.debug(
            "Registration mode decided",
            extra={"mode": mode.value, "sibling": isinstance(sibling, Resolved)},
        )

        target = _module_target(resolved, settings)
        symbol = f"{classify(resolved.name)}Module"

        _enter(log, "ConditionallyAddImport")
        if mode is RegistrationMode.DIRECT_IMPORT and resolved.module:
            register_symbol(host, resolved.module, symbol, target, field="imports")

        _enter(log, "ConditionallyAddRoute")
        if resolved.route and resolved.module:
            _add_route(host, sibling.unwrap_or(resolved.module), resolved, target, context)

        _enter(log, "ConditionallyGenerateSubUnit")
        lazy = mode is RegistrationMode.LAZY_ROUTE
        if lazy:
            generate_component(
                host,
                ComponentOptions(
                    name=resolved.name,
                    path=resolved.path,
                    project=resolved.project,
                    flat=resolved.flat,
                    skip_import=True,
                ),
                settings,
            )

        _enter(log, "ApplyTemplate")
        routing_module = resolved.routing or (lazy and isinstance(sibling, Resolved))
        inline_routes = lazy and not routing_module
        scaffold(
            host,
            _template_files(resolved, settings, with_routing=routing_module),
            {
                "name": resolved.name,
                "common_module": resolved.common_module,
                "routing_module": routing_module,
                "inline_routes": inline_routes,
                "lazy_route": lazy,
                "routing_scope": resolved.routing_scope.value,
                "imports": _module_imports(
                    resolved, routing_module=routing_module, inline_routes=inline_routes
                ),
            },
        )

        _enter(log, "ConditionallyLintFix")
        plan = GenerationPlan(host.actions())
        if resolved.lint_fix:
            plan = plan.extend(LintFix(path=resolved.path or "/"))

        _enter(log, "Done")
        log.info(
            "Module generated",
            extra={
                "status": "success",
                "mode": mode.value,
                "actions": len(plan),
                "duration_ms": round((measure_duration() - started) * 1000, 2),
            },
        )
        return plan
