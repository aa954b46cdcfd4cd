"""Component generator.

Renders ``<name>.component.{ts,html,<style>}`` plus a spec file, and declares
the component in the closest (or the explicitly named) module descriptor.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modforge_common.logging import get_logger, measure_duration, with_fields
from modforge_common.settings import load_settings

from modforge.generators.common import register_symbol, unit_directory
from modforge.paths import find_module_from_options, join, parse_name
from modforge.plan import GenerationPlan, LintFix
from modforge.render import scaffold
from modforge.strings import classify, dasherize
from modforge.workspace import build_default_path, get_project, load_workspace

if TYPE_CHECKING:
    from modforge_common.settings import ModforgeSettings

    from modforge.host import Host
    from modforge.options import ComponentOptions

__all__ = ["build_selector", "generate_component"]

logger = get_logger(__name__)


def build_selector(name: str, prefix: str | None) -> str:
    """Return the element selector for component ``name``.

    >>> build_selector("userProfile", "app")
    'app-user-profile'
    >>> build_selector("userProfile", None)
    'user-profile'
    """
    return f"{prefix}-{dasherize(name)}" if prefix else dasherize(name)


def generate_component(
    host: Host,
    options: ComponentOptions,
    settings: ModforgeSettings | None = None,
) -> GenerationPlan:
    """Generate a component and declare it in its module.

    Parameters
    ----------
    host : Host
        Staged workspace.
    options : ComponentOptions
        Caller options; never mutated.
    settings : ModforgeSettings | None, optional
        Runtime settings. Loaded from the environment when None.

    Returns
    -------
    GenerationPlan
        Every file the host has staged so far, followed by a lint-fix action
        when requested.
    """
    started = measure_duration()
    with with_fields(logger, operation="generate_component", unit=options.name) as log:
        settings = settings or load_settings()
        project = get_project(load_workspace(host, settings), options.project)
        resolved = options.model_copy(
            update={"path": options.path or build_default_path(project), "project": project.name}
        )
        module_path = find_module_from_options(
            host, resolved, settings.module_ext, settings.routing_module_ext
        )
        location = parse_name(resolved.path or "/", resolved.name)
        resolved = resolved.model_copy(update={"name": location.name, "path": location.path})

        prefix = resolved.prefix if resolved.prefix is not None else project.prefix
        selector = resolved.selector or build_selector(resolved.name, prefix)
        style = resolved.style or settings.style_ext
        directory = unit_directory(location.path, location.name, flat=resolved.flat)
        stem = join(directory, f"{dasherize(location.name)}.component")

        if module_path is not None:
            register_symbol(
                host,
                module_path,
                f"{classify(location.name)}Component",
                stem,
                field="declarations",
            )

        files = [
            ("component/component.ts.j2", f"{stem}.ts"),
            ("component/component.html.j2", f"{stem}.html"),
            ("component/component.style.j2", f"{stem}.{style}"),
        ]
        if not resolved.skip_tests:
            files.append(("component/component.spec.ts.j2", f"{stem}.spec.ts"))
        scaffold(
            host,
            files,
            {"name": location.name, "selector": selector, "style": style},
        )

        plan = GenerationPlan(host.actions())
        if resolved.lint_fix:
            plan = plan.extend(LintFix(path=location.path))
        log.info(
            "Component generated",
            extra={
                "status": "success",
                "declared_in": module_path,
                "actions": len(plan),
                "duration_ms": round((measure_duration() - started) * 1000, 2),
            },
        )
        return plan
