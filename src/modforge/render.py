"""Jinja2 rendering of newly generated files.

Templates live in ``modforge/templates`` and receive the generator's resolved
options plus the name-casing helpers as filters (``{{ name | classify }}``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from modforge_common.logging import get_logger

from modforge.strings import camelize, classify, dasherize

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from jinja2 import Template

    from modforge.host import Host

__all__ = ["render_template", "scaffold"]

logger = get_logger(__name__)


def _build_environment() -> Environment:
    """Build the Jinja2 environment for source templates.

    Returns
    -------
    Environment
        Environment with strict undefined handling, no autoescaping, and the
        casing filters registered.
    """
    env = Environment(
        loader=PackageLoader("modforge", "templates"),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        autoescape=select_autoescape(
            enabled_extensions=(), default=False, default_for_string=False
        ),
    )
    env.filters.update(classify=classify, dasherize=dasherize, camelize=camelize)
    return env


_ENV = _build_environment()


def render_template(template: str, context: Mapping[str, object]) -> str:
    """Render ``template`` (relative to the templates directory) with ``context``."""
    compiled: Template = _ENV.get_template(template)
    return compiled.render(**context)


def scaffold(
    host: Host,
    files: Iterable[tuple[str, str]],
    context: Mapping[str, object],
) -> list[str]:
    """Render each ``(template, target_path)`` pair and stage it as a new file.

    Returns
    -------
    list[str]
        Target paths in creation order.

    Raises
    ------
    FileAlreadyExistsError
        If a target path already exists. Files staged before the failing one
        stay staged; nothing is written to disk.
    """
    created: list[str] = []
    for template, target in files:
        host.create(target, render_template(template, context))
        created.append(target)
    logger.debug(
        "Templates rendered",
        extra={"operation": "scaffold", "files": created},
    )
    return created
