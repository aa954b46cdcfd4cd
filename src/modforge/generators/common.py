"""Steps shared by the generators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modforge_common.errors import SourceNotFoundError
from modforge_common.logging import get_logger

from modforge.analyzer import import_insertion, metadata_insertion
from modforge.paths import build_relative_path, dirname, join
from modforge.strings import dasherize
from modforge.syntax import SourceFile, parse_source

if TYPE_CHECKING:
    from modforge.host import Host

__all__ = ["read_source", "register_symbol", "unit_directory"]

logger = get_logger(__name__)


def read_source(host: Host, path: str, missing: str | None = None) -> SourceFile:
    """Read and lower the descriptor at ``path``.

    Raises
    ------
    SourceNotFoundError
        If ``path`` cannot be read; ``missing`` overrides the message.
    """
    data = host.read(path)
    if data is None:
        msg = missing or f"File {path} does not exist."
        raise SourceNotFoundError(msg, context={"path": path})
    return parse_source(path, data)


def unit_directory(path: str, name: str, *, flat: bool) -> str:
    """Return the directory a unit named ``name`` is generated into."""
    return path if flat else join(path, dasherize(name))


def register_symbol(host: Host, module_path: str, symbol: str, target: str, field: str) -> None:
    """Import ``symbol`` from ``target`` into ``module_path`` and list it under ``field``.

    The import line and the metadata entry are committed as one patch.
    ``target`` is the generated file's path without extension.
    """
    source = read_source(host, module_path)
    relative = build_relative_path(module_path, target)
    edits = [import_insertion(source, symbol, relative)]
    registration = metadata_insertion(source, field, symbol)
    if registration is not None:
        edits.append(registration)
    host.commit_edits(module_path, edits)
    logger.info(
        "Symbol registered",
        extra={
            "operation": "register_symbol",
            "path": module_path,
            "symbol": symbol,
            "field": field,
            "from": dirname(target),
        },
    )
