"""Insertion points inside a module descriptor.

Each function inspects a lowered :class:`~modforge.syntax.SourceFile` and
returns a :class:`~modforge.changes.PendingEdit` against its unmodified bytes.
Nothing here writes; the caller commits the edits through the host.
"""

from __future__ import annotations

import re
from typing import Final

from modforge_common.errors import RouteHostNotFoundError
from modforge_common.logging import get_logger

from modforge.changes import PendingEdit
from modforge.synth import import_statement
from modforge.syntax import ArrayLiteral, Call, Expr, Identifier, ObjectLiteral, SourceFile

__all__ = [
    "find_route_table",
    "import_insertion",
    "metadata_insertion",
    "ngmodule_metadata",
    "route_insertion",
]

logger = get_logger(__name__)

_ARRAY_BREAK: Final = re.compile(r"\r?\n\s*")
_WHITESPACE: Final = frozenset(b" \t\r\n")


def _resolve(source: SourceFile, expr: Expr | None) -> Expr | None:
    """Follow a bare identifier to the value of the top-level variable it names."""
    match expr:
        case Identifier(name=name):
            variable = source.variable(name)
            return variable.value if variable is not None else None
        case _:
            return expr


def _leading_break(data: bytes, start: int) -> str:
    """Return the newline and indentation right before ``start`` (or "")."""
    cursor = start
    while cursor > 0 and data[cursor - 1] in _WHITESPACE:
        cursor -= 1
    gap = data[cursor:start].decode("utf-8")
    newline = gap.rfind("\n")
    if newline < 0:
        return ""
    if newline > 0 and gap[newline - 1] == "\r":
        newline -= 1
    return gap[newline:]


def ngmodule_metadata(source: SourceFile) -> ObjectLiteral | None:
    """Return the metadata object passed to ``@NgModule``, if any."""
    decorator = source.decorator("NgModule")
    if decorator is None or not decorator.arguments:
        return None
    match _resolve(source, decorator.arguments[0]):
        case ObjectLiteral() as metadata:
            return metadata
        case _:
            return None


def import_insertion(source: SourceFile, symbol: str, import_path: str) -> PendingEdit:
    """Compute the edit adding ``import { symbol } from 'import_path';``.

    The statement goes right after the last top-level import, or at the very
    top of the file when there is none. Existing imports of the same symbol
    are not detected, so running twice inserts the statement twice.

    Parameters
    ----------
    source : SourceFile
        Lowered descriptor.
    symbol : str
        Class name to import, e.g. ``WidgetModule``.
    import_path : str
        Relative module specifier, e.g. ``./widget/widget.module``.

    Returns
    -------
    PendingEdit
        Left-insert against ``source.data``.
    """
    statement = import_statement(symbol, import_path)
    if source.imports:
        anchor = source.imports[-1].span.end
        return PendingEdit(source.path, anchor, "\n" + statement)
    return PendingEdit(source.path, 0, statement + "\n")


def metadata_insertion(source: SourceFile, field: str, symbol: str) -> PendingEdit | None:
    """Compute the edit listing ``symbol`` in the ``@NgModule`` array ``field``.

    Returns ``None`` when the descriptor has no ``@NgModule`` metadata object,
    or when ``field`` holds something other than an array literal.
    """
    metadata = ngmodule_metadata(source)
    if metadata is None:
        logger.debug(
            "No NgModule metadata; skipping registration",
            extra={"operation": "metadata_insertion", "path": source.path, "field": field},
        )
        return None

    prop = metadata.get(field)
    if prop is None:
        if not metadata.properties:
            return PendingEdit(source.path, metadata.span.start + 1, f" {field}: [{symbol}] ")
        last = metadata.properties[-1]
        separator = _leading_break(source.data, last.span.start) or " "
        return PendingEdit(source.path, last.span.end, f",{separator}{field}: [{symbol}]")

    match _resolve(source, prop.value):
        case ArrayLiteral(elements=()) as array:
            return PendingEdit(source.path, array.close_offset, symbol)
        case ArrayLiteral(elements=elements):
            last_element = elements[-1]
            separator = _leading_break(source.data, last_element.span.start) or " "
            return PendingEdit(source.path, last_element.span.end, f",{separator}{symbol}")
        case _:
            logger.warning(
                "NgModule field is not an array literal; skipping registration",
                extra={
                    "operation": "metadata_insertion",
                    "status": "skipped",
                    "path": source.path,
                    "field": field,
                },
            )
            return None


def find_route_table(source: SourceFile) -> ArrayLiteral:
    """Return the route array passed to the first ``RouterModule.*`` call.

    Raises
    ------
    RouteHostNotFoundError
        If there is no router call in the ``@NgModule`` imports, the call has no
        arguments, or its first argument does not lead to an array literal.
    """
    metadata = ngmodule_metadata(source)
    prop = metadata.get("imports") if metadata is not None else None
    imports = _resolve(source, prop.value) if prop is not None else None
    router_call: Call | None = None
    if isinstance(imports, ArrayLiteral):
        router_call = next(
            (
                element
                for element in imports.elements
                if isinstance(element, Call) and element.callee.startswith("RouterModule")
            ),
            None,
        )
    if router_call is None:
        msg = f"Couldn't find a route declaration in {source.path}."
        raise RouteHostNotFoundError(msg, context={"path": source.path})

    line = source.line_of(router_call.span.start)
    if not router_call.arguments:
        msg = f"The router module method doesn't have arguments at line {line} in {source.path}"
        raise RouteHostNotFoundError(msg, context={"path": source.path, "line": line})

    match _resolve(source, router_call.arguments[0]):
        case ArrayLiteral() as routes:
            return routes
        case _:
            msg = (
                "No route declaration array was found that corresponds to router module "
                f"at line {line} in {source.path}"
            )
            raise RouteHostNotFoundError(msg, context={"path": source.path, "line": line})


def route_insertion(source: SourceFile, entry: str) -> PendingEdit:
    """Compute the edit appending ``entry`` to the descriptor's route table.

    The entry lands after the last element, separated by a comma and the
    array's first line break and indentation (a single space for one-line
    arrays). An empty table receives the bare entry right after ``[``.
    """
    routes = find_route_table(source)
    if not routes.elements:
        return PendingEdit(source.path, routes.open_offset, entry)

    found = _ARRAY_BREAK.search(source.text(routes.span))
    separator = found.group(0) if found else " "
    last = routes.elements[-1]
    return PendingEdit(source.path, last.span.end, f",{separator}{entry}")
