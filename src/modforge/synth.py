"""Text synthesis for import lines and lazy route entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

__all__ = [
    "LoaderStyle",
    "SynthesisContext",
    "import_statement",
    "loader_expression",
    "route_entry",
]


class LoaderStyle(StrEnum):
    """Shape of the ``loadChildren`` value of a lazy route."""

    DYNAMIC_IMPORT = "dynamic-import"
    STRING_REFERENCE = "string-reference"


@dataclass(frozen=True, slots=True)
class SynthesisContext:
    """Per-run inputs of the synthesizer.

    Built once by the orchestrator from the workspace capability flag and
    passed explicitly to every synthesis call.
    """

    loader_style: LoaderStyle = LoaderStyle.DYNAMIC_IMPORT

    @classmethod
    def from_capability(cls, dynamic_import: bool) -> SynthesisContext:
        """Pick the loader style from the advanced compilation mode flag."""
        style = LoaderStyle.DYNAMIC_IMPORT if dynamic_import else LoaderStyle.STRING_REFERENCE
        return cls(loader_style=style)


def import_statement(symbol: str, import_path: str) -> str:
    """Return a single-symbol named import.

    >>> import_statement("WidgetModule", "./widget/widget.module")
    "import { WidgetModule } from './widget/widget.module';"
    """
    return f"import {{ {symbol} }} from '{import_path}';"


def loader_expression(context: SynthesisContext, module_path: str, module_name: str) -> str:
    """Return the ``loadChildren`` value for ``module_name`` at ``module_path``.

    >>> ctx = SynthesisContext.from_capability(False)
    >>> loader_expression(ctx, "./widget/widget.module", "WidgetModule")
    "'./widget/widget.module#WidgetModule'"
    """
    match context.loader_style:
        case LoaderStyle.DYNAMIC_IMPORT:
            return f"() => import('{module_path}').then(m => m.{module_name})"
        case LoaderStyle.STRING_REFERENCE:
            return f"'{module_path}#{module_name}'"


def route_entry(
    context: SynthesisContext, route: str, module_path: str, module_name: str
) -> str:
    """Return the route object literal registering a lazily loaded module."""
    loader = loader_expression(context, module_path, module_name)
    return f"{{ path: '{route}', loadChildren: {loader} }}"
