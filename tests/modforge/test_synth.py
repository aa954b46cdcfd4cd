from __future__ import annotations

from modforge.synth import (
    LoaderStyle,
    SynthesisContext,
    import_statement,
    loader_expression,
    route_entry,
)


def test_import_statement() -> None:
    assert (
        import_statement("WidgetModule", "./widget/widget.module")
        == "import { WidgetModule } from './widget/widget.module';"
    )


def test_context_from_capability() -> None:
    assert SynthesisContext.from_capability(True).loader_style is LoaderStyle.DYNAMIC_IMPORT
    assert SynthesisContext.from_capability(False).loader_style is LoaderStyle.STRING_REFERENCE


def test_loader_shapes() -> None:
    dynamic = SynthesisContext(LoaderStyle.DYNAMIC_IMPORT)
    string = SynthesisContext(LoaderStyle.STRING_REFERENCE)

    assert (
        loader_expression(dynamic, "./widget/widget.module", "WidgetModule")
        == "() => import('./widget/widget.module').then(m => m.WidgetModule)"
    )
    assert (
        loader_expression(string, "./widget/widget.module", "WidgetModule")
        == "'./widget/widget.module#WidgetModule'"
    )


def test_route_entries_differ_only_in_loader() -> None:
    args = ("widgets", "./widget/widget.module", "WidgetModule")
    dynamic_ctx = SynthesisContext.from_capability(True)
    string_ctx = SynthesisContext.from_capability(False)

    dynamic = route_entry(dynamic_ctx, *args)
    string = route_entry(string_ctx, *args)

    dynamic_loader = loader_expression(dynamic_ctx, *args[1:])
    string_loader = loader_expression(string_ctx, *args[1:])
    assert dynamic.replace(dynamic_loader, "<loader>") == string.replace(string_loader, "<loader>")
    assert string == "{ path: 'widgets', loadChildren: './widget/widget.module#WidgetModule' }"
