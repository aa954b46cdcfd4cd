from __future__ import annotations

import pytest

from modforge_common.settings import ModforgeSettings

from modforge.generators import generate_component
from modforge.generators.component import build_selector
from modforge.host import Host
from modforge.options import ComponentOptions

APP = "/src/app/app.module.ts"
STEM = "/src/app/widget/widget.component"


def test_component_is_declared_in_closest_module(host: Host, settings: ModforgeSettings) -> None:
    plan = generate_component(host, ComponentOptions(name="widget"), settings)

    assert plan.paths("UPDATE") == [APP]
    assert plan.paths("CREATE") == [
        f"{STEM}.ts",
        f"{STEM}.html",
        f"{STEM}.css",
        f"{STEM}.spec.ts",
    ]
    updated = plan.content_of(APP) or ""
    assert (
        "import { AppComponent } from './app.component';\n"
        "import { WidgetComponent } from './widget/widget.component';\n"
    ) in updated
    assert "  declarations: [\n    AppComponent,\n    WidgetComponent\n  ],\n" in updated

    component = plan.content_of(f"{STEM}.ts") or ""
    assert "selector: 'app-widget'" in component
    assert "templateUrl: './widget.component.html'" in component
    assert "styleUrls: ['./widget.component.css']" in component
    assert "export class WidgetComponent implements OnInit {" in component
    assert plan.content_of(f"{STEM}.html") == "<p>widget works!</p>\n"
    assert plan.content_of(f"{STEM}.css") == ""
    assert "describe('WidgetComponent', () => {" in (plan.content_of(f"{STEM}.spec.ts") or "")


def test_skip_import_and_tests(host: Host, settings: ModforgeSettings) -> None:
    options = ComponentOptions(name="widget", skip_import=True, skip_tests=True, style="scss")

    plan = generate_component(host, options, settings)

    assert APP not in plan.paths()
    assert plan.paths() == [f"{STEM}.ts", f"{STEM}.html", f"{STEM}.scss"]


def test_flat_component_with_custom_selector(host: Host, settings: ModforgeSettings) -> None:
    options = ComponentOptions(name="widget", flat=True, selector="my-widget")

    plan = generate_component(host, options, settings)

    assert "/src/app/widget.component.ts" in plan.paths("CREATE")
    assert "selector: 'my-widget'" in (plan.content_of("/src/app/widget.component.ts") or "")
    assert "import { WidgetComponent } from './widget.component';" in (
        plan.content_of(APP) or ""
    )


@pytest.mark.parametrize(
    ("name", "prefix", "expected"),
    [("widget", "app", "app-widget"), ("userList", "acme", "acme-user-list"), ("x", None, "x")],
)
def test_build_selector(name: str, prefix: str | None, expected: str) -> None:
    assert build_selector(name, prefix) == expected


def test_explicit_empty_prefix_drops_project_prefix(
    host: Host, settings: ModforgeSettings
) -> None:
    plan = generate_component(host, ComponentOptions(name="widget", prefix=""), settings)

    assert "selector: 'widget'" in (plan.content_of(f"{STEM}.ts") or "")
