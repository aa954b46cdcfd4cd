from __future__ import annotations

import pytest

from modforge.strings import camelize, capitalize, classify, dasherize, decamelize


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("widget", "Widget"),
        ("user-profile", "UserProfile"),
        ("action_name", "ActionName"),
        ("innerHTML", "InnerHTML"),
        ("css class name", "CssClassName"),
    ],
)
def test_classify(value: str, expected: str) -> None:
    assert classify(value) == expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("widget", "widget"),
        ("userProfile", "user-profile"),
        ("my favorite items", "my-favorite-items"),
        ("action_name", "action-name"),
    ],
)
def test_dasherize(value: str, expected: str) -> None:
    assert dasherize(value) == expected


def test_camelize_lowers_leading_capital() -> None:
    assert camelize("Widget-list") == "widgetList"
    assert camelize("css-class-name") == "cssClassName"


def test_decamelize() -> None:
    assert decamelize("innerHTML") == "inner_html"


def test_capitalize_only_touches_first_character() -> None:
    assert capitalize("widgetList") == "WidgetList"
    assert capitalize("") == ""


def test_classify_keeps_dotted_parts() -> None:
    assert classify("admin.user-list") == "Admin.UserList"
