"""Deterministic name-casing transforms.

These produce the identifier-safe symbol names and hyphenated file stems used
throughout generated code.

Examples
--------
>>> classify("user-profile")
'UserProfile'
>>> dasherize("userProfile")
'user-profile'
"""

from __future__ import annotations

import re
from typing import Final

__all__ = [
    "camelize",
    "capitalize",
    "classify",
    "dasherize",
    "decamelize",
]

_DASHERIZE_RE: Final = re.compile(r"[ _]")
_DECAMELIZE_RE: Final = re.compile(r"([a-z\d])([A-Z])")
_CAMELIZE_RE: Final = re.compile(r"(-|_|\.|\s)+(.)?")


def decamelize(value: str) -> str:
    """Lower-case ``value`` with an underscore before each inner capital.

    >>> decamelize("innerHTML")
    'inner_html'
    """
    return _DECAMELIZE_RE.sub(r"\1_\2", value).lower()


def dasherize(value: str) -> str:
    """Replace underscores, spaces, and camel humps with dashes.

    >>> dasherize("my favorite items")
    'my-favorite-items'
    """
    return _DASHERIZE_RE.sub("-", decamelize(value))


def camelize(value: str) -> str:
    """Return the lowerCamelCase form of ``value``.

    >>> camelize("css-class-name")
    'cssClassName'
    """
    collapsed = _CAMELIZE_RE.sub(lambda m: m.group(2).upper() if m.group(2) else "", value)
    return collapsed[:1].lower() + collapsed[1:] if collapsed[:1].isupper() else collapsed


def capitalize(value: str) -> str:
    """Upper-case the first character only."""
    return value[:1].upper() + value[1:]


def classify(value: str) -> str:
    """Return the UpperCamelCase form of each dot-separated part.

    >>> classify("innerHTML")
    'InnerHTML'
    >>> classify("action_name")
    'ActionName'
    """
    return ".".join(capitalize(camelize(part)) for part in value.split("."))

