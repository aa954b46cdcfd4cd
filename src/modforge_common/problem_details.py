"""RFC 9457 Problem Details helpers.

Problem Details payloads are the machine-readable failure surface of the
``modforge`` CLI: every :class:`~modforge_common.errors.ModforgeError` can be
rendered into one and printed to stderr.

Examples
--------
>>> problem = build_problem_details(
...     problem_type="https://modforge.dev/problems/source-not-found",
...     title="SourceNotFoundError",
...     status=404,
...     detail="File /src/app/app.module.ts does not exist.",
...     instance="urn:modforge:module",
... )
>>> problem["status"]
404
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TypedDict

__all__ = [
    "JsonPrimitive",
    "JsonValue",
    "ProblemDetails",
    "build_problem_details",
    "render_problem",
]

type JsonPrimitive = str | int | float | bool | None
type JsonValue = JsonPrimitive | list[JsonValue] | dict[str, JsonValue]


class ProblemDetails(TypedDict, total=False):
    """TypedDict for RFC 9457 Problem Details payloads."""

    type: str
    title: str
    status: int
    detail: str
    instance: str
    code: str
    extensions: dict[str, JsonValue]


def _coerce_json_value(value: object) -> JsonValue:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {str(key): _coerce_json_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_coerce_json_value(item) for item in value]
    return str(value)


def build_problem_details(  # noqa: PLR0913 - mirrors the RFC field list
    problem_type: str,
    title: str,
    status: int,
    detail: str,
    instance: str,
    *,
    code: str | None = None,
    extensions: Mapping[str, object] | None = None,
) -> ProblemDetails:
    """Build an RFC 9457 Problem Details payload.

    Parameters
    ----------
    problem_type : str
        Type URI identifying the problem class.
    title : str
        Short human-readable summary.
    status : int
        Status code associated with the problem.
    detail : str
        Human-readable explanation specific to this occurrence.
    instance : str
        URI identifying the specific occurrence.
    code : str | None, optional
        Stable error code. Defaults to None.
    extensions : Mapping[str, object] | None, optional
        Additional members. Values are coerced to JSON-compatible types.
        Defaults to None.

    Returns
    -------
    ProblemDetails
        Problem Details payload.
    """
    payload: ProblemDetails = {
        "type": problem_type,
        "title": title,
        "status": status,
        "detail": detail,
        "instance": instance,
    }
    if code is not None:
        payload["code"] = code
    if extensions:
        payload["extensions"] = {
            str(key): _coerce_json_value(value) for key, value in extensions.items()
        }
    return payload


def render_problem(problem: ProblemDetails | Mapping[str, object]) -> str:
    """Render Problem Details as a minified JSON string.

    Parameters
    ----------
    problem : ProblemDetails | Mapping[str, object]
        Problem Details payload to serialize.

    Returns
    -------
    str
        JSON-encoded payload without a trailing newline.
    """
    return json.dumps(problem, default=str, ensure_ascii=False)
