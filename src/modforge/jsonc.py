"""JSON-with-comments reader backed by the Tree-sitter JSON grammar.

Workspace and ``tsconfig`` files routinely carry comments, which ``json.loads``
rejects. The Tree-sitter grammar accepts them; this module lowers its tree into
plain Python values. Nodes the parser could not place (trailing commas, for
instance) are skipped rather than failing the whole document.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from modforge_common.errors import WorkspaceError
from modforge_common.logging import get_logger

from modforge.grammar import parse_json

if TYPE_CHECKING:
    from tree_sitter import Node

    from modforge_common.problem_details import JsonValue

__all__ = ["loads"]

logger = get_logger(__name__)


def _text(node: Node, data: bytes) -> str:
    return data[node.start_byte : node.end_byte].decode("utf-8")


def _values(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type not in {"comment", "ERROR"}]


def _lower(node: Node, data: bytes, source: str) -> JsonValue:
    match node.type:
        case "object":
            result: dict[str, JsonValue] = {}
            for pair in _values(node):
                if pair.type != "pair":
                    continue
                key = pair.child_by_field_name("key")
                value = pair.child_by_field_name("value")
                if key is None or value is None:
                    continue
                result[str(_lower(key, data, source))] = _lower(value, data, source)
            return result
        case "array":
            return [_lower(child, data, source) for child in _values(node)]
        case "string":
            return json.loads(_text(node, data))
        case "number":
            raw = _text(node, data)
            return float(raw) if any(ch in raw for ch in ".eE") else int(raw)
        case "true":
            return True
        case "false":
            return False
        case "null":
            return None
        case kind:
            msg = f"Unexpected '{kind}' value in {source} at byte {node.start_byte}."
            raise WorkspaceError(msg, context={"source": source, "offset": node.start_byte})


def loads(data: bytes, *, source: str = "<json>") -> JsonValue:
    """Parse JSON with comments.

    Parameters
    ----------
    data : bytes
        UTF-8 encoded document.
    source : str, optional
        Name used in error messages. Defaults to ``"<json>"``.

    Returns
    -------
    JsonValue
        The decoded top-level value.

    Raises
    ------
    WorkspaceError
        If the document holds no value or a value of an unknown kind.
    """
    tree = parse_json(data)
    root = tree.root_node
    if root.has_error:
        logger.warning(
            "JSON document contains syntax errors; skipping unparsable parts",
            extra={"operation": "jsonc.loads", "status": "warning", "source": source},
        )
    values = _values(root)
    if not values:
        msg = f"{source} does not contain a JSON value."
        raise WorkspaceError(msg, context={"source": source})
    return _lower(values[0], data, source)
