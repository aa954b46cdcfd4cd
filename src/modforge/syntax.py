"""Typed outline of a TypeScript module descriptor.

The Tree-sitter tree is lowered once into a handful of frozen dataclasses that
cover what the insertion analysis needs: top-level imports, top-level variable
declarations, class decorators, and the expressions inside them (arrays,
objects, calls, identifiers, strings). Everything else becomes :class:`Other`
and keeps only its byte span.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from modforge_common.logging import get_logger

from modforge.grammar import parse_typescript

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tree_sitter import Node

__all__ = [
    "ArrayLiteral",
    "Call",
    "Decorator",
    "Expr",
    "Identifier",
    "ImportDecl",
    "ObjectLiteral",
    "Other",
    "Property",
    "SourceFile",
    "Span",
    "StringLiteral",
    "VariableDecl",
    "parse_source",
]

logger = get_logger(__name__)

_UNWRAPPED: Final[frozenset[str]] = frozenset(
    {"parenthesized_expression", "as_expression", "satisfies_expression", "non_null_expression"}
)
_DECLARATIONS: Final[frozenset[str]] = frozenset({"lexical_declaration", "variable_declaration"})
_CLASSES: Final[frozenset[str]] = frozenset({"class_declaration", "abstract_class_declaration"})


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open byte range ``[start, end)``."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class StringLiteral:
    span: Span
    value: str


@dataclass(frozen=True, slots=True)
class Identifier:
    span: Span
    name: str


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    """``[a, b, c]``; ``elements`` excludes comments."""

    span: Span
    elements: tuple[Expr, ...]

    @property
    def open_offset(self) -> int:
        """Offset just after ``[``."""
        return self.span.start + 1

    @property
    def close_offset(self) -> int:
        """Offset of ``]``."""
        return self.span.end - 1


@dataclass(frozen=True, slots=True)
class Property:
    """One member of an object literal; ``key`` is None for spreads."""

    span: Span
    key: str | None
    value: Expr


@dataclass(frozen=True, slots=True)
class ObjectLiteral:
    span: Span
    properties: tuple[Property, ...]

    def get(self, key: str) -> Property | None:
        """Return the first property named ``key``."""
        return next((prop for prop in self.properties if prop.key == key), None)


@dataclass(frozen=True, slots=True)
class Call:
    """A call expression; ``callee`` is the callee's source text."""

    span: Span
    callee: str
    arguments: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class Other:
    span: Span
    kind: str


type Expr = StringLiteral | Identifier | ArrayLiteral | ObjectLiteral | Call | Other


@dataclass(frozen=True, slots=True)
class ImportDecl:
    """A top-level ``import`` statement; ``source`` is its module specifier."""

    span: Span
    source: StringLiteral | None


@dataclass(frozen=True, slots=True)
class VariableDecl:
    span: Span
    name: str
    value: Expr | None


@dataclass(frozen=True, slots=True)
class Decorator:
    span: Span
    name: str
    arguments: tuple[Expr, ...]


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Lowered outline of one descriptor, with the bytes it was parsed from."""

    path: str
    data: bytes
    imports: tuple[ImportDecl, ...]
    variables: tuple[VariableDecl, ...]
    decorators: tuple[Decorator, ...]
    has_errors: bool = False

    def text(self, span: Span) -> str:
        """Return the source text covered by ``span``."""
        return self.data[span.start : span.end].decode("utf-8")

    def line_of(self, offset: int) -> int:
        """Return the 1-based line number of byte ``offset``."""
        return self.data.count(b"\n", 0, offset) + 1

    def variable(self, name: str) -> VariableDecl | None:
        """Return the first top-level variable declared as ``name``."""
        return next((var for var in self.variables if var.name == name), None)

    def decorator(self, name: str) -> Decorator | None:
        """Return the first class decorator called ``name`` (optionally namespaced)."""
        return next(
            (
                deco
                for deco in self.decorators
                if deco.name == name or deco.name.endswith(f".{name}")
            ),
            None,
        )


def _span(node: Node) -> Span:
    return Span(node.start_byte, node.end_byte)


def _text(node: Node, data: bytes) -> str:
    return data[node.start_byte : node.end_byte].decode("utf-8")


def _named(node: Node | None) -> Iterator[Node]:
    if node is None:
        return
    for child in node.named_children:
        if child.type != "comment":
            yield child


def _string_value(node: Node, data: bytes) -> str:
    raw = _text(node, data)
    return raw[1:-1] if len(raw) >= 2 else raw  # noqa: PLR2004 - opening and closing quote


def _lower_expression(node: Node, data: bytes) -> Expr:
    span = _span(node)
    match node.type:
        case "array":
            elements = tuple(_lower_expression(child, data) for child in _named(node))
            return ArrayLiteral(span, elements)
        case "object":
            properties = tuple(_lower_property(child, data) for child in _named(node))
            return ObjectLiteral(span, properties)
        case "string":
            return StringLiteral(span, _string_value(node, data))
        case "identifier":
            return Identifier(span, _text(node, data))
        case "call_expression":
            function = node.child_by_field_name("function")
            arguments = node.child_by_field_name("arguments")
            return Call(
                span,
                _text(function, data) if function is not None else "",
                tuple(_lower_expression(arg, data) for arg in _named(arguments)),
            )
        case kind if kind in _UNWRAPPED:
            inner = next(_named(node), None)
            return _lower_expression(inner, data) if inner is not None else Other(span, kind)
        case kind:
            return Other(span, kind)


def _lower_property(node: Node, data: bytes) -> Property:
    span = _span(node)
    match node.type:
        case "pair":
            key_node = node.child_by_field_name("key")
            value_node = node.child_by_field_name("value")
            key: str | None = None
            if key_node is not None:
                key = (
                    _string_value(key_node, data)
                    if key_node.type == "string"
                    else _text(key_node, data)
                )
            value = (
                _lower_expression(value_node, data)
                if value_node is not None
                else Other(span, "missing")
            )
            return Property(span, key, value)
        case "shorthand_property_identifier":
            name = _text(node, data)
            return Property(span, name, Identifier(span, name))
        case "method_definition":
            name_node = node.child_by_field_name("name")
            name = _text(name_node, data) if name_node is not None else None
            return Property(span, name, Other(span, node.type))
        case kind:
            return Property(span, None, Other(span, kind))


def _lower_decorator(node: Node, data: bytes) -> Decorator | None:
    target = next(_named(node), None)
    if target is None:
        return None
    if target.type == "call_expression":
        call = _lower_expression(target, data)
        if isinstance(call, Call):
            return Decorator(_span(node), call.callee, call.arguments)
    return Decorator(_span(node), _text(target, data), ())


@dataclass
class _Collector:
    data: bytes
    imports: list[ImportDecl]
    variables: list[VariableDecl]
    decorators: list[Decorator]

    def statement(self, node: Node) -> None:
        match node.type:
            case "import_statement":
                source = node.child_by_field_name("source")
                literal = (
                    StringLiteral(_span(source), _string_value(source, self.data))
                    if source is not None
                    else None
                )
                self.imports.append(ImportDecl(_span(node), literal))
            case kind if kind in _DECLARATIONS:
                for declarator in _named(node):
                    if declarator.type != "variable_declarator":
                        continue
                    name = declarator.child_by_field_name("name")
                    value = declarator.child_by_field_name("value")
                    self.variables.append(
                        VariableDecl(
                            _span(declarator),
                            _text(name, self.data) if name is not None else "",
                            _lower_expression(value, self.data) if value is not None else None,
                        )
                    )
            case "export_statement":
                self.class_decorators(node)
                declaration = node.child_by_field_name("declaration")
                if declaration is not None:
                    self.statement(declaration)
            case kind if kind in _CLASSES:
                self.class_decorators(node)
            case _:
                pass

    def class_decorators(self, node: Node) -> None:
        for child in _named(node):
            if child.type == "decorator":
                decorator = _lower_decorator(child, self.data)
                if decorator is not None:
                    self.decorators.append(decorator)


def parse_source(path: str, data: bytes) -> SourceFile:
    """Parse ``data`` and lower it into a :class:`SourceFile`.

    Parameters
    ----------
    path : str
        Virtual path of the descriptor, kept for error messages.
    data : bytes
        UTF-8 encoded TypeScript source.

    Returns
    -------
    SourceFile
        The lowered outline. Syntax errors are tolerated; the outline then
        covers whatever the parser could recover.
    """
    tree = parse_typescript(data)
    root = tree.root_node
    collector = _Collector(data, [], [], [])
    for child in _named(root):
        collector.statement(child)
    if root.has_error:
        logger.warning(
            "Descriptor contains syntax errors; continuing with the recovered tree",
            extra={"operation": "parse_source", "status": "warning", "path": path},
        )
    return SourceFile(
        path=path,
        data=data,
        imports=tuple(collector.imports),
        variables=tuple(collector.variables),
        decorators=tuple(collector.decorators),
        has_errors=root.has_error,
    )
