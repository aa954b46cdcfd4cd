"""Tree-sitter grammar loading and parsing.

Two grammars are used: TypeScript for module descriptors and JSON (which
accepts comments) for workspace and ``tsconfig`` files.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
from importlib import import_module
from typing import TYPE_CHECKING, Any, Final, cast

from tree_sitter import Language, Parser

from modforge_common.errors import ConfigurationError

if TYPE_CHECKING:
    from tree_sitter import Tree

__all__ = [
    "GRAMMARS",
    "GrammarSpec",
    "load_language",
    "parse_bytes",
    "parse_json",
    "parse_typescript",
]


@dataclass(frozen=True)
class GrammarSpec:
    """Where to find a Tree-sitter grammar."""

    name: str
    """Canonical language name (e.g., 'typescript')."""
    package: str
    """Importable package name (e.g., 'tree_sitter_typescript')."""
    factory: str
    """Name of the package attribute returning the ``TSLanguage`` pointer."""


GRAMMARS: Final[dict[str, GrammarSpec]] = {
    "typescript": GrammarSpec("typescript", "tree_sitter_typescript", "language_typescript"),
    "json": GrammarSpec("json", "tree_sitter_json", "language"),
}


@cache
def load_language(name: str) -> Language:
    """Load the Tree-sitter grammar registered under ``name``.

    Parameters
    ----------
    name : str
        Key of :data:`GRAMMARS`.

    Returns
    -------
    Language
        Instantiated Tree-sitter language.

    Raises
    ------
    ConfigurationError
        If the grammar is unknown, its package is missing, or it does not
        expose the expected factory.
    """
    try:
        spec = GRAMMARS[name]
    except KeyError as exc:
        message = f"Unsupported grammar '{name}'. Known grammars: {sorted(GRAMMARS)}"
        raise ConfigurationError(message, cause=exc) from exc
    try:
        module = import_module(spec.package)
    except ModuleNotFoundError as exc:
        message = (
            f"Tree-sitter package '{spec.package}' is not installed. "
            "Install modforge with its declared dependencies."
        )
        raise ConfigurationError(message, cause=exc) from exc
    try:
        factory = getattr(module, spec.factory)
    except AttributeError as exc:
        message = f"Tree-sitter package '{spec.package}' does not expose '{spec.factory}()'."
        raise ConfigurationError(message, cause=exc) from exc
    return Language(factory())


def parse_bytes(lang: Language, data: bytes) -> Tree:
    """Parse a byte buffer with the supplied Tree-sitter language.

    Parameters
    ----------
    lang : Language
        Instantiated Tree-sitter grammar.
    data : bytes
        UTF-8 encoded source to parse.

    Returns
    -------
    Tree
        Parsed syntax tree for the buffer.
    """
    parser = Parser()
    cast("Any", parser).language = lang
    return parser.parse(data)


def parse_typescript(data: bytes) -> Tree:
    """Parse TypeScript source bytes."""
    return parse_bytes(load_language("typescript"), data)


def parse_json(data: bytes) -> Tree:
    """Parse JSON (with comments) bytes."""
    return parse_bytes(load_language("json"), data)
