"""Module-descriptor transformations for Angular-style workspaces."""

from __future__ import annotations

from importlib import metadata

__all__ = ["__version__"]

try:  # pragma: no cover - populated by the installed distribution
    __version__ = metadata.version("modforge")
except metadata.PackageNotFoundError:  # pragma: no cover - development fallback
    __version__ = "0.0.0-dev"
