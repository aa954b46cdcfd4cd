"""Module and component generators."""

from __future__ import annotations

from modforge.generators.component import generate_component
from modforge.generators.module import generate_module

__all__ = ["generate_component", "generate_module"]
