"""Shared infrastructure for the modforge generators.

This package bundles the error taxonomy, structured logging, runtime settings,
filesystem helpers, and subprocess execution used by :mod:`modforge`.
"""

from __future__ import annotations

from modforge_common import errors, fs, logging, problem_details, settings, subprocess_utils

__all__ = [
    "errors",
    "fs",
    "logging",
    "problem_details",
    "settings",
    "subprocess_utils",
]
