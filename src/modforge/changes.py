"""Pending text edits computed against an unmodified descriptor."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["PendingEdit"]


@dataclass(frozen=True, slots=True)
class PendingEdit:
    """Left-insertion of ``text`` at byte ``offset`` of the file at ``path``.

    Offsets always refer to the pre-edit bytes, so edits against one file are
    independent of each other and may be registered in any order.
    """

    path: str
    offset: int
    text: str

    def describe(self) -> str:
        """Return a one-line summary used in debug logs."""
        preview = self.text.strip().splitlines()[0] if self.text.strip() else ""
        return f"{self.path}@{self.offset}: {preview}"
