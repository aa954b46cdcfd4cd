"""Staged operations handed to the execution engine."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

__all__ = [
    "Action",
    "CreateFile",
    "GenerationPlan",
    "LintFix",
    "OverwriteFile",
]


@dataclass(frozen=True, slots=True)
class CreateFile:
    """Write a new file that did not exist before the run."""

    path: str
    content: bytes

    @property
    def verb(self) -> str:
        return "CREATE"


@dataclass(frozen=True, slots=True)
class OverwriteFile:
    """Replace the content of an existing file with its patched bytes."""

    path: str
    content: bytes

    @property
    def verb(self) -> str:
        return "UPDATE"


@dataclass(frozen=True, slots=True)
class LintFix:
    """Run the configured lint-fix command over ``path``."""

    path: str

    @property
    def verb(self) -> str:
        return "LINT"


type Action = CreateFile | OverwriteFile | LintFix


@dataclass(frozen=True, slots=True)
class GenerationPlan:
    """Ordered actions produced by one generator run."""

    actions: tuple[Action, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Action]:
        return iter(self.actions)

    def __len__(self) -> int:
        return len(self.actions)

    def extend(self, *actions: Action) -> GenerationPlan:
        """Return a new plan with ``actions`` appended."""
        return GenerationPlan(actions=(*self.actions, *actions))

    def paths(self, verb: str | None = None) -> list[str]:
        """Return the paths touched by the plan, optionally filtered by ``verb``."""
        return [action.path for action in self.actions if verb is None or action.verb == verb]

    def content_of(self, path: str) -> str | None:
        """Return the staged text for ``path`` when the plan writes it."""
        for action in reversed(self.actions):
            if isinstance(action, (CreateFile, OverwriteFile)) and action.path == path:
                return action.content.decode("utf-8")
        return None
