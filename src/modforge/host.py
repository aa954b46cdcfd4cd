"""Staged file tree with transactional left-insert patches.

:class:`Host` overlays a workspace directory. Reads fall through to disk until
a path is staged; writes are kept in memory and surface as
:class:`~modforge.plan.CreateFile` / :class:`~modforge.plan.OverwriteFile`
actions. Descriptor edits go through :class:`UpdateRecorder`::

    recorder = host.begin_update("/src/app/app.module.ts")
    recorder.insert_left(42, "import { WidgetModule } from './widget/widget.module';\\n")
    host.commit_update(recorder)

All inserts registered on one recorder land together or not at all.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Self

from modforge_common.errors import FileAlreadyExistsError, PatchError, SourceNotFoundError
from modforge_common.logging import get_logger

from modforge.paths import dirname, normalize
from modforge.plan import CreateFile, OverwriteFile

if TYPE_CHECKING:
    from collections.abc import Iterable

    from modforge.changes import PendingEdit
    from modforge.plan import Action

__all__ = ["Host", "UpdateRecorder"]

logger = get_logger(__name__)


class UpdateRecorder:
    """Collects left-inserts against one snapshot of a file.

    Offsets are byte offsets into the snapshot taken by
    :meth:`Host.begin_update`. When several inserts share an offset, the one
    registered last is placed first.
    """

    def __init__(self, path: str, original: bytes) -> None:
        self.path = path
        self.original = original
        self._inserts: list[tuple[int, int, bytes]] = []

    def __len__(self) -> int:
        return len(self._inserts)

    def insert_left(self, offset: int, text: str) -> Self:
        """Register ``text`` for insertion at byte ``offset``."""
        self._inserts.append((offset, len(self._inserts), text.encode("utf-8")))
        return self

    def apply(self) -> bytes:
        """Return the snapshot with every registered insert merged in.

        Raises
        ------
        PatchError
            If any offset lies outside the snapshot. No insert is applied.
        """
        size = len(self.original)
        bad = [offset for offset, _, _ in self._inserts if not 0 <= offset <= size]
        if bad:
            msg = f"Insert offset(s) {bad} out of range for {self.path} ({size} bytes)."
            raise PatchError(msg, context={"path": self.path, "offsets": bad, "size": size})

        ordered = sorted(self._inserts, key=lambda item: (item[0], -item[1]))
        chunks: list[bytes] = []
        cursor = 0
        for offset, _, data in ordered:
            chunks.append(self.original[cursor:offset])
            chunks.append(data)
            cursor = offset
        chunks.append(self.original[cursor:])
        return b"".join(chunks)


class Host:
    """In-memory overlay of the workspace rooted at ``root``.

    Paths are virtual POSIX paths rooted at the workspace (``/src/app``).

    Parameters
    ----------
    root : Path
        Workspace directory on disk.
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._staged: dict[str, bytes] = {}
        self._created: set[str] = set()

    def _disk_path(self, path: str) -> Path:
        return self.root / normalize(path).lstrip("/")

    def read(self, path: str) -> bytes | None:
        """Return the current bytes of ``path`` or ``None`` when it is not a file."""
        key = normalize(path)
        if key in self._staged:
            return self._staged[key]
        disk_path = self._disk_path(key)
        if not disk_path.is_file():
            return None
        return disk_path.read_bytes()

    def exists(self, path: str) -> bool:
        """Return True when ``path`` is a (staged or on-disk) file."""
        key = normalize(path)
        return key in self._staged or self._disk_path(key).is_file()

    def list_files(self, directory: str) -> list[str]:
        """Return the sorted file names directly inside ``directory``."""
        key = normalize(directory)
        names: set[str] = set()
        disk_dir = self._disk_path(key)
        if disk_dir.is_dir():
            names.update(child.name for child in disk_dir.iterdir() if child.is_file())
        names.update(
            staged.rsplit("/", 1)[-1] for staged in self._staged if dirname(staged) == key
        )
        return sorted(names)

    def create(self, path: str, content: str | bytes) -> None:
        """Stage a new file.

        Raises
        ------
        FileAlreadyExistsError
            If ``path`` already exists.
        """
        key = normalize(path)
        if self.exists(key):
            msg = f"{key} already exists."
            raise FileAlreadyExistsError(msg, context={"path": key})
        self._staged[key] = content.encode("utf-8") if isinstance(content, str) else content
        self._created.add(key)
        logger.debug("File staged", extra={"operation": "create", "path": key})

    def overwrite(self, path: str, content: str | bytes) -> None:
        """Stage new content for an existing file.

        Raises
        ------
        SourceNotFoundError
            If ``path`` does not exist.
        """
        key = normalize(path)
        if not self.exists(key):
            msg = f"File {key} does not exist."
            raise SourceNotFoundError(msg, context={"path": key})
        self._staged[key] = content.encode("utf-8") if isinstance(content, str) else content
        logger.debug("File staged", extra={"operation": "overwrite", "path": key})

    def begin_update(self, path: str) -> UpdateRecorder:
        """Snapshot ``path`` and return a recorder for left-inserts.

        Raises
        ------
        SourceNotFoundError
            If ``path`` cannot be read.
        """
        key = normalize(path)
        data = self.read(key)
        if data is None:
            msg = f"File {key} does not exist."
            raise SourceNotFoundError(msg, context={"path": key})
        return UpdateRecorder(key, data)

    def commit_update(self, recorder: UpdateRecorder) -> None:
        """Merge the recorder's inserts and stage the result as one rewrite.

        Raises
        ------
        PatchError
            If the file changed since :meth:`begin_update` or an offset is invalid.
        """
        current = self.read(recorder.path)
        if current != recorder.original:
            msg = f"{recorder.path} changed after its update began."
            raise PatchError(msg, context={"path": recorder.path})
        merged = recorder.apply()
        self._staged[recorder.path] = merged
        logger.info(
            "Patch committed",
            extra={
                "operation": "commit_update",
                "path": recorder.path,
                "inserts": len(recorder),
            },
        )

    def commit_edits(self, path: str, edits: Iterable[PendingEdit]) -> None:
        """Apply ``edits`` to ``path`` in a single update."""
        recorder = self.begin_update(path)
        for edit in edits:
            if normalize(edit.path) != recorder.path:
                msg = f"Edit for {edit.path} cannot be applied to {recorder.path}."
                raise PatchError(msg, context={"path": recorder.path, "edit_path": edit.path})
            recorder.insert_left(edit.offset, edit.text)
            logger.debug(
                "Edit registered",
                extra={"operation": "commit_edits", "edit": edit.describe()},
            )
        self.commit_update(recorder)

    def actions(self) -> tuple[Action, ...]:
        """Return staged writes in first-touch order."""
        staged: list[Action] = []
        for path, content in self._staged.items():
            if path in self._created:
                staged.append(CreateFile(path=path, content=content))
            else:
                staged.append(OverwriteFile(path=path, content=content))
        return tuple(staged)
