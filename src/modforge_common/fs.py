"""Filesystem utilities using pathlib.

Examples
--------
>>> from pathlib import Path
>>> from modforge_common.fs import atomic_write
>>> atomic_write(Path("/tmp/modforge/out.ts"), b"export {};\\n")
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from modforge_common.logging import get_logger

__all__ = ["atomic_write", "ensure_dir"]

logger = get_logger(__name__)


def ensure_dir(path: Path, *, exist_ok: bool = True) -> Path:
    """Create ``path`` and its parents when missing.

    Parameters
    ----------
    path : Path
        Directory to create.
    exist_ok : bool, optional
        Do not fail when the directory exists. Defaults to True.

    Returns
    -------
    Path
        The directory path.
    """
    path.mkdir(parents=True, exist_ok=exist_ok)
    return path


def atomic_write(path: Path, data: bytes) -> None:
    """Write ``data`` atomically using a temporary file and rename.

    The temporary file lives in the destination directory so the final
    ``replace`` stays on one filesystem. Readers see either the previous
    content or the full new content.

    Parameters
    ----------
    path : Path
        Final file path. Parent directories are created when needed.
    data : bytes
        Content to write.

    Raises
    ------
    OSError
        If the temporary file cannot be created, written, or renamed.
    """
    ensure_dir(path.parent)
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(mode="wb", dir=path.parent, delete=False) as temp_file:
            tmp_path = Path(temp_file.name)
            temp_file.write(data)
            temp_file.flush()
        tmp_path.replace(path)
    except BaseException:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("File written", extra={"path": str(path), "bytes": len(data)})
