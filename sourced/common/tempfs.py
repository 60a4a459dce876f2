"""Host filesystem view rooted at a single directory.

``OSFilesystem`` resolves every path relative to its root and refuses paths
that would leave it, so code handed a temporary filesystem cannot write
outside the directory created for the running process.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import IO, Any

from sourced.common.logging import get_logger

logger = get_logger(__name__)

TEMP_DIR_MODE = 0o755


class PathEscapeError(ValueError):
    """Raised when a path resolves outside the filesystem root."""

    pass


class OSFilesystem:
    """Filesystem handle rooted at a host directory.

    Attributes:
        root: Absolute, resolved path of the directory this view is rooted at.

    Example:
        >>> fs = OSFilesystem("/tmp/sourced/abc123")
        >>> with fs.create("repos/a.pack") as fh:
        ...     fh.write(b"PACK")
        >>> fs.read_dir("repos")
        ['a.pack']
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root).resolve()

    def __repr__(self) -> str:
        return f"OSFilesystem(root={str(self.root)!r})"

    def join(self, *parts: str) -> str:
        """Join path elements into a root-relative path."""
        return os.path.join(*parts) if parts else ""

    def _abs(self, name: str) -> Path:
        target = (self.root / name.lstrip("/")).resolve()
        if target != self.root and self.root not in target.parents:
            raise PathEscapeError(f"path {name!r} escapes filesystem root {self.root}")
        return target

    def abspath(self, name: str) -> str:
        """Return the host path for ``name``."""
        return str(self._abs(name))

    def create(self, name: str) -> IO[Any]:
        """Create (or truncate) a file for binary writing, making parents as needed."""
        path = self._abs(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        return path.open("wb")

    def open(self, name: str, mode: str = "rb") -> IO[Any]:
        """Open a file under the root."""
        return self._abs(name).open(mode)

    def mkdir_all(self, name: str, mode: int = TEMP_DIR_MODE) -> None:
        """Create a directory and any missing parents."""
        self._abs(name).mkdir(mode=mode, parents=True, exist_ok=True)

    def read_dir(self, name: str = "") -> list[str]:
        """Return the sorted entry names of a directory."""
        return sorted(entry.name for entry in self._abs(name).iterdir())

    def stat(self, name: str) -> os.stat_result:
        return self._abs(name).stat()

    def exists(self, name: str) -> bool:
        return self._abs(name).exists()

    def remove(self, name: str) -> None:
        """Remove a file or an empty directory."""
        path = self._abs(name)
        if path == self.root:
            raise PathEscapeError("refusing to remove the filesystem root")
        if path.is_dir():
            path.rmdir()
        else:
            path.unlink()

    def rename(self, old: str, new: str) -> None:
        """Move ``old`` to ``new``, both relative to the root."""
        target = self._abs(new)
        target.parent.mkdir(parents=True, exist_ok=True)
        os.replace(self._abs(old), target)

    def temp_file(self, directory: str = "", prefix: str = "") -> tuple[IO[Any], str]:
        """Create a uniquely named file under ``directory``.

        Returns:
            tuple: (open binary file object, root-relative name)
        """
        parent = self._abs(directory)
        parent.mkdir(parents=True, exist_ok=True)
        fd, path = tempfile.mkstemp(prefix=prefix, dir=parent)
        return os.fdopen(fd, "wb"), os.path.relpath(path, self.root)


def create_temporary_filesystem(base_dir: str | os.PathLike[str]) -> OSFilesystem:
    """Create a fresh uniquely named directory under ``base_dir`` and root a view there.

    The base directory is created recursively with mode 0755 if missing.

    Args:
        base_dir: Temp root, usually ``SourcedConfig.temp_dir``.

    Returns:
        OSFilesystem: Handle rooted at the new directory.

    Raises:
        OSError: If either directory cannot be created.
    """
    os.makedirs(base_dir, mode=TEMP_DIR_MODE, exist_ok=True)
    directory = tempfile.mkdtemp(dir=base_dir)
    logger.info("Temporary directory created", extra={"base_dir": str(base_dir), "path": directory})
    return OSFilesystem(directory)


def remove_filesystem_root(fs: OSFilesystem) -> None:
    """Delete the directory a filesystem view is rooted at, with its contents."""
    shutil.rmtree(fs.root, ignore_errors=False)
    logger.info("Temporary directory removed", extra={"path": str(fs.root)})


__all__ = [
    "TEMP_DIR_MODE",
    "OSFilesystem",
    "PathEscapeError",
    "create_temporary_filesystem",
    "remove_filesystem_root",
]
