"""File primitives used by the pipeline.

The pipeline never touches the disk directly. It writes rendered
artifacts and edits generated sources through a FileSystem:

- LocalFileSystem: paths relative to a project directory on disk
- MemoryFileSystem: dict-backed, for dry runs and tests

Paths are project-relative POSIX strings such as
``src/main/java/com/mycompany/myapp/domain/Book.java``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterator, Mapping

from entity_audit.base import FileOperationError

logger = logging.getLogger(__name__)

Transform = Callable[[str], str]


class FileSystem(ABC):
    """Read, write and read-modify-write access to project files."""

    def __init__(self) -> None:
        self.written: list[str] = []
        self.edited: list[str] = []

    @abstractmethod
    def read(self, path: str) -> str:
        """Read a file.

        Raises:
            FileOperationError: If the file is missing or unreadable.
        """
        ...

    @abstractmethod
    def _write(self, path: str, content: str) -> None:
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    def write(self, path: str, content: str) -> None:
        """Write a file, creating parent directories as needed.

        Raises:
            FileOperationError: If the file cannot be written.
        """
        self._write(path, content)
        if path not in self.written:
            self.written.append(path)
        logger.debug(f"Wrote {path}")

    def edit(self, path: str, transform: Transform) -> bool:
        """Apply a text transform to a file in place.

        The file is only rewritten when the transform changes it.

        Returns:
            True if the content changed.

        Raises:
            FileOperationError: If the file cannot be read or written.
        """
        original = self.read(path)
        updated = transform(original)
        if updated == original:
            logger.debug(f"No changes for {path}")
            return False

        self._write(path, updated)
        if path not in self.edited:
            self.edited.append(path)
        logger.debug(f"Edited {path}")
        return True


class LocalFileSystem(FileSystem):
    """Files under a project directory on disk."""

    def __init__(self, root: Path | str, encoding: str = "utf-8") -> None:
        super().__init__()
        self.root = Path(root)
        self.encoding = encoding

    def resolve(self, path: str) -> Path:
        return self.root / path

    def read(self, path: str) -> str:
        full_path = self.resolve(path)
        try:
            return full_path.read_text(encoding=self.encoding)
        except OSError as e:
            raise FileOperationError(f"Cannot read {full_path}: {e}", path=full_path) from e

    def _write(self, path: str, content: str) -> None:
        full_path = self.resolve(path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(content, encoding=self.encoding)
        except OSError as e:
            raise FileOperationError(f"Cannot write {full_path}: {e}", path=full_path) from e

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def __repr__(self) -> str:
        return f"<LocalFileSystem root={self.root}>"


class MemoryFileSystem(FileSystem):
    """Files held in a dict keyed by project-relative path."""

    def __init__(self, files: Mapping[str, str] | None = None) -> None:
        super().__init__()
        self.files: dict[str, str] = dict(files or {})

    @classmethod
    def from_directory(cls, root: Path | str, pattern: str = "**/*.java") -> "MemoryFileSystem":
        """Snapshot matching files under a directory."""
        root = Path(root)
        files: dict[str, str] = {}
        for path in sorted(root.glob(pattern)):
            if path.is_file():
                try:
                    files[path.relative_to(root).as_posix()] = path.read_text(encoding="utf-8")
                except OSError as e:
                    raise FileOperationError(f"Cannot read {path}: {e}", path=path) from e
        return cls(files)

    def read(self, path: str) -> str:
        if path not in self.files:
            raise FileOperationError(f"File not found: {path}", path=path)
        return self.files[path]

    def _write(self, path: str, content: str) -> None:
        self.files[path] = content

    def exists(self, path: str) -> bool:
        return path in self.files

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)

    def __len__(self) -> int:
        return len(self.files)

    def __repr__(self) -> str:
        return f"<MemoryFileSystem files={len(self.files)}>"
