"""Storage capability the executor uses for every read and write."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Set


class FileIO(Protocol):
    """Host-provided access to file bytes. The engine never touches disk itself."""

    def read_file(self, path: str) -> str:
        """Return the UTF-8 text stored at ``path``."""
        ...

    def write_file(self, path: str, content: str) -> None:
        """Replace the content of ``path``."""
        ...

    def file_exists(self, path: str) -> bool:
        ...

    def mkdir(self, path: str) -> None:
        """Create ``path`` and any missing parents."""
        ...


class FsFileIO:
    """FileIO over the local filesystem."""

    def read_file(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_file(self, path: str, content: str) -> None:
        Path(path).write_text(content, encoding="utf-8")

    def file_exists(self, path: str) -> bool:
        return Path(path).exists()

    def mkdir(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)


class InMemoryFileIO:
    """Dict-backed FileIO for embedding hosts and tests."""

    def __init__(self, files: Optional[Mapping[str, str]] = None) -> None:
        self.files: Dict[str, str] = dict(files or {})
        self.directories: Set[str] = set()
        self.writes: list[str] = []

    def read_file(self, path: str) -> str:
        try:
            return self.files[path]
        except KeyError as exc:
            raise FileNotFoundError(f"No such file: '{path}'") from exc

    def write_file(self, path: str, content: str) -> None:
        self.files[path] = content
        self.writes.append(path)

    def file_exists(self, path: str) -> bool:
        return path in self.files or path in self.directories

    def mkdir(self, path: str) -> None:
        current = path
        while current and current not in self.directories:
            self.directories.add(current)
            parent = posixpath.dirname(current)
            if parent == current:
                break
            current = parent


__all__ = ["FileIO", "FsFileIO", "InMemoryFileIO"]
