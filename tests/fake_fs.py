"""Wirtualny system plików do testów skanera."""

from __future__ import annotations

import posixpath
from typing import Callable, Dict, Iterable, List, Set

from space_analyzer.metadata import DirectoryEntry, EntryAccessError, EntryKind, EntryNotFoundError


class FakeFileSystem:
    """Dostawca metadanych oparty na słowniku ścieżka -> rozmiar (ścieżki POSIX)."""

    def __init__(
        self,
        files: Dict[str, int],
        *,
        dirs: Iterable[str] = (),
        unreadable: Iterable[str] = (),
        vanished: Iterable[str] = (),
        denied: Iterable[str] = (),
        broken: Iterable[str] = (),
        on_list: Callable[[str], None] | None = None,
    ) -> None:
        self.files = dict(files)
        self.dirs: Set[str] = set(dirs)
        for path in list(self.files) + list(self.dirs):
            parent = posixpath.dirname(path)
            while parent not in self.dirs:
                self.dirs.add(parent)
                if parent == "/":
                    break
                parent = posixpath.dirname(parent)
        self.unreadable = set(unreadable)
        self.vanished = set(vanished)
        self.denied = set(denied)
        self.broken = set(broken)
        self.on_list = on_list
        self.listed: List[str] = []
        self.stat_calls: List[str] = []

    def exists(self, path: str) -> bool:
        return path in self.dirs or path in self.files

    def is_directory(self, path: str) -> bool:
        return path in self.dirs

    def is_readable(self, path: str) -> bool:
        return path not in self.unreadable

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        self.listed.append(path)
        if self.on_list is not None:
            self.on_list(path)
        if path in self.unreadable:
            raise EntryAccessError(13, "Permission denied", path)
        if path not in self.dirs:
            raise EntryNotFoundError(2, "No such file or directory", path)

        entries = []
        for child in sorted(self.dirs | set(self.files)):
            if child != path and posixpath.dirname(child) == path:
                kind = EntryKind.DIRECTORY if child in self.dirs else EntryKind.FILE
                entries.append(DirectoryEntry(name=posixpath.basename(child), path=child, kind=kind))
        return entries

    def file_size(self, path: str) -> int:
        self.stat_calls.append(path)
        if path in self.broken:
            raise ValueError(f"corrupted metadata for {path}")
        if path in self.vanished:
            raise EntryNotFoundError(2, "No such file or directory", path)
        if path in self.denied:
            raise EntryAccessError(13, "Permission denied", path)
        return self.files[path]
