"""Dostawca metadanych oparty na lokalnym systemie plików."""

from __future__ import annotations

import os
from typing import List

from .provider import DirectoryEntry, EntryAccessError, EntryKind, EntryNotFoundError, MetadataError


class LocalMetadataProvider:
    """Implementacja `MetadataProvider` korzystająca z `os.scandir` i `os.stat`.

    Dowiązania symboliczne nie są rozwijane: trafiają do `EntryKind.OTHER`
    i skaner je pomija.
    """

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_readable(self, path: str) -> bool:
        return os.access(path, os.R_OK)

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        try:
            with os.scandir(path) as iterator:
                return [
                    DirectoryEntry(name=entry.name, path=os.path.join(path, entry.name), kind=self._kind(entry))
                    for entry in iterator
                ]
        except OSError as exc:
            raise _translate(exc, path) from exc

    def file_size(self, path: str) -> int:
        try:
            return int(os.stat(path).st_size)
        except OSError as exc:
            raise _translate(exc, path) from exc

    @staticmethod
    def _kind(entry: os.DirEntry) -> EntryKind:
        try:
            if entry.is_dir(follow_symlinks=False):
                return EntryKind.DIRECTORY
            if entry.is_file(follow_symlinks=False):
                return EntryKind.FILE
        except OSError:
            pass
        return EntryKind.OTHER


def _translate(exc: OSError, path: str) -> MetadataError:
    if isinstance(exc, FileNotFoundError):
        return EntryNotFoundError(exc.errno, exc.strerror or "Nie znaleziono", path)
    return EntryAccessError(exc.errno, exc.strerror or str(exc), path)


__all__ = ["LocalMetadataProvider"]
