"""Interfejs dostawcy metadanych plików i katalogów."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol


class MetadataError(OSError):
    """Bazowy błąd dostępu do metadanych wpisu."""


class EntryNotFoundError(MetadataError):
    """Wpis nie istnieje (np. zniknął w trakcie skanowania)."""


class EntryAccessError(MetadataError):
    """Wpis istnieje, ale nie udało się go odczytać (uprawnienia, błąd I/O)."""


class EntryKind(str, Enum):
    """Rodzaj wpisu katalogu."""

    FILE = "file"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """Pojedynczy wpis zwrócony przez listowanie katalogu."""

    name: str
    path: str
    kind: EntryKind


class MetadataProvider(Protocol):
    """Minimalny interfejs dostępu do systemu plików wymagany przez skaner."""

    def exists(self, path: str) -> bool:
        """Sprawdza, czy ścieżka istnieje."""

    def is_directory(self, path: str) -> bool:
        """Sprawdza, czy ścieżka wskazuje katalog."""

    def is_readable(self, path: str) -> bool:
        """Sprawdza prawo odczytu ścieżki."""

    def list_directory(self, path: str) -> List[DirectoryEntry]:
        """Zwraca wpisy katalogu; zgłasza `MetadataError` przy niepowodzeniu."""

    def file_size(self, path: str) -> int:
        """Zwraca logiczny rozmiar pliku w bajtach; zgłasza `MetadataError` przy niepowodzeniu."""
