"""Modele danych używane w rdzeniu skanera."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


NO_EXTENSION = "no-extension"
UNRECOGNIZED_APPLICATION = "unrecognized"


def printable(value: str) -> str:
    """Zamienia bajty nazw spoza UTF-8 (surogaty z `os.fsdecode`) na U+FFFD.

    Tekst wynikowy zawsze daje się zakodować w UTF-8, więc można go wysłać
    ramką websocket albo zapisać w raporcie.
    """

    try:
        raw = value.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        raw = value.encode("utf-8", "replace")
    return raw.decode("utf-8", "replace")


class TaskState(str, Enum):
    """Stan zadania skanowania."""

    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not TaskState.RUNNING


@dataclass(slots=True)
class FileTypeEntry:
    """Statystyki jednego rozszerzenia pliku."""

    extension: str
    description: str
    count: int = 0
    size: int = 0


@dataclass(slots=True)
class FolderEntry:
    """Skumulowany rozmiar poddrzewa katalogu."""

    name: str
    path: str
    size: int = 0


@dataclass(slots=True)
class ApplicationEntry:
    """Rozmiar przypisany heurystycznie rozpoznanej aplikacji."""

    name: str
    path: Optional[str]
    size: int = 0


@dataclass(slots=True)
class ScanResult:
    """Sformatowany wynik skanowania: łączne liczniki i listy top-N."""

    total_files: int
    total_size: int
    error_count: int
    file_types: List[FileTypeEntry] = field(default_factory=list)
    folders: List[FolderEntry] = field(default_factory=list)
    applications: List[ApplicationEntry] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        """Reprezentacja w formacie protokołu (klucze camelCase)."""

        return {
            "totalFiles": self.total_files,
            "totalSize": self.total_size,
            "fileTypes": [
                {
                    "name": printable(entry.extension),
                    "type": printable(entry.extension),
                    "description": printable(entry.description),
                    "count": entry.count,
                    "size": entry.size,
                }
                for entry in self.file_types
            ],
            "folders": [
                {"name": printable(f.name), "path": printable(f.path), "size": f.size} for f in self.folders
            ],
            "applications": [
                {"name": printable(a.name), "path": printable(a.path) if a.path else None, "size": a.size}
                for a in self.applications
            ],
            "errorCount": self.error_count,
        }


@dataclass(frozen=True, slots=True)
class ScanProgress:
    """Migawka postępu publikowana co określoną liczbę plików."""

    scanned_count: int
    total_size: int
    error_count: int
    current_path: str
    percentage: int


@dataclass(frozen=True, slots=True)
class ScanOutcome:
    """Stan końcowy pojedynczego przebiegu skanera."""

    state: TaskState
    result: Optional[ScanResult] = None
    duration: int = 0
    error: Optional[str] = None

    @classmethod
    def completed(cls, result: ScanResult, duration: int) -> "ScanOutcome":
        return cls(state=TaskState.COMPLETED, result=result, duration=duration)

    @classmethod
    def aborted(cls) -> "ScanOutcome":
        return cls(state=TaskState.ABORTED)

    @classmethod
    def failed(cls, reason: str) -> "ScanOutcome":
        return cls(state=TaskState.FAILED, error=reason)
