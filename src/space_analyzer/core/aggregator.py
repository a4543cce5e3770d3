"""Akumulator statystyk pojedynczego skanowania."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict

from .classification import (
    application_name,
    describe_extension,
    file_extension,
    folder_display_name,
    is_application,
)
from .models import ApplicationEntry, FileTypeEntry, FolderEntry


@dataclass(slots=True)
class StatsAggregator:
    """Zbiera histogram typów plików, rozmiary folderów i aplikacji.

    Instancja należy wyłącznie do jednego zadania i ma jednego pisarza
    (wątek skanera), więc nie wymaga blokad.
    """

    total_files: int = 0
    total_size: int = 0
    scanned_count: int = 0
    error_count: int = 0
    file_types: Dict[str, FileTypeEntry] = field(default_factory=dict)
    folders: Dict[str, FolderEntry] = field(default_factory=dict)
    applications: Dict[str, ApplicationEntry] = field(default_factory=dict)

    def record_folder(self, path: str) -> FolderEntry:
        """Zwraca wpis folderu, tworząc go przy pierwszym użyciu."""

        entry = self.folders.get(path)
        if entry is None:
            entry = FolderEntry(name=folder_display_name(path), path=path)
            self.folders[path] = entry
        return entry

    def record_file(self, path: str, size: int, *, root: str) -> None:
        """Rejestruje poprawnie odczytany plik i przenosi jego rozmiar w górę drzewa.

        Rozmiar trafia do folderu-właściciela oraz do każdego przodka, który
        nadal zaczyna się od ścieżki `root` (włącznie z samym `root`).
        """

        self.total_files += 1
        self.total_size += size
        self.scanned_count += 1

        extension = file_extension(os.path.basename(path))
        file_type = self.file_types.get(extension)
        if file_type is None:
            file_type = FileTypeEntry(extension=extension, description=describe_extension(extension))
            self.file_types[extension] = file_type
        file_type.count += 1
        file_type.size += size

        if is_application(path, extension):
            name = application_name(path)
            application = self.applications.get(name)
            if application is None:
                application = ApplicationEntry(name=name, path=path)
                self.applications[name] = application
            application.size += size

        folder_path = os.path.dirname(path)
        self.record_folder(folder_path).size += size
        self._roll_up(folder_path, size, root)

    def record_error(self) -> None:
        self.error_count += 1

    def _roll_up(self, folder_path: str, size: int, root: str) -> None:
        current = folder_path
        parent = os.path.dirname(current)
        while parent and parent != current and len(parent) >= len(root) and parent.startswith(root):
            self.record_folder(parent).size += size
            current, parent = parent, os.path.dirname(parent)
