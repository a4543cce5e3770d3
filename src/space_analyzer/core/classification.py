"""Klasyfikacja plików: rozszerzenia, opisy typów, heurystyka aplikacji."""

from __future__ import annotations

import ntpath
import os

from .models import NO_EXTENSION

EXECUTABLE_EXTENSIONS = frozenset({"exe", "msi", "app", "dmg", "pkg", "appx", "msix", "com"})

APPLICATION_DIRECTORY_MARKERS = (
    "program files",
    "applications",
    "appdata",
    "windows\\system32",
    "windows/system32",
)

FILE_DESCRIPTIONS = {
    "exe": "Plik wykonywalny",
    "dll": "Biblioteka dynamiczna",
    "sys": "Plik systemowy",
    "docx": "Dokument Word",
    "xlsx": "Arkusz Excel",
    "pptx": "Prezentacja PowerPoint",
    "pdf": "Dokument PDF",
    "txt": "Plik tekstowy",
    "jpg": "Obraz JPEG",
    "jpeg": "Obraz JPEG",
    "png": "Obraz PNG",
    "gif": "Obraz GIF",
    "bmp": "Obraz BMP",
    "mp3": "Dźwięk MP3",
    "wav": "Dźwięk WAV",
    "mp4": "Wideo MP4",
    "avi": "Wideo AVI",
    "mkv": "Wideo MKV",
    "zip": "Archiwum ZIP",
    "rar": "Archiwum RAR",
    "7z": "Archiwum 7Z",
    "js": "Plik JavaScript",
    "css": "Arkusz stylów CSS",
    "html": "Plik HTML",
    "json": "Plik JSON",
    "xml": "Plik XML",
    "sql": "Plik SQL",
    "php": "Plik PHP",
    "py": "Plik Python",
    "java": "Plik Java",
    "c": "Plik źródłowy C",
    "cpp": "Plik źródłowy C++",
    "cs": "Plik C#",
    "go": "Plik Go",
    "rb": "Plik Ruby",
    "swift": "Plik Swift",
    "kt": "Plik Kotlin",
    "md": "Plik Markdown",
    "log": "Plik dziennika",
    "bak": "Kopia zapasowa",
    "tmp": "Plik tymczasowy",
    NO_EXTENSION: "Bez rozszerzenia",
}

FRIENDLY_FOLDER_NAMES = {
    "Program Files": "Pliki programów",
    "Program Files (x86)": "Pliki programów (x86)",
    "Windows": "Folder systemowy",
    "Users": "Użytkownicy",
    "AppData": "Dane aplikacji",
    "Documents": "Dokumenty",
    "Desktop": "Pulpit",
    "Downloads": "Pobrane",
    "Pictures": "Obrazy",
    "Music": "Muzyka",
    "Videos": "Wideo",
}

ROOT_FOLDER_NAME = "Katalog główny"
UNKNOWN_FOLDER_NAME = "Nieznany folder"


def file_extension(name: str) -> str:
    """Zwraca rozszerzenie małymi literami (bez kropki) lub `NO_EXTENSION`."""

    extension = os.path.splitext(name)[1].lower().lstrip(".")
    return extension or NO_EXTENSION


def describe_extension(extension: str) -> str:
    return FILE_DESCRIPTIONS.get(extension, extension.upper())


def is_application(path: str, extension: str) -> bool:
    """Heurystyka: rozszerzenie wykonywalne lub ścieżka w katalogu aplikacji."""

    if extension in EXECUTABLE_EXTENSIONS:
        return True
    lowered = path.lower()
    return any(marker in lowered for marker in APPLICATION_DIRECTORY_MARKERS)


def application_name(path: str) -> str:
    """Nazwa aplikacji: nazwa pliku bez rozszerzenia."""

    return os.path.splitext(os.path.basename(path))[0] or os.path.basename(path)


def folder_display_name(path: str) -> str:
    """Czytelna nazwa folderu na potrzeby raportu."""

    if not path:
        return UNKNOWN_FOLDER_NAME

    # Dzielimy po obu separatorach, żeby ścieżki Windows działały też na POSIX.
    parts = [part for part in ntpath.normpath(path).replace("\\", "/").split("/") if part]
    if not parts or (len(parts) == 1 and parts[0].endswith(":")):
        return ROOT_FOLDER_NAME

    name = parts[-1]
    if name in FRIENDLY_FOLDER_NAMES:
        return FRIENDLY_FOLDER_NAMES[name]

    for index, part in enumerate(parts[:-1]):
        if "program files" in part.lower():
            return parts[index + 1]

    return name
