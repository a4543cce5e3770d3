"""Testy klasyfikacji plików i nazw folderów."""

from __future__ import annotations

import pytest

from space_analyzer.core.classification import (
    ROOT_FOLDER_NAME,
    UNKNOWN_FOLDER_NAME,
    application_name,
    describe_extension,
    file_extension,
    folder_display_name,
    is_application,
)
from space_analyzer.core.models import NO_EXTENSION


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("photo.JPG", "jpg"),
        ("archive.tar.gz", "gz"),
        ("Makefile", NO_EXTENSION),
        (".bashrc", NO_EXTENSION),
        ("trailing.", NO_EXTENSION),
    ],
)
def test_file_extension(name: str, expected: str) -> None:
    assert file_extension(name) == expected


def test_describe_extension_uses_table_or_uppercase() -> None:
    assert describe_extension("pdf") == "Dokument PDF"
    assert describe_extension(NO_EXTENSION) == "Bez rozszerzenia"
    assert describe_extension("xyz") == "XYZ"


@pytest.mark.parametrize(
    ("path", "extension", "expected"),
    [
        ("/data/setup.exe", "exe", True),
        ("/data/Installer.DMG", "dmg", True),
        ("C:\\Program Files\\Tool\\data.bin", "bin", True),
        ("C:\\Users\\me\\AppData\\Local\\cache.db", "db", True),
        ("C:\\Windows\\System32\\kernel32.dll", "dll", True),
        ("/Applications/Editor.app/Contents/Info.plist", "plist", True),
        ("/home/me/notes.txt", "txt", False),
    ],
)
def test_is_application(path: str, extension: str, expected: bool) -> None:
    assert is_application(path, extension) is expected


def test_application_name_strips_extension() -> None:
    assert application_name("/opt/tools/setup.exe") == "setup"
    assert application_name("/opt/tools/runner") == "runner"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("", UNKNOWN_FOLDER_NAME),
        ("/", ROOT_FOLDER_NAME),
        ("C:\\", ROOT_FOLDER_NAME),
        ("C:\\Program Files", "Pliki programów"),
        ("C:\\Users\\me\\Downloads", "Pobrane"),
        ("C:\\Program Files\\Vendor\\bin", "Vendor"),
        ("/home/me/projects", "projects"),
        ("/home/me/projects/", "projects"),
    ],
)
def test_folder_display_name(path: str, expected: str) -> None:
    assert folder_display_name(path) == expected
