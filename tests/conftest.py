"""Wspólne fixtury testów."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict

import pytest


@pytest.fixture(autouse=True)
def _error_reports_dir(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Raporty błędów trafiają do katalogu tymczasowego, nie do repozytorium."""

    path = tmp_path_factory.mktemp("error_reports")
    monkeypatch.setenv("SPACEANALYZER_ERROR_DIR", str(path))
    return path


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, int]], Path]:
    """Tworzy na dysku pliki o zadanych rozmiarach i zwraca katalog główny."""

    def _make(files: Dict[str, int]) -> Path:
        root = tmp_path / "root"
        root.mkdir(exist_ok=True)
        for relative, size in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"x" * size)
        return root

    return _make
