"""Ranking i obcinanie statystyk do list top-N."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, TypeVar

import structlog

from .aggregator import StatsAggregator
from .models import UNRECOGNIZED_APPLICATION, ApplicationEntry, FileTypeEntry, FolderEntry, ScanResult

DEFAULT_TOP_N = 20

_Entry = TypeVar("_Entry", FileTypeEntry, FolderEntry, ApplicationEntry)


class ResultFormatter:
    """Zamienia akumulator w `ScanResult` z trzema rankingami."""

    def __init__(self, top_n: int = DEFAULT_TOP_N) -> None:
        if top_n < 1:
            raise ValueError("top_n musi być >= 1")
        self._top_n = top_n
        self._logger = structlog.get_logger(__name__)

    def format(self, stats: StatsAggregator) -> ScanResult:
        file_types = self._rank(stats.file_types.values())
        folders = self._rank(folder for folder in stats.folders.values() if folder.name)
        applications = self._rank(stats.applications.values())
        if not applications:
            # Klient nie renderuje pustej serii.
            applications = [ApplicationEntry(name=UNRECOGNIZED_APPLICATION, path=None, size=1)]

        self._logger.debug(
            "scan-results-formatted",
            file_types=len(file_types),
            folders=len(folders),
            applications=len(applications),
        )
        return ScanResult(
            total_files=stats.total_files,
            total_size=stats.total_size,
            error_count=stats.error_count,
            file_types=file_types,
            folders=folders,
            applications=applications,
        )

    def _rank(self, entries: Iterable[_Entry]) -> List[_Entry]:
        ranked = sorted((entry for entry in entries if entry.size > 0), key=lambda entry: entry.size, reverse=True)
        # Kopie, żeby wynik nie współdzielił obiektów z akumulatorem.
        return [replace(entry) for entry in ranked[: self._top_n]]


__all__ = ["DEFAULT_TOP_N", "ResultFormatter"]
