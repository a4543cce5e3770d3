"""Rekurencyjny, ograniczony głębokością skaner katalogów."""

from __future__ import annotations

import os
from typing import Callable

import structlog

from space_analyzer.metadata import EntryKind, LocalMetadataProvider, MetadataError, MetadataProvider
from space_analyzer.shared.error_reporting import write_error_report
from .formatter import ResultFormatter
from .models import ScanOutcome, ScanProgress
from .tasks import ScanTask


ProgressCallback = Callable[[ScanTask, ScanProgress], None]

DEFAULT_PROGRESS_INTERVAL = 50


class InvalidRootError(ValueError):
    """Katalog startowy nie istnieje, nie jest katalogiem lub nie da się go odczytać."""


class ScanAborted(Exception):
    """Wewnętrzny sygnał anulowania; nigdy nie trafia do klienta jako błąd."""


class ScanEngine:
    """Przechodzi drzewo katalogów w głąb i zasila akumulator zadania.

    Anulowanie jest kooperacyjne: flaga zadania jest sprawdzana na początku
    każdego katalogu i przed każdym wpisem, więc opóźnienie przerwania
    ogranicza czas obsługi jednego wpisu.
    """

    def __init__(
        self,
        provider: MetadataProvider | None = None,
        *,
        formatter: ResultFormatter | None = None,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    ) -> None:
        if progress_interval < 1:
            raise ValueError("progress_interval musi być >= 1")
        self._provider = provider or LocalMetadataProvider()
        self._formatter = formatter or ResultFormatter()
        self._progress_interval = progress_interval
        self._logger = structlog.get_logger(__name__)

    def validate_root(self, path: str | None) -> str:
        """Sprawdza katalog startowy i zwraca jego znormalizowaną, bezwzględną ścieżkę."""

        if not path:
            raise InvalidRootError(f"Nieprawidłowa ścieżka skanowania: {path}")
        root = os.path.normpath(os.path.abspath(path))
        if not self._provider.exists(root):
            raise InvalidRootError(f"Nieprawidłowa ścieżka skanowania: {path}")
        if not self._provider.is_directory(root):
            raise InvalidRootError(f"Ścieżka skanowania nie jest katalogiem: {path}")
        if not self._provider.is_readable(root):
            raise InvalidRootError(f"Brak uprawnień do odczytu ścieżki: {path}")
        return root

    def walk(self, task: ScanTask, *, progress: ProgressCallback | None = None) -> ScanOutcome:
        """Wykonuje skanowanie zadania i przeprowadza je do stanu końcowego."""

        try:
            outcome = self._walk(task, progress)
        except Exception as exc:
            self._logger.exception("scan-failed", task_id=task.id, root=task.root_path)
            self._report_failure(task, exc)
            outcome = ScanOutcome.failed(f"Nieoczekiwany błąd skanowania: {exc}")
        task.finish(outcome.state)
        return outcome

    def _walk(self, task: ScanTask, progress: ProgressCallback | None) -> ScanOutcome:
        try:
            task.root_path = self.validate_root(task.root_path)
        except InvalidRootError as exc:
            self._logger.warning("scan-invalid-root", task_id=task.id, root=task.root_path, error=str(exc))
            return ScanOutcome.failed(str(exc))

        self._logger.info("scan-walk-started", task_id=task.id, root=task.root_path, depth=task.max_depth)
        try:
            self._scan_directory(task, task.root_path, 1, progress)
        except ScanAborted:
            self._logger.info("scan-aborted", task_id=task.id, scanned=task.aggregator.scanned_count)
            return ScanOutcome.aborted()

        stats = task.aggregator
        self._logger.info(
            "scan-walk-finished",
            task_id=task.id,
            files=stats.total_files,
            size=stats.total_size,
            errors=stats.error_count,
        )
        return ScanOutcome.completed(self._formatter.format(stats), task.elapsed_seconds())

    def _scan_directory(self, task: ScanTask, path: str, depth: int, progress: ProgressCallback | None) -> None:
        self._check_cancel(task)
        stats = task.aggregator

        try:
            entries = self._provider.list_directory(path)
        except MetadataError as exc:
            self._logger.warning("directory-list-failed", task_id=task.id, path=path, error=str(exc))
            stats.record_error()
            return

        for entry in entries:
            self._check_cancel(task)

            if entry.kind is EntryKind.DIRECTORY:
                stats.record_folder(entry.path)
                if depth < task.max_depth:
                    self._scan_directory(task, entry.path, depth + 1, progress)
                continue

            if entry.kind is not EntryKind.FILE:
                continue

            try:
                size = self._provider.file_size(entry.path)
            except MetadataError as exc:
                self._logger.debug("file-stat-failed", task_id=task.id, path=entry.path, error=str(exc))
                stats.record_error()
                continue

            stats.record_file(entry.path, size, root=task.root_path)

            if progress is not None and stats.scanned_count % self._progress_interval == 0:
                progress(task, self._snapshot(task, entry.path))

    def _report_failure(self, task: ScanTask, error: Exception) -> None:
        try:
            report = write_error_report(
                error,
                where="scan-engine",
                context={"task_id": task.id, "root": task.root_path, "depth": task.max_depth},
            )
        except OSError as exc:
            self._logger.warning("error-report-failed", task_id=task.id, error=str(exc))
            return
        self._logger.info("error-report-written", task_id=task.id, path=str(report.path))

    @staticmethod
    def _snapshot(task: ScanTask, current_path: str) -> ScanProgress:
        stats = task.aggregator
        return ScanProgress(
            scanned_count=stats.scanned_count,
            total_size=stats.total_size,
            error_count=stats.error_count,
            current_path=current_path,
            percentage=min(99, stats.scanned_count // 100),
        )

    @staticmethod
    def _check_cancel(task: ScanTask) -> None:
        if task.cancel_requested:
            raise ScanAborted()


__all__ = ["InvalidRootError", "ProgressCallback", "ScanAborted", "ScanEngine"]
