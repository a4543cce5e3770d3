"""Domyślna implementacja eksportu raportów (CSV/JSON)."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, Iterator

from space_analyzer.core.models import ScanResult, printable
from .exporter import ExportFormat, ReportExporter


class DefaultReportExporter(ReportExporter):
    """Eksporter zapisujący wynik skanowania do plików CSV lub JSON."""

    def export(self, result: ScanResult, destination: Path, fmt: ExportFormat, *, root: str, duration: int) -> Path:
        destination.parent.mkdir(parents=True, exist_ok=True)

        if fmt is ExportFormat.JSON:
            payload = {"root": printable(root), "duration": duration, "stats": result.to_dict()}
            destination.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
        elif fmt is ExportFormat.CSV:
            self._write_csv(result, destination, root)
        else:  # pragma: no cover - obsługa przyszłych formatów
            raise ValueError(f"Nieobsługiwany format eksportu: {fmt}")

        return destination

    # ------------------------------------------------------------------
    # CSV
    # ------------------------------------------------------------------

    def _write_csv(self, result: ScanResult, destination: Path, root: str) -> None:
        fieldnames = ["category", "rank", "name", "path", "description", "count", "size"]
        with destination.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            writer.writeheader()
            for row in self._iter_csv_rows(result, root):
                writer.writerow(row)

    @staticmethod
    def _iter_csv_rows(result: ScanResult, root: str) -> Iterator[Dict[str, object]]:
        yield {
            "category": "total",
            "rank": None,
            "name": None,
            "path": printable(root),
            "description": f"errors={result.error_count}",
            "count": result.total_files,
            "size": result.total_size,
        }
        for rank, file_type in enumerate(result.file_types, start=1):
            yield {
                "category": "file_type",
                "rank": rank,
                "name": printable(file_type.extension),
                "path": None,
                "description": printable(file_type.description),
                "count": file_type.count,
                "size": file_type.size,
            }
        for rank, folder in enumerate(result.folders, start=1):
            yield {
                "category": "folder",
                "rank": rank,
                "name": printable(folder.name),
                "path": printable(folder.path),
                "description": None,
                "count": None,
                "size": folder.size,
            }
        for rank, application in enumerate(result.applications, start=1):
            yield {
                "category": "application",
                "rank": rank,
                "name": printable(application.name),
                "path": printable(application.path) if application.path else None,
                "description": None,
                "count": None,
                "size": application.size,
            }


__all__ = ["DefaultReportExporter"]
