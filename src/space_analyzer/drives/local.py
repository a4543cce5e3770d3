"""Wykrywanie dysków lokalnych przy użyciu psutil."""

from __future__ import annotations

import os
from typing import List

import psutil
import structlog

from .base import Drive, DriveError, fallback_drives


class PsutilDriveEnumerator:
    """Lista punktów montowania z `psutil.disk_partitions`."""

    def __init__(self) -> None:
        self._logger = structlog.get_logger(__name__)

    def discover(self) -> List[Drive]:
        """Zwraca wykryte dyski; zgłasza `DriveError`, gdy psutil zawiedzie."""

        try:
            partitions = psutil.disk_partitions(all=False)
        except (OSError, RuntimeError) as exc:
            raise DriveError(f"Nie udało się pobrać listy partycji: {exc}") from exc

        drives: List[Drive] = []
        seen = set()
        for partition in partitions:
            mountpoint = partition.mountpoint
            if not mountpoint:
                continue
            path = os.path.abspath(mountpoint)
            if path in seen:
                continue
            seen.add(path)
            drives.append(Drive(name=self._display_name(path), path=path))

        drives.sort(key=lambda drive: drive.path.lower())
        return drives

    def list_drives(self) -> List[Drive]:
        """Wykryte dyski albo lista domyślna, gdy nic nie znaleziono.

        Błąd psutil przechodzi dalej jako `DriveError`; wywołujący decyduje,
        jak zgłosić go klientowi.
        """

        drives = self.discover()
        if not drives:
            self._logger.warning("no-drives-found")
            return fallback_drives()

        self._logger.debug("drives-discovered", count=len(drives))
        return drives

    @staticmethod
    def _display_name(path: str) -> str:
        # "C:\\" -> "C:", punkty montowania POSIX bez zmian.
        if len(path) == 3 and path[1:] == ":\\":
            return path[:2]
        return path


__all__ = ["PsutilDriveEnumerator"]
