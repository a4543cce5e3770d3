"""Współdzielony rejestr aktywnych zadań skanowania."""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable, Dict, List

import structlog

from .tasks import ScanTask


class TaskRegistry:
    """Przechowuje zadania w toku, indeksowane identyfikatorem zadania.

    Rejestr jest współdzielony przez wszystkie połączenia; każda operacja
    wykonuje się pod blokadą. Zadanie jest w rejestrze wtedy i tylko wtedy,
    gdy trwa.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._tasks: Dict[str, ScanTask] = {}
        self._lock = Lock()
        self._last_id = 0
        self._logger = structlog.get_logger(__name__)

    def next_id(self) -> str:
        """Nowy identyfikator: znacznik czasu w ms, podbijany przy kolizji."""

        with self._lock:
            return self._next_id_locked()

    def create(self, root_path: str, max_depth: int, *, owner: str | None = None) -> ScanTask:
        with self._lock:
            task = ScanTask(id=self._next_id_locked(), root_path=root_path, max_depth=max_depth, owner=owner)
            self._tasks[task.id] = task
        self._logger.debug("task-registered", task_id=task.id, root=root_path, depth=max_depth)
        return task

    def get(self, task_id: str) -> ScanTask | None:
        with self._lock:
            return self._tasks.get(task_id)

    def exists(self, task_id: str) -> bool:
        with self._lock:
            return task_id in self._tasks

    def request_abort(self, task_id: str) -> bool:
        """Ustawia flagę anulowania zadania.

        Zwraca False, gdy zadania nie ma (mogło się już zakończyć) albo gdy
        anulowanie zostało już wcześniej zażądane.
        """

        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                return False
            return task.request_cancel()

    def remove(self, task_id: str) -> ScanTask | None:
        """Usuwa zadanie; kolejne wywołania dla tego samego id nic nie robią."""

        with self._lock:
            task = self._tasks.pop(task_id, None)
        if task is not None:
            self._logger.debug("task-unregistered", task_id=task_id)
        return task

    def owned_by(self, owner: str) -> List[ScanTask]:
        with self._lock:
            return [task for task in self._tasks.values() if task.owner == owner]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def _next_id_locked(self) -> str:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)
