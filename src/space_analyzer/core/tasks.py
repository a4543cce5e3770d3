"""Zadanie skanowania i jego cykl życia."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Event

from .aggregator import StatsAggregator
from .models import TaskState


@dataclass(slots=True)
class ScanTask:
    """Pojedyncze, anulowalne skanowanie z własnym akumulatorem statystyk."""

    id: str
    root_path: str
    max_depth: int
    owner: str | None = None
    aggregator: StatsAggregator = field(default_factory=StatsAggregator)
    state: TaskState = TaskState.RUNNING
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    _cancel_event: Event = field(default_factory=Event, repr=False)
    _started_monotonic: float = field(default_factory=time.monotonic, repr=False)

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ValueError(f"Głębokość skanowania musi być >= 1, otrzymano {self.max_depth}")

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_event.is_set()

    def request_cancel(self) -> bool:
        """Ustawia flagę anulowania; zwraca True tylko przy pierwszym wywołaniu."""

        if self._cancel_event.is_set() or self.state.is_terminal:
            return False
        self._cancel_event.set()
        return True

    def finish(self, state: TaskState) -> None:
        """Przeprowadza zadanie do stanu końcowego (dokładnie raz)."""

        if not state.is_terminal:
            raise ValueError(f"{state.value} nie jest stanem końcowym")
        if self.state.is_terminal:
            raise RuntimeError(f"Zadanie {self.id} jest już w stanie {self.state.value}")
        self.state = state

    def elapsed_seconds(self) -> int:
        return round(time.monotonic() - self._started_monotonic)
