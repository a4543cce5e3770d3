"""Obsługa jednego połączenia klienta: start, stop i rozłączenie."""

from __future__ import annotations

import asyncio
from typing import Dict, Set
from uuid import uuid4

import structlog

from space_analyzer.core import InvalidRootError, ScanEngine, ScanTask, TaskRegistry
from space_analyzer.core.models import ScanOutcome, TaskState
from . import protocol
from .protocol import ProtocolError, StartScanMessage, StopScanMessage
from .publisher import ProgressPublisher


class ConnectionHandler:
    """Dispatcher wiadomości jednego połączenia.

    Każde skanowanie działa w osobnym wątku roboczym (`asyncio.to_thread`),
    więc pętla zdarzeń dalej przyjmuje start i stop z innych połączeń.

    `connections` to współdzielona mapa identyfikator połączenia -> publisher.
    Zatrzymać zadanie może dowolne połączenie, ale potwierdzenie
    `scan_stopped` trafia zawsze do połączenia, które zadanie uruchomiło.
    """

    def __init__(
        self,
        *,
        registry: TaskRegistry,
        engine: ScanEngine,
        publisher: ProgressPublisher,
        default_depth: int = 2,
        connections: Dict[str, ProgressPublisher] | None = None,
    ) -> None:
        self.connection_id = uuid4().hex
        self._connections = connections if connections is not None else {}
        self._connections[self.connection_id] = publisher
        self._registry = registry
        self._engine = engine
        self._publisher = publisher
        self._default_depth = default_depth
        self._runners: Set[asyncio.Task[None]] = set()
        self._logger = structlog.get_logger(__name__).bind(connection=self.connection_id)

    async def handle_raw(self, raw: str | bytes) -> None:
        try:
            message = protocol.parse_inbound(raw)
        except ProtocolError as exc:
            self._logger.warning("protocol-error", error=str(exc))
            await self._publisher.send(protocol.protocol_error(str(exc)))
            return
        await self.dispatch(message)

    async def dispatch(self, message: StartScanMessage | StopScanMessage) -> None:
        if isinstance(message, StartScanMessage):
            await self.start_scan(message.payload.drive_path, message.payload.scan_depth)
        elif isinstance(message, StopScanMessage):
            await self.stop_scan(message.payload.task_id)
        else:  # pragma: no cover - parse_inbound zwraca tylko znane typy
            raise TypeError(f"Nieobsługiwany typ wiadomości: {type(message).__name__}")

    async def start_scan(self, drive_path: str | None, scan_depth: int | None = None) -> ScanTask | None:
        depth = scan_depth or self._default_depth
        try:
            root = await asyncio.to_thread(self._engine.validate_root, drive_path)
        except InvalidRootError as exc:
            self._logger.error("scan-invalid-root", path=drive_path, error=str(exc))
            await self._publisher.send(protocol.scan_error(self._registry.next_id(), str(exc)))
            return None

        task = self._registry.create(root, depth, owner=self.connection_id)
        self._logger.info("scan-started", task_id=task.id, root=root, depth=depth)
        await self._publisher.send(protocol.scan_started(task.id))

        runner = asyncio.create_task(self._run(task), name=f"scan-{task.id}")
        self._runners.add(runner)
        runner.add_done_callback(self._runners.discard)
        return task

    async def stop_scan(self, task_id: str) -> bool:
        task = self._registry.get(task_id)
        owner = self._connections.get(task.owner) if task is not None and task.owner else None
        if owner is None:
            self._logger.debug("stop-ignored", task_id=task_id)
            return False
        if not await owner.acknowledge_stop(self._registry, task_id):
            return False
        self._registry.remove(task_id)
        self._logger.info("scan-stop-requested", task_id=task_id, owner=task.owner)
        return True

    async def close(self) -> None:
        """Rozłączenie: anuluje i wyrejestrowuje wszystkie zadania połączenia."""

        self._publisher.close()
        self._connections.pop(self.connection_id, None)
        for task in self._registry.owned_by(self.connection_id):
            self._registry.request_abort(task.id)
            self._registry.remove(task.id)
            self._logger.info("scan-aborted-on-disconnect", task_id=task.id)

    async def wait_idle(self) -> None:
        """Czeka, aż wszystkie skanowania tego połączenia się zakończą."""

        if self._runners:
            await asyncio.gather(*list(self._runners), return_exceptions=True)

    async def _run(self, task: ScanTask) -> None:
        try:
            outcome = await asyncio.to_thread(self._engine.walk, task, progress=self._publisher.report_progress)
        except Exception as exc:
            self._logger.exception("scan-runner-failed", task_id=task.id)
            outcome = ScanOutcome.failed(str(exc))
        finally:
            self._registry.remove(task.id)

        try:
            await self._emit_outcome(task, outcome)
        except Exception:
            self._logger.exception("scan-outcome-delivery-failed", task_id=task.id)

    async def _emit_outcome(self, task: ScanTask, outcome: ScanOutcome) -> None:
        if outcome.state is TaskState.COMPLETED and outcome.result is not None:
            self._logger.info(
                "scan-complete",
                task_id=task.id,
                files=outcome.result.total_files,
                size=outcome.result.total_size,
                errors=outcome.result.error_count,
                duration=outcome.duration,
            )
            await self._publisher.publish(task, protocol.scan_complete(task.id, outcome.result, outcome.duration))
        elif outcome.state is TaskState.FAILED:
            self._logger.error("scan-error", task_id=task.id, error=outcome.error)
            await self._publisher.publish(task, protocol.scan_error(task.id, outcome.error or "Nieznany błąd"))
        else:
            # scan_stopped wysłano już przy żądaniu zatrzymania.
            self._logger.info("scan-stopped", task_id=task.id)


__all__ = ["ConnectionHandler"]
