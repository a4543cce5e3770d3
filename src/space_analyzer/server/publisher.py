"""Publikowanie postępu i wiadomości końcowych do połączenia klienta."""

from __future__ import annotations

import asyncio
import concurrent.futures
from typing import Protocol

import structlog
from fastapi.websockets import WebSocket, WebSocketDisconnect, WebSocketState

from space_analyzer.core.models import ScanProgress
from space_analyzer.core.registry import TaskRegistry
from space_analyzer.core.tasks import ScanTask
from .protocol import OutboundMessage, scan_progress, scan_stopped


class MessageSink(Protocol):
    """Kanał tekstowy do klienta."""

    @property
    def is_open(self) -> bool:
        """Czy kanał przyjmuje jeszcze wiadomości."""

    async def send_text(self, data: str) -> None:
        """Wysyła ramkę tekstową."""


class WebSocketSink:
    """Adapter `MessageSink` dla websocketu Starlette/FastAPI."""

    def __init__(self, websocket: WebSocket) -> None:
        self._websocket = websocket

    @property
    def is_open(self) -> bool:
        return (
            self._websocket.client_state is WebSocketState.CONNECTED
            and self._websocket.application_state is WebSocketState.CONNECTED
        )

    async def send_text(self, data: str) -> None:
        await self._websocket.send_text(data)


class ProgressPublisher:
    """Serializuje i dostarcza wiadomości jednego połączenia.

    Wszystkie wysyłki przechodzą przez jedną blokadę. Potwierdzenie
    zatrzymania ustawia flagę anulowania pod tą blokadą, a wiadomości
    zadania z ustawioną flagą są odrzucane, więc po `scan_stopped` klient
    nie dostanie już postępu ani wyniku tego zadania. Zamknięte połączenie
    po cichu gubi wiadomości.
    """

    def __init__(
        self,
        sink: MessageSink,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
        publish_timeout: float = 5.0,
    ) -> None:
        self._sink = sink
        self._loop = loop or asyncio.get_running_loop()
        self._publish_timeout = publish_timeout
        self._lock = asyncio.Lock()
        self._closed = False
        self._logger = structlog.get_logger(__name__)

    @property
    def closed(self) -> bool:
        return self._closed or not self._sink.is_open

    def close(self) -> None:
        self._closed = True

    async def send(self, message: OutboundMessage) -> bool:
        """Wysyła wiadomość niezwiązaną z trwającym zadaniem."""

        async with self._lock:
            return await self._deliver(message)

    async def publish(self, task: ScanTask, message: OutboundMessage) -> bool:
        """Wysyła wiadomość zadania, chyba że zadanie zostało już zatrzymane."""

        async with self._lock:
            if task.cancel_requested:
                self._logger.debug("message-dropped-cancelled", task_id=task.id, type=message.type.value)
                return False
            return await self._deliver(message)

    async def acknowledge_stop(self, registry: TaskRegistry, task_id: str) -> bool:
        """Anuluje zadanie i od razu potwierdza zatrzymanie.

        Dla nieznanego lub już zatrzymanego zadania nic nie wysyła.
        """

        async with self._lock:
            if not registry.request_abort(task_id):
                return False
            await self._deliver(scan_stopped(task_id))
            return True

    def report_progress(self, task: ScanTask, progress: ScanProgress) -> None:
        """Callback postępu wywoływany z wątku skanera."""

        self.publish_threadsafe(task, scan_progress(task.id, progress))

    def publish_threadsafe(self, task: ScanTask, message: OutboundMessage) -> None:
        """Przekazuje wiadomość do pętli zdarzeń i czeka na jej dostarczenie."""

        if self.closed:
            return
        try:
            future = asyncio.run_coroutine_threadsafe(self.publish(task, message), self._loop)
        except RuntimeError as exc:
            # Pętla zdarzeń została już zamknięta.
            self._logger.debug("publish-loop-closed", task_id=task.id, error=str(exc))
            return

        try:
            future.result(timeout=self._publish_timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            self._logger.warning("publish-timeout", task_id=task.id, type=message.type.value)
        except concurrent.futures.CancelledError:
            self._logger.debug("publish-cancelled", task_id=task.id, type=message.type.value)

    async def _deliver(self, message: OutboundMessage) -> bool:
        if self.closed:
            self._logger.debug("message-dropped-closed", type=message.type.value)
            return False
        try:
            await self._sink.send_text(message.to_json())
        except (TypeError, ValueError) as exc:
            # Wiadomości nie da się zserializować; połączenie pozostaje otwarte.
            self._logger.warning("message-serialization-failed", type=message.type.value, error=str(exc))
            return False
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            self._closed = True
            self._logger.debug("message-delivery-failed", type=message.type.value, error=str(exc))
            return False
        return True


__all__ = ["MessageSink", "ProgressPublisher", "WebSocketSink"]
