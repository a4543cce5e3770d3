"""Testy publikowania wiadomości do połączenia."""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import List

import pytest

from space_analyzer.core import ScanEngine, ScanTask, TaskRegistry
from space_analyzer.core.models import ScanProgress, TaskState
from space_analyzer.metadata import LocalMetadataProvider
from space_analyzer.server.protocol import scan_complete, scan_started
from space_analyzer.server.publisher import ProgressPublisher


class FakeSink:
    def __init__(self, *, fail: bool = False, reject: Exception | None = None) -> None:
        self.sent: List[dict] = []
        self.fail = fail
        self.reject = reject
        self.open = True

    @property
    def is_open(self) -> bool:
        return self.open

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("socket closed")
        if self.reject is not None:
            error, self.reject = self.reject, None
            raise error
        # Ramka tekstowa websocketu jest zawsze kodowana w UTF-8.
        data.encode("utf-8")
        self.sent.append(json.loads(data))


def _progress(count: int) -> ScanProgress:
    return ScanProgress(scanned_count=count, total_size=count, error_count=0, current_path="/data/x", percentage=0)


def test_send_delivers_serialized_envelope() -> None:
    sink = FakeSink()

    async def scenario() -> bool:
        return await ProgressPublisher(sink).send(scan_started("1"))

    assert asyncio.run(scenario()) is True
    assert sink.sent == [{"type": "scan_started", "payload": {"taskId": "1"}}]


def test_messages_are_dropped_when_connection_closed() -> None:
    sink = FakeSink()

    async def scenario() -> bool:
        publisher = ProgressPublisher(sink)
        publisher.close()
        return await publisher.send(scan_started("1"))

    assert asyncio.run(scenario()) is False
    assert sink.sent == []


def test_closed_sink_is_detected() -> None:
    sink = FakeSink()
    sink.open = False

    async def scenario() -> bool:
        publisher = ProgressPublisher(sink)
        return publisher.closed

    assert asyncio.run(scenario()) is True


def test_delivery_failure_closes_publisher() -> None:
    sink = FakeSink(fail=True)

    async def scenario() -> ProgressPublisher:
        publisher = ProgressPublisher(sink)
        assert await publisher.send(scan_started("1")) is False
        return publisher

    assert asyncio.run(scenario()).closed


def test_acknowledge_stop_suppresses_later_task_messages() -> None:
    sink = FakeSink()
    registry = TaskRegistry()
    task = registry.create("/data", 2)

    async def scenario() -> None:
        publisher = ProgressPublisher(sink)
        await publisher.publish(task, scan_started(task.id))
        assert await publisher.acknowledge_stop(registry, task.id) is True
        assert await publisher.acknowledge_stop(registry, task.id) is False
        assert await publisher.publish(task, scan_started(task.id)) is False

    asyncio.run(scenario())

    assert [message["type"] for message in sink.sent] == ["scan_started", "scan_stopped"]
    assert task.cancel_requested


def test_acknowledge_stop_for_unknown_task_sends_nothing() -> None:
    sink = FakeSink()

    async def scenario() -> bool:
        return await ProgressPublisher(sink).acknowledge_stop(TaskRegistry(), "404")

    assert asyncio.run(scenario()) is False
    assert sink.sent == []


def test_report_progress_from_worker_thread_waits_for_delivery() -> None:
    sink = FakeSink()
    task = ScanTask(id="5", root_path="/data", max_depth=2)

    def worker(publisher: ProgressPublisher) -> int:
        publisher.report_progress(task, _progress(50))
        publisher.report_progress(task, _progress(100))
        return len(sink.sent)

    async def scenario() -> int:
        publisher = ProgressPublisher(sink)
        return await asyncio.to_thread(worker, publisher)

    assert asyncio.run(scenario()) == 2
    assert [message["payload"]["scannedCount"] for message in sink.sent] == [50, 100]
    assert all(message["type"] == "scan_progress" for message in sink.sent)


def test_report_progress_is_skipped_for_cancelled_task() -> None:
    sink = FakeSink()
    task = ScanTask(id="5", root_path="/data", max_depth=2)
    task.request_cancel()

    async def scenario() -> None:
        publisher = ProgressPublisher(sink)
        await asyncio.to_thread(publisher.report_progress, task, _progress(50))

    asyncio.run(scenario())

    assert sink.sent == []


def test_unserializable_message_is_dropped_without_closing() -> None:
    sink = FakeSink(reject=UnicodeEncodeError("utf-8", "\udcff", 0, 1, "surrogates not allowed"))

    async def scenario() -> tuple:
        publisher = ProgressPublisher(sink)
        first = await publisher.send(scan_started("1"))
        second = await publisher.send(scan_started("2"))
        return first, second, publisher.closed

    assert asyncio.run(scenario()) == (False, True, False)
    assert [message["payload"]["taskId"] for message in sink.sent] == ["2"]


@pytest.mark.skipif(sys.platform in ("win32", "darwin"), reason="wymaga nazw plików spoza UTF-8")
def test_undecodable_file_names_reach_client_as_replacement_characters(tmp_path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    raw_root = os.fsencode(str(root))
    with open(os.path.join(raw_root, b"bad\xff.txt"), "wb") as handle:
        handle.write(b"x" * 3)
    os.mkdir(os.path.join(raw_root, b"dir\xff"))
    with open(os.path.join(raw_root, b"dir\xff", b"inner.txt"), "wb") as handle:
        handle.write(b"y" * 5)

    sink = FakeSink()
    task = ScanTask(id="u", root_path=str(root), max_depth=2)
    engine = ScanEngine(LocalMetadataProvider(), progress_interval=1)

    async def scenario() -> tuple:
        publisher = ProgressPublisher(sink)
        outcome = await asyncio.to_thread(engine.walk, task, progress=publisher.report_progress)
        delivered = await publisher.publish(task, scan_complete(task.id, outcome.result, outcome.duration))
        return outcome, delivered

    outcome, delivered = asyncio.run(scenario())

    assert outcome.state is TaskState.COMPLETED
    assert delivered is True
    assert [message["type"] for message in sink.sent] == ["scan_progress", "scan_progress", "scan_complete"]
    assert any("�" in message["payload"]["currentPath"] for message in sink.sent[:2])
    stats = sink.sent[-1]["payload"]["stats"]
    assert stats["totalSize"] == 8
    assert "dir�" in [folder["name"] for folder in stats["folders"]]
