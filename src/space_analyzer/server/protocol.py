"""Protokół wiadomości websocket: koperty `{type, payload}`."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from space_analyzer.core.models import ScanProgress, ScanResult, printable


class ProtocolError(ValueError):
    """Wiadomość przychodząca nie jest poprawną kopertą protokołu."""


class MessageType(str, Enum):
    """Rodzaje wiadomości w obu kierunkach."""

    START_SCAN = "start_scan"
    STOP_SCAN = "stop_scan"
    SCAN_STARTED = "scan_started"
    SCAN_PROGRESS = "scan_progress"
    SCAN_COMPLETE = "scan_complete"
    SCAN_ERROR = "scan_error"
    SCAN_STOPPED = "scan_stopped"
    PROTOCOL_ERROR = "protocol_error"


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


TaskId = Annotated[str, BeforeValidator(lambda value: str(value) if isinstance(value, int) else value)]


# ----------------------------------------------------------------------
# Wiadomości przychodzące
# ----------------------------------------------------------------------


class StartScanPayload(_Payload):
    drive_path: Optional[str] = None
    scan_depth: Optional[int] = Field(default=None, ge=1)


class StopScanPayload(_Payload):
    task_id: TaskId


class StartScanMessage(BaseModel):
    type: Literal["start_scan"]
    payload: StartScanPayload = Field(default_factory=StartScanPayload)


class StopScanMessage(BaseModel):
    type: Literal["stop_scan"]
    payload: StopScanPayload


InboundMessage = Annotated[Union[StartScanMessage, StopScanMessage], Field(discriminator="type")]

_INBOUND_ADAPTER: TypeAdapter[Any] = TypeAdapter(InboundMessage)


def parse_inbound(raw: Union[str, bytes]) -> Union[StartScanMessage, StopScanMessage]:
    """Parsuje i waliduje wiadomość; nieznane typy są odrzucane jawnie."""

    try:
        return _INBOUND_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise ProtocolError(_describe(exc)) from exc


def _describe(exc: ValidationError) -> str:
    error = exc.errors()[0]
    kind = error.get("type")
    if kind == "json_invalid":
        return "Wiadomość nie jest poprawnym JSON-em"
    if kind == "union_tag_invalid":
        return f"Nieznany typ wiadomości: {error.get('ctx', {}).get('tag')}"
    if kind in {"union_tag_not_found", "model_type", "model_attributes_type"}:
        return "Wiadomość musi być obiektem z polem 'type'"
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"Nieprawidłowe pole {location}: {error.get('msg')}"


# ----------------------------------------------------------------------
# Wiadomości wychodzące
# ----------------------------------------------------------------------


class ScanStartedPayload(_Payload):
    task_id: str


class ScanProgressPayload(_Payload):
    task_id: str
    scanned_count: int
    total_size: int
    error_count: int
    current_path: str
    percentage: int


class ScanCompletePayload(_Payload):
    task_id: str
    stats: Dict[str, Any]
    duration: int


class ScanErrorPayload(_Payload):
    task_id: Optional[str] = None
    error: str


class ScanStoppedPayload(_Payload):
    task_id: str


class ProtocolErrorPayload(_Payload):
    error: str


@dataclass(frozen=True, slots=True)
class OutboundMessage:
    """Gotowa do wysłania koperta wychodząca."""

    type: MessageType
    payload: _Payload

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "payload": self.payload.model_dump(by_alias=True, mode="json")}

    def to_json(self) -> str:
        return printable(json.dumps(self.to_dict(), ensure_ascii=False))


def scan_started(task_id: str) -> OutboundMessage:
    return OutboundMessage(MessageType.SCAN_STARTED, ScanStartedPayload(task_id=task_id))


def scan_progress(task_id: str, progress: ScanProgress) -> OutboundMessage:
    return OutboundMessage(
        MessageType.SCAN_PROGRESS,
        ScanProgressPayload(
            task_id=task_id,
            scanned_count=progress.scanned_count,
            total_size=progress.total_size,
            error_count=progress.error_count,
            current_path=printable(progress.current_path),
            percentage=progress.percentage,
        ),
    )


def scan_complete(task_id: str, result: ScanResult, duration: int) -> OutboundMessage:
    return OutboundMessage(
        MessageType.SCAN_COMPLETE,
        ScanCompletePayload(task_id=task_id, stats=result.to_dict(), duration=duration),
    )


def scan_error(task_id: Optional[str], error: str) -> OutboundMessage:
    return OutboundMessage(MessageType.SCAN_ERROR, ScanErrorPayload(task_id=task_id, error=printable(error)))


def scan_stopped(task_id: str) -> OutboundMessage:
    return OutboundMessage(MessageType.SCAN_STOPPED, ScanStoppedPayload(task_id=task_id))


def protocol_error(error: str) -> OutboundMessage:
    return OutboundMessage(MessageType.PROTOCOL_ERROR, ProtocolErrorPayload(error=printable(error)))
