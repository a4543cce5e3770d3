"""Aplikacja FastAPI: websocket skanowania, lista dysków i pliki statyczne."""

from __future__ import annotations

from typing import Dict

import structlog
from fastapi import FastAPI, WebSocket
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from space_analyzer.core import ResultFormatter, ScanEngine, TaskRegistry
from space_analyzer.drives import DriveEnumerator, DriveError, PsutilDriveEnumerator, fallback_drives
from space_analyzer.metadata import LocalMetadataProvider, MetadataProvider
from space_analyzer.shared import AppConfig
from .handler import ConnectionHandler
from .publisher import ProgressPublisher, WebSocketSink


def create_app(
    config: AppConfig | None = None,
    *,
    registry: TaskRegistry | None = None,
    provider: MetadataProvider | None = None,
    drive_enumerator: DriveEnumerator | None = None,
) -> FastAPI:
    """Buduje aplikację z jawnie wstrzykniętymi zależnościami."""

    config = config or AppConfig.default()
    registry = registry if registry is not None else TaskRegistry()
    engine = ScanEngine(
        provider or LocalMetadataProvider(),
        formatter=ResultFormatter(top_n=config.top_n),
        progress_interval=config.progress_interval,
    )
    drives = drive_enumerator or PsutilDriveEnumerator()
    connections: Dict[str, ProgressPublisher] = {}
    logger = structlog.get_logger(__name__)

    app = FastAPI(title="SpaceAnalyzer", version="1.0.0")
    app.state.config = config
    app.state.registry = registry
    app.state.engine = engine

    @app.get("/api/drives")
    def list_drives() -> JSONResponse:
        try:
            return JSONResponse([drive.to_dict() for drive in drives.list_drives()])
        except DriveError as exc:
            logger.error("drive-listing-failed", error=str(exc))
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Nie udało się pobrać listy dysków",
                    "message": str(exc),
                    "drives": [drive.to_dict() for drive in fallback_drives()],
                },
            )

    async def scan_socket(websocket: WebSocket) -> None:
        await websocket.accept()
        publisher = ProgressPublisher(WebSocketSink(websocket), publish_timeout=config.publish_timeout)
        handler = ConnectionHandler(
            registry=registry,
            engine=engine,
            publisher=publisher,
            default_depth=config.default_scan_depth,
            connections=connections,
        )
        logger.info("client-connected", connection=handler.connection_id)
        try:
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
                raw = message.get("text")
                await handler.handle_raw(raw if raw is not None else message.get("bytes") or b"")
        finally:
            logger.info("client-disconnected", connection=handler.connection_id)
            await handler.close()

    app.add_api_websocket_route("/ws", scan_socket)
    app.add_api_websocket_route("/", scan_socket)

    if config.static_dir is not None:
        if config.static_dir.is_dir():
            app.mount("/", StaticFiles(directory=config.static_dir, html=True), name="static")
        else:
            logger.warning("static-dir-missing", path=str(config.static_dir))

    return app


__all__ = ["create_app"]
