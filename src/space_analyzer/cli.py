"""Interfejs wiersza poleceń: serwer, skanowanie offline i lista dysków."""

from __future__ import annotations

import logging
import sys
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from pathlib import Path

import structlog
import uvicorn

from space_analyzer.core import InvalidRootError, ResultFormatter, ScanEngine, ScanTask, TaskRegistry
from space_analyzer.core.models import ScanProgress, TaskState
from space_analyzer.drives import DriveError, PsutilDriveEnumerator, fallback_drives
from space_analyzer.reporting import DefaultReportExporter, ExportFormat
from space_analyzer.server import create_app
from space_analyzer.shared import AppConfig, configure_logging, install_crash_reporting


def _build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="space-analyzer",
        description="Analiza zajętości dysku: typy plików, największe foldery i aplikacje.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Wyświetla szczegółowe logi",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Logi w formacie JSON",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Uruchamia serwer websocket")
    serve.add_argument("--host", help="Adres nasłuchiwania (domyślnie: 127.0.0.1)")
    serve.add_argument("--port", type=int, help="Port serwera (domyślnie: 3000)")
    serve.add_argument("--static-dir", type=Path, help="Katalog z plikami klienta serwowanymi pod /")

    scan = commands.add_parser("scan", help="Skanuje katalog bez serwera i zapisuje raport")
    scan.add_argument("path", help="Katalog startowy skanowania")
    scan.add_argument(
        "--depth",
        type=int,
        help="Maksymalna głębokość skanowania katalogów (domyślnie: 2)",
    )
    scan.add_argument(
        "--output",
        type=Path,
        default=Path("report.json"),
        help="Ścieżka do pliku wynikowego (domyślnie: report.json)",
    )
    scan.add_argument(
        "--format",
        choices=["json", "csv"],
        default="json",
        help="Format raportu (domyślnie: json)",
    )

    commands.add_parser("drives", help="Wyświetla dostępne dyski i kończy działanie")
    return parser


def _run_serve(args: Namespace, config: AppConfig) -> int:
    overrides = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.static_dir:
        overrides["static_dir"] = args.static_dir
    config = replace(config, **overrides)

    logger = structlog.get_logger(__name__)
    logger.info("server-starting", host=config.host, port=config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)
    return 0


def _run_scan(args: Namespace, config: AppConfig) -> int:
    logger = structlog.get_logger(__name__)
    depth = args.depth if args.depth is not None else config.default_scan_depth
    if depth < 1:
        logger.error("invalid-depth", depth=depth)
        return 1

    engine = ScanEngine(formatter=ResultFormatter(top_n=config.top_n), progress_interval=config.progress_interval)
    try:
        root = engine.validate_root(args.path)
    except InvalidRootError as exc:
        logger.error("invalid-root", path=args.path, error=str(exc))
        return 1

    task = TaskRegistry().create(root, depth)

    def _log_progress(_task: ScanTask, progress: ScanProgress) -> None:
        logger.info(
            "progress",
            scanned=progress.scanned_count,
            size=progress.total_size,
            errors=progress.error_count,
            path=progress.current_path,
        )

    outcome = engine.walk(task, progress=_log_progress)
    if outcome.state is not TaskState.COMPLETED or outcome.result is None:
        logger.error("scan-failed", error=outcome.error)
        return 1

    fmt = ExportFormat.JSON if args.format == "json" else ExportFormat.CSV
    output_path = DefaultReportExporter().export(outcome.result, args.output, fmt, root=root, duration=outcome.duration)
    logger.info(
        "scan-complete",
        files=outcome.result.total_files,
        size=outcome.result.total_size,
        errors=outcome.result.error_count,
        duration=outcome.duration,
        report=str(output_path),
    )
    return 0


def _run_drives(_args: Namespace, _config: AppConfig) -> int:
    logger = structlog.get_logger(__name__)
    try:
        drives = PsutilDriveEnumerator().list_drives()
    except DriveError as exc:
        logger.warning("drive-listing-failed", error=str(exc))
        drives = fallback_drives()
    for drive in drives:
        logger.info("drive", name=drive.name, path=drive.path, type=drive.kind)
    return 0


_COMMANDS = {
    "serve": _run_serve,
    "scan": _run_scan,
    "drives": _run_drives,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = AppConfig.from_env()
    except ValueError as exc:
        parser.error(str(exc))

    level = logging.DEBUG if args.verbose else config.log_level
    configure_logging(level=level, json_output=args.json_logs or config.json_logs)
    install_crash_reporting()
    return _COMMANDS[args.command](args, config)


if __name__ == "__main__":
    sys.exit(main())
