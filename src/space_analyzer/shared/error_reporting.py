"""Raporty błędów: zapis nieoczekiwanych wyjątków do plików tekstowych."""

from __future__ import annotations

import json
import os
import platform
import sys
import threading
import traceback
from dataclasses import dataclass
from datetime import datetime, timezone
from importlib import metadata
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

ERROR_DIR_ENV = "SPACEANALYZER_ERROR_DIR"
DISABLE_HOOKS_ENV = "SPACEANALYZER_DISABLE_CRASH_HOOKS"
ENABLE_HOOKS_ENV = "SPACEANALYZER_ENABLE_CRASH_HOOKS"

_hooks_installed = False


@dataclass(frozen=True, slots=True)
class ErrorReport:
    """Zapisany raport błędu."""

    path: Path
    created_at: datetime


def get_error_reports_dir() -> Path:
    """Katalog raportów: `SPACEANALYZER_ERROR_DIR` albo katalog użytkownika.

    Na Windows jest to `%LOCALAPPDATA%/SpaceAnalyzer/error_reports`, na
    pozostałych systemach `~/.space_analyzer/error_reports`. Katalog jest
    tworzony przy pierwszym użyciu.
    """

    override = (os.getenv(ERROR_DIR_ENV) or "").strip()
    if override:
        directory = Path(override)
    elif os.name == "nt":
        directory = Path(os.getenv("LOCALAPPDATA") or Path.home()) / "SpaceAnalyzer" / "error_reports"
    else:
        directory = Path.home() / ".space_analyzer" / "error_reports"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_error_report(
    error: BaseException,
    *,
    where: str,
    context: Mapping[str, Any] | None = None,
) -> ErrorReport:
    """Zapisuje raport (nagłówek JSON i traceback) i zwraca jego ścieżkę.

    Zgłasza `OSError`, gdy katalogu raportów nie da się utworzyć lub zapisać.
    """

    created_at = datetime.now(timezone.utc)
    path = get_error_reports_dir() / f"error_{created_at:%Y%m%d_%H%M%S}_{uuid4().hex[:8]}.txt"

    header = {
        "created_at": created_at.isoformat(),
        "where": where,
        "version": _installed_version(),
        "python": platform.python_version(),
        "platform": platform.platform(),
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": dict(context or {}),
    }
    trace = "".join(traceback.format_exception(type(error), error, error.__traceback__))

    path.write_text(
        f"SpaceAnalyzer: raport błędu\n\n{json.dumps(header, ensure_ascii=False, indent=2, default=str)}\n\n{trace}",
        encoding="utf-8",
        errors="replace",
    )
    return ErrorReport(path=path, created_at=created_at)


def install_crash_reporting() -> bool:
    """Podpina `sys.excepthook` i `threading.excepthook` zapisujące raporty.

    Oryginalne hooki są wołane dalej. Zwraca False, gdy hooki są wyłączone
    (`SPACEANALYZER_DISABLE_CRASH_HOOKS=1`, albo uruchomienie pod pytest bez
    `SPACEANALYZER_ENABLE_CRASH_HOOKS=1`) lub zostały już zainstalowane.
    """

    global _hooks_installed
    if _hooks_installed or _flag(DISABLE_HOOKS_ENV):
        return False
    if os.getenv("PYTEST_CURRENT_TEST") and not _flag(ENABLE_HOOKS_ENV):
        return False

    previous_sys_hook = sys.excepthook
    previous_thread_hook = threading.excepthook

    def _sys_hook(exc_type, exc, tb):  # type: ignore[no-untyped-def]
        _report_quietly(exc, where="sys.excepthook", context={})
        previous_sys_hook(exc_type, exc, tb)

    def _thread_hook(args):  # type: ignore[no-untyped-def]
        if args.exc_value is not None:
            _report_quietly(args.exc_value, where="threading.excepthook", context={"thread": getattr(args.thread, "name", None)})
        previous_thread_hook(args)

    sys.excepthook = _sys_hook
    threading.excepthook = _thread_hook
    _hooks_installed = True
    return True


def _report_quietly(error: BaseException, *, where: str, context: Mapping[str, Any]) -> None:
    # Hook nie może sam zgłosić wyjątku; traceback i tak wypisze poprzedni hook.
    try:
        write_error_report(error, where=where, context=context)
    except OSError:
        pass


def _installed_version() -> str:
    try:
        return metadata.version("space-analyzer")
    except metadata.PackageNotFoundError:
        return "unknown"


def _flag(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}
