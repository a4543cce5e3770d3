"""Konfiguracja aplikacji."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping

_ENV_PREFIX = "SPACEANALYZER_"
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class AppConfig:
    """Konfiguracja serwera i skanera."""

    host: str = "127.0.0.1"
    port: int = 3000
    static_dir: Path | None = None
    default_scan_depth: int = 2
    progress_interval: int = 50
    top_n: int = 20
    publish_timeout: float = 5.0
    log_level: int = logging.INFO
    json_logs: bool = False

    @classmethod
    def default(cls) -> "AppConfig":
        """Tworzy domyślną konfigurację."""

        return cls()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AppConfig":
        """Tworzy konfigurację nadpisaną zmiennymi środowiskowymi `SPACEANALYZER_*`."""

        env = os.environ if environ is None else environ
        config = cls.default()
        overrides: dict[str, object] = {}

        host = _get(env, "HOST")
        if host:
            overrides["host"] = host
        static_dir = _get(env, "STATIC_DIR")
        if static_dir:
            overrides["static_dir"] = Path(static_dir)

        for field_name, key in (
            ("port", "PORT"),
            ("default_scan_depth", "SCAN_DEPTH"),
            ("progress_interval", "PROGRESS_INTERVAL"),
            ("top_n", "TOP_N"),
        ):
            raw = _get(env, key)
            if raw:
                overrides[field_name] = _parse_int(key, raw, minimum=1)

        timeout = _get(env, "PUBLISH_TIMEOUT")
        if timeout:
            try:
                overrides["publish_timeout"] = float(timeout)
            except ValueError as exc:
                raise ValueError(f"Nieprawidłowa wartość {_ENV_PREFIX}PUBLISH_TIMEOUT: {timeout!r}") from exc

        level = _get(env, "LOG_LEVEL")
        if level:
            overrides["log_level"] = _parse_level(level)

        json_logs = _get(env, "JSON_LOGS")
        if json_logs:
            overrides["json_logs"] = json_logs.lower() in _TRUE_VALUES

        return replace(config, **overrides)


def _get(env: Mapping[str, str], key: str) -> str:
    return (env.get(_ENV_PREFIX + key) or "").strip()


def _parse_int(key: str, raw: str, *, minimum: int) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Nieprawidłowa wartość {_ENV_PREFIX}{key}: {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"Wartość {_ENV_PREFIX}{key} musi być >= {minimum}, otrzymano {value}")
    return value


def _parse_level(raw: str) -> int:
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ValueError(f"Nieznany poziom logowania {_ENV_PREFIX}LOG_LEVEL: {raw!r}")
    return level
