# logger y utilidades de logging del servidor
from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path

from server.api.settings import Settings, _env_bool, _env_str

_FILE_HANDLER_TAG = "_anime_detector_api_file_handler"
_LOGGER_FILE_PATH_SENTINEL: object = object()
_LOGGER_FILE_PATH_CACHED: Path | None | object = _LOGGER_FILE_PATH_SENTINEL

SERVER_DIR = Path(__file__).resolve().parents[1]

API_LOGGER_NAME = "anime_detector.api"

# Campos `extra` que emiten middleware/routers y que queremos ver en el fichero.
_EXTRA_FIELDS: tuple[str, ...] = (
    "request_id",
    "task_id",
    "method",
    "path",
    "status",
    "duration_ms",
    "error_id",
)


class _ExtraFieldsFormatter(logging.Formatter):
    """Añade `k=v` de los campos extra conocidos al final de la línea."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        parts = []
        for name in _EXTRA_FIELDS:
            value = record.__dict__.get(name)
            if value is not None:
                parts.append(f"{name}={value}")
        return f"{base} {' '.join(parts)}" if parts else base


def _sanitize_filename_component(value: str) -> str:
    s = (value or "").strip()
    if not s:
        return ""
    out = [ch if (ch.isalnum() or ch in ("-", "_", ".")) else "_" for ch in s]
    return "".join(out).strip("._-")


def _resolve_dir(raw: str, *, base: Path) -> Path:
    p = Path(raw)
    return p if p.is_absolute() else (base / p)


def _build_logger_file_path() -> Path | None:
    """
    Path del log por ejecución (cacheado por proceso).

    - LOGGER_FILE_ENABLED=0 -> None
    - LOGGER_FILE_PATH explícito gana
    - si no: LOGGER_FILE_DIR/<prefix>_<ts>[_<pid>].log
    """
    global _LOGGER_FILE_PATH_CACHED

    if _LOGGER_FILE_PATH_CACHED is not _LOGGER_FILE_PATH_SENTINEL:
        return None if _LOGGER_FILE_PATH_CACHED is None else _LOGGER_FILE_PATH_CACHED  # type: ignore[return-value]

    if not _env_bool("LOGGER_FILE_ENABLED", False):
        _LOGGER_FILE_PATH_CACHED = None
        return None

    raw_path = _env_str("LOGGER_FILE_PATH", "").strip()
    if raw_path:
        _LOGGER_FILE_PATH_CACHED = _resolve_dir(raw_path, base=SERVER_DIR).resolve()
        return _LOGGER_FILE_PATH_CACHED

    log_dir = _resolve_dir(_env_str("LOGGER_FILE_DIR", "logs") or "logs", base=SERVER_DIR)
    prefix = _sanitize_filename_component(_env_str("LOGGER_FILE_PREFIX", "anime-detector")) or "anime-detector"
    ts_fmt = _env_str("LOGGER_FILE_TIMESTAMP_FORMAT", "%Y-%m-%d_%H-%M-%S") or "%Y-%m-%d_%H-%M-%S"
    pid_part = f"_{os.getpid()}" if _env_bool("LOGGER_FILE_INCLUDE_PID", True) else ""

    filename = f"{prefix}_{datetime.now().strftime(ts_fmt)}{pid_part}.log"
    _LOGGER_FILE_PATH_CACHED = (log_dir / filename).resolve()
    return _LOGGER_FILE_PATH_CACHED


def _has_our_file_handler(root: logging.Logger) -> bool:
    return any(getattr(h, _FILE_HANDLER_TAG, False) for h in root.handlers)


def _ensure_file_handler(root: logging.Logger, *, level: str) -> None:
    path = _build_logger_file_path()
    if path is None:
        return

    if _has_our_file_handler(root):
        for handler in root.handlers:
            if getattr(handler, _FILE_HANDLER_TAG, False):
                handler.setLevel(level)
        return

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8", delay=True)
        handler.setLevel(level)
        handler.setFormatter(
            _ExtraFieldsFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        setattr(handler, _FILE_HANDLER_TAG, True)
        root.addHandler(handler)
    except OSError:
        # Sin fichero seguimos con consola (uvicorn).
        pass


def configure_logging(settings: Settings) -> logging.Logger:
    """
    Configuración mínima e idempotente:
    - Respetamos handlers/format de uvicorn.
    - Ajustamos nivel global según LOG_LEVEL.
    """
    root = logging.getLogger()
    root.setLevel(settings.log_level)
    _ensure_file_handler(root, level=settings.log_level)

    logger = logging.getLogger(API_LOGGER_NAME)
    logger.setLevel(settings.log_level)
    return logger
