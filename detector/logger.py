from __future__ import annotations

"""
detector/logger.py

Logging del detector sobre el módulo estándar `logging`.

Uso
---
    from detector import logger
    logger.info("...")
    logger.error("...", exc_info=exc)
    logger.debug_ctx("METACORE", "PUT ... -> 204")

Reglas
------
- SILENT_MODE: se callan debug/info/warning salvo `always=True`. error() nunca se calla.
- DEBUG_MODE: activa debug_ctx y, si no hay LOG_LEVEL, baja el nivel a DEBUG.
- HTTP_DEBUG: deja urllib3/requests en su nivel; si no, quedan en WARNING.
- Un fallo al loguear no puede tumbar una tarea.

Los flags se leen de `detector.config` vía sys.modules: config_base importa
este módulo para avisar de env vars inválidas antes de que exista config.
"""

import logging
import sys
from types import ModuleType, TracebackType
from typing import Final, Mapping, TypedDict

from typing_extensions import TypeAlias, Unpack

_ExcInfoTuple: TypeAlias = tuple[type[BaseException], BaseException, TracebackType | None]
ExcInfo: TypeAlias = bool | _ExcInfoTuple | BaseException | None


class LogKwargs(TypedDict, total=False):
    exc_info: ExcInfo
    stack_info: bool
    stacklevel: int
    extra: Mapping[str, object] | None


LOGGER_NAME: Final[str] = "anime_detector"

_DEFAULT_LOG_LINE_MAX_CHARS: Final[int] = 500
_LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_NOISY_HTTP_LOGGERS: Final[tuple[str, ...]] = ("urllib3", "urllib3.connectionpool", "requests")

_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_LOGGER: logging.Logger | None = None


def _filter_log_kwargs(kwargs: Mapping[str, object]) -> LogKwargs:
    """Deja pasar solo los kwargs de logging con un tipo válido."""
    out: LogKwargs = {}

    exc_info = kwargs.get("exc_info", False)
    if "exc_info" in kwargs and (exc_info is None or isinstance(exc_info, (bool, BaseException, tuple))):
        out["exc_info"] = exc_info  # type: ignore[typeddict-item]

    if isinstance(kwargs.get("stack_info"), bool):
        out["stack_info"] = kwargs["stack_info"]  # type: ignore[typeddict-item]

    stacklevel = kwargs.get("stacklevel")
    if isinstance(stacklevel, int) and not isinstance(stacklevel, bool):
        out["stacklevel"] = stacklevel

    extra = kwargs.get("extra", False)
    if "extra" in kwargs and (extra is None or isinstance(extra, Mapping)):
        out["extra"] = extra  # type: ignore[typeddict-item]

    return out


# ============================================================================
# Flags (leídos de detector.config si ya está importado)
# ============================================================================


def _config_attr(name: str, default: object) -> object:
    cfg = sys.modules.get("detector.config")
    if not isinstance(cfg, ModuleType):
        return default
    return getattr(cfg, name, default)


def is_silent_mode() -> bool:
    return bool(_config_attr("SILENT_MODE", False))


def is_debug_mode() -> bool:
    return bool(_config_attr("DEBUG_MODE", False))


def _resolve_level() -> int:
    """LOG_LEVEL explícito > DEBUG_MODE > INFO."""
    raw = _config_attr("LOG_LEVEL", None)
    if isinstance(raw, str):
        mapped = _LEVELS.get(raw.strip().upper())
        if mapped is not None:
            return mapped
    return logging.DEBUG if is_debug_mode() else logging.INFO


def get_logger() -> logging.Logger:
    """Logger del paquete; configura la primera vez (idempotente)."""
    global _LOGGER

    if _LOGGER is not None:
        return _LOGGER

    level = _resolve_level()
    root = logging.getLogger()
    if not root.handlers:
        # Bajo uvicorn ya hay handlers: no los tocamos.
        logging.basicConfig(level=level, format=_LOG_FORMAT)

    if not bool(_config_attr("HTTP_DEBUG", False)):
        for name in _NOISY_HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    _LOGGER = log
    return log


def _emit(level: int, msg: str, args: tuple[object, ...], kwargs: Mapping[str, object]) -> None:
    try:
        get_logger().log(level, msg, *args, **_filter_log_kwargs(kwargs))
    except Exception:
        if level >= logging.ERROR:
            print(msg, file=sys.stderr)


# ============================================================================
# API pública
# ============================================================================


def debug(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if always or not is_silent_mode():
        _emit(logging.DEBUG, msg, args, kwargs)


def info(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if always or not is_silent_mode():
        _emit(logging.INFO, msg, args, kwargs)


def warning(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    if always or not is_silent_mode():
        _emit(logging.WARNING, msg, args, kwargs)


def error(msg: str, *args: object, always: bool = False, **kwargs: Unpack[LogKwargs]) -> None:
    _emit(logging.ERROR, msg, args, kwargs)


def truncate_line(text: str, max_chars: int | None = None) -> str:
    limit = max_chars if isinstance(max_chars, int) and max_chars > 0 else _DEFAULT_LOG_LINE_MAX_CHARS
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 12)] + " …(truncated)"


def debug_ctx(tag: str, msg: object) -> None:
    """info("[TAG][DEBUG] ...") solo con DEBUG_MODE activo."""
    if not is_debug_mode():
        return
    label = (tag or "DEBUG").strip().upper()
    info(f"[{label}][DEBUG] {truncate_line(str(msg))}")
