"""
detector/config_base.py

Lectura de entorno para detector/config.py.

- `.env` se carga UNA vez al importar (sin pisar variables ya exportadas por
  el contenedor).
- Los parsers nunca lanzan: un valor inválido avisa (always=True) y devuelve
  el default.

No importa detector/config.py (ciclo).
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Final, TypeVar

from dotenv import load_dotenv

load_dotenv(override=False)

from detector import logger as _logger  # noqa: E402

_T = TypeVar("_T", int, float)

_TRUE_SET: Final[frozenset[str]] = frozenset({"1", "true", "t", "yes", "y", "on"})
_FALSE_SET: Final[frozenset[str]] = frozenset({"0", "false", "f", "no", "n", "off"})


def _clean_env_raw(v: object | None) -> str | None:
    """Strip + quita comillas envolventes ('x' / "x"). Vacío -> None."""
    if v is None:
        return None
    s = str(v).strip()
    if len(s) >= 2 and s[0] == s[-1] and s[0] in ("'", '"'):
        s = s[1:-1].strip()
    return s or None


def _read(name: str) -> str | None:
    return _clean_env_raw(os.getenv(name))


def _get_env_str(name: str, default: str | None = None) -> str | None:
    v = _read(name)
    return default if v is None else v


def _parse_number(name: str, default: _T, convert: Callable[[str], _T], kind: str) -> _T:
    v = _read(name)
    if v is None:
        return default
    try:
        return convert(v)
    except ValueError:
        _logger.warning(f"Invalid {kind} for {name!r}: {v!r}, using default {default}", always=True)
        return default


def _get_env_int(name: str, default: int) -> int:
    return _parse_number(name, default, int, "int")


def _get_env_float(name: str, default: float) -> float:
    return _parse_number(name, default, float, "float")


def _get_env_bool(name: str, default: bool) -> bool:
    v = _read(name)
    if v is None:
        return default
    s = v.lower()
    if s in _TRUE_SET:
        return True
    if s in _FALSE_SET:
        return False
    _logger.warning(f"Invalid bool for {name!r}: {v!r}, using default {default}", always=True)
    return default


def _clamp(name: str, value: _T, min_v: _T, max_v: _T) -> _T:
    if value < min_v:
        _logger.warning(f"{name}={value} below {min_v}; using {min_v}", always=True)
        return min_v
    if value > max_v:
        _logger.warning(f"{name}={value} above {max_v}; using {max_v}", always=True)
        return max_v
    return value


def _cap_int(name: str, value: int, *, min_v: int, max_v: int) -> int:
    return _clamp(name, value, min_v, max_v)


def _cap_float(name: str, value: float, *, min_v: float, max_v: float) -> float:
    return _clamp(name, value, min_v, max_v)
