# lectura de env vars + defaults
from __future__ import annotations

import os
from dataclasses import dataclass


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip()
    return val if val else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except Exception:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """
    Settings del servidor (env vars). Esto evita `os.getenv(...)` disperso.

    Notas:
    - PORT (convención de contenedores) tiene prioridad sobre API_PORT.
    - API_HOST: default "0.0.0.0" (el plugin corre en contenedor).
    - API_RELOAD: default "0" (seguro para producción).
    """

    log_level: str

    api_host: str
    api_port: int
    api_reload: bool

    @staticmethod
    def from_env() -> "Settings":
        port = _env_int("PORT", _env_int("API_PORT", 8080))
        return Settings(
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
            api_host=_env_str("API_HOST", "0.0.0.0"),
            api_port=port if 0 < port < 65536 else 8080,
            api_reload=_env_bool("API_RELOAD", False),
        )
