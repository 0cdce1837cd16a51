from __future__ import annotations

"""
detector/config.py

Constantes de configuración del detector, leídas una vez desde el entorno (.env).

- Este módulo SOLO parsea, valida y expone constantes.
- Una env var mal formada no rompe: warning always=True y se usa el default.

Los knobs del heurístico (cap de pistas, códigos de idioma) NO son configurables:
viven en detector/models.py y detector/detection.py.
"""

from typing import Final

from detector.config_base import (
    _cap_float,
    _cap_int,
    _get_env_bool,
    _get_env_float,
    _get_env_int,
    _get_env_str,
)

# ============================================================
# MODO DE EJECUCIÓN
# ============================================================

DEBUG_MODE: bool = _get_env_bool("DEBUG_MODE", False)
SILENT_MODE: bool = _get_env_bool("SILENT_MODE", False)

HTTP_DEBUG: bool = _get_env_bool("HTTP_DEBUG", False)
LOG_LEVEL: str | None = _get_env_str("LOG_LEVEL", None)

# ============================================================
# HTTP (meta-core + callback)
# ============================================================

# Alineado con el timeout de tarea del manifest (30 s).
ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS: float = _cap_float(
    "ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS",
    _get_env_float("ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS", 30.0),
    min_v=0.5,
    max_v=120.0,
)

ANIME_DETECTOR_USER_AGENT: Final[str] = (
    _get_env_str("ANIME_DETECTOR_USER_AGENT", "anime-detector/1.0") or "anime-detector/1.0"
)

METACORE_HTTP_RETRY_TOTAL: int = _cap_int(
    "METACORE_HTTP_RETRY_TOTAL",
    _get_env_int("METACORE_HTTP_RETRY_TOTAL", 2),
    min_v=0,
    max_v=10,
)

METACORE_HTTP_RETRY_BACKOFF_FACTOR: float = _cap_float(
    "METACORE_HTTP_RETRY_BACKOFF_FACTOR",
    _get_env_float("METACORE_HTTP_RETRY_BACKOFF_FACTOR", 0.5),
    min_v=0.0,
    max_v=10.0,
)

# Si True, las escrituras van a un store en memoria (no se llama a meta-core).
METACORE_DRY_RUN: bool = _get_env_bool("METACORE_DRY_RUN", False)

# Si True, las propiedades simples se envían en un único PATCH (merge_metadata)
# en vez de un PUT por clave. El add a `genres` siempre va aparte.
METACORE_BATCH_WRITES: bool = _get_env_bool("METACORE_BATCH_WRITES", False)
