from __future__ import annotations

"""
detector/metacore_client.py

Cliente del store de metadatos (meta-core).

API (protocolo MetadataStore)
-----------------------------
- set_property(cid, key, value)      -> PUT   {base}/meta/{cid}/{key}       {"value": ...}
- add_to_set(cid, key, value)        -> POST  {base}/meta/{cid}/{key}/add   {"value": ...}
- merge_metadata(cid, mapping)       -> PATCH {base}/meta/{cid}             {"metadata": {...}}

Principios
----------
- Fail-fast por request: cualquier respuesta no-2xx o error de red -> MetaCoreError.
  El caller (processor) lo convierte en status "failed"; no se ignora.
- requests.Session compartida (pooling) + Retry de urllib3 para 502/503/504 y
  errores de conexión. Las tres operaciones son idempotentes (add = unión).
- InMemoryMetadataStore implementa el mismo protocolo (dry-run / tests).
"""

import threading
from collections.abc import Mapping
from typing import Protocol
from urllib.parse import quote

import requests  # type: ignore[import-not-found]
from requests.adapters import HTTPAdapter  # type: ignore[import-not-found]
from requests.exceptions import RequestException  # type: ignore[import-not-found]
from urllib3.util.retry import Retry  # type: ignore[import-not-found]

from detector import logger as logger
from detector.config import (
    ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS,
    ANIME_DETECTOR_USER_AGENT,
    METACORE_HTTP_RETRY_BACKOFF_FACTOR,
    METACORE_HTTP_RETRY_TOTAL,
)


class MetaCoreError(Exception):
    pass


class MetadataStore(Protocol):
    def set_property(self, cid: str, key: str, value: str) -> None: ...

    def add_to_set(self, cid: str, key: str, value: str) -> None: ...

    def merge_metadata(self, cid: str, metadata: Mapping[str, str]) -> None: ...


# ============================================================
#                       SESSION
# ============================================================

_SESSION: requests.Session | None = None
_SESSION_LOCK = threading.Lock()


def _get_session() -> requests.Session:
    """Singleton requests.Session con retries (compartida entre requests concurrentes)."""
    global _SESSION
    if _SESSION is not None:
        return _SESSION

    with _SESSION_LOCK:
        if _SESSION is not None:
            return _SESSION

        session = requests.Session()

        retries = Retry(
            total=int(METACORE_HTTP_RETRY_TOTAL),
            backoff_factor=float(METACORE_HTTP_RETRY_BACKOFF_FACTOR),
            status_forcelist=(502, 503, 504),
            allowed_methods=("PUT", "POST", "PATCH"),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries, pool_connections=8, pool_maxsize=16)
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        session.headers.update(
            {
                "User-Agent": ANIME_DETECTOR_USER_AGENT,
                "Accept": "application/json,text/plain,*/*",
            }
        )

        _SESSION = session
        return _SESSION


def _build_url(base_url: str, *parts: str) -> str:
    base = base_url.rstrip("/")
    # Las claves llevan "/" (titles/jpn): se conservan como separadores de path.
    tail = "/".join(quote(p, safe="/") for p in parts)
    return f"{base}/{tail}"


# ============================================================
#                       CLIENTE HTTP
# ============================================================


class MetaCoreClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = (base_url or "").strip()
        if not self._base_url:
            raise MetaCoreError("metaCoreUrl vacío")
        self._timeout = float(timeout_seconds)
        self._session = session

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(self, method: str, url: str, payload: Mapping[str, object]) -> None:
        session = self._session or _get_session()
        try:
            resp = session.request(method, url, json=dict(payload), timeout=self._timeout)
        except RequestException as exc:
            raise MetaCoreError(f"Error de conexión con meta-core ({method} {url}): {exc!r}") from exc

        status = int(getattr(resp, "status_code", 0))
        if status < 200 or status >= 300:
            detail = logger.truncate_line((getattr(resp, "text", "") or "").strip(), 200)
            raise MetaCoreError(f"meta-core HTTP {status} en {method} {url}: {detail}")

        logger.debug_ctx("METACORE", f"{method} {url} -> {status}")

    def set_property(self, cid: str, key: str, value: str) -> None:
        url = _build_url(self._base_url, "meta", cid, key)
        self._request("PUT", url, {"value": value})

    def add_to_set(self, cid: str, key: str, value: str) -> None:
        url = _build_url(self._base_url, "meta", cid, key, "add")
        self._request("POST", url, {"value": value})

    def merge_metadata(self, cid: str, metadata: Mapping[str, str]) -> None:
        if not metadata:
            return
        url = _build_url(self._base_url, "meta", cid)
        self._request("PATCH", url, {"metadata": dict(metadata)})


# ============================================================
#                       STORE EN MEMORIA
# ============================================================


class InMemoryMetadataStore:
    """
    Store local con la misma semántica que meta-core:
    - propiedades simples: último valor gana
    - multi-valor: conjunto (add idempotente, conserva orden de inserción)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._props: dict[str, dict[str, str]] = {}
        self._sets: dict[str, dict[str, list[str]]] = {}

    def set_property(self, cid: str, key: str, value: str) -> None:
        with self._lock:
            self._props.setdefault(cid, {})[key] = value

    def add_to_set(self, cid: str, key: str, value: str) -> None:
        with self._lock:
            values = self._sets.setdefault(cid, {}).setdefault(key, [])
            if value not in values:
                values.append(value)

    def merge_metadata(self, cid: str, metadata: Mapping[str, str]) -> None:
        with self._lock:
            self._props.setdefault(cid, {}).update(metadata)

    def get_property(self, cid: str, key: str) -> str | None:
        with self._lock:
            return self._props.get(cid, {}).get(key)

    def get_set(self, cid: str, key: str) -> list[str]:
        with self._lock:
            return list(self._sets.get(cid, {}).get(key, []))

    def snapshot(self, cid: str) -> dict[str, object]:
        with self._lock:
            out: dict[str, object] = dict(self._props.get(cid, {}))
            for key, values in self._sets.get(cid, {}).items():
                out[key] = list(values)
            return out
