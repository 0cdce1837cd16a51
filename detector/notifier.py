from __future__ import annotations

"""
detector/notifier.py

Callback de finalización al orquestador.

- Fire-and-forget: un POST, sin reintentos.
- Un fallo de entrega se loguea y se traga: ya no hay nadie a quien reportarlo.
"""

from collections.abc import Callable

import requests  # type: ignore[import-not-found]

from detector import logger as logger
from detector.config import ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS, ANIME_DETECTOR_USER_AGENT
from detector.models import CallbackPayload

SendCallback = Callable[[CallbackPayload], None]


def send_callback(
    callback_url: str,
    payload: CallbackPayload,
    *,
    timeout_seconds: float = ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS,
    post: Callable[..., object] | None = None,
) -> bool:
    """
    Envía el payload. Devuelve True si se entregó (2xx), False en cualquier otro caso.
    Nunca lanza.
    """
    do_post = post or requests.post
    try:
        resp = do_post(
            callback_url,
            json=payload.to_json(),
            headers={"User-Agent": ANIME_DETECTOR_USER_AGENT},
            timeout=float(timeout_seconds),
        )
        status = int(getattr(resp, "status_code", 0))
        if 200 <= status < 300:
            logger.debug_ctx("CALLBACK", f"task={payload.task_id} status={payload.status} -> {status}")
            return True
        logger.error(
            f"[anime-detector] Callback error: HTTP {status} "
            f"(task={payload.task_id}, url={callback_url})"
        )
        return False
    except Exception as exc:
        logger.error(
            f"[anime-detector] Callback error: {exc!r} (task={payload.task_id}, url={callback_url})"
        )
        return False

