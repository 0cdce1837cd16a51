from __future__ import annotations

"""
server/api/middleware/errors.py

Handler global de excepciones no controladas.

- Responde 500 {"detail", "error_id", "request_id"?} sin filtrar el mensaje interno.
- Loguea el traceback con el mismo error_id que ve el cliente.
- /process nunca debería llegar aquí: el procesamiento va en background y
  `detector.processor.process` convierte cualquier fallo en status=failed.
"""

import uuid
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from detector.manifest import PLUGIN_ID
from server.api.logging_config import configure_logging
from server.api.services import metrics
from server.api.settings import Settings


def build_exception_handler(settings: Settings):
    logger = configure_logging(settings)

    async def handler(request: Request, exc: Exception) -> JSONResponse:
        error_id = uuid.uuid4().hex
        req_id = getattr(request.state, "request_id", None)

        logger.exception(
            f"[{PLUGIN_ID}] Unhandled error on {request.method} {request.url.path}: {exc!r}",
            extra={
                "error_id": error_id,
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
            },
        )
        metrics.inc("http_errors_5xx_total", 1)

        payload: dict[str, Any] = {"detail": "Internal Server Error", "error_id": error_id}
        headers: dict[str, str] = {}
        if isinstance(req_id, str) and req_id:
            payload["request_id"] = req_id
            headers["X-Request-ID"] = req_id

        return JSONResponse(status_code=500, content=payload, headers=headers)

    return handler
