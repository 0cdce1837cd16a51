# /manifest, /configure, /process
from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from detector.manifest import PLUGIN_ID, get_manifest
from detector.models import InvalidRequestError, ProcessRequest
from server.api.deps import (
    CallbackSender,
    StoreFactory,
    get_callback_sender,
    get_state,
    get_store_factory,
)
from server.api.logging_config import API_LOGGER_NAME
from server.api.services import metrics
from server.api.services.tasks import run_task
from server.api.state import PluginState

router = APIRouter()

_log = logging.getLogger(API_LOGGER_NAME)


async def _json_or_none(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


@router.get("/manifest")
def manifest() -> dict[str, Any]:
    return get_manifest()


@router.post("/configure")
async def configure(request: Request, state: PluginState = Depends(get_state)) -> dict[str, Any]:
    body = await _json_or_none(request)
    config = body.get("config") if isinstance(body, dict) else None
    state.update_config(config if isinstance(config, dict) else {})
    _log.info(f"[{PLUGIN_ID}] Configuration updated")
    return {"status": "ok"}


@router.post("/process")
async def process_task(
    request: Request,
    background_tasks: BackgroundTasks,
    store_factory: StoreFactory = Depends(get_store_factory),
    sender: CallbackSender = Depends(get_callback_sender),
) -> dict[str, Any]:
    """
    Validación síncrona + procesamiento en background.

    - Falta algún campo obligatorio -> {"status": "rejected"} (sin callback).
    - OK -> {"status": "accepted"}; el resultado llega por callbackUrl.
    """
    body = await _json_or_none(request)
    try:
        task = ProcessRequest.from_payload(body)
    except InvalidRequestError as exc:
        metrics.inc("process_rejected_total", 1)
        return {"status": "rejected", "error": str(exc)}

    metrics.inc("process_accepted_total", 1)
    background_tasks.add_task(run_task, task, store_factory=store_factory, sender=sender)
    return {"status": "accepted"}
