from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Response

from detector.manifest import PLUGIN_VERSION
from server.api.deps import get_state
from server.api.services import metrics
from server.api.state import PluginState

router = APIRouter()


@router.get("/health")
def health(state: PluginState = Depends(get_state)) -> dict[str, Any]:
    return {"status": "healthy", "ready": state.ready, "version": PLUGIN_VERSION}


@router.get("/ready")
def ready(state: PluginState = Depends(get_state)) -> dict[str, Any]:
    """
    Readiness:
    - true entre startup y shutdown (lifespan).
    - 503 mientras arranca o durante el apagado (SIGTERM).
    """
    if not state.ready:
        raise HTTPException(status_code=503, detail={"ready": False})
    return {"ready": True, "ts": datetime.now(timezone.utc).isoformat()}


@router.get("/metrics")
def metrics_endpoint() -> Response:
    body = metrics.render_prometheus()
    return Response(content=body, media_type="text/plain; version=0.0.4")
