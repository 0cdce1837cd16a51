# ejecución en background de /process + métricas por resultado
from __future__ import annotations

from detector.metacore_client import MetadataStore
from detector.models import CallbackPayload, ProcessRequest
from detector.processor import process
from server.api.deps import CallbackSender, StoreFactory
from server.api.services import metrics


def run_task(
    request: ProcessRequest,
    *,
    store_factory: StoreFactory,
    sender: CallbackSender,
) -> CallbackPayload:
    """
    Ejecuta una tarea aceptada. Nunca lanza (process() convierte todo en status).

    El store solo se crea si el veredicto tiene algo que escribir; si además la
    tarea termina completed, cuenta en tasks_with_writes_total.
    """
    store_created = False

    def _store_for(meta_core_url: str) -> MetadataStore:
        nonlocal store_created
        store_created = True
        return store_factory(meta_core_url)

    def _send(payload: CallbackPayload) -> None:
        if not sender(request.callback_url, payload):
            metrics.inc("callback_errors_total", 1)

    result = process(request, store_factory=_store_for, send=_send)
    metrics.inc(f"tasks_{result.status}_total", 1)
    if store_created and result.status == "completed":
        metrics.inc("tasks_with_writes_total", 1)
    return result
