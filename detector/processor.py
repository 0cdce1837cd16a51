from __future__ import annotations

"""
detector/processor.py

Orquestación de una tarea: gate de tipo -> veredicto -> escrituras -> callback.

Taxonomía de resultados
-----------------------
- skipped   : no es vídeo (reason="Not a video file"), sin escrituras
- completed : veredicto aplicado (0 escrituras también es completed)
- failed    : fallo de meta-core (aborta escrituras restantes) o excepción inesperada
(rejected lo decide el servidor de forma síncrona, antes de llegar aquí)

Las escrituras se completan SIEMPRE antes del callback: el callback significa "hecho".
"""

import time
from collections.abc import Callable

from detector import logger as logger
from detector.config import METACORE_BATCH_WRITES
from detector.detection import SKIP_REASON_NOT_VIDEO, build_write_batch, classify
from detector.metacore_client import MetadataStore
from detector.models import CallbackPayload, ProcessRequest, PropertyWriteBatch, TaskStatus
from detector.notifier import SendCallback


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def apply_write_batch(
    store: MetadataStore,
    cid: str,
    batch: PropertyWriteBatch,
    *,
    batched: bool = False,
) -> int:
    """
    Aplica el lote en orden. La primera excepción del store aborta el resto.
    Devuelve el número de operaciones emitidas.
    """
    if batch.is_empty:
        return 0

    calls = 0
    if batched and batch.sets:
        store.merge_metadata(cid, batch.as_dict())
        calls += 1
    else:
        for key, value in batch.sets:
            store.set_property(cid, key, value)
            calls += 1

    for key, value in batch.set_additions:
        store.add_to_set(cid, key, value)
        calls += 1
    return calls


def process(
    request: ProcessRequest,
    *,
    store_factory: Callable[[str], MetadataStore],
    send: SendCallback,
    batched_writes: bool = METACORE_BATCH_WRITES,
) -> CallbackPayload:
    """
    Procesa una tarea y envía el callback. Nunca lanza.

    `store_factory(meta_core_url)` crea el cliente del store para esta tarea.
    Devuelve el payload enviado (útil para métricas/tests).
    """
    start = time.monotonic()

    def _finish(status: TaskStatus, *, error: str | None = None, reason: str | None = None) -> CallbackPayload:
        payload = CallbackPayload(
            task_id=request.task_id,
            status=status,
            duration_ms=_elapsed_ms(start),
            error=error,
            reason=reason,
        )
        try:
            send(payload)
        except Exception as exc:
            logger.error(f"[anime-detector] Callback error: {exc!r} (task={request.task_id})")
        return payload

    try:
        data = request.classification_input()

        if data.file_type != "video":
            logger.debug_ctx("PROCESS", f"task={request.task_id} skipped ({data.file_type})")
            return _finish("skipped", reason=SKIP_REASON_NOT_VIDEO)

        verdict = classify(data)
        batch = build_write_batch(verdict)
        logger.debug_ctx(
            "PROCESS",
            f"task={request.task_id} signals={verdict.signals} "
            f"anime={verdict.is_anime} jpn={verdict.is_japanese}",
        )

        if not batch.is_empty:
            store = store_factory(request.meta_core_url)
            apply_write_batch(store, request.cid, batch, batched=batched_writes)
            logger.info(f"[anime-detector] Detected anime: {data.file_name or data.file_path}")

        return _finish("completed")

    except Exception as exc:
        logger.error(
            f"[anime-detector] Task {request.task_id} failed: {exc!r}",
            exc_info=exc,
        )
        return _finish("failed", error=str(exc))
