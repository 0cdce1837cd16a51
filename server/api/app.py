from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from detector.manifest import PLUGIN_ID, PLUGIN_VERSION
from server.api.deps import get_settings, get_state
from server.api.logging_config import configure_logging
from server.api.middleware import build_exception_handler, build_request_id_middleware
from server.api.routers.health import router as health_router
from server.api.routers.plugin import router as plugin_router

_settings = get_settings()


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger = configure_logging(_settings)
    state = get_state()
    state.set_ready(True)
    logger.info(f"[{PLUGIN_ID}] Listening on port {_settings.api_port}")
    try:
        yield
    finally:
        # SIGTERM -> uvicorn apaga -> dejamos de estar ready antes de cerrar
        state.set_ready(False)
        logger.info(f"[{PLUGIN_ID}] Shutting down")


def create_app() -> FastAPI:
    app = FastAPI(title="Anime Detector Plugin", version=PLUGIN_VERSION, lifespan=_lifespan)

    app.middleware("http")(build_request_id_middleware(_settings))
    app.add_exception_handler(Exception, build_exception_handler(_settings))

    app.include_router(health_router)
    app.include_router(plugin_router)

    return app


app = create_app()
