from __future__ import annotations

from collections.abc import Callable

from detector.config import ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS, METACORE_DRY_RUN
from detector.metacore_client import InMemoryMetadataStore, MetaCoreClient, MetadataStore
from detector.models import CallbackPayload
from detector.notifier import send_callback
from server.api.settings import Settings
from server.api.state import PluginState

StoreFactory = Callable[[str], MetadataStore]
CallbackSender = Callable[[str, CallbackPayload], bool]

_SETTINGS = Settings.from_env()
_STATE = PluginState()
_DRY_RUN_STORE = InMemoryMetadataStore()


def _http_store_factory(meta_core_url: str) -> MetadataStore:
    return MetaCoreClient(meta_core_url, timeout_seconds=ANIME_DETECTOR_HTTP_TIMEOUT_SECONDS)


def _dry_run_store_factory(meta_core_url: str) -> MetadataStore:
    return _DRY_RUN_STORE


def get_settings() -> Settings:
    return _SETTINGS


def get_state() -> PluginState:
    return _STATE


def get_store_factory() -> StoreFactory:
    return _dry_run_store_factory if METACORE_DRY_RUN else _http_store_factory


def get_callback_sender() -> CallbackSender:
    return send_callback
