from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock
from typing import Any


@dataclass
class PluginState:
    """Estado de proceso: readiness + última config recibida en /configure."""

    ready: bool = False
    config: dict[str, Any] = field(default_factory=dict)
    _lock: Lock = field(default_factory=Lock, repr=False)

    def set_ready(self, value: bool) -> None:
        with self._lock:
            self.ready = bool(value)

    def update_config(self, config: dict[str, Any]) -> None:
        with self._lock:
            self.config = dict(config)
