from __future__ import annotations

from typing import Final

from detector.models import KANA_TITLE_KEY, ROMAJI_TITLE_KEY

PLUGIN_ID: Final[str] = "anime-detector"
PLUGIN_VERSION: Final[str] = "1.0.0"

MANIFEST: Final[dict[str, object]] = {
    "id": PLUGIN_ID,
    "name": "Anime Detector",
    "version": PLUGIN_VERSION,
    "description": "Detects anime content based on keywords, Japanese text, and audio tracks",
    "author": "MetaMesh",
    "dependencies": ["file-info", "ffmpeg", "filename-parser"],
    "priority": 35,
    "color": "#E91E63",
    "defaultQueue": "fast",
    "timeout": 30000,
    "schema": {
        "anime": {"label": "Is Anime", "type": "boolean", "readonly": True},
        KANA_TITLE_KEY: {"label": "Japanese Title", "type": "string"},
        ROMAJI_TITLE_KEY: {"label": "Romaji Title", "type": "string"},
    },
    "config": {},
}


def get_manifest() -> dict[str, object]:
    """Copia del manifest (los routers no deben poder mutar el global)."""
    schema = MANIFEST["schema"]
    out = dict(MANIFEST)
    out["dependencies"] = list(MANIFEST["dependencies"])  # type: ignore[call-overload]
    out["schema"] = {k: dict(v) for k, v in schema.items()}  # type: ignore[union-attr]
    out["config"] = {}
    return out
