from __future__ import annotations

"""
detector/models.py

Modelos del detector: entrada normalizada, veredicto, lote de escrituras y
el contrato de petición/callback con el orquestador.

Principios
----------
- Todo inmutable (frozen dataclasses): un request no comparte estado con otro.
- La adaptación del registro plano `existingMeta` (claves indexadas
  `fileinfo/streamdetails/<kind>/<i>/language`) a secuencias ordenadas se hace
  AQUÍ, en la frontera. El core solo ve tuplas.
- Este módulo NO hace logging.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Final, Literal

from typing_extensions import TypeAlias

# ============================================================================
# Tipos públicos
# ============================================================================

FileType: TypeAlias = Literal["video", "audio", "document", "image", "other"]
TitleScript: TypeAlias = Literal["none", "kana", "other_japanese"]
TaskStatus: TypeAlias = Literal["accepted", "completed", "failed", "skipped", "rejected"]

_FILE_TYPES: Final[frozenset[str]] = frozenset({"video", "audio", "document", "image", "other"})

# Cap canónico de pistas inspeccionadas por tipo (ver DESIGN.md).
TRACK_SCAN_CAP: Final[int] = 20

# Código ISO de romaji: sufijo de la clave de título no-kana.
ROMAJI_ISO_CODE: Final[str] = "jpl"

KANA_TITLE_KEY: Final[str] = "titles/jpn"
ROMAJI_TITLE_KEY: Final[str] = f"titles/{ROMAJI_ISO_CODE}"

REQUIRED_REQUEST_FIELDS: Final[tuple[str, ...]] = (
    "taskId",
    "cid",
    "filePath",
    "callbackUrl",
    "metaCoreUrl",
)


class InvalidRequestError(ValueError):
    """Petición incompleta/malformada: se rechaza de forma síncrona."""


def _as_str(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_file_type(value: object) -> FileType:
    s = _as_str(value).strip().lower()
    if s in _FILE_TYPES:
        return s  # type: ignore[return-value]
    return "other"


def stream_language_key(kind: str, index: int) -> str:
    return f"fileinfo/streamdetails/{kind}/{index}/language"


def collect_track_languages(
    meta: Mapping[str, object],
    kind: str,
    *,
    cap: int = TRACK_SCAN_CAP,
) -> tuple[str, ...]:
    """
    Convierte claves indexadas en una secuencia ordenada.

    Para en el primer índice ausente/vacío (sentinel de fin de lista) o en `cap`.
    """
    out: list[str] = []
    for i in range(max(0, int(cap))):
        lang = _as_str(meta.get(stream_language_key(kind, i))).strip()
        if not lang:
            break
        out.append(lang)
    return tuple(out)


# ============================================================================
# Entrada / veredicto
# ============================================================================


@dataclass(frozen=True, slots=True)
class ClassificationInput:
    file_path: str
    file_name: str
    file_type: FileType
    original_title: str = ""
    audio_track_languages: tuple[str, ...] = ()
    video_track_languages: tuple[str, ...] = ()

    @staticmethod
    def from_existing_meta(file_path: str, meta: Mapping[str, object] | None) -> "ClassificationInput":
        m: Mapping[str, object] = meta or {}
        return ClassificationInput(
            file_path=_as_str(file_path),
            file_name=_as_str(m.get("fileName")),
            file_type=normalize_file_type(m.get("fileType")),
            original_title=_as_str(m.get("originalTitle")),
            audio_track_languages=collect_track_languages(m, "audio"),
            video_track_languages=collect_track_languages(m, "video"),
        )


@dataclass(frozen=True, slots=True)
class LocalizedTitle:
    """Par etiquetado (script, título): una sola clave de título posible."""

    script: Literal["kana", "other_japanese"]
    title: str

    @property
    def property_key(self) -> str:
        return KANA_TITLE_KEY if self.script == "kana" else ROMAJI_TITLE_KEY


@dataclass(frozen=True, slots=True)
class Signals:
    path_marker: bool = False
    keyword_match: bool = False
    title_script: TitleScript = "none"
    audio_japanese: bool = False
    video_japanese: bool = False

    @property
    def title_japanese(self) -> bool:
        return self.title_script != "none"


@dataclass(frozen=True, slots=True)
class ClassificationVerdict:
    is_anime: bool
    is_japanese: bool
    detected_title_script: TitleScript
    localized_title: LocalizedTitle | None = None
    signals: Signals = field(default_factory=Signals)

    @property
    def should_write(self) -> bool:
        return self.is_anime or self.is_japanese


@dataclass(frozen=True, slots=True)
class PropertyWriteBatch:
    """Escrituras a aplicar en meta-core, en orden: primero `sets`, luego `set_additions`."""

    sets: tuple[tuple[str, str], ...] = ()
    set_additions: tuple[tuple[str, str], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.sets and not self.set_additions

    def as_dict(self) -> dict[str, str]:
        return dict(self.sets)


# ============================================================================
# Contrato con el orquestador
# ============================================================================


@dataclass(frozen=True, slots=True)
class ProcessRequest:
    task_id: str
    cid: str
    file_path: str
    callback_url: str
    meta_core_url: str
    existing_meta: Mapping[str, object] = field(default_factory=dict)

    @staticmethod
    def from_payload(payload: Mapping[str, object] | None) -> "ProcessRequest":
        """
        Valida y construye la petición desde el JSON camelCase.

        Raises InvalidRequestError si falta cualquier campo obligatorio.
        """
        if not isinstance(payload, Mapping):
            raise InvalidRequestError("Missing required fields")

        missing = [k for k in REQUIRED_REQUEST_FIELDS if not _as_str(payload.get(k)).strip()]
        if missing:
            raise InvalidRequestError("Missing required fields")

        meta = payload.get("existingMeta")
        return ProcessRequest(
            task_id=_as_str(payload.get("taskId")),
            cid=_as_str(payload.get("cid")),
            file_path=_as_str(payload.get("filePath")),
            callback_url=_as_str(payload.get("callbackUrl")),
            meta_core_url=_as_str(payload.get("metaCoreUrl")),
            existing_meta=dict(meta) if isinstance(meta, Mapping) else {},
        )

    def classification_input(self) -> ClassificationInput:
        return ClassificationInput.from_existing_meta(self.file_path, self.existing_meta)


@dataclass(frozen=True, slots=True)
class CallbackPayload:
    task_id: str
    status: TaskStatus
    duration_ms: int
    error: str | None = None
    reason: str | None = None

    def to_json(self) -> dict[str, object]:
        out: dict[str, object] = {
            "taskId": self.task_id,
            "status": self.status,
            "durationMs": int(self.duration_ms),
        }
        if self.error is not None:
            out["error"] = self.error
        if self.reason is not None:
            out["reason"] = self.reason
        return out
