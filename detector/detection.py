from __future__ import annotations

"""
detector/detection.py

Núcleo del detector: señales -> veredicto -> lote de escrituras.

Señales (todas se evalúan; dentro de cada categoría se para en el primer match):
  1) path contiene "anime" (case-insensitive)      -> anime + japonés
  2) filename contiene un keyword de ANIME_KEYWORDS -> anime + japonés
  3) escritura del título original (kana / otra)    -> japonés
  4) idioma de pistas de audio (jpn/ja)             -> japonés
  5) idioma de pistas de vídeo (jpn/ja)             -> japonés

Combinación OR: ninguna señal es necesaria, cualquiera es suficiente.
Todo es puro: sin I/O, sin logging.
"""

from collections.abc import Iterable
from typing import Final

from detector.keywords import match_anime_keyword
from detector.models import (
    TRACK_SCAN_CAP,
    ClassificationInput,
    ClassificationVerdict,
    LocalizedTitle,
    PropertyWriteBatch,
    Signals,
)
from detector.title_script import classify_title_script

# ISO 639-2 y 639-1 (ver DESIGN.md: política canónica)
JAPANESE_LANGUAGE_CODES: Final[frozenset[str]] = frozenset({"jpn", "ja"})

ANIME_PROPERTY_KEY: Final[str] = "anime"
GENRES_PROPERTY_KEY: Final[str] = "genres"
ANIME_GENRE: Final[str] = "Anime"

SKIP_REASON_NOT_VIDEO: Final[str] = "Not a video file"

_PATH_MARKER: Final[str] = "anime"


# ============================================================================
# Señales
# ============================================================================


def path_has_anime_marker(file_path: str) -> bool:
    return _PATH_MARKER in (file_path or "").lower()


def tracks_have_japanese(languages: Iterable[str], *, cap: int = TRACK_SCAN_CAP) -> bool:
    """
    Recorre como mucho `cap` pistas en orden.

    - Entrada vacía = fin de lista (para, aunque haya más detrás).
    - Primer código japonés -> True.
    """
    for i, lang in enumerate(languages):
        if i >= cap:
            break
        code = (lang or "").strip().lower()
        if not code:
            break
        if code in JAPANESE_LANGUAGE_CODES:
            return True
    return False


def extract_signals(
    data: ClassificationInput,
    *,
    keywords: frozenset[str] | None = None,
) -> Signals:
    """`keywords=None` usa ANIME_KEYWORDS."""
    return Signals(
        path_marker=path_has_anime_marker(data.file_path),
        keyword_match=match_anime_keyword(data.file_name, keywords) is not None,
        title_script=classify_title_script(data.original_title),
        audio_japanese=tracks_have_japanese(data.audio_track_languages),
        video_japanese=tracks_have_japanese(data.video_track_languages),
    )


# ============================================================================
# Veredicto
# ============================================================================


def combine_signals(signals: Signals, *, original_title: str) -> ClassificationVerdict:
    is_anime = signals.path_marker or signals.keyword_match
    is_japanese = (
        is_anime
        or signals.title_japanese
        or signals.audio_japanese
        or signals.video_japanese
    )

    title = (original_title or "").strip()
    localized: LocalizedTitle | None = None
    if is_japanese and title and signals.title_script != "none":
        localized = LocalizedTitle(script=signals.title_script, title=original_title)  # type: ignore[arg-type]

    return ClassificationVerdict(
        is_anime=is_anime,
        is_japanese=is_japanese,
        detected_title_script=signals.title_script,
        localized_title=localized,
        signals=signals,
    )


def classify(
    data: ClassificationInput,
    *,
    keywords: frozenset[str] | None = None,
) -> ClassificationVerdict:
    """Veredicto completo para un input de vídeo (el gate de tipo lo aplica el caller)."""
    signals = extract_signals(data, keywords=keywords)
    return combine_signals(signals, original_title=data.original_title)


def build_write_batch(verdict: ClassificationVerdict) -> PropertyWriteBatch:
    """
    Escrituras para meta-core.

    - Veredicto negativo -> lote vacío.
    - Título localizado antes de `anime`, y `genres` (add) al final.
    """
    if not verdict.should_write:
        return PropertyWriteBatch()

    sets: list[tuple[str, str]] = []
    if verdict.localized_title is not None:
        sets.append((verdict.localized_title.property_key, verdict.localized_title.title))
    sets.append((ANIME_PROPERTY_KEY, "true"))

    return PropertyWriteBatch(
        sets=tuple(sets),
        set_additions=((GENRES_PROPERTY_KEY, ANIME_GENRE),),
    )
