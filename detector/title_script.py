"""
detector/title_script.py

Clasificación de escritura de un título: kana / otra escritura japonesa / nada.

Objetivo:
- NO es detección de idioma: solo bloques Unicode.
- Kanji (Han) no se distingue de hanzi chino; un título solo-Han cuenta como japonés.
- Puntuación CJK, ・, ー y formas full-width son neutras: por sí solas no hacen
  japonés un título ("Léon（1994）", "Sherlock・Holmes").
- Este módulo NO hace logging (utility core).
"""

from __future__ import annotations

import re
from typing import Final

from detector.models import TitleScript

# ============================================================================
# Bloques Unicode
# ============================================================================

# Letras kana: hiragana, katakana (sin ・ U+30FB ni ー U+30FC), extensiones
# fonéticas y katakana half-width (sin ｰ U+FF70)
_KANA_LETTER_CLASS: Final[str] = (
    r"\u3041-\u3096\u309D-\u309F\u30A1-\u30FA\u30FD-\u30FF\u31F0-\u31FF"
    r"\uFF66-\uFF6F\uFF71-\uFF9D"
)

# Marcas que acompañan a kana: ・ ー ゛゜ y sus variantes half-width
_KANA_MARK_CLASS: Final[str] = r"\u3099-\u309C\u30FB\u30FC\uFF65\uFF70\uFF9E\uFF9F"

# Kanji: ext. A, unificados, compatibilidad y 々 (iteración)
_KANJI_CLASS: Final[str] = r"\u3005\u3400-\u4DBF\u4E00-\u9FFF\uF900-\uFAFF"

_PURE_KANA_RE: Final[re.Pattern[str]] = re.compile(f"[{_KANA_LETTER_CLASS}{_KANA_MARK_CLASS}]+")
_KANA_LETTER_RE: Final[re.Pattern[str]] = re.compile(f"[{_KANA_LETTER_CLASS}]")
_JAPANESE_LETTER_RE: Final[re.Pattern[str]] = re.compile(f"[{_KANA_LETTER_CLASS}{_KANJI_CLASS}]")


def is_kana(text: str) -> bool:
    """True si TODOS los caracteres son kana (con al menos una letra, no solo ・/ー)."""
    return bool(text and _PURE_KANA_RE.fullmatch(text) and _KANA_LETTER_RE.search(text))


def has_japanese_script(text: str) -> bool:
    """True si hay al menos una letra japonesa (kana o kanji); la puntuación no cuenta."""
    return bool(text and _JAPANESE_LETTER_RE.search(text))


def classify_title_script(title: str) -> TitleScript:
    """
    - "kana": título 100% kana (p.ej. "ナルト")
    - "other_japanese": contiene kanji/kana sin ser 100% kana
      (p.ej. "進撃の巨人", "Naruto ナルト")
    - "none": resto (latino, hangul, vacío, latino con puntuación CJK/full-width)
    """
    t = (title or "").strip()
    if not t:
        return "none"
    if is_kana(t):
        return "kana"
    if has_japanese_script(t):
        return "other_japanese"
    return "none"
