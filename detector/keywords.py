"""
detector/keywords.py

Marcadores de release anime (tags de grupos fansub y similares).

- Coincidencia por SUBSTRING exacto y case-sensitive contra el filename.
- Set inmutable construido una vez al importar; compartido entre requests.
- Los tags van con corchetes para no disparar con palabras sueltas
  ("Judas" en un título no es "[Judas]").
"""

from __future__ import annotations

from typing import Final

ANIME_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        # Grupos fansub / raws
        "[HorribleSubs]",
        "[SubsPlease]",
        "[Erai-raws]",
        "[Judas]",
        "[EMBER]",
        "[ASW]",
        "[Anime Time]",
        "[DKB]",
        "[Ohys-Raws]",
        "[Leopard-Raws]",
        "[Commie]",
        "[Coalgirls]",
        "[gg]",
        "[FFF]",
        "[Doki]",
        "[UTW]",
        "[Underwater]",
        "[Vivid]",
        "[Kametsu]",
        "[Nep_Blanc]",
        "[Golumpa]",
        "[Kawaiika-Raws]",
        "[NC-Raws]",
        "[Moozzi2]",
        "[SallySubs]",
        "[Cleo]",
        "[DameDesuYo]",
        "[Chihiro]",
        "[Mezashite]",
        "[Hi10]",
        "[BakedFish]",
        "[Tsundere-Raws]",
        "[YuiSubs]",
        "[Beatrice-Raws]",
        "[Anime-Releases]",
        # Perfil de codificación exclusivo de encodes anime
        "[Hi10P]",
    }
)


_ORDERED_KEYWORDS: Final[tuple[str, ...]] = tuple(sorted(ANIME_KEYWORDS))


def match_anime_keyword(file_name: str, keywords: frozenset[str] | None = None) -> str | None:
    """Devuelve el primer keyword contenido en `file_name` (orden estable) o None."""
    if not file_name:
        return None
    ordered = _ORDERED_KEYWORDS if keywords is None else tuple(sorted(keywords))
    for keyword in ordered:
        if keyword in file_name:
            return keyword
    return None
