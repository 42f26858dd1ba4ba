# File: sgis/core/palette.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.0
# Status: stable
# Date: 2026-10-19
# Purpose: Paleta de colores con nombre + fuente aleatoria única del proceso.
# Notes:
# - La paleta sale de QColor.colorNames() (colores SVG con nombre), sin negro/blanco/grises.
# - Un solo random.Random por proceso; los generadores de símbolos lo reciben explícito.
from __future__ import annotations

import logging
import random
from functools import lru_cache

from PySide6.QtGui import QColor

from sgis.core.settings import ViewerSettings

log = logging.getLogger(__name__)

# Nombres excluidos (además de cualquier variante gray/grey).
_EXCLUDED_NAMES = frozenset({"black", "white", "silver", "transparent", "gainsboro", "whitesmoke"})

_RNG: random.Random | None = None


@lru_cache(maxsize=1)
def palette_names() -> tuple[str, ...]:
    """Nombres de colores elegibles para símbolos aleatorios (orden estable)."""
    out: list[str] = []
    for name in QColor.colorNames():
        n = str(name).strip().lower()
        if not n or n in _EXCLUDED_NAMES:
            continue
        if "gray" in n or "grey" in n:
            continue
        if n not in out:
            out.append(n)
    out.sort()
    return tuple(out)


def default_rng() -> random.Random:
    """Fuente aleatoria del proceso.

    Se crea una sola vez. Si SGIS_RANDOM_SEED está seteado, se siembra con ese valor
    (reproducible); si no, con la entropía del sistema.
    """
    global _RNG
    if _RNG is None:
        seed = ViewerSettings.from_env().random_seed
        _RNG = random.Random(seed)
        if seed is not None:
            log.info("Random de símbolos sembrado con seed=%s", seed)
    return _RNG


def reseed(seed: int | None) -> random.Random:
    """Reemplaza la fuente aleatoria del proceso (tests / reproducibilidad)."""
    global _RNG
    _RNG = random.Random(seed)
    return _RNG


def random_color(rng: random.Random | None = None) -> QColor:
    """Color uniforme sobre la paleta con nombre."""
    r = rng or default_rng()
    return QColor(r.choice(palette_names()))
