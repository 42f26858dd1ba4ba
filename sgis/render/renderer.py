# File: sgis/render/renderer.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.0
# Status: stable
# Date: 2026-10-19
# Purpose: Pasada de render: capas visibles de abajo hacia arriba -> viewport -> símbolo.
# Notes:
# - Un feature malo (pocos puntos, coords no finitas, tipo que no coincide) se omite con
#   warning; nunca corta la pasada completa.
# - El hint de antialiasing se reaplica por capa (los polígonos lo fuerzan en True).
# - render_to_image pinta en QImage (ARGB32 premultiplied), igual que las miniaturas.
from __future__ import annotations

import logging
from dataclasses import dataclass

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QImage, QPainter

from sgis.core.layers import Layer, Map
from sgis.core.symbols import draw_symbol, symbol_geometry_type
from sgis.core.viewport import Viewport
from sgis.geom.primitives import Feature
from sgis.render.surface import DrawingSurface, QPainterSurface
from sgis.utils.errors import SgisValidationError

log = logging.getLogger(__name__)


@dataclass
class RenderStats:
    layers_drawn: int = 0
    features_drawn: int = 0
    features_skipped: int = 0


def _screen_points(viewport: Viewport, feature: Feature) -> list[QPointF] | None:
    out: list[QPointF] = []
    for p in feature.points:
        s = viewport.to_screen(p)
        if not s.is_finite():
            return None
        out.append(QPointF(s.x, s.y))
    return out


def render_layer(
    layer: Layer,
    viewport: Viewport,
    surface: DrawingSurface,
    stats: RenderStats | None = None,
    *,
    antialias: bool | None = None,
) -> RenderStats:
    """Dibuja los features de una capa. Si `antialias` no es None, fija el hint antes."""
    st = stats if stats is not None else RenderStats()
    if antialias is not None:
        # Un símbolo de la capa anterior (polígono) pudo dejar el hint cambiado.
        surface.set_antialiasing(antialias)
    kind = symbol_geometry_type(layer.symbol)
    for idx, feature in enumerate(layer.features):
        if feature.geometry_type != kind:
            log.warning(
                "Capa %r feature #%d: geometría %s con símbolo de %s; se omite",
                layer.name, idx, feature.geometry_type.value, kind.value,
            )
            st.features_skipped += 1
            continue

        pts = _screen_points(viewport, feature)
        if pts is None:
            log.warning("Capa %r feature #%d: coordenadas no finitas; se omite", layer.name, idx)
            st.features_skipped += 1
            continue

        if draw_symbol(layer.symbol, surface, pts):
            st.features_drawn += 1
        else:
            st.features_skipped += 1
    st.layers_drawn += 1
    return st


def render_map(map_: Map, surface: DrawingSurface) -> RenderStats:
    """Dibuja el mapa completo sobre `surface`.

    Orden: del último índice al 0, así layers[0] (la superior) queda encima.
    """
    stats = RenderStats()
    antialias = map_.settings.antialias
    surface.set_antialiasing(antialias)
    viewport = map_.viewport
    for layer in reversed(map_.layers):
        if not layer.visible:
            continue
        render_layer(layer, viewport, surface, stats, antialias=antialias)
    log.debug(
        "render_map: capas=%d dibujados=%d omitidos=%d",
        stats.layers_drawn, stats.features_drawn, stats.features_skipped,
    )
    return stats


def render_to_image(map_: Map, width: int, height: int, background: str | QColor | None = None) -> QImage:
    """Renderiza el mapa en un QImage nuevo de width x height px."""
    w = int(width)
    h = int(height)
    if w <= 0 or h <= 0:
        raise SgisValidationError(f"Tamaño de imagen inválido: {width}x{height}")

    bg = QColor(background if background is not None else map_.settings.background)
    if not bg.isValid():
        log.warning("Color de fondo inválido %r; se usa transparente", background)
        bg = QColor(Qt.transparent)

    img = QImage(w, h, QImage.Format_ARGB32_Premultiplied)
    img.fill(bg)

    p = QPainter(img)
    try:
        render_map(map_, QPainterSurface(p))
    finally:
        p.end()
    return img
