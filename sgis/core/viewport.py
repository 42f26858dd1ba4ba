# File: sgis/core/viewport.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.1
# Status: stable
# Date: 2026-10-19
# Purpose: Transformación mapa <-> pantalla (offset + escala) y pan/zoom.
# Notes:
# - offset_x/offset_y = coordenada de mapa que cae en el pixel (0, 0) de pantalla.
# - scale = unidades de mapa por pixel (siempre > 0). Sin rotación ni shear.
# - Los errores se lanzan antes de tocar el estado (fail fast, nunca NaN/inf en render).
from __future__ import annotations

import logging
import math

from sgis.core.version import DEFAULT_SCALE, DEFAULT_ZOOM_STEP
from sgis.geom.primitives import BoundingBox, PointD
from sgis.utils.errors import InvalidTransformState, InvalidZoomRatio, SgisValidationError

log = logging.getLogger(__name__)


def _check_scale(s: float) -> float:
    try:
        s = float(s)
    except Exception as e:
        raise InvalidTransformState(f"Escala inválida: {s!r}") from e
    if not math.isfinite(s) or s <= 0.0:
        raise InvalidTransformState(f"Escala inválida (debe ser finita y > 0): {s!r}")
    return s


def _check_coord(v: float, what: str) -> float:
    try:
        f = float(v)
    except Exception as e:
        raise SgisValidationError(f"{what} inválido: {v!r}") from e
    if not math.isfinite(f):
        raise SgisValidationError(f"{what} no finito: {v!r}")
    return f


class Viewport:
    """Vista actual del mapa.

    to_screen:  (p - offset) / scale
    to_map:     p * scale + offset   (inversa exacta, salvo epsilon de float)
    """

    __slots__ = ("offset_x", "offset_y", "_scale")

    def __init__(self, offset_x: float = 0.0, offset_y: float = 0.0, scale: float = DEFAULT_SCALE) -> None:
        self.offset_x = float(offset_x)
        self.offset_y = float(offset_y)
        self._scale = _check_scale(scale)

    def __repr__(self) -> str:
        return f"Viewport(offset_x={self.offset_x!r}, offset_y={self.offset_y!r}, scale={self._scale!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Viewport):
            return NotImplemented
        return (self.offset_x, self.offset_y, self._scale) == (other.offset_x, other.offset_y, other._scale)

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def offset(self) -> PointD:
        return PointD(self.offset_x, self.offset_y)

    def copy(self) -> "Viewport":
        return Viewport(self.offset_x, self.offset_y, self._scale)

    # ----------------------------
    # Transformaciones
    # ----------------------------
    def to_screen(self, p: PointD) -> PointD:
        return PointD((p.x - self.offset_x) / self._scale, (p.y - self.offset_y) / self._scale)

    def to_map(self, p: PointD) -> PointD:
        return PointD(p.x * self._scale + self.offset_x, p.y * self._scale + self.offset_y)

    def map_distance_to_screen(self, d: float) -> float:
        return d / self._scale

    def screen_distance_to_map(self, d: float) -> float:
        return d * self._scale

    # ----------------------------
    # Pan / zoom
    # ----------------------------
    def pan_to(self, x: float, y: float) -> None:
        """Mueve el origen de pantalla a (x, y) de mapa. Sin clamp al extent."""
        nx = _check_coord(x, "Offset x")
        ny = _check_coord(y, "Offset y")
        self.offset_x, self.offset_y = nx, ny

    def pan_by_screen(self, dx_px: float, dy_px: float) -> None:
        """Pan por arrastre: el contenido sigue al cursor (dx/dy en pixels)."""
        dx = _check_coord(dx_px, "Desplazamiento x")
        dy = _check_coord(dy_px, "Desplazamiento y")
        self.offset_x -= dx * self._scale
        self.offset_y -= dy * self._scale

    def set_scale(self, s: float) -> None:
        self._scale = _check_scale(s)

    def zoom_by_center(self, center: PointD, ratio: float) -> None:
        """Zoom manteniendo `center` (coordenada de mapa) fijo en pantalla.

        ratio > 1 acerca (la escala baja); 0 < ratio < 1 aleja.
        """
        try:
            r = float(ratio)
        except Exception as e:
            raise InvalidZoomRatio(f"Ratio de zoom inválido: {ratio!r}") from e
        if not math.isfinite(r) or r <= 0.0:
            raise InvalidZoomRatio(f"Ratio de zoom inválido (debe ser finito y > 0): {ratio!r}")

        cx = _check_coord(center.x, "Centro de zoom x")
        cy = _check_coord(center.y, "Centro de zoom y")

        new_scale = _check_scale(self._scale / r)
        k = 1.0 - 1.0 / r
        new_ox = self.offset_x + k * (cx - self.offset_x)
        new_oy = self.offset_y + k * (cy - self.offset_y)

        self._scale = new_scale
        self.offset_x = new_ox
        self.offset_y = new_oy

    def zoom_in(self, center: PointD, step: float = DEFAULT_ZOOM_STEP) -> None:
        self.zoom_by_center(center, step)

    def zoom_out(self, center: PointD, step: float = DEFAULT_ZOOM_STEP) -> None:
        if step <= 0:
            raise InvalidZoomRatio(f"Paso de zoom inválido: {step!r}")
        self.zoom_by_center(center, 1.0 / step)

    # ----------------------------
    # Extent
    # ----------------------------
    def visible_extent(self, width_px: float, height_px: float) -> BoundingBox:
        """Rectángulo de mapa visible en una ventana de width_px x height_px."""
        if width_px < 0 or height_px < 0:
            raise SgisValidationError(f"Tamaño de ventana inválido: {width_px}x{height_px}")
        a = self.to_map(PointD(0.0, 0.0))
        b = self.to_map(PointD(float(width_px), float(height_px)))
        return BoundingBox(a.x, a.y, b.x, b.y)

    def fit_extent(self, box: BoundingBox, width_px: float, height_px: float, *, margin_px: float = 0.0) -> None:
        """Ajusta escala y offset para que `box` entre completo y centrado.

        Si el box es degenerado (ancho y alto 0), conserva la escala y sólo centra.
        """
        avail_w = float(width_px) - 2.0 * float(margin_px)
        avail_h = float(height_px) - 2.0 * float(margin_px)
        if avail_w <= 0 or avail_h <= 0:
            raise InvalidTransformState(
                f"Ventana sin área útil: {width_px}x{height_px} (margen {margin_px})"
            )

        candidates = []
        if box.width > 0:
            candidates.append(box.width / avail_w)
        if box.height > 0:
            candidates.append(box.height / avail_h)
        new_scale = _check_scale(max(candidates)) if candidates else self._scale

        c = box.center
        self._scale = new_scale
        self.offset_x = c.x - float(width_px) * 0.5 * new_scale
        self.offset_y = c.y - float(height_px) * 0.5 * new_scale
        log.debug("fit_extent: box=%s ventana=%sx%s -> %r", box, width_px, height_px, self)
