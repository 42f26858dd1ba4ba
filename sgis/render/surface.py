# File: sgis/render/surface.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.0
# Status: stable
# Date: 2026-10-19
# Purpose: Contrato de superficie de dibujo + adaptador QPainter.
# Notes:
# - Los símbolos sólo conocen DrawingSurface (se puede grabar en tests sin pintar).
# - Todo en coordenadas de pantalla (px).
from __future__ import annotations

from typing import Protocol, Sequence

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QPainter, QPen, QPolygonF


class DrawingSurface(Protocol):
    """Capacidades mínimas que el core necesita de la superficie."""

    def set_antialiasing(self, on: bool) -> None: ...

    def draw_ellipse(self, rect: QRectF, pen: QPen) -> None: ...

    def fill_ellipse(self, rect: QRectF, brush: QBrush) -> None: ...

    def draw_rect(self, rect: QRectF, pen: QPen) -> None: ...

    def fill_rect(self, rect: QRectF, brush: QBrush) -> None: ...

    def draw_polyline(self, points: Sequence[QPointF], pen: QPen) -> None: ...

    def draw_polygon(self, points: Sequence[QPointF], pen: QPen) -> None: ...

    def fill_polygon(self, points: Sequence[QPointF], brush: QBrush) -> None: ...


class QPainterSurface:
    """DrawingSurface sobre un QPainter activo (QImage, QPixmap o widget).

    No hace begin/end: el dueño del QPainter controla su ciclo de vida.
    """

    def __init__(self, painter: QPainter) -> None:
        self._p = painter

    @property
    def painter(self) -> QPainter:
        return self._p

    def set_antialiasing(self, on: bool) -> None:
        self._p.setRenderHint(QPainter.Antialiasing, bool(on))

    def _stroke(self, pen: QPen) -> None:
        self._p.setPen(pen)
        self._p.setBrush(Qt.NoBrush)

    def _fill(self, brush: QBrush) -> None:
        self._p.setPen(Qt.NoPen)
        self._p.setBrush(brush)

    def draw_ellipse(self, rect: QRectF, pen: QPen) -> None:
        self._stroke(pen)
        self._p.drawEllipse(rect)

    def fill_ellipse(self, rect: QRectF, brush: QBrush) -> None:
        self._fill(brush)
        self._p.drawEllipse(rect)

    def draw_rect(self, rect: QRectF, pen: QPen) -> None:
        self._stroke(pen)
        self._p.drawRect(rect)

    def fill_rect(self, rect: QRectF, brush: QBrush) -> None:
        self._p.fillRect(rect, brush)

    def draw_polyline(self, points: Sequence[QPointF], pen: QPen) -> None:
        self._stroke(pen)
        self._p.drawPolyline(QPolygonF(list(points)))

    def draw_polygon(self, points: Sequence[QPointF], pen: QPen) -> None:
        self._stroke(pen)
        self._p.drawPolygon(QPolygonF(list(points)))

    def fill_polygon(self, points: Sequence[QPointF], brush: QBrush) -> None:
        self._fill(brush)
        self._p.drawPolygon(QPolygonF(list(points)))
