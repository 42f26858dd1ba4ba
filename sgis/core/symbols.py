# File: sgis/core/symbols.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.2
# Status: stable
# Date: 2026-10-19
# Purpose: Símbolos de punto / línea / polígono (estilo + dibujo + variantes aleatorias).
# Notes:
# - Symbol es una unión cerrada (PointSymbol | LineSymbol | PolygonSymbol); el despacho
#   se hace en las funciones de módulo (clone_symbol, random_symbols_from, draw_symbol).
# - Los campos escalares (color/ancho/guiones) son la fuente de verdad. QPen/QBrush son
#   derivados, se construyen lazy y se invalidan en cada setter.
# - commit() vuelve a sincronizar escalares desde el QPen/QBrush cacheado (si alguien lo editó).
from __future__ import annotations

import logging
import math
import random
from enum import IntEnum
from typing import Any, Sequence, Union

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QPen

from sgis.core.palette import default_rng, random_color
from sgis.core.settings import ViewerSettings
from sgis.core.version import DEFAULT_LINE_WIDTH_PX, DEFAULT_POINT_SIZE_PX
from sgis.geom.primitives import GeometryType
from sgis.render.surface import DrawingSurface
from sgis.utils.errors import EmptyGeometryWarning, SgisValidationError

log = logging.getLogger(__name__)

SQRT3 = math.sqrt(3.0)

# Estilos de guión soportados (Qt.PenStyle, sin NoPen ni CustomDashLine).
DASH_STYLES = (
    Qt.SolidLine,
    Qt.DashLine,
    Qt.DotLine,
    Qt.DashDotLine,
    Qt.DashDotDotLine,
)


class PointShape(IntEnum):
    HOLLOW_CIRCLE = 1
    FILLED_CIRCLE = 2
    HOLLOW_SQUARE = 3
    FILLED_SQUARE = 4
    HOLLOW_TRIANGLE = 5
    FILLED_TRIANGLE = 6
    CIRCLE_DOT = 7
    DOUBLE_CIRCLE = 8


SHAPE_MIN = int(PointShape.HOLLOW_CIRCLE)
SHAPE_MAX = int(PointShape.DOUBLE_CIRCLE)


def _as_qcolor(value: Any) -> QColor:
    """Acepta QColor, nombre/hex, Qt.GlobalColor o (r, g, b[, a]). Devuelve una copia."""
    if isinstance(value, (tuple, list)):
        try:
            c = QColor(*[int(v) for v in value])
        except Exception as e:
            raise SgisValidationError(f"Color inválido: {value!r}") from e
    else:
        try:
            c = QColor(value)
        except Exception as e:
            raise SgisValidationError(f"Color inválido: {value!r}") from e
    if not c.isValid():
        raise SgisValidationError(f"Color inválido: {value!r}")
    return c


def _as_size(value: Any, field: str) -> float:
    try:
        v = float(value)
    except Exception as e:
        raise SgisValidationError(f"Campo {field} inválido (float): {value!r}") from e
    if not math.isfinite(v) or v < 0:
        raise SgisValidationError(f"Campo {field} inválido (debe ser >= 0): {value!r}")
    return v


def _as_dash_style(value: Any) -> Qt.PenStyle:
    for s in DASH_STYLES:
        if value == s:
            return s
    raise SgisValidationError(f"Estilo de línea inválido: {value!r}")


def _as_shape(value: Any) -> int:
    # Cualquier entero vale (formas desconocidas no dibujan); lo no entero es error.
    if isinstance(value, bool):
        raise SgisValidationError(f"Forma inválida: {value!r}")
    try:
        return int(value)
    except Exception as e:
        raise SgisValidationError(f"Forma inválida: {value!r}") from e


def _check_count(n: Any) -> int:
    try:
        k = int(n)
    except Exception as e:
        raise SgisValidationError(f"Cantidad inválida: {n!r}") from e
    if k < 0:
        raise SgisValidationError(f"Cantidad inválida (debe ser >= 0): {n!r}")
    return k


def _warn_empty(kind: str, got: int, need: int) -> None:
    log.warning("%s: %s con %d puntos (mínimo %d); se omite", EmptyGeometryWarning.__name__, kind, got, need)


# ----------------------------
# Punto
# ----------------------------

class PointSymbol:
    """Símbolo de punto: forma (1..8), color y tamaño (diámetro en px).

    Formas desconocidas no dibujan nada (sin error).
    """

    geometry_type = GeometryType.POINT

    def __init__(
        self,
        shape: int = PointShape.FILLED_CIRCLE,
        color: Any = "red",
        size: float = DEFAULT_POINT_SIZE_PX,
    ) -> None:
        self.shape = _as_shape(shape)
        self._color = _as_qcolor(color)
        self._size = _as_size(size, "size")

    def __repr__(self) -> str:
        return f"PointSymbol(shape={self.shape}, color={self._color.name()!r}, size={self._size})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PointSymbol):
            return NotImplemented
        return (self.shape, self._color.rgba(), self._size) == (other.shape, other._color.rgba(), other._size)

    @property
    def color(self) -> QColor:
        return QColor(self._color)

    @color.setter
    def color(self, value: Any) -> None:
        self._color = _as_qcolor(value)

    @property
    def size(self) -> float:
        return self._size

    @size.setter
    def size(self, value: float) -> None:
        self._size = _as_size(value, "size")

    def clone(self) -> "PointSymbol":
        return PointSymbol(self.shape, self._color, self._size)

    def random_variants(self, n: int, rng: random.Random | None = None) -> list["PointSymbol"]:
        """n símbolos con forma y color aleatorios; el tamaño se hereda."""
        k = _check_count(n)
        r = rng or default_rng()
        return [PointSymbol(r.randint(SHAPE_MIN, SHAPE_MAX), random_color(r), self._size) for _ in range(k)]

    def draw(self, surface: DrawingSurface, center: QPointF) -> bool:
        """Dibuja el símbolo centrado en `center` (pantalla). Devuelve False si no dibujó nada."""
        x, y = float(center.x()), float(center.y())
        s = self._size
        h = s / 2.0
        box = QRectF(x - h, y - h, s, s)
        pen = QPen(self._color)
        brush = QBrush(self._color)

        shape = self.shape
        if shape == PointShape.HOLLOW_CIRCLE:
            surface.draw_ellipse(box, pen)
        elif shape == PointShape.FILLED_CIRCLE:
            surface.fill_ellipse(box, brush)
        elif shape == PointShape.HOLLOW_SQUARE:
            surface.draw_rect(box, pen)
        elif shape == PointShape.FILLED_SQUARE:
            surface.fill_rect(box, brush)
        elif shape == PointShape.HOLLOW_TRIANGLE:
            surface.draw_polygon(self._triangle(x, y), pen)
        elif shape == PointShape.FILLED_TRIANGLE:
            surface.fill_polygon(self._triangle(x, y), brush)
        elif shape == PointShape.CIRCLE_DOT:
            surface.draw_ellipse(box, pen)
            surface.fill_ellipse(QRectF(x - s / 6.0, y - s / 6.0, s / 3.0, s / 3.0), brush)
        elif shape == PointShape.DOUBLE_CIRCLE:
            surface.draw_ellipse(box, pen)
            surface.draw_ellipse(QRectF(x - s / 4.0, y - s / 4.0, s / 2.0, s / 2.0), pen)
        else:
            log.debug("PointSymbol: forma desconocida %r; no se dibuja", shape)
            return False
        return True

    def _triangle(self, x: float, y: float) -> list[QPointF]:
        # Equilátero, ápice arriba, centrado en el baricentro.
        s = self._size
        return [
            QPointF(x, y - s / SQRT3),
            QPointF(x - s / 2.0, y + s / 2.0 / SQRT3),
            QPointF(x + s / 2.0, y + s / 2.0 / SQRT3),
        ]


# ----------------------------
# Línea
# ----------------------------

class LineSymbol:
    """Símbolo de línea: color, ancho (px) y estilo de guión (Qt.PenStyle)."""

    geometry_type = GeometryType.LINE

    def __init__(
        self,
        color: Any = "black",
        width: float = DEFAULT_LINE_WIDTH_PX,
        dash_style: Qt.PenStyle = Qt.SolidLine,
    ) -> None:
        self._color = _as_qcolor(color)
        self._width = _as_size(width, "width")
        self._dash_style = _as_dash_style(dash_style)
        self._pen: QPen | None = None

    @classmethod
    def from_pen(cls, pen: QPen) -> "LineSymbol":
        return cls(pen.color(), pen.widthF(), pen.style())

    def __repr__(self) -> str:
        return f"LineSymbol(color={self._color.name()!r}, width={self._width}, dash_style={self._dash_style!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LineSymbol):
            return NotImplemented
        return (self._color.rgba(), self._width, self._dash_style) == (
            other._color.rgba(),
            other._width,
            other._dash_style,
        )

    @property
    def color(self) -> QColor:
        return QColor(self._color)

    @color.setter
    def color(self, value: Any) -> None:
        self._color = _as_qcolor(value)
        self._pen = None

    @property
    def width(self) -> float:
        return self._width

    @width.setter
    def width(self, value: float) -> None:
        self._width = _as_size(value, "width")
        self._pen = None

    @property
    def dash_style(self) -> Qt.PenStyle:
        return self._dash_style

    @dash_style.setter
    def dash_style(self, value: Qt.PenStyle) -> None:
        self._dash_style = _as_dash_style(value)
        self._pen = None

    @property
    def pen(self) -> QPen:
        """QPen derivado (lazy). Si se edita en sitio, llamar commit() después."""
        if self._pen is None:
            pen = QPen(self._color)
            pen.setWidthF(self._width)
            pen.setStyle(self._dash_style)
            self._pen = pen
            log.debug("LineSymbol: pen reconstruido %r", self)
        return self._pen

    @pen.setter
    def pen(self, value: QPen) -> None:
        # Reemplazo completo del estilo: se copia y se sincronizan escalares.
        pen = QPen(value)
        self._color, self._width, self._dash_style = self._scalars_from(pen)
        self._pen = pen

    @staticmethod
    def _scalars_from(pen: QPen) -> tuple[QColor, float, Qt.PenStyle]:
        # Valida todo antes de que el caller asigne nada.
        return (
            _as_qcolor(pen.color()),
            _as_size(pen.widthF(), "width"),
            _as_dash_style(pen.style()),
        )

    def commit(self) -> None:
        """Sincroniza color/ancho/guión desde el QPen cacheado. Idempotente.

        Si el pen quedó con un valor inválido (p.ej. NoPen) lanza SgisValidationError
        y los escalares no cambian.
        """
        if self._pen is None:
            return
        self._color, self._width, self._dash_style = self._scalars_from(self._pen)

    def clone(self) -> "LineSymbol":
        # Copia del estilo efectivo (incluye ediciones del pen aún no commiteadas).
        if self._pen is not None:
            return LineSymbol.from_pen(self._pen)
        return LineSymbol(self._color, self._width, self._dash_style)

    def random_variants(self, n: int, rng: random.Random | None = None) -> list["LineSymbol"]:
        """n símbolos con color aleatorio; ancho y guión se heredan."""
        k = _check_count(n)
        r = rng or default_rng()
        return [LineSymbol(random_color(r), self._width, self._dash_style) for _ in range(k)]

    def draw(self, surface: DrawingSurface, points: Sequence[QPointF]) -> bool:
        if len(points) < 2:
            _warn_empty("línea", len(points), 2)
            return False
        surface.draw_polyline(points, self.pen)
        return True


# ----------------------------
# Polígono
# ----------------------------

class PolygonSymbol:
    """Símbolo de polígono: color de borde + color de relleno."""

    geometry_type = GeometryType.POLYGON

    def __init__(self, outline_color: Any = "black", fill_color: Any = "lightyellow") -> None:
        self._outline_color = _as_qcolor(outline_color)
        self._fill_color = _as_qcolor(fill_color)
        self._outline: QPen | None = None
        self._fill: QBrush | None = None

    def __repr__(self) -> str:
        return (
            f"PolygonSymbol(outline_color={self._outline_color.name()!r}, "
            f"fill_color={self._fill_color.name()!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PolygonSymbol):
            return NotImplemented
        return (self._outline_color.rgba(), self._fill_color.rgba()) == (
            other._outline_color.rgba(),
            other._fill_color.rgba(),
        )

    @property
    def outline_color(self) -> QColor:
        return QColor(self._outline_color)

    @outline_color.setter
    def outline_color(self, value: Any) -> None:
        self._outline_color = _as_qcolor(value)
        self._outline = None

    @property
    def fill_color(self) -> QColor:
        return QColor(self._fill_color)

    @fill_color.setter
    def fill_color(self, value: Any) -> None:
        self._fill_color = _as_qcolor(value)
        self._fill = None

    @property
    def outline_pen(self) -> QPen:
        if self._outline is None:
            self._outline = QPen(self._outline_color)
        return self._outline

    @outline_pen.setter
    def outline_pen(self, value: QPen) -> None:
        pen = QPen(value)
        self._outline_color = _as_qcolor(pen.color())
        self._outline = pen

    @property
    def fill_brush(self) -> QBrush:
        if self._fill is None:
            self._fill = QBrush(self._fill_color)
        return self._fill

    @fill_brush.setter
    def fill_brush(self, value: QBrush) -> None:
        brush = QBrush(value)
        self._fill_color = _as_qcolor(brush.color())
        self._fill = brush

    def commit(self) -> None:
        """Sincroniza los colores desde pen/brush cacheados. Idempotente."""
        outline = _as_qcolor(self._outline.color()) if self._outline is not None else self._outline_color
        fill = _as_qcolor(self._fill.color()) if self._fill is not None else self._fill_color
        self._outline_color, self._fill_color = outline, fill

    def clone(self) -> "PolygonSymbol":
        out = PolygonSymbol(
            self._outline.color() if self._outline is not None else self._outline_color,
            self._fill.color() if self._fill is not None else self._fill_color,
        )
        if self._outline is not None:
            out._outline = QPen(self._outline)
        if self._fill is not None:
            out._fill = QBrush(self._fill)
        return out

    def random_variants(self, n: int, rng: random.Random | None = None) -> list["PolygonSymbol"]:
        """n símbolos con borde y relleno aleatorios (independientes)."""
        k = _check_count(n)
        r = rng or default_rng()
        return [PolygonSymbol(random_color(r), random_color(r)) for _ in range(k)]

    def draw(self, surface: DrawingSurface, points: Sequence[QPointF]) -> bool:
        """Relleno primero y borde después (el borde no queda tapado).

        Siempre con antialiasing. El renderer restaura el hint de settings al
        empezar cada capa, así no se filtra a las capas siguientes.
        """
        if len(points) < 3:
            _warn_empty("polígono", len(points), 3)
            return False
        surface.set_antialiasing(True)
        surface.fill_polygon(points, self.fill_brush)
        surface.draw_polygon(points, self.outline_pen)
        return True


Symbol = Union[PointSymbol, LineSymbol, PolygonSymbol]


# ----------------------------
# Despacho sobre la unión
# ----------------------------

def symbol_geometry_type(symbol: Symbol) -> GeometryType:
    if isinstance(symbol, (PointSymbol, LineSymbol, PolygonSymbol)):
        return symbol.geometry_type
    raise SgisValidationError(f"Símbolo no soportado: {type(symbol).__name__}")


def clone_symbol(symbol: Symbol) -> Symbol:
    symbol_geometry_type(symbol)
    return symbol.clone()


def random_symbols_from(symbol: Symbol, n: int, rng: random.Random | None = None) -> list[Symbol]:
    """Variantes aleatorias de `symbol` usando `rng` (o la fuente del proceso)."""
    symbol_geometry_type(symbol)
    return list(symbol.random_variants(n, rng or default_rng()))


def draw_symbol(symbol: Symbol, surface: DrawingSurface, points: Sequence[QPointF]) -> bool:
    """Dibuja `points` (pantalla) con el símbolo. Devuelve True si dibujó algo.

    - Punto: cada vértice es un punto independiente.
    - Línea: polilínea abierta.
    - Polígono: anillo cerrado.
    """
    if isinstance(symbol, PointSymbol):
        drawn = False
        for p in points:
            drawn = symbol.draw(surface, p) or drawn
        return drawn
    if isinstance(symbol, LineSymbol):
        return symbol.draw(surface, points)
    if isinstance(symbol, PolygonSymbol):
        return symbol.draw(surface, points)
    raise SgisValidationError(f"Símbolo no soportado: {type(symbol).__name__}")


def default_symbol(geometry_type: GeometryType, settings: ViewerSettings | None = None) -> Symbol:
    """Símbolo inicial para una capa nueva."""
    s = settings or ViewerSettings.from_env()
    if geometry_type == GeometryType.POINT:
        return PointSymbol(PointShape.FILLED_CIRCLE, "red", s.point_size_px)
    if geometry_type == GeometryType.LINE:
        return LineSymbol("black", s.line_width_px, Qt.SolidLine)
    if geometry_type == GeometryType.POLYGON:
        return PolygonSymbol("black", "lightyellow")
    raise SgisValidationError(f"Tipo de geometría inválido: {geometry_type!r}")
