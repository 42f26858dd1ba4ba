# File: sgis/geom/primitives.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.0
# Status: stable
# Date: 2026-10-19
# Purpose: Tipos valor de geometría (punto, bbox, feature).
# Notes:
# - PointD sirve tanto para coordenadas de mapa como de pantalla; el espacio lo define
#   la transformación que lo produjo.
# - Sin dependencias de Qt: el render convierte a QPointF en el último paso.
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from sgis.utils.errors import SgisValidationError


@dataclass(frozen=True)
class PointD:
    x: float = 0.0
    y: float = 0.0

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (float(self.x), float(self.y))


def as_point(value: PointD | Sequence[float]) -> PointD:
    """Acepta PointD o (x, y) y devuelve PointD."""
    if isinstance(value, PointD):
        return value
    try:
        x, y = value
        return PointD(float(x), float(y))
    except Exception as e:
        raise SgisValidationError(f"Punto inválido: {value!r}") from e


def distance(a: PointD, b: PointD) -> float:
    return math.hypot(b.x - a.x, b.y - a.y)


@dataclass(frozen=True)
class BoundingBox:
    """Rectángulo alineado a ejes (min <= max en ambos ejes)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise SgisValidationError(
                f"BoundingBox inválido: ({self.min_x}, {self.min_y}, {self.max_x}, {self.max_y})"
            )

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> PointD:
        return PointD((self.min_x + self.max_x) * 0.5, (self.min_y + self.max_y) * 0.5)

    def contains(self, p: PointD) -> bool:
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y

    def union(self, other: "BoundingBox") -> "BoundingBox":
        return BoundingBox(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )

    @staticmethod
    def from_points(points: Iterable[PointD]) -> "BoundingBox | None":
        """BBox de una colección de puntos; None si está vacía."""
        it = iter(points)
        try:
            first = next(it)
        except StopIteration:
            return None
        x0 = x1 = first.x
        y0 = y1 = first.y
        for p in it:
            x0 = min(x0, p.x)
            x1 = max(x1, p.x)
            y0 = min(y0, p.y)
            y1 = max(y1, p.y)
        return BoundingBox(x0, y0, x1, y1)

    @staticmethod
    def union_all(boxes: Iterable["BoundingBox | None"]) -> "BoundingBox | None":
        out: BoundingBox | None = None
        for b in boxes:
            if b is None:
                continue
            out = b if out is None else out.union(b)
        return out


class GeometryType(str, Enum):
    POINT = "point"
    LINE = "line"
    POLYGON = "polygon"


# Mínimo de vértices para que un feature sea dibujable.
MIN_POINTS = {
    GeometryType.POINT: 1,
    GeometryType.LINE: 2,
    GeometryType.POLYGON: 3,
}


@dataclass(frozen=True)
class Feature:
    """Feature en coordenadas de mapa.

    - POINT: 1 punto (si trae más, cada uno se dibuja como punto independiente).
    - LINE: polilínea abierta, en orden.
    - POLYGON: anillo (el cierre es implícito; no hace falta repetir el primer vértice).
    """

    geometry_type: GeometryType
    points: tuple[PointD, ...]

    @staticmethod
    def point(x: float, y: float) -> "Feature":
        return Feature(GeometryType.POINT, (PointD(float(x), float(y)),))

    @staticmethod
    def line(points: Iterable[PointD | Sequence[float]]) -> "Feature":
        return Feature(GeometryType.LINE, tuple(as_point(p) for p in points))

    @staticmethod
    def polygon(points: Iterable[PointD | Sequence[float]]) -> "Feature":
        return Feature(GeometryType.POLYGON, tuple(as_point(p) for p in points))

    def is_drawable(self) -> bool:
        return len(self.points) >= MIN_POINTS[self.geometry_type]

    def extent(self) -> BoundingBox | None:
        return BoundingBox.from_points(p for p in self.points if p.is_finite())
