"""Tests de la pasada de render (orden, transformación, omisión de features malos)."""

import logging
import math

import pytest
from PySide6.QtCore import QPointF
from PySide6.QtGui import QColor, QImage, QPainter

from sgis.core.layers import Layer, Map
from sgis.core.settings import ViewerSettings
from sgis.core.symbols import LineSymbol, PointShape, PointSymbol, PolygonSymbol
from sgis.core.viewport import Viewport
from sgis.geom.primitives import Feature, GeometryType
from sgis.render.renderer import render_layer, render_map, render_to_image
from sgis.render.surface import QPainterSurface
from sgis.utils.errors import SgisValidationError

SQUARE = [(0, 0), (10, 0), (10, 10), (0, 10)]


def _poly_layer(name, fill):
    return Layer(name, GeometryType.POLYGON, PolygonSymbol("black", fill), [Feature.polygon(SQUARE)])


def test_layers_draw_bottom_to_top(surface):
    m = Map()
    m.add_layer(_poly_layer("bottom", "blue"))
    m.add_layer(_poly_layer("top", "red"))
    stats = render_map(m, surface)
    fills = [c[2].color() for c in surface.calls if c[0] == "fill_polygon"]
    assert fills == [QColor("blue"), QColor("red")]
    assert stats.layers_drawn == 2
    assert stats.features_drawn == 2


def test_hidden_layers_are_skipped(surface):
    m = Map()
    m.add_layer(_poly_layer("a", "blue"))
    m.layers[0].visible = False
    stats = render_map(m, surface)
    assert "fill_polygon" not in surface.names()
    assert stats.layers_drawn == 0


def test_features_are_transformed_to_screen(surface):
    m = Map(Viewport(10.0, 10.0, 2.0))
    m.add_layer(Layer("p", GeometryType.POINT, PointSymbol(PointShape.FILLED_CIRCLE, "red", 4.0), [Feature.point(30, 50)]))
    render_map(m, surface)
    rect = [c for c in surface.calls if c[0] == "fill_ellipse"][0][1]
    assert rect.center() == QPointF(10.0, 20.0)
    assert rect.width() == 4.0


def test_line_points_keep_order(surface):
    m = Map()
    m.add_layer(Layer("l", GeometryType.LINE, LineSymbol(), [Feature.line([(0, 0), (5, 5), (10, 0)])]))
    render_map(m, surface)
    pts = [c for c in surface.calls if c[0] == "draw_polyline"][0][1]
    assert [(p.x(), p.y()) for p in pts] == [(0, 0), (5, 5), (10, 0)]


def test_bad_features_are_skipped_without_aborting(surface, caplog):
    layer = Layer(
        "l",
        GeometryType.LINE,
        LineSymbol(),
        [
            Feature.line([(0, 0)]),
            Feature.line([(0, 0), (math.inf, 1)]),
            Feature.line([(0, 0), (1, 1)]),
        ],
    )
    m = Map()
    m.add_layer(layer)
    with caplog.at_level(logging.WARNING):
        stats = render_map(m, surface)
    assert stats.features_drawn == 1
    assert stats.features_skipped == 2
    assert surface.names().count("draw_polyline") == 1
    assert "no finitas" in caplog.text


def test_render_layer_skips_feature_with_other_geometry(surface, caplog):
    layer = Layer("p", GeometryType.POINT, PointSymbol())
    # Se fuerza un feature ajeno saltando la validación de add_feature.
    layer.features.append(Feature.polygon(SQUARE))
    with caplog.at_level(logging.WARNING):
        stats = render_layer(layer, Viewport(), surface)
    assert stats.features_skipped == 1
    assert surface.calls == []


def test_render_map_applies_antialias_setting(surface):
    m = Map(settings=ViewerSettings(antialias=False))
    render_map(m, surface)
    assert surface.calls[0] == ("set_antialiasing", False)


def _antialias_state_at(surface, name):
    state = None
    for call in surface.calls:
        if call[0] == "set_antialiasing":
            state = call[1]
        elif call[0] == name:
            return state
    raise AssertionError(f"{name} no se llamó")


def test_polygon_layer_does_not_leak_antialias_to_layers_above(surface):
    m = Map(settings=ViewerSettings(antialias=False))
    m.add_layer(_poly_layer("fondo", "yellow"))
    m.add_layer(Layer("l", GeometryType.LINE, LineSymbol(), [Feature.line([(0, 0), (5, 5)])]))
    m.add_layer(Layer("p", GeometryType.POINT, PointSymbol(PointShape.HOLLOW_CIRCLE), [Feature.point(1, 1)]))
    render_map(m, surface)
    assert _antialias_state_at(surface, "fill_polygon") is True
    assert _antialias_state_at(surface, "draw_polyline") is False
    assert _antialias_state_at(surface, "draw_ellipse") is False


def test_render_to_image_paints_pixels(qt_app):
    m = Map()
    m.add_layer(
        Layer("p", GeometryType.POINT, PointSymbol(PointShape.FILLED_SQUARE, "red", 20.0), [Feature.point(50, 50)])
    )
    img = render_to_image(m, 100, 100, background="white")
    assert img.width() == 100 and img.height() == 100
    assert img.pixelColor(50, 50).rgb() == QColor("red").rgb()
    assert img.pixelColor(2, 2).rgb() == QColor("white").rgb()


def test_render_to_image_uses_settings_background(qt_app):
    m = Map(settings=ViewerSettings(background="navy"))
    img = render_to_image(m, 10, 10)
    assert img.pixelColor(5, 5).rgb() == QColor("navy").rgb()


def test_render_to_image_rejects_empty_size():
    with pytest.raises(SgisValidationError):
        render_to_image(Map(), 0, 10)


def test_qpainter_surface_polygon(qt_app):
    img = QImage(20, 20, QImage.Format_ARGB32_Premultiplied)
    img.fill(QColor("white"))
    p = QPainter(img)
    try:
        surf = QPainterSurface(p)
        sym = PolygonSymbol("blue", "blue")
        sym.draw(surf, [QPointF(2, 2), QPointF(18, 2), QPointF(18, 18), QPointF(2, 18)])
    finally:
        p.end()
    assert img.pixelColor(10, 10).rgb() == QColor("blue").rgb()
