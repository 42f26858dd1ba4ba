"""Tests del entry-point (arranque + hoja de muestra)."""

import json
import logging
import random

from PySide6.QtGui import QColor, QImage

from sgis.app import build_sample_map, main
from sgis.core.settings import PROJECT_SETTINGS_FILENAME, ViewerSettings
from sgis.core.symbols import DASH_STYLES, PointShape
from sgis.geom.primitives import GeometryType
from sgis.render.renderer import render_map
from sgis.utils.log import LOG_FILE_NAME


def test_sample_map_has_every_shape_and_dash_style():
    m = build_sample_map(ViewerSettings())
    assert len(m) == 1 + len(DASH_STYLES) + len(PointShape)
    assert m.layer_at(len(m) - 1).geometry_type == GeometryType.POLYGON
    shapes = sorted(layer.symbol.shape for layer in m if layer.geometry_type == GeometryType.POINT)
    assert shapes == [int(s) for s in PointShape]
    dashes = [layer.symbol.dash_style for layer in m if layer.geometry_type == GeometryType.LINE]
    assert len(dashes) == len(DASH_STYLES)
    assert set(dashes) == set(DASH_STYLES)


def test_sample_map_draws_every_layer(surface):
    m = build_sample_map(ViewerSettings())
    stats = render_map(m, surface)
    assert stats.layers_drawn == len(m)
    assert stats.features_skipped == 0


def test_random_sample_is_reproducible_with_seed():
    a = build_sample_map(ViewerSettings(), random.Random(5))
    b = build_sample_map(ViewerSettings(), random.Random(5))
    assert [layer.symbol for layer in a] == [layer.symbol for layer in b]


def test_main_writes_png_with_project_settings(tmp_path, qt_app, fresh_logging):
    logs = tmp_path / "logs_proyecto"
    settings = {"logging": {"level": "debug", "dir": str(logs)}, "render": {"background": "black"}}
    (tmp_path / PROJECT_SETTINGS_FILENAME).write_text(json.dumps(settings), encoding="utf-8")
    out = tmp_path / "muestra.png"

    assert main([str(out), "--width", "320", "--height", "200", "--project-dir", str(tmp_path)]) == 0

    img = QImage(str(out))
    assert (img.width(), img.height()) == (320, 200)
    assert img.pixelColor(0, 0) == QColor("black")

    assert logging.getLogger("sgis").level == logging.DEBUG
    for h in fresh_logging():
        h.flush()
    assert "Muestra guardada" in (logs / LOG_FILE_NAME).read_text(encoding="utf-8")
