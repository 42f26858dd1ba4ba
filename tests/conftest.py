"""Fixtures compartidos para los tests de SGIS."""

import logging
import os

# Qt sin display (CI / contenedores).
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtGui import QGuiApplication

from sgis.core import palette

SGIS_ENV_KEYS = (
    "SGIS_DEFAULT_SCALE",
    "SGIS_ZOOM_STEP",
    "SGIS_POINT_SIZE",
    "SGIS_LINE_WIDTH",
    "SGIS_ANTIALIAS",
    "SGIS_BACKGROUND",
    "SGIS_RANDOM_SEED",
    "SGIS_LOG_LEVEL",
    "SGIS_LOG_DIR",
)


class RecordingSurface:
    """DrawingSurface que sólo registra las llamadas (name, *args)."""

    def __init__(self):
        self.calls = []

    def names(self):
        return [c[0] for c in self.calls]

    def set_antialiasing(self, on):
        self.calls.append(("set_antialiasing", on))

    def draw_ellipse(self, rect, pen):
        self.calls.append(("draw_ellipse", rect, pen))

    def fill_ellipse(self, rect, brush):
        self.calls.append(("fill_ellipse", rect, brush))

    def draw_rect(self, rect, pen):
        self.calls.append(("draw_rect", rect, pen))

    def fill_rect(self, rect, brush):
        self.calls.append(("fill_rect", rect, brush))

    def draw_polyline(self, points, pen):
        self.calls.append(("draw_polyline", list(points), pen))

    def draw_polygon(self, points, pen):
        self.calls.append(("draw_polygon", list(points), pen))

    def fill_polygon(self, points, brush):
        self.calls.append(("fill_polygon", list(points), brush))


@pytest.fixture(scope="session")
def qt_app():
    """QGuiApplication única para los tests que pintan con QPainter."""
    app = QGuiApplication.instance() or QGuiApplication([])
    yield app


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture(autouse=True)
def clean_env():
    """Cada test arranca sin overrides SGIS_* ni fuente aleatoria previa."""
    for k in SGIS_ENV_KEYS:
        os.environ.pop(k, None)
    palette._RNG = None
    yield
    for k in SGIS_ENV_KEYS:
        os.environ.pop(k, None)
    palette._RNG = None


@pytest.fixture
def fresh_logging(monkeypatch):
    """Logger "sgis" sin configuración previa; devuelve una función con los handlers nuevos."""
    from sgis.utils import log as sgis_log

    logger = logging.getLogger(sgis_log.PACKAGE_LOGGER)
    before = list(logger.handlers)
    level = logger.level
    monkeypatch.setattr(sgis_log, "_LOGGER_CONFIGURED", False)
    monkeypatch.setattr(sgis_log, "_LOG_FILE", None)

    def added():
        return [h for h in logger.handlers if h not in before]

    yield added
    for h in added():
        logger.removeHandler(h)
        h.close()
    logger.setLevel(level)
