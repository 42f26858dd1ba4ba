# File: sgis/app.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.2
# Status: stable
# Date: 2026-10-19
# Purpose: Entry-point: arranque (settings + logging) y hoja de muestra de símbolos a PNG.
# Notes:
# - apply_project_settings corre ANTES de setup_logging: el JSON define nivel y carpeta del log.
# - La hoja de muestra dibuja las 8 formas de punto, los 5 guiones y un polígono; sirve para
#   revisar a ojo un cambio de símbolos o de settings sin levantar la UI.
from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Sequence

from PySide6.QtGui import QGuiApplication

from sgis.core.layers import Layer, Map
from sgis.core.palette import default_rng
from sgis.core.settings import ViewerSettings, apply_project_settings
from sgis.core.symbols import DASH_STYLES, LineSymbol, PointShape, PointSymbol, default_symbol
from sgis.core.version import APP_NAME, APP_VERSION
from sgis.geom.primitives import Feature, GeometryType
from sgis.render.renderer import render_to_image
from sgis.utils.log import get_logger, setup_logging

log = get_logger(__name__)

SAMPLE_MARGIN_PX = 20.0


def bootstrap(start: Path | None = None) -> ViewerSettings:
    """Aplica sgis_settings.json, configura logging y devuelve los settings efectivos."""
    applied = apply_project_settings(start, logger=log, prefer_env=True)
    log_file = setup_logging()
    settings = ViewerSettings.from_env()
    if applied:
        log.info("Project settings: %s", applied)
    log.info("%s v%s (log: %s)", APP_NAME, APP_VERSION, log_file or "sólo consola")
    log.debug("Settings efectivos: %r", settings)
    return settings


def build_sample_map(settings: ViewerSettings | None = None, rng: random.Random | None = None) -> Map:
    """Mapa de muestra en coordenadas de pantalla (escala 1).

    Abajo un polígono, a la derecha una línea por estilo de guión y arriba de todo una
    fila con cada PointShape. Con `rng`, cada capa recibe una variante aleatoria.
    """
    s = settings or ViewerSettings.from_env()
    m = Map(settings=s)

    m.add_layer(
        Layer(
            "polígono",
            GeometryType.POLYGON,
            default_symbol(GeometryType.POLYGON, s),
            [Feature.polygon([(0, 0), (180, 0), (180, 120), (0, 120)])],
        )
    )
    width = max(s.line_width_px, 1.0)
    for i, style in enumerate(DASH_STYLES):
        y = 20.0 + i * 20.0
        m.add_layer(
            Layer(f"guión {i + 1}", GeometryType.LINE, LineSymbol("black", width, style), [Feature.line([(200, y), (380, y)])])
        )
    for shape in PointShape:
        x = 20.0 + (int(shape) - 1) * 45.0
        m.add_layer(
            Layer(shape.name.lower(), GeometryType.POINT, PointSymbol(shape, "red", s.point_size_px * 2), [Feature.point(x, 160)])
        )

    if rng is not None:
        m.apply_random_symbols(rng)
    return m


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sgis-muestra",
        description="Renderiza una hoja de muestra de símbolos SGIS a PNG.",
    )
    parser.add_argument("out", type=Path, help="Archivo PNG de salida")
    parser.add_argument("--width", type=int, default=640, help="Ancho en px (default: 640)")
    parser.add_argument("--height", type=int, default=400, help="Alto en px (default: 400)")
    parser.add_argument("--random", action="store_true", help="Símbolos aleatorios por capa")
    parser.add_argument("--seed", type=int, default=None, help="Semilla para --random")
    parser.add_argument(
        "--project-dir",
        type=Path,
        default=None,
        help="Carpeta desde donde buscar sgis_settings.json (default: CWD)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_args(argv)
    settings = bootstrap(args.project_dir)

    # QImage/QPainter necesitan una app Qt viva (offscreen sirve).
    _app = QGuiApplication.instance() or QGuiApplication(sys.argv[:1])

    rng = None
    if args.random:
        rng = random.Random(args.seed) if args.seed is not None else default_rng()
    m = build_sample_map(settings, rng)
    m.zoom_to_full_extent(args.width, args.height, margin_px=SAMPLE_MARGIN_PX)

    img = render_to_image(m, args.width, args.height)
    if not img.save(str(args.out)):
        log.error("No se pudo guardar la muestra en %s", args.out)
        return 1
    log.info("Muestra guardada: %s (%dx%d, %d capas)", args.out, args.width, args.height, len(m))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
