"""SGIS - version constants.

Keep this module tiny and dependency-free. It is imported by many places
(core models, symbols, render) and must not have side effects.
"""

APP_NAME = "SimpleGIS"
APP_SHORT = "SGIS"

APP_VERSION = "0.4.2"

# Defaults de vista (1 px de pantalla = DEFAULT_SCALE unidades de mapa).
DEFAULT_SCALE = 1.0
# Paso de zoom para zoom_in/zoom_out (ratio > 1 acerca).
DEFAULT_ZOOM_STEP = 1.25

# Defaults de símbolos (en px de pantalla).
DEFAULT_POINT_SIZE_PX = 6.0
DEFAULT_LINE_WIDTH_PX = 1.0
