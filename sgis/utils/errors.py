# File: sgis/utils/errors.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.0
# Status: stable
# Date: 2026-10-19
# Purpose: Errores tipados del proyecto.
# Notes: Los errores se lanzan en la llamada que introduce el estado inválido (nunca durante el render).
from __future__ import annotations


class SgisError(Exception):
    """Error base del proyecto."""


class SgisValidationError(SgisError):
    """Error de validación (input/estructura)."""


class InvalidTransformState(SgisValidationError):
    """Escala del viewport nula, negativa o no finita."""


class InvalidZoomRatio(SgisValidationError):
    """Ratio de zoom <= 0 o no finito."""


class LayerIndexError(SgisValidationError, IndexError):
    """Índice de capa fuera de rango (remove/select/layer_at)."""


class EmptyGeometryWarning(UserWarning):
    """Geometría insuficiente para dibujar (línea < 2 puntos, polígono < 3).

    No se lanza: se usa como categoría en el log y el feature se omite.
    """
