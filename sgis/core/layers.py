# File: sgis/core/layers.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.1
# Status: stable
# Date: 2026-10-19
# Purpose: Pila de capas (Layer) + agregado Map (viewport, selección, extent total).
# Notes:
# - layers[0] es la capa superior: se dibuja última y gana visualmente.
# - move_selected_up/down mueven SOLO el cursor de selección (no reordenan).
#   raise_selected_layer/lower_selected_layer reordenan de verdad.
# - Índices fuera de rango -> LayerIndexError (remove/select/layer_at), sin tocar estado.
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from sgis.core.settings import ViewerSettings
from sgis.core.symbols import Symbol, clone_symbol, random_symbols_from, symbol_geometry_type
from sgis.core.viewport import Viewport
from sgis.geom.primitives import BoundingBox, Feature, GeometryType, PointD
from sgis.utils.errors import LayerIndexError, SgisValidationError

log = logging.getLogger(__name__)


class MoveResult(str, Enum):
    """Resultado de mover la selección (lo muestra la UI, no el core)."""

    MOVED = "moved"
    AT_TOP = "at_top"
    AT_BOTTOM = "at_bottom"
    EMPTY = "empty"


@dataclass
class Layer:
    name: str
    geometry_type: GeometryType
    symbol: Symbol
    features: list[Feature] = field(default_factory=list)
    visible: bool = True

    def __post_init__(self) -> None:
        self.geometry_type = GeometryType(self.geometry_type)
        self._check_symbol(self.symbol)
        self.symbol = clone_symbol(self.symbol)
        feats = list(self.features)
        self.features = []
        for f in feats:
            self.add_feature(f)

    def _check_symbol(self, symbol: Symbol) -> None:
        kind = symbol_geometry_type(symbol)
        if kind != self.geometry_type:
            raise SgisValidationError(
                f"Capa {self.name!r}: símbolo de {kind.value} en capa de {self.geometry_type.value}"
            )

    def add_feature(self, feature: Feature) -> None:
        if feature.geometry_type != self.geometry_type:
            raise SgisValidationError(
                f"Capa {self.name!r}: feature {feature.geometry_type.value} en capa de {self.geometry_type.value}"
            )
        self.features.append(feature)

    def set_symbol(self, symbol: Symbol) -> None:
        """Reemplaza el símbolo completo (la capa se queda con una copia propia)."""
        self._check_symbol(symbol)
        self.symbol = clone_symbol(symbol)

    def extent(self) -> BoundingBox | None:
        return BoundingBox.union_all(f.extent() for f in self.features)


class Map:
    """Agregado del visor: capas ordenadas, viewport, capa seleccionada y extent total.

    Sin sincronización: lo usa un solo hilo (el loop de UI del host).
    """

    def __init__(self, viewport: Viewport | None = None, *, settings: ViewerSettings | None = None) -> None:
        self.settings = settings or ViewerSettings.from_env()
        self.layers: list[Layer] = []
        self.viewport = viewport or Viewport(scale=self.settings.default_scale)
        self.selected_layer_index = 0
        self.full_extent: BoundingBox | None = None

    def __len__(self) -> int:
        return len(self.layers)

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    # ----------------------------
    # Helpers
    # ----------------------------
    def _check_index(self, index: int) -> int:
        try:
            i = int(index)
        except Exception as e:
            raise LayerIndexError(f"Índice de capa inválido: {index!r}") from e
        if not 0 <= i < len(self.layers):
            raise LayerIndexError(f"Índice de capa fuera de rango: {i} (hay {len(self.layers)})")
        return i

    def update_full_extent(self) -> BoundingBox | None:
        self.full_extent = BoundingBox.union_all(layer.extent() for layer in self.layers)
        return self.full_extent

    def layer_at(self, index: int) -> Layer:
        return self.layers[self._check_index(index)]

    def selected_layer(self) -> Layer | None:
        if not self.layers:
            return None
        return self.layers[self.selected_layer_index]

    def index_of(self, layer: Layer) -> int:
        for i, candidate in enumerate(self.layers):
            if candidate is layer:
                return i
        raise LayerIndexError(f"La capa {layer.name!r} no está en el mapa")

    # ----------------------------
    # Pila de capas
    # ----------------------------
    def add_layer(self, layer: Layer) -> None:
        """Inserta arriba de todo (índice 0). La selección sigue apuntando a la misma capa."""
        had_layers = bool(self.layers)
        self.layers.insert(0, layer)
        if had_layers:
            self.selected_layer_index += 1
        else:
            self.selected_layer_index = 0
        self.update_full_extent()
        log.debug("Capa agregada: %r (total=%d)", layer.name, len(self.layers))

    def add_layers(self, layers: Iterable[Layer]) -> None:
        for layer in layers:
            self.add_layer(layer)

    def remove_layer(self, index: int) -> Layer:
        i = self._check_index(index)
        layer = self.layers.pop(i)
        if i < self.selected_layer_index:
            self.selected_layer_index -= 1
        self.selected_layer_index = max(0, min(self.selected_layer_index, len(self.layers) - 1))
        self.update_full_extent()
        log.debug("Capa eliminada: %r (total=%d)", layer.name, len(self.layers))
        return layer

    def clear_layers(self) -> None:
        self.layers.clear()
        self.selected_layer_index = 0
        self.full_extent = None

    def select_layer(self, index: int) -> None:
        self.selected_layer_index = self._check_index(index)

    # ----------------------------
    # Cursor de selección
    # ----------------------------
    def move_selected_up(self) -> MoveResult:
        """Mueve la selección hacia arriba (índice menor). No reordena capas."""
        if not self.layers:
            return MoveResult.EMPTY
        if self.selected_layer_index > 0:
            self.selected_layer_index -= 1
            return MoveResult.MOVED
        log.info("Ya está en la capa superior")
        return MoveResult.AT_TOP

    def move_selected_down(self) -> MoveResult:
        """Mueve la selección hacia abajo (índice mayor). No reordena capas."""
        if not self.layers:
            return MoveResult.EMPTY
        if self.selected_layer_index < len(self.layers) - 1:
            self.selected_layer_index += 1
            return MoveResult.MOVED
        log.info("Ya está en la capa inferior")
        return MoveResult.AT_BOTTOM

    # ----------------------------
    # Reordenamiento real
    # ----------------------------
    def raise_selected_layer(self) -> MoveResult:
        """Sube la capa seleccionada un lugar en la pila (swap); la selección la acompaña."""
        if not self.layers:
            return MoveResult.EMPTY
        i = self.selected_layer_index
        if i <= 0:
            log.info("Ya está en la capa superior")
            return MoveResult.AT_TOP
        self.layers[i - 1], self.layers[i] = self.layers[i], self.layers[i - 1]
        self.selected_layer_index = i - 1
        return MoveResult.MOVED

    def lower_selected_layer(self) -> MoveResult:
        """Baja la capa seleccionada un lugar en la pila (swap); la selección la acompaña."""
        if not self.layers:
            return MoveResult.EMPTY
        i = self.selected_layer_index
        if i >= len(self.layers) - 1:
            log.info("Ya está en la capa inferior")
            return MoveResult.AT_BOTTOM
        self.layers[i + 1], self.layers[i] = self.layers[i], self.layers[i + 1]
        self.selected_layer_index = i + 1
        return MoveResult.MOVED

    # ----------------------------
    # Vista / símbolos
    # ----------------------------
    def zoom_to_full_extent(self, width_px: float, height_px: float, *, margin_px: float = 0.0) -> bool:
        """Ajusta el viewport al extent total. Devuelve False si no hay geometría.

        Recalcula full_extent: las capas pueden haber recibido features después de add_layer.
        """
        box = self.update_full_extent()
        if box is None:
            return False
        self.viewport.fit_extent(box, width_px, height_px, margin_px=margin_px)
        return True

    def apply_random_symbols(self, rng: random.Random | None = None) -> None:
        """Asigna a cada capa una variante aleatoria de su propio símbolo."""
        for layer in self.layers:
            layer.symbol = random_symbols_from(layer.symbol, 1, rng)[0]

    def zoom_in(self, center_map: PointD) -> None:
        self.viewport.zoom_in(center_map, self.settings.zoom_step)

    def zoom_out(self, center_map: PointD) -> None:
        self.viewport.zoom_out(center_map, self.settings.zoom_step)
