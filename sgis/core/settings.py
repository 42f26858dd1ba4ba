# File: sgis/core/settings.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.0
# Status: stable
# Date: 2026-10-19
# Purpose: Defaults del visor por proyecto (sgis_settings.json) + overrides por env vars.
# Notes: No depende de Qt. Los consumidores (Map / palette / render) leen ViewerSettings.from_env().
from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from sgis.core.version import (
    DEFAULT_LINE_WIDTH_PX,
    DEFAULT_POINT_SIZE_PX,
    DEFAULT_SCALE,
    DEFAULT_ZOOM_STEP,
)
from sgis.utils.log import ENV_LOG_DIR, ENV_LOG_LEVEL

log = logging.getLogger(__name__)


# ------------------------------
# Project settings (repo-local)
# ------------------------------
# Archivo esperado: sgis_settings.json en la raíz del proyecto (o en un padre del CWD).
PROJECT_SETTINGS_FILENAME = "sgis_settings.json"

ENV_DEFAULT_SCALE = "SGIS_DEFAULT_SCALE"
ENV_ZOOM_STEP = "SGIS_ZOOM_STEP"
ENV_POINT_SIZE = "SGIS_POINT_SIZE"
ENV_LINE_WIDTH = "SGIS_LINE_WIDTH"
ENV_ANTIALIAS = "SGIS_ANTIALIAS"
ENV_BACKGROUND = "SGIS_BACKGROUND"
ENV_RANDOM_SEED = "SGIS_RANDOM_SEED"


def find_project_settings_path(start: Path | None = None) -> Path | None:
    """Busca sgis_settings.json subiendo desde start (o CWD)."""
    start = (start or Path.cwd()).resolve()
    for p in (start, *start.parents):
        candidate = p / PROJECT_SETTINGS_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_project_settings(start: Path | None = None, *, logger: logging.Logger | None = None) -> Dict[str, Any]:
    """Carga el JSON de project settings. Devuelve {} si no existe o es inválido."""
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        return {}
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
        return data if isinstance(data, dict) else {}
    except Exception as e:
        _log.warning("No se pudo leer %s: %s", p, e)
        return {}


def save_project_settings(data: Dict[str, Any], start: Path | None = None, *, logger: logging.Logger | None = None) -> Path | None:
    """Guarda project settings en sgis_settings.json.

    - Si se encuentra un archivo existente, lo pisa.
    - Si no existe, lo crea en `start` (o el CWD).

    Devuelve el Path guardado o None si falla.
    """
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        p = (start or Path.cwd()).resolve() / PROJECT_SETTINGS_FILENAME
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        return p
    except Exception as e:
        _log.warning("No se pudo guardar %s: %s", p, e)
        return None


def _deep_get(d: Dict[str, Any], path: str, default: Any = None) -> Any:
    cur: Any = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def apply_project_settings(
    start: Path | None = None,
    *,
    logger: logging.Logger | None = None,
    prefer_env: bool = True,
) -> Dict[str, Any]:
    """Carga sgis_settings.json (si existe) y lo vuelca a variables de entorno SGIS_*.

    - Si `prefer_env=True`, una env var ya seteada NO se pisa (ganan los overrides manuales).
    - Si `prefer_env=False`, el JSON pisa la env var.
    - Valores fuera de rango o de tipo incorrecto se ignoran.

    Devuelve un dict con los valores *aplicados desde JSON* (útil para logging/debug).
    """
    _log = logger or log
    p = find_project_settings_path(start)
    if not p:
        return {}

    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except Exception as e:
        _log.warning("No se pudo leer %s: %s", p, e)
        return {}
    if not isinstance(data, dict):
        _log.warning("Project settings ignorados (raíz no es objeto): %s", p)
        return {}

    applied: Dict[str, Any] = {}

    def _set_env(key: str, value: Any) -> None:
        if prefer_env and os.environ.get(key):
            return
        os.environ[key] = str(value)

    # Vista
    scale = _deep_get(data, "view.default_scale")
    if isinstance(scale, (int, float)) and not isinstance(scale, bool) and scale > 0:
        applied["view.default_scale"] = float(scale)
        _set_env(ENV_DEFAULT_SCALE, float(scale))

    step = _deep_get(data, "view.zoom_step")
    if isinstance(step, (int, float)) and not isinstance(step, bool):
        step = float(step)
        if 1.01 <= step <= 10.0:
            applied["view.zoom_step"] = step
            _set_env(ENV_ZOOM_STEP, step)

    # Símbolos
    size = _deep_get(data, "symbols.point_size_px")
    if isinstance(size, (int, float)) and not isinstance(size, bool) and 1 <= size <= 256:
        applied["symbols.point_size_px"] = float(size)
        _set_env(ENV_POINT_SIZE, float(size))

    width = _deep_get(data, "symbols.line_width_px")
    if isinstance(width, (int, float)) and not isinstance(width, bool) and 0 <= width <= 64:
        applied["symbols.line_width_px"] = float(width)
        _set_env(ENV_LINE_WIDTH, float(width))

    seed = _deep_get(data, "symbols.random_seed")
    if isinstance(seed, int) and not isinstance(seed, bool):
        applied["symbols.random_seed"] = seed
        _set_env(ENV_RANDOM_SEED, seed)

    # Render
    aa = _deep_get(data, "render.antialias")
    if isinstance(aa, bool):
        applied["render.antialias"] = aa
        _set_env(ENV_ANTIALIAS, "1" if aa else "0")

    bg = _deep_get(data, "render.background")
    if isinstance(bg, str) and bg.strip():
        applied["render.background"] = bg.strip()
        _set_env(ENV_BACKGROUND, bg.strip())

    # Logging (lo lee setup_logging)
    lvl = _deep_get(data, "logging.level")
    if isinstance(lvl, str) and isinstance(logging.getLevelName(lvl.strip().upper()), int):
        applied["logging.level"] = lvl.strip().upper()
        _set_env(ENV_LOG_LEVEL, lvl.strip().upper())

    log_dir = _deep_get(data, "logging.dir")
    if isinstance(log_dir, str) and log_dir.strip():
        applied["logging.dir"] = log_dir.strip()
        _set_env(ENV_LOG_DIR, log_dir.strip())

    if applied:
        _log.info("Project settings aplicados desde %s: %s", p, applied)
    return applied


# ------------------------------
# Lectura tolerante desde env
# ------------------------------

def _env_float(name: str, default: float, *, min_value: float = -1e9, max_value: float = 1e9) -> float:
    try:
        v = float(os.getenv(name, str(default)).strip())
    except Exception:
        return float(default)
    if not math.isfinite(v):
        # nan pasa ambas comparaciones del clamp; inf se descarta igual.
        return float(default)
    if v < float(min_value):
        return float(min_value)
    if v > float(max_value):
        return float(max_value)
    return float(v)


def _env_int(name: str, default: int | None) -> int | None:
    raw = os.environ.get(name, "")
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(str(raw).strip())
    except Exception:
        return default


def _env_bool(name: str, default: bool) -> bool:
    """Lee un booleano desde env (tolerante)."""
    raw = str(os.environ.get(name, "") or "").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return bool(default)


@dataclass(frozen=True)
class ViewerSettings:
    """Defaults efectivos del visor (después de JSON + env)."""

    default_scale: float = DEFAULT_SCALE
    zoom_step: float = DEFAULT_ZOOM_STEP
    point_size_px: float = DEFAULT_POINT_SIZE_PX
    line_width_px: float = DEFAULT_LINE_WIDTH_PX
    antialias: bool = True
    background: str = "white"
    random_seed: int | None = None

    @classmethod
    def from_env(cls) -> "ViewerSettings":
        return cls(
            default_scale=_env_float(ENV_DEFAULT_SCALE, DEFAULT_SCALE, min_value=1e-12),
            zoom_step=_env_float(ENV_ZOOM_STEP, DEFAULT_ZOOM_STEP, min_value=1.01, max_value=10.0),
            point_size_px=_env_float(ENV_POINT_SIZE, DEFAULT_POINT_SIZE_PX, min_value=1.0, max_value=256.0),
            line_width_px=_env_float(ENV_LINE_WIDTH, DEFAULT_LINE_WIDTH_PX, min_value=0.0, max_value=64.0),
            antialias=_env_bool(ENV_ANTIALIAS, True),
            background=str(os.environ.get(ENV_BACKGROUND, "") or "").strip() or "white",
            random_seed=_env_int(ENV_RANDOM_SEED, None),
        )
