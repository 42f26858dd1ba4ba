# File: sgis/utils/log.py
# Project: SimpleGIS (SGIS)
# Version: 0.4.2
# Status: stable
# Date: 2026-10-19
# Purpose: Logging del paquete sgis (consola + sgis.log), nivel y carpeta por settings.
# Notes:
# - Se configura el logger "sgis", no el root: el host (UI) puede tener su propio logging.
# - Nivel: argumento > SGIS_LOG_LEVEL > INFO. Carpeta: argumento > SGIS_LOG_DIR > ./logs.
#   sgis_settings.json llega a esas env vars vía apply_project_settings (logging.level/dir).
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_FILE_NAME = "sgis.log"
DEFAULT_LOG_DIR = "logs"
PACKAGE_LOGGER = "sgis"

ENV_LOG_LEVEL = "SGIS_LOG_LEVEL"
ENV_LOG_DIR = "SGIS_LOG_DIR"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_LOGGER_CONFIGURED = False
_LOG_FILE: Path | None = None


def parse_level(value: int | str | None, default: int = logging.INFO) -> int:
    """Nivel de logging desde int o nombre ("debug", "WARNING", ...). Desconocido -> default."""
    if value is None:
        return default
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    name = str(value).strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def setup_logging(log_dir: str | os.PathLike | None = None, level: int | str | None = None) -> Path | None:
    """Configura el logger del paquete: consola + archivo sgis.log.

    Devuelve el Path del archivo de log, o None si quedó sólo consola.

    Nota:
        - Idempotente: una segunda llamada no duplica handlers (devuelve el mismo Path).
        - No lanza excepción si no puede escribir el archivo; cae a consola.
    """
    global _LOGGER_CONFIGURED, _LOG_FILE
    if _LOGGER_CONFIGURED:
        return _LOG_FILE

    lvl = parse_level(level if level is not None else os.environ.get(ENV_LOG_LEVEL) or None)
    d = Path(log_dir if log_dir is not None else (os.environ.get(ENV_LOG_DIR) or DEFAULT_LOG_DIR))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(lvl)
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    ch = logging.StreamHandler()
    ch.setLevel(lvl)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    _LOG_FILE = None
    try:
        d.mkdir(parents=True, exist_ok=True)
        path = d / LOG_FILE_NAME
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(lvl)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
        _LOG_FILE = path
    except OSError as e:
        logger.warning("No se pudo abrir %s en %s (sólo consola): %s", LOG_FILE_NAME, d, e)

    _LOGGER_CONFIGURED = True
    logger.debug("Logging listo: nivel=%s archivo=%s", logging.getLevelName(lvl), _LOG_FILE)
    return _LOG_FILE


def log_file_path() -> Path | None:
    """Archivo de log activo (None si no se configuró o quedó sólo consola)."""
    return _LOG_FILE


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
