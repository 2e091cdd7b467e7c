"""Configuración de logging de la aplicación.

Todos los módulos usan ``logging.getLogger(__name__)``; aquí solo se decide
el nivel y el formato (texto o JSON) del handler de consola.
"""

from __future__ import annotations

import logging.config
from typing import Any, Dict


def setup_logging(level: str = "INFO", fmt: str = "default") -> None:
    """Inicializa el logger raíz con salida por consola."""
    log_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level.upper(),
                "formatter": fmt,
            },
        },
        "root": {"level": level.upper(), "handlers": ["console"]},
    }

    logging.config.dictConfig(log_config)


__all__ = ["setup_logging"]
