"""Configuración de la aplicación.

Los valores se leen de variables de entorno y, si existe, de un archivo
``.env`` en el directorio de trabajo.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Parámetros de conexión y de registro."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_ignore_empty=True, extra="ignore"
    )

    # Para emulador o backend local: http://localhost:3000
    API_BASE_URL: str = "https://nestjs-crud-7t8x.onrender.com"
    API_TIMEOUT: float = Field(default=10.0, gt=0)
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["default", "json"] = "default"


@lru_cache
def get_settings() -> Settings:
    """Devuelve la configuración cargada una sola vez por proceso."""

    return Settings()


__all__ = ["Settings", "get_settings"]
