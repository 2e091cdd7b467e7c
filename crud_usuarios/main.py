"""Punto de entrada de la aplicación.

Carga la configuración, crea los componentes de infraestructura, servicios y
estado, y arranca la interfaz gráfica principal.
"""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from crud_usuarios.config import get_settings
from crud_usuarios.core.logging import setup_logging
from crud_usuarios.core.services import UserService
from crud_usuarios.core.state import AppState
from crud_usuarios.infrastructure.api_client import APIClient
from crud_usuarios.infrastructure.repositories import UserRepository
from crud_usuarios.ui.main_window import MainWindow

logger = logging.getLogger(__name__)


def build_user_service() -> UserService:
    """Crea la cadena cliente → repositorio → servicio desde la configuración."""

    settings = get_settings()
    api_client = APIClient(settings.API_BASE_URL, timeout=settings.API_TIMEOUT)
    return UserService(UserRepository(api_client))


def main() -> None:
    """Arranca la aplicación PyQt6 con las dependencias configuradas."""

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    logger.info("Usando API en %s", settings.API_BASE_URL)

    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    window = MainWindow(state=AppState(), user_service=build_user_service())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":  # pragma: no cover - punto de entrada interactivo
    main()
