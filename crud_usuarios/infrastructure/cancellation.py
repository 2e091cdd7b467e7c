"""Token de cancelación cooperativa para operaciones remotas."""

from __future__ import annotations

import threading

from crud_usuarios.errors import OperacionCancelada


class TokenCancelacion:
    """Marca compartida entre quien lanza una operación y quien la ejecuta.

    La petición HTTP en curso no se interrumpe; el cliente revisa el token
    antes de enviarla y al recibir la respuesta, y en ese caso descarta el
    resultado y libera la conexión.
    """

    def __init__(self) -> None:
        self._evento = threading.Event()

    def cancelar(self) -> None:
        self._evento.set()

    @property
    def cancelado(self) -> bool:
        return self._evento.is_set()

    def verificar(self) -> None:
        """Lanza ``OperacionCancelada`` si el token fue cancelado."""

        if self._evento.is_set():
            raise OperacionCancelada("La operación fue cancelada")


__all__ = ["TokenCancelacion"]
