"""Implementaciones de repositorios para acceso a datos."""

from __future__ import annotations

from typing import Optional

from crud_usuarios.infrastructure.api_client import APIClient
from crud_usuarios.infrastructure.cancellation import TokenCancelacion
from crud_usuarios.models.user import User


class UserRepository:
    """Repositorio de usuarios basado en un cliente API.

    ``timeout`` reemplaza, solo para esa llamada, el timeout del cliente.
    """

    def __init__(self, api_client: APIClient) -> None:
        self._api_client = api_client

    def obtener_usuarios(
        self,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> list[User]:
        """Devuelve la lista completa de usuarios, en el orden del servidor."""

        usuarios_crudos = self._api_client.obtener_usuarios(
            cancelacion=cancelacion, timeout=timeout
        )
        return [User.from_wire(datos) for datos in usuarios_crudos]

    def crear_usuario(
        self,
        usuario: User,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> User:
        """Registra ``usuario`` y devuelve la versión con el id asignado por el servidor."""

        creado = self._api_client.crear_usuario(
            usuario.to_wire(), cancelacion=cancelacion, timeout=timeout
        )
        return User.from_wire(creado)

    def actualizar_usuario(
        self,
        usuario: User,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._api_client.actualizar_usuario(
            usuario.id, usuario.to_wire(), cancelacion=cancelacion, timeout=timeout
        )

    def eliminar_usuario(
        self,
        usuario_id: int,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._api_client.eliminar_usuario(usuario_id, cancelacion=cancelacion, timeout=timeout)


__all__ = ["UserRepository"]
