"""Servicios de aplicación que coordinan el acceso a datos."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Iterable, Optional, TypeVar

from crud_usuarios.core.results import Exito, Fallo, Resultado
from crud_usuarios.core.validation import parsear_edad, validar_formulario
from crud_usuarios.errors import ClienteError, ValidacionError
from crud_usuarios.infrastructure.cancellation import TokenCancelacion
from crud_usuarios.infrastructure.repositories import UserRepository
from crud_usuarios.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UserService:
    """Orquesta el flujo de datos relacionado con usuarios.

    Todas las operaciones devuelven un ``Resultado``; las fallas esperadas del
    cliente nunca se propagan como excepción.
    """

    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def listar(
        self,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> Resultado[list[User]]:
        """Obtiene los usuarios tal como los ordena el servidor."""

        return self._ejecutar(
            "listar usuarios", lambda: self._repository.obtener_usuarios(cancelacion, timeout)
        )

    def buscar(self, consulta: str, usuarios: Iterable[User]) -> list[User]:
        """Filtra usuarios ya cargados por login o nombre."""

        consulta_normalizada = consulta.strip().lower()
        if not consulta_normalizada:
            return list(usuarios)

        return [
            usuario
            for usuario in usuarios
            if consulta_normalizada in usuario.user.lower()
            or consulta_normalizada in usuario.nombre.lower()
        ]

    def crear(
        self,
        user: str,
        nombre: str,
        edad: str,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> Resultado[User]:
        """Valida el formulario de alta y registra el usuario."""

        errores = validar_formulario(user, nombre, edad)
        if errores:
            return Fallo(ValidacionError(errores))

        nuevo = User.nuevo(user=user.strip(), nombre=nombre.strip(), edad=parsear_edad(edad))
        return self._ejecutar(
            "crear usuario", lambda: self._repository.crear_usuario(nuevo, cancelacion, timeout)
        )

    def actualizar(
        self,
        original: User,
        user: str,
        nombre: str,
        edad: str,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> Resultado[User]:
        """Valida el formulario de edición y envía los cambios.

        Devuelve la nueva instancia del usuario; ``original`` no se modifica.
        """

        errores = validar_formulario(user, nombre, edad)
        if errores:
            return Fallo(ValidacionError(errores))

        actualizado = replace(
            original, user=user.strip(), nombre=nombre.strip(), edad=parsear_edad(edad)
        )

        def _actualizar() -> User:
            self._repository.actualizar_usuario(actualizado, cancelacion, timeout)
            return actualizado

        return self._ejecutar("actualizar usuario", _actualizar)

    def eliminar(
        self,
        usuario: User,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> Resultado[None]:
        return self._ejecutar(
            "eliminar usuario",
            lambda: self._repository.eliminar_usuario(usuario.id, cancelacion, timeout),
        )

    @staticmethod
    def _ejecutar(operacion: str, accion: Callable[[], T]) -> Resultado[T]:
        try:
            return Exito(accion())
        except ClienteError as exc:
            logger.warning("No se pudo %s: %s", operacion, exc)
            return Fallo(exc)


__all__ = ["UserService"]
