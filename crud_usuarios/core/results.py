"""Resultados explícitos de las operaciones remotas.

Los servicios no lanzan las fallas esperadas del cliente: devuelven ``Exito``
o ``Fallo`` y la interfaz decide qué mostrar en cada caso.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from crud_usuarios.errors import (
    ApiConnectionError,
    ApiError,
    ClienteError,
    DecodeError,
    ErrorServidor,
    NoEncontradoError,
    OperacionCancelada,
    SolicitudRechazadaError,
    ValidacionError,
)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Exito(Generic[T]):
    valor: T


@dataclass(frozen=True, slots=True)
class Fallo:
    error: ClienteError

    @property
    def mensaje(self) -> str:
        return mensaje_usuario(self.error)


Resultado = Union[Exito[T], Fallo]


def es_exito(resultado: "Resultado[T]") -> bool:
    return isinstance(resultado, Exito)


def mensaje_usuario(error: ClienteError) -> str:
    """Traduce un error del cliente a un texto apto para mostrar al usuario."""

    if isinstance(error, ValidacionError):
        return "\n".join(error.errores.values())
    if isinstance(error, OperacionCancelada):
        return "La operación fue cancelada."
    if isinstance(error, ApiConnectionError):
        return "No se pudo conectar con el servidor."
    if isinstance(error, DecodeError):
        return "El servidor devolvió una respuesta inválida."
    if isinstance(error, NoEncontradoError):
        return "El usuario no existe en el servidor."
    if isinstance(error, SolicitudRechazadaError):
        return f"El servidor rechazó los datos enviados (HTTP {error.status})."
    if isinstance(error, ErrorServidor):
        return f"Error interno del servidor (HTTP {error.status})."
    if isinstance(error, ApiError):
        return f"Error HTTP {error.status}."
    return str(error)


__all__ = ["Exito", "Fallo", "Resultado", "es_exito", "mensaje_usuario"]
