"""Definiciones de modelos de dominio."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from crud_usuarios.errors import DecodeError

_CAMPOS: tuple[tuple[str, type], ...] = (
    ("id", int),
    ("user", str),
    ("nombre", str),
    ("edad", int),
)


def _campo(payload: Mapping[str, Any], nombre: str, tipo: type) -> Any:
    if nombre not in payload:
        raise DecodeError(f"Falta el campo '{nombre}' en el usuario recibido")
    valor = payload[nombre]
    # bool es subclase de int y no es un valor válido aquí
    if isinstance(valor, bool) or not isinstance(valor, tipo):
        raise DecodeError(
            f"El campo '{nombre}' debe ser {tipo.__name__}, se recibió {type(valor).__name__}"
        )
    return valor


@dataclass(frozen=True, slots=True)
class User:
    """Usuario gestionado por el API remoto.

    Attributes
    ----------
    id:
        Identificador asignado por el servidor. ``0`` indica un usuario que
        todavía no fue creado.
    user:
        Nombre de inicio de sesión.
    nombre:
        Nombre visible.
    edad:
        Edad en años.
    """

    id: int
    user: str
    nombre: str
    edad: int

    @classmethod
    def nuevo(cls, user: str, nombre: str, edad: int) -> "User":
        """Crea un usuario aún no registrado en el servidor."""

        return cls(id=0, user=user, nombre=nombre, edad=edad)

    @classmethod
    def from_wire(cls, payload: Any) -> "User":
        """Construye un usuario a partir del JSON decodificado del API."""

        if not isinstance(payload, Mapping):
            raise DecodeError(
                f"Se esperaba un objeto JSON de usuario, se recibió {type(payload).__name__}"
            )
        valores = {nombre: _campo(payload, nombre, tipo) for nombre, tipo in _CAMPOS}
        return cls(**valores)

    def to_wire(self) -> dict[str, Any]:
        """Devuelve el usuario en el formato JSON del API."""

        return {"id": self.id, "user": self.user, "nombre": self.nombre, "edad": self.edad}

    @property
    def es_nuevo(self) -> bool:
        return self.id == 0


__all__ = ["User"]
