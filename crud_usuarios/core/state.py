"""Estado compartido de la aplicación."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from crud_usuarios.core.results import Exito, Fallo, Resultado
from crud_usuarios.models.user import User


class EstadoCarga(Enum):
    INACTIVO = "inactivo"
    CARGANDO = "cargando"
    LISTO = "listo"
    ERROR = "error"


@dataclass
class AppState:
    """Mantiene los usuarios visibles, la selección y el estado de la carga."""

    usuarios: List[User] = field(default_factory=list)
    usuario_seleccionado: User | None = None
    estado: EstadoCarga = EstadoCarga.INACTIVO
    mensaje_error: Optional[str] = None

    @property
    def cargando(self) -> bool:
        return self.estado is EstadoCarga.CARGANDO

    def iniciar_carga(self) -> None:
        self.estado = EstadoCarga.CARGANDO
        self.mensaje_error = None

    def aplicar_resultado(self, resultado: Resultado[list[User]]) -> None:
        """Actualiza el estado con el resultado de un listado."""

        if isinstance(resultado, Exito):
            self.actualizar_usuarios(resultado.valor)
            self.estado = EstadoCarga.LISTO
            self.mensaje_error = None
        elif isinstance(resultado, Fallo):
            # se conservan los usuarios anteriores para no vaciar la tabla
            self.estado = EstadoCarga.ERROR
            self.mensaje_error = resultado.mensaje

    def actualizar_usuarios(self, usuarios: list[User]) -> None:
        seleccionado_id = self.usuario_seleccionado.id if self.usuario_seleccionado else None
        self.usuarios = usuarios
        self.usuario_seleccionado = None
        if seleccionado_id is not None:
            self.seleccionar_por_id(seleccionado_id)
        if self.usuario_seleccionado is None and usuarios:
            self.usuario_seleccionado = usuarios[0]

    def seleccionar_usuario(self, usuario: User | None) -> None:
        self.usuario_seleccionado = usuario

    def seleccionar_por_id(self, usuario_id: int) -> User | None:
        self.usuario_seleccionado = next(
            (usuario for usuario in self.usuarios if usuario.id == usuario_id), None
        )
        return self.usuario_seleccionado


__all__ = ["AppState", "EstadoCarga"]
