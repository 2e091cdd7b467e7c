"""Excepciones del cliente de usuarios.

Toda falla esperada del acceso a datos se traduce a una de estas clases. La
capa de servicios las convierte en valores ``Fallo`` para la interfaz.
"""

from __future__ import annotations


class ClienteError(RuntimeError):
    """Base de todas las fallas del cliente de usuarios."""


class DecodeError(ClienteError):
    """La respuesta no tiene la forma esperada (JSON inválido o campos erróneos)."""


class ApiConnectionError(ClienteError):
    """Falla de transporte: DNS, conexión rechazada o timeout."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Error de conexión: {cause}")
        self.cause = cause


class ApiError(ClienteError):
    """El servidor respondió con un código HTTP no esperado."""

    def __init__(self, status: int, operacion: str = "") -> None:
        detalle = f" al {operacion}" if operacion else ""
        super().__init__(f"Error HTTP {status}{detalle}")
        self.status = status
        self.operacion = operacion


class NoEncontradoError(ApiError):
    """HTTP 404."""


class SolicitudRechazadaError(ApiError):
    """El servidor rechazó los datos enviados (400, 409, 422)."""


class ErrorServidor(ApiError):
    """HTTP 5xx."""


class OperacionCancelada(ClienteError):
    """El llamador abandonó la operación mediante su token de cancelación."""


class ValidacionError(ClienteError):
    """Los datos del formulario no pasan las reglas de validación."""

    def __init__(self, errores: dict[str, str]) -> None:
        super().__init__("; ".join(errores.values()))
        self.errores = dict(errores)


_RECHAZOS = {400, 409, 422}


def api_error_para(status: int, operacion: str = "") -> ApiError:
    """Devuelve la subclase de ``ApiError`` que corresponde al código."""

    if status == 404:
        return NoEncontradoError(status, operacion)
    if status in _RECHAZOS:
        return SolicitudRechazadaError(status, operacion)
    if 500 <= status < 600:
        return ErrorServidor(status, operacion)
    return ApiError(status, operacion)


__all__ = [
    "ApiConnectionError",
    "ApiError",
    "ClienteError",
    "DecodeError",
    "ErrorServidor",
    "NoEncontradoError",
    "OperacionCancelada",
    "SolicitudRechazadaError",
    "ValidacionError",
    "api_error_para",
]
