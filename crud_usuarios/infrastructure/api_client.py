"""Cliente HTTP del API de usuarios.

Cada método realiza una única petición contra la URL base configurada y
devuelve el JSON ya decodificado. No hay reintentos, caché ni estado
compartido entre llamadas: dos peticiones simultáneas son independientes.
"""

from __future__ import annotations

import http.client
import json
import logging
from typing import Any, Iterable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from crud_usuarios.errors import ApiConnectionError, DecodeError, api_error_para
from crud_usuarios.infrastructure.cancellation import TokenCancelacion

logger = logging.getLogger(__name__)


class APIClient:
    """Provee acceso HTTP a los recursos ``/usuarios`` del backend."""

    def __init__(self, base_url: str, timeout: float = 10.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    # ------------------------------------------------------------------
    # Operaciones
    # ------------------------------------------------------------------
    def obtener_usuarios(
        self,
        *,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> list[Any]:
        """Recupera la lista completa de usuarios en el orden del servidor."""

        raw = self._enviar(
            "GET",
            "/usuarios/all",
            esperados=(200,),
            operacion="cargar usuarios",
            cancelacion=cancelacion,
            timeout=timeout,
        )
        payload = self._decodificar(raw)
        if not isinstance(payload, list):
            raise DecodeError(
                f"Se esperaba una lista de usuarios, se recibió {type(payload).__name__}"
            )
        return payload

    def crear_usuario(
        self,
        datos: dict[str, Any],
        *,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Registra un usuario y devuelve el objeto creado por el servidor."""

        raw = self._enviar(
            "POST",
            "/usuarios",
            datos=datos,
            esperados=(200, 201),
            operacion="crear usuario",
            cancelacion=cancelacion,
            timeout=timeout,
        )
        return self._decodificar(raw)

    def actualizar_usuario(
        self,
        usuario_id: int,
        datos: dict[str, Any],
        *,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Reemplaza los datos del usuario indicado. El cuerpo de la respuesta se ignora."""

        self._enviar(
            "PUT",
            f"/usuarios/{usuario_id}",
            datos=datos,
            esperados=(200,),
            operacion="actualizar usuario",
            cancelacion=cancelacion,
            timeout=timeout,
        )

    def eliminar_usuario(
        self,
        usuario_id: int,
        *,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self._enviar(
            "DELETE",
            f"/usuarios/{usuario_id}",
            esperados=(200,),
            operacion="eliminar usuario",
            cancelacion=cancelacion,
            timeout=timeout,
        )

    # ------------------------------------------------------------------
    # Transporte
    # ------------------------------------------------------------------
    def _enviar(
        self,
        metodo: str,
        ruta: str,
        *,
        esperados: Iterable[int],
        operacion: str,
        datos: Optional[dict[str, Any]] = None,
        cancelacion: Optional[TokenCancelacion] = None,
        timeout: Optional[float] = None,
    ) -> bytes:
        if cancelacion is not None:
            cancelacion.verificar()

        url = f"{self._base_url}{ruta}"
        headers = {"Accept": "application/json"}
        cuerpo = None
        if datos is not None:
            cuerpo = json.dumps(datos).encode("utf-8")
            headers["Content-Type"] = "application/json"

        request = Request(url, data=cuerpo, method=metodo, headers=headers)
        logger.debug("%s %s", metodo, url)

        try:
            with urlopen(
                request, timeout=timeout if timeout is not None else self._timeout
            ) as response:
                status = response.status
                raw = response.read()
                if cancelacion is not None:
                    cancelacion.verificar()
        except HTTPError as exc:
            status = exc.code
            exc.close()
        except (URLError, OSError, http.client.HTTPException) as exc:
            causa = exc.reason if isinstance(exc, URLError) else exc
            logger.warning("Fallo de conexión en %s %s: %s", metodo, url, causa)
            raise ApiConnectionError(causa) from exc
        else:
            if status in esperados:
                return raw

        logger.warning("%s %s respondió HTTP %s", metodo, url, status)
        raise api_error_para(status, operacion)

    @staticmethod
    def _decodificar(raw: bytes) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"Respuesta inválida del servicio ({exc})") from exc


__all__ = ["APIClient"]
