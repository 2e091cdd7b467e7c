from __future__ import annotations

import socket
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable
from urllib.error import URLError

import pytest

from conftest import ServidorFalso
from crud_usuarios.errors import (
    ApiConnectionError,
    ApiError,
    DecodeError,
    ErrorServidor,
    NoEncontradoError,
    OperacionCancelada,
)
from crud_usuarios.infrastructure.api_client import APIClient
from crud_usuarios.infrastructure.cancellation import TokenCancelacion


def _puerto_libre() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def test_base_url_trailing_slash_is_stripped(api_client: APIClient, servidor: ServidorFalso) -> None:
    assert api_client.base_url == servidor.url.rstrip("/")


def test_obtener_usuarios_keeps_server_order(
    api_client: APIClient, servidor: ServidorFalso, usuarios_json: list[dict[str, Any]]
) -> None:
    servidor.responder("GET", "/usuarios/all", 200, usuarios_json)

    assert api_client.obtener_usuarios() == usuarios_json
    peticion = servidor.peticiones[0]
    assert (peticion.metodo, peticion.ruta) == ("GET", "/usuarios/all")
    assert peticion.headers["Accept"] == "application/json"


def test_obtener_usuarios_non_200_raises_api_error(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("GET", "/usuarios/all", 503, {"message": "down"})

    with pytest.raises(ErrorServidor) as excinfo:
        api_client.obtener_usuarios()

    assert excinfo.value.status == 503


def test_obtener_usuarios_2xx_other_than_200_is_an_error(
    api_client: APIClient, servidor: ServidorFalso
) -> None:
    servidor.responder("GET", "/usuarios/all", 204)

    with pytest.raises(ApiError) as excinfo:
        api_client.obtener_usuarios()

    assert excinfo.value.status == 204


def test_obtener_usuarios_requires_json_array(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("GET", "/usuarios/all", 200, {"usuarios": []})

    with pytest.raises(DecodeError):
        api_client.obtener_usuarios()


def test_invalid_json_raises_decode_error(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("GET", "/usuarios/all", 200, b"<html>no json</html>")

    with pytest.raises(DecodeError):
        api_client.obtener_usuarios()


@pytest.mark.parametrize("status", [200, 201])
def test_crear_usuario_posts_json_and_returns_body(
    api_client: APIClient, servidor: ServidorFalso, status: int
) -> None:
    creado = {"id": 7, "user": "ann", "nombre": "Ann", "edad": 30}
    servidor.responder("POST", "/usuarios", status, creado)
    datos = {"id": 0, "user": "ann", "nombre": "Ann", "edad": 30}

    assert api_client.crear_usuario(datos) == creado

    peticion = servidor.peticiones[0]
    assert peticion.metodo == "POST"
    assert peticion.headers["Content-Type"] == "application/json"
    assert peticion.json() == datos


def test_crear_usuario_rejected(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("POST", "/usuarios", 400, {"message": ["edad must be a number"]})

    with pytest.raises(ApiError) as excinfo:
        api_client.crear_usuario({"id": 0, "user": "ann", "nombre": "Ann", "edad": 30})

    assert excinfo.value.status == 400


def test_actualizar_usuario_puts_to_id(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("PUT", "/usuarios/5", 200)
    datos = {"id": 5, "user": "ana", "nombre": "Ana", "edad": 31}

    assert api_client.actualizar_usuario(5, datos) is None

    peticion = servidor.peticiones[0]
    assert (peticion.metodo, peticion.ruta) == ("PUT", "/usuarios/5")
    assert peticion.json() == datos


def test_actualizar_usuario_ignores_response_body(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("PUT", "/usuarios/5", 200, b"not json at all")

    api_client.actualizar_usuario(5, {"id": 5, "user": "ana", "nombre": "Ana", "edad": 31})


def test_actualizar_usuario_404(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("PUT", "/usuarios/5", 404, {"message": "Not Found"})

    with pytest.raises(NoEncontradoError) as excinfo:
        api_client.actualizar_usuario(5, {"id": 5, "user": "ana", "nombre": "Ana", "edad": 31})

    assert excinfo.value.status == 404
    assert len(servidor.peticiones) == 1


def test_eliminar_usuario_ok(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("DELETE", "/usuarios/5", 200)

    assert api_client.eliminar_usuario(5) is None
    assert servidor.peticiones[0].ruta == "/usuarios/5"


def test_eliminar_usuario_500(api_client: APIClient, servidor: ServidorFalso) -> None:
    servidor.responder("DELETE", "/usuarios/5", 500)

    with pytest.raises(ApiError) as excinfo:
        api_client.eliminar_usuario(5)

    assert excinfo.value.status == 500


def test_connection_refused_raises_connection_error() -> None:
    client = APIClient(f"http://127.0.0.1:{_puerto_libre()}", timeout=2)

    with pytest.raises(ApiConnectionError) as excinfo:
        client.eliminar_usuario(1)

    assert excinfo.value.cause is not None


def test_timeout_raises_connection_error(servidor: ServidorFalso) -> None:
    servidor.responder("GET", "/usuarios/all", 200, [], demora=1.0)
    client = APIClient(servidor.url, timeout=0.2)

    with pytest.raises(ApiConnectionError):
        client.obtener_usuarios()


def test_per_call_timeout_overrides_configured(servidor: ServidorFalso) -> None:
    servidor.responder("GET", "/usuarios/all", 200, [], demora=1.0)
    client = APIClient(servidor.url, timeout=30)

    with pytest.raises(ApiConnectionError):
        client.obtener_usuarios(timeout=0.2)


def test_cancelled_token_sends_nothing(api_client: APIClient, servidor: ServidorFalso) -> None:
    token = TokenCancelacion()
    token.cancelar()

    with pytest.raises(OperacionCancelada):
        api_client.obtener_usuarios(cancelacion=token)

    assert servidor.peticiones == []


def test_cancel_during_request_discards_result(api_client: APIClient, servidor: ServidorFalso) -> None:
    token = TokenCancelacion()
    servidor.responder("DELETE", "/usuarios/9", 200, al_recibir=token.cancelar)

    with pytest.raises(OperacionCancelada):
        api_client.eliminar_usuario(9, cancelacion=token)

    assert len(servidor.peticiones) == 1


def test_concurrent_lists_are_independent(crear_servidor: Callable[[], ServidorFalso]) -> None:
    servidores = [crear_servidor() for _ in range(4)]
    esperados = []
    for indice, srv in enumerate(servidores):
        datos = [
            {"id": indice * 10 + n, "user": f"u{indice}{n}", "nombre": f"N{indice}{n}", "edad": 20 + n}
            for n in range(indice + 1)
        ]
        srv.responder("GET", "/usuarios/all", 200, datos, demora=0.1)
        esperados.append(datos)

    clientes = [APIClient(srv.url, timeout=5) for srv in servidores]
    with ThreadPoolExecutor(max_workers=8) as pool:
        futuros = [pool.submit(cliente.obtener_usuarios) for cliente in clientes * 2]
        resultados = [futuro.result() for futuro in futuros]

    assert resultados == esperados * 2


@pytest.mark.parametrize("timeout, esperado", [(None, 30), (0, 0), (0.5, 0.5)])
def test_explicit_timeout_is_passed_to_urlopen(
    monkeypatch: pytest.MonkeyPatch, timeout: Any, esperado: float
) -> None:
    recibidos: list[Any] = []

    def _urlopen(request: Any, timeout: Any = None) -> Any:
        recibidos.append(timeout)
        raise URLError("sin red")

    monkeypatch.setattr("crud_usuarios.infrastructure.api_client.urlopen", _urlopen)
    client = APIClient("http://example.invalid", timeout=30)

    with pytest.raises(ApiConnectionError):
        client.eliminar_usuario(1, timeout=timeout)

    assert recibidos == [esperado]
