"""Fixtures compartidas: un servidor HTTP local con respuestas programadas."""

from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass, field
from email.message import Message
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Iterator, Optional

import pytest

from crud_usuarios.infrastructure.api_client import APIClient


@dataclass
class Respuesta:
    status: int = 200
    cuerpo: Any = None
    demora: float = 0.0
    al_recibir: Optional[Callable[[], None]] = None


@dataclass
class Peticion:
    metodo: str
    ruta: str
    headers: Message
    cuerpo: bytes

    def json(self) -> Any:
        return json.loads(self.cuerpo)


@dataclass
class ServidorFalso:
    url: str = ""
    respuestas: dict[tuple[str, str], Respuesta] = field(default_factory=dict)
    peticiones: list[Peticion] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def responder(self, metodo: str, ruta: str, status: int = 200, cuerpo: Any = None, **extra: Any) -> None:
        self.respuestas[(metodo, ruta)] = Respuesta(status=status, cuerpo=cuerpo, **extra)

    def registrar(self, peticion: Peticion) -> None:
        with self._lock:
            self.peticiones.append(peticion)


def _handler_para(servidor: ServidorFalso) -> type[BaseHTTPRequestHandler]:
    class _Handler(BaseHTTPRequestHandler):
        def _atender(self) -> None:
            longitud = int(self.headers.get("Content-Length") or 0)
            cuerpo = self.rfile.read(longitud) if longitud else b""
            servidor.registrar(
                Peticion(self.command, self.path, self.headers, cuerpo)
            )

            respuesta = servidor.respuestas.get((self.command, self.path), Respuesta(status=404))
            if respuesta.al_recibir is not None:
                respuesta.al_recibir()
            if respuesta.demora:
                time.sleep(respuesta.demora)

            if respuesta.cuerpo is None:
                datos = b""
            elif isinstance(respuesta.cuerpo, bytes):
                datos = respuesta.cuerpo
            else:
                datos = json.dumps(respuesta.cuerpo).encode("utf-8")

            try:
                self.send_response(respuesta.status)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(datos)))
                self.end_headers()
                self.wfile.write(datos)
            except (BrokenPipeError, ConnectionResetError):
                pass

        do_GET = do_POST = do_PUT = do_DELETE = _atender

        def log_message(self, format: str, *args: Any) -> None:
            pass

    return _Handler


@pytest.fixture
def crear_servidor() -> Iterator[Callable[[], ServidorFalso]]:
    servidores: list[ThreadingHTTPServer] = []

    def _crear() -> ServidorFalso:
        servidor = ServidorFalso()
        httpd = ThreadingHTTPServer(("127.0.0.1", 0), _handler_para(servidor))
        httpd.daemon_threads = True
        servidor.url = f"http://127.0.0.1:{httpd.server_address[1]}/"
        threading.Thread(target=httpd.serve_forever, daemon=True).start()
        servidores.append(httpd)
        return servidor

    yield _crear

    for httpd in servidores:
        httpd.shutdown()
        httpd.server_close()


@pytest.fixture
def servidor(crear_servidor: Callable[[], ServidorFalso]) -> ServidorFalso:
    return crear_servidor()


@pytest.fixture
def api_client(servidor: ServidorFalso) -> APIClient:
    return APIClient(servidor.url, timeout=5)


@pytest.fixture
def usuarios_json() -> list[dict[str, Any]]:
    return [
        {"id": 3, "user": "carla", "nombre": "Carla Pérez", "edad": 41},
        {"id": 1, "user": "ana", "nombre": "Ana García", "edad": 30},
        {"id": 2, "user": "bruno", "nombre": "Bruno Díaz", "edad": 25},
    ]
