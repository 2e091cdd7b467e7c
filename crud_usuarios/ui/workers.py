"""Ejecución de operaciones remotas fuera del hilo de la interfaz."""

from __future__ import annotations

import logging
from typing import Any, Callable

from PyQt6.QtCore import QDeadlineTimer, QObject, QThread, pyqtSignal, pyqtSlot

from crud_usuarios.infrastructure.cancellation import TokenCancelacion

logger = logging.getLogger(__name__)

Tarea = Callable[[TokenCancelacion], Any]

ESPERA_CIERRE_MS = 2000


class _ApiWorker(QObject):
    finished = pyqtSignal(object)
    error = pyqtSignal(str)

    def __init__(self, tarea: Tarea) -> None:
        super().__init__()
        self.tarea = tarea
        self.cancelacion = TokenCancelacion()

    def run(self) -> None:
        try:
            resultado = self.tarea(self.cancelacion)
        except Exception as exc:  # pragma: no cover - mostrado en UI
            self.error.emit(str(exc))
            return
        self.finished.emit(resultado)


class _Receptor(QObject):
    """Vive en el hilo de la interfaz; entrega el resultado si nadie canceló."""

    def __init__(
        self,
        cancelacion: TokenCancelacion,
        al_terminar: Callable[[Any], None],
        al_fallar: Callable[[str], None],
        parent: QObject,
    ) -> None:
        super().__init__(parent)
        self._cancelacion = cancelacion
        self._al_terminar = al_terminar
        self._al_fallar = al_fallar

    @pyqtSlot(object)
    def terminar(self, resultado: Any) -> None:
        if not self._cancelacion.cancelado:
            self._al_terminar(resultado)

    @pyqtSlot(str)
    def fallar(self, mensaje: str) -> None:
        if not self._cancelacion.cancelado:
            self._al_fallar(mensaje)


class EjecutorTareas(QObject):
    """Lanza cada tarea en su propio ``QThread`` y mantiene vivas sus referencias."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._activas: dict[QThread, tuple[_ApiWorker, _Receptor]] = {}

    def lanzar(
        self,
        tarea: Tarea,
        al_terminar: Callable[[Any], None],
        al_fallar: Callable[[str], None],
    ) -> TokenCancelacion:
        thread = QThread(self)
        worker = _ApiWorker(tarea)
        receptor = _Receptor(worker.cancelacion, al_terminar, al_fallar, self)
        worker.moveToThread(thread)

        thread.started.connect(worker.run)
        worker.finished.connect(thread.quit)
        worker.error.connect(thread.quit)
        worker.finished.connect(receptor.terminar)
        worker.error.connect(receptor.fallar)
        thread.finished.connect(self._limpiar_hilos)

        self._activas[thread] = (worker, receptor)
        thread.start()
        return worker.cancelacion

    def cancelar_todas(self, espera_ms: int = ESPERA_CIERRE_MS) -> int:
        """Cancela las tareas en curso y espera a lo sumo ``espera_ms`` en total.

        Devuelve cuántos hilos seguían ocupados al agotarse la espera; sus
        resultados se descartan igualmente al llegar.
        """

        limite = QDeadlineTimer(espera_ms)
        for thread, (worker, _receptor) in list(self._activas.items()):
            worker.cancelacion.cancelar()
            thread.quit()
        pendientes = [thread for thread in self._activas if not thread.wait(limite)]
        if pendientes:
            logger.warning("%d petición(es) siguen en curso al cerrar", len(pendientes))
        return len(pendientes)

    @pyqtSlot()
    def _limpiar_hilos(self) -> None:
        for thread in [t for t in self._activas if t.isFinished()]:
            worker, receptor = self._activas.pop(thread)
            worker.deleteLater()
            receptor.deleteLater()
            thread.deleteLater()


__all__ = ["EjecutorTareas"]
