"""Ventana principal de la aplicación."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QCloseEvent
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from crud_usuarios.core.results import Fallo, Resultado
from crud_usuarios.core.services import UserService
from crud_usuarios.core.state import AppState, EstadoCarga
from crud_usuarios.models.user import User
from crud_usuarios.ui.user_form_dialog import UserFormDialog
from crud_usuarios.ui.workers import EjecutorTareas


@dataclass(slots=True)
class _TableColumns:
    user: int = 0
    nombre: int = 1
    edad: int = 2


class MainWindow(QMainWindow):
    """Ventana principal con listado de usuarios y acciones CRUD."""

    def __init__(self, *, state: AppState, user_service: UserService) -> None:
        super().__init__()
        self.state = state
        self.user_service = user_service
        self._columns = _TableColumns()
        self._ejecutor = EjecutorTareas(self)

        self.setWindowTitle("Usuarios")
        self.resize(720, 460)

        self.search_box = QLineEdit(placeholderText="Buscar por usuario o nombre")
        self.search_box.textChanged.connect(self._on_search_changed)

        self.refresh_button = QPushButton("Recargar")
        self.refresh_button.clicked.connect(self._reload_data)
        self.new_button = QPushButton("Nuevo")
        self.new_button.clicked.connect(self._on_create)
        self.edit_button = QPushButton("Editar")
        self.edit_button.clicked.connect(self._on_edit)
        self.delete_button = QPushButton("Eliminar")
        self.delete_button.clicked.connect(self._on_delete)

        self.table = QTableWidget(columnCount=3)
        self.table.setHorizontalHeaderLabels(["User", "Nombre", "Edad"])
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.verticalHeader().setVisible(False)
        self.table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.table.itemSelectionChanged.connect(self._on_selection_changed)
        self.table.itemDoubleClicked.connect(lambda _item: self._on_edit())

        self.status_label = QLabel("")
        self.status_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.status_label.setWordWrap(True)

        top_bar = QHBoxLayout()
        top_bar.addWidget(QLabel("Usuarios"))
        top_bar.addStretch(1)
        top_bar.addWidget(self.search_box)
        top_bar.addWidget(self.refresh_button)

        actions_bar = QHBoxLayout()
        actions_bar.addWidget(self.new_button)
        actions_bar.addWidget(self.edit_button)
        actions_bar.addWidget(self.delete_button)
        actions_bar.addStretch(1)

        layout = QVBoxLayout()
        layout.addLayout(top_bar)
        layout.addWidget(self.table)
        layout.addWidget(self.status_label)
        layout.addLayout(actions_bar)

        container = QWidget()
        container.setLayout(layout)
        self.setCentralWidget(container)

        self._reload_data()

    # ------------------------------------------------------------------
    # Eventos y acciones
    # ------------------------------------------------------------------
    def _reload_data(self) -> None:
        """Pide los usuarios al servicio en segundo plano."""

        if self.state.cargando:
            return
        self.state.iniciar_carga()
        self._render_estado()
        self._ejecutor.lanzar(
            self.user_service.listar, self._on_usuarios_cargados, self._on_error_inesperado
        )

    def _on_usuarios_cargados(self, resultado: Resultado[list[User]]) -> None:
        self.state.aplicar_resultado(resultado)
        self._populate_table(self._usuarios_visibles())
        self._render_estado()

    def _on_search_changed(self, _text: str) -> None:
        self._populate_table(self._usuarios_visibles())

    def _on_selection_changed(self) -> None:
        row = self.table.currentRow()
        item = self.table.item(row, self._columns.user) if row >= 0 else None
        if item is None:
            self.state.seleccionar_usuario(None)
        else:
            self.state.seleccionar_por_id(item.data(Qt.ItemDataRole.UserRole))
        self._toggle_row_actions()

    def _on_create(self) -> None:
        dialog = UserFormDialog(
            user_service=self.user_service, ejecutor=self._ejecutor, parent=self
        )
        if dialog.exec() == QDialog.DialogCode.Accepted:
            self.statusBar().showMessage("Usuario creado exitosamente", 5000)
            self._reload_data()

    def _on_edit(self) -> None:
        usuario = self.state.usuario_seleccionado
        if usuario is None:
            return
        dialog = UserFormDialog(
            user_service=self.user_service,
            ejecutor=self._ejecutor,
            usuario=usuario,
            parent=self,
        )
        if dialog.exec() == QDialog.DialogCode.Accepted:
            self.statusBar().showMessage("Usuario actualizado exitosamente", 5000)
            self._reload_data()

    def _on_delete(self) -> None:
        usuario = self.state.usuario_seleccionado
        if usuario is None:
            return
        respuesta = QMessageBox.question(
            self,
            "Confirmar",
            f"¿Eliminar a {usuario.nombre}?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.Cancel,
            QMessageBox.StandardButton.Cancel,
        )
        if respuesta != QMessageBox.StandardButton.Yes:
            return

        self.delete_button.setEnabled(False)
        self._ejecutor.lanzar(
            lambda token: self.user_service.eliminar(usuario, token),
            self._on_usuario_eliminado,
            self._on_error_inesperado,
        )

    def _on_usuario_eliminado(self, resultado: Resultado[None]) -> None:
        self._toggle_row_actions()
        if isinstance(resultado, Fallo):
            QMessageBox.critical(self, "Error", f"Error al eliminar usuario: {resultado.mensaje}")
            return
        self.statusBar().showMessage("Usuario eliminado", 5000)
        self._reload_data()

    def _on_error_inesperado(self, mensaje: str) -> None:  # pragma: no cover - UI
        if self.state.cargando:
            self.state.estado = EstadoCarga.ERROR
            self.state.mensaje_error = mensaje
            self._render_estado()
        QMessageBox.critical(self, "Error", f"Error inesperado: {mensaje}")

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - API de Qt
        self._ejecutor.cancelar_todas()
        super().closeEvent(event)

    # ------------------------------------------------------------------
    # Renderizado
    # ------------------------------------------------------------------
    def _usuarios_visibles(self) -> list[User]:
        return self.user_service.buscar(self.search_box.text(), self.state.usuarios)

    def _render_estado(self) -> None:
        estado = self.state.estado
        self.refresh_button.setEnabled(estado is not EstadoCarga.CARGANDO)

        if estado is EstadoCarga.CARGANDO:
            self._set_status("Cargando usuarios...", error=False)
        elif estado is EstadoCarga.ERROR:
            self._set_status(
                f"Error: {self.state.mensaje_error}\nPresiona «Recargar» para reintentar.",
                error=True,
            )
        elif estado is EstadoCarga.LISTO and not self.state.usuarios:
            self._set_status("No hay usuarios disponibles", error=False)
        else:
            self._set_status("", error=False)

    def _set_status(self, mensaje: str, *, error: bool) -> None:
        self.status_label.setText(mensaje)
        self.status_label.setVisible(bool(mensaje))
        self.status_label.setStyleSheet("color: #b91c1c;" if error else "color: #374151;")

    def _populate_table(self, usuarios: list[User]) -> None:
        self.table.blockSignals(True)
        self.table.setRowCount(len(usuarios))

        for row, usuario in enumerate(usuarios):
            user_item = QTableWidgetItem(usuario.user)
            user_item.setData(Qt.ItemDataRole.UserRole, usuario.id)
            nombre_item = QTableWidgetItem(usuario.nombre)
            edad_item = QTableWidgetItem(str(usuario.edad))
            edad_item.setTextAlignment(
                Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
            )

            self.table.setItem(row, self._columns.user, user_item)
            self.table.setItem(row, self._columns.nombre, nombre_item)
            self.table.setItem(row, self._columns.edad, edad_item)

        self.table.resizeColumnsToContents()
        self.table.blockSignals(False)

        # la fila seleccionada sobrevive a setRowCount sin emitir señal, así
        # que el estado se sincroniza aquí y no en _on_selection_changed
        seleccionado = self.state.usuario_seleccionado
        visibles = [usuario.id for usuario in usuarios]
        if seleccionado is not None and seleccionado.id in visibles:
            fila = visibles.index(seleccionado.id)
            self.state.seleccionar_por_id(seleccionado.id)
        elif usuarios:
            fila = 0
            self.state.seleccionar_usuario(usuarios[0])
        else:
            fila = -1
            self.state.seleccionar_usuario(None)

        self.table.blockSignals(True)
        if fila >= 0:
            self.table.selectRow(fila)
        else:
            self.table.clearSelection()
        self.table.blockSignals(False)
        self._toggle_row_actions()

    def _toggle_row_actions(self) -> None:
        habilitado = self.state.usuario_seleccionado is not None
        self.edit_button.setEnabled(habilitado)
        self.delete_button.setEnabled(habilitado)


__all__ = ["MainWindow"]
