"""Diálogo de alta y edición de usuarios."""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from crud_usuarios.core.results import Exito, Fallo, Resultado
from crud_usuarios.core.services import UserService
from crud_usuarios.core.validation import validar_edad, validar_nombre, validar_usuario
from crud_usuarios.errors import ValidacionError
from crud_usuarios.infrastructure.cancellation import TokenCancelacion
from crud_usuarios.models.user import User
from crud_usuarios.ui.workers import EjecutorTareas


class UserFormDialog(QDialog):
    """Formulario modal para crear un usuario o editar uno existente.

    Si ``usuario`` es ``None`` el diálogo crea; en otro caso edita esa
    instancia. Al aceptar, ``usuario_resultado`` contiene el usuario devuelto
    por el servicio.
    """

    def __init__(
        self,
        *,
        user_service: UserService,
        ejecutor: EjecutorTareas,
        usuario: Optional[User] = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._user_service = user_service
        self._ejecutor = ejecutor
        self._original = usuario
        self.usuario_resultado: Optional[User] = None
        self._cancelacion: Optional[TokenCancelacion] = None

        self.setWindowTitle("Editar Usuario" if usuario else "Crear Usuario")
        self.setModal(True)

        self._input_user = QLineEdit()
        self._input_user.setPlaceholderText("usuario")
        self._input_nombre = QLineEdit()
        self._input_nombre.setPlaceholderText("nombre completo")
        self._input_edad = QLineEdit()
        self._input_edad.setPlaceholderText("años")

        self._errores = {
            "user": self._crear_label_error(),
            "nombre": self._crear_label_error(),
            "edad": self._crear_label_error(),
        }

        self._lbl_status = QLabel("")
        self._lbl_status.setObjectName("statusLabel")
        self._lbl_status.setWordWrap(True)
        self._lbl_status.setVisible(False)

        self._btn_guardar = QPushButton("Actualizar Usuario" if usuario else "Crear Usuario")
        self._btn_guardar.clicked.connect(self._on_submit)
        self._btn_cancelar = QPushButton("Cancelar")
        self._btn_cancelar.clicked.connect(self.reject)

        if usuario is not None:
            self._input_user.setText(usuario.user)
            self._input_nombre.setText(usuario.nombre)
            self._input_edad.setText(str(usuario.edad))

        self._input_user.editingFinished.connect(
            lambda: self._mostrar_error("user", validar_usuario(self._input_user.text()))
        )
        self._input_nombre.editingFinished.connect(
            lambda: self._mostrar_error("nombre", validar_nombre(self._input_nombre.text()))
        )
        self._input_edad.editingFinished.connect(
            lambda: self._mostrar_error("edad", validar_edad(self._input_edad.text()))
        )

        self._build_ui()
        self._input_user.setFocus()

    def _build_ui(self) -> None:
        form = QFormLayout()
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        form.addRow("Usuario", self._input_user)
        form.addRow("", self._errores["user"])
        form.addRow("Nombre", self._input_nombre)
        form.addRow("", self._errores["nombre"])
        form.addRow("Edad", self._input_edad)
        form.addRow("", self._errores["edad"])

        buttons = QDialogButtonBox()
        buttons.addButton(self._btn_guardar, QDialogButtonBox.ButtonRole.AcceptRole)
        buttons.addButton(self._btn_cancelar, QDialogButtonBox.ButtonRole.RejectRole)

        status_layout = QHBoxLayout()
        status_layout.addWidget(self._lbl_status)
        status_layout.addStretch(1)

        layout = QVBoxLayout()
        layout.setSpacing(14)
        layout.setContentsMargins(20, 18, 20, 16)
        layout.addLayout(form)
        layout.addLayout(status_layout)
        layout.addWidget(buttons)

        self.setLayout(layout)
        self.setMinimumWidth(380)
        self.setStyleSheet(
            """
            QLineEdit {
                border: 1px solid #93c5fd;
                border-radius: 8px;
                padding: 6px 8px;
            }
            QLineEdit:focus {
                border: 2px solid #2563eb;
            }
            QPushButton {
                background: #2563eb;
                color: #fff;
                border: none;
                border-radius: 8px;
                padding: 8px 14px;
                font-weight: 600;
            }
            QPushButton:disabled {
                background: #bfdbfe;
            }
            #statusLabel, .fieldError {
                color: #b91c1c;
            }
            """
        )

    # ------------------------------------------------------------------
    # Acciones
    # ------------------------------------------------------------------
    def _on_submit(self) -> None:
        user = self._input_user.text()
        nombre = self._input_nombre.text()
        edad = self._input_edad.text()

        self._show_status("")
        self._set_ocupado(True)

        original = self._original
        if original is None:
            tarea = lambda token: self._user_service.crear(user, nombre, edad, token)  # noqa: E731
        else:
            tarea = lambda token: self._user_service.actualizar(  # noqa: E731
                original, user, nombre, edad, token
            )
        self._cancelacion = self._ejecutor.lanzar(
            tarea, self._on_resultado, self._on_error_inesperado
        )

    def reject(self) -> None:
        if self._cancelacion is not None:
            self._cancelacion.cancelar()
        super().reject()

    def _on_resultado(self, resultado: Resultado[User]) -> None:
        self._set_ocupado(False)
        for campo in self._errores:
            self._mostrar_error(campo, None)

        if isinstance(resultado, Exito):
            self.usuario_resultado = resultado.valor
            self.accept()
            return

        if isinstance(resultado, Fallo) and isinstance(resultado.error, ValidacionError):
            for campo, mensaje in resultado.error.errores.items():
                self._mostrar_error(campo, mensaje)
            return

        accion = "actualizar" if self._original else "crear"
        self._show_status(f"Error al {accion} usuario: {resultado.mensaje}")

    def _on_error_inesperado(self, mensaje: str) -> None:  # pragma: no cover - UI
        self._set_ocupado(False)
        self._show_status(f"Error inesperado: {mensaje}")

    # ------------------------------------------------------------------
    # Auxiliares
    # ------------------------------------------------------------------
    @staticmethod
    def _crear_label_error() -> QLabel:
        label = QLabel("")
        label.setProperty("class", "fieldError")
        label.setVisible(False)
        return label

    def _mostrar_error(self, campo: str, mensaje: Optional[str]) -> None:
        label = self._errores[campo]
        label.setText(mensaje or "")
        label.setVisible(bool(mensaje))

    def _show_status(self, message: str) -> None:
        self._lbl_status.setText(message)
        self._lbl_status.setToolTip(message)
        self._lbl_status.setVisible(bool(message))

    def _set_ocupado(self, ocupado: bool) -> None:
        for widget in (
            self._input_user,
            self._input_nombre,
            self._input_edad,
            self._btn_guardar,
        ):
            widget.setEnabled(not ocupado)
        self._btn_guardar.setText(
            "Guardando..." if ocupado else ("Actualizar Usuario" if self._original else "Crear Usuario")
        )


__all__ = ["UserFormDialog"]
