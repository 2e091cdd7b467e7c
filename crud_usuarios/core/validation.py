"""Reglas de validación de los formularios de usuario.

Cada función devuelve ``None`` si el valor es válido o el mensaje a mostrar
junto al campo.
"""

from __future__ import annotations

import re
from typing import Optional

EDAD_MINIMA = 1
EDAD_MAXIMA = 120

_ENTERO = re.compile(r"[+-]?\d+", re.ASCII)


def validar_usuario(valor: Optional[str]) -> Optional[str]:
    texto = (valor or "").strip()
    if not texto:
        return "Por favor ingresa un nombre de usuario"
    if len(texto) < 3:
        return "El usuario debe tener al menos 3 caracteres"
    return None


def validar_nombre(valor: Optional[str]) -> Optional[str]:
    texto = (valor or "").strip()
    if not texto:
        return "Por favor ingresa el nombre"
    if len(texto) < 2:
        return "El nombre debe tener al menos 2 caracteres"
    return None


def parsear_edad(valor: Optional[str]) -> Optional[int]:
    """Convierte el texto a entero; ``None`` si no es un número entero.

    Solo acepta dígitos ASCII con signo opcional: ``"1_0"`` o ``"١٢"`` no son edades.
    """

    texto = (valor or "").strip()
    if not _ENTERO.fullmatch(texto):
        return None
    return int(texto)


def validar_edad(valor: Optional[str]) -> Optional[str]:
    texto = (valor or "").strip()
    if not texto:
        return "Por favor ingresa la edad"
    edad = parsear_edad(texto)
    if edad is None:
        return "Por favor ingresa un número válido"
    if edad < EDAD_MINIMA or edad > EDAD_MAXIMA:
        return f"La edad debe estar entre {EDAD_MINIMA} y {EDAD_MAXIMA} años"
    return None


def validar_formulario(user: Optional[str], nombre: Optional[str], edad: Optional[str]) -> dict[str, str]:
    """Valida los tres campos y devuelve solo los que tienen error."""

    errores = {
        "user": validar_usuario(user),
        "nombre": validar_nombre(nombre),
        "edad": validar_edad(edad),
    }
    return {campo: mensaje for campo, mensaje in errores.items() if mensaje}


__all__ = [
    "EDAD_MAXIMA",
    "EDAD_MINIMA",
    "parsear_edad",
    "validar_edad",
    "validar_formulario",
    "validar_nombre",
    "validar_usuario",
]
