# qrtix/app/security/validation.py
"""
Field-level validation of user records.

``validate_usuario`` returns a mapping of field name to a message shown to
the end user (Spanish). An empty mapping means the record is valid. Only
the first failing rule of each field is reported.
"""
import re
from typing import Dict, Protocol

NOMBRE_RE = re.compile(r"^[a-zA-ZáéíóúÁÉÍÓÚñÑ\s]+$")
DIGITOS_RE = re.compile(r"^[0-9]+$")
CORREO_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Accepted password symbols
SIMBOLOS = '!@#$%^&*(),.?":{}|<>'

MIN_NOMBRE = 2
MIN_CEDULA, MAX_CEDULA = 5, 12
MIN_TELEFONO, MAX_TELEFONO = 7, 15
MIN_CONTRASENA = 8


class UsuarioLike(Protocol):
    nombres: str
    apellidos: str
    cedula: str
    correo: str
    telefono: str
    contrasena: str
    foto: str


def _validar_nombre(valor: str, campo: str) -> str:
    valor = valor.strip()
    if not valor:
        return f"El {campo} es obligatorio"
    if not NOMBRE_RE.match(valor):
        return f"El {campo} solo debe contener letras"
    if len(valor) < MIN_NOMBRE:
        return f"El {campo} debe tener al menos {MIN_NOMBRE} caracteres"
    return ""


def _validar_cedula(valor: str) -> str:
    valor = valor.strip()
    if not valor:
        return "La cédula es obligatoria"
    if not DIGITOS_RE.match(valor):
        return "La cédula solo debe contener números"
    if not MIN_CEDULA <= len(valor) <= MAX_CEDULA:
        return f"La cédula debe tener entre {MIN_CEDULA} y {MAX_CEDULA} dígitos"
    return ""


def _validar_correo(valor: str) -> str:
    valor = valor.strip()
    if not valor:
        return "El correo electrónico es obligatorio"
    if not CORREO_RE.match(valor):
        return "Ingrese un correo electrónico válido"
    return ""


def _validar_telefono(valor: str) -> str:
    valor = valor.strip()
    if not valor:
        return "El teléfono es obligatorio"
    if not DIGITOS_RE.match(valor):
        return "El teléfono solo debe contener números"
    if not MIN_TELEFONO <= len(valor) <= MAX_TELEFONO:
        return f"El teléfono debe tener entre {MIN_TELEFONO} y {MAX_TELEFONO} dígitos"
    return ""


def validar_contrasena(valor: str) -> str:
    """Empty string when the password is acceptable, otherwise the reason."""
    if not valor:
        return "La contraseña es obligatoria"
    if len(valor) < MIN_CONTRASENA:
        return f"La contraseña debe tener al menos {MIN_CONTRASENA} caracteres"

    tiene_minuscula = any(c.islower() and c.isascii() for c in valor)
    tiene_mayuscula = any(c.isupper() and c.isascii() for c in valor)
    tiene_numero = any(c in "0123456789" for c in valor)
    tiene_simbolo = any(c in SIMBOLOS for c in valor)

    if not (tiene_minuscula and tiene_mayuscula and tiene_numero and tiene_simbolo):
        return (
            "La contraseña debe contener al menos una letra minúscula, "
            "una mayúscula, un número y un carácter especial"
        )
    return ""


def validate_usuario(usuario: UsuarioLike) -> Dict[str, str]:
    checks = {
        "nombres": _validar_nombre(usuario.nombres, "nombre"),
        "apellidos": _validar_nombre(usuario.apellidos, "apellido"),
        "cedula": _validar_cedula(usuario.cedula),
        "correo": _validar_correo(usuario.correo),
        "telefono": _validar_telefono(usuario.telefono),
        "contrasena": validar_contrasena(usuario.contrasena),
        "foto": "" if usuario.foto.strip() else "La foto es obligatoria",
    }
    return {campo: mensaje for campo, mensaje in checks.items() if mensaje}
