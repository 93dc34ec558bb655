# qrtix/app/schemas/auth.py
"""
Schemas for the login and identity-check endpoints.

These endpoints answer with a ``success`` flag, plus ``mensaje`` on
success or ``error`` on failure.
"""
from pydantic import BaseModel, ConfigDict, Field

from qrtix.app.schemas.common import RequestBody


class LoginIn(RequestBody):
    cedula: str = ""
    contrasena: str = ""
    foto: str = ""


class VerificarCorreoIn(RequestBody):
    email: str = ""


class VerificarRostroIn(RequestBody):
    cedula: str = ""
    foto: str = ""


class UltimaSesionIn(RequestBody):
    model_config = ConfigDict(populate_by_name=True)

    cedula: str = ""
    ultima_sesion: str = Field(default="", alias="ultimaSesion")


class SuccessResponse(BaseModel):
    success: bool
    mensaje: str


class CorreoVerificadoResponse(BaseModel):
    success: bool
    cedula: str
