# qrtix/app/schemas/usuario.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from qrtix.app.schemas.common import RequestBody


# Body of /registro and /actualizar-usuario.
# Missing fields default to "" so validation can report them per field.
class UsuarioIn(RequestBody):
    nombres: str = ""
    apellidos: str = ""
    cedula: str = ""
    correo: str = ""
    telefono: str = ""
    contrasena: str = ""
    foto: str = ""


class CedulaIn(RequestBody):
    cedula: str = ""


# Returned by /obtener-usuario (the password never leaves the server)
class UsuarioOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    nombres: str
    apellidos: str
    cedula: str
    correo: str
    telefono: str
    foto: str
    ultima_sesion: Optional[str] = Field(default=None, alias="ultimaSesion")


class UsuarioDataResponse(BaseModel):
    status: str
    data: UsuarioOut
