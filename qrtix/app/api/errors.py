# qrtix/app/api/errors.py
"""
Error responses.

Two body shapes coexist because the web client reads them that way:
- ``{"status": "error", "mensaje": ...}`` for user CRUD and sales
- ``{"success": false, "error": ...}`` for login and identity checks
"""
import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

DATOS_INVALIDOS = "Datos inválidos"

FLAG_STYLE_PATHS = {
    "/login",
    "/verificar-correo",
    "/verificar-rostro",
    "/actualizar-ultima-sesion",
}

# Endpoints whose malformed-body message is not the generic one
MALFORMED_MESSAGES = {
    "/obtener-usuario": "Por favor, ingrese una cédula válida",
    "/eliminar-usuario": "Cédula inválida",
}


def status_error(
        status_code: int,
        mensaje: str,
        errores: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content = {"status": "error", "mensaje": mensaje}
    if errores:
        content["errores"] = errores
    return JSONResponse(status_code=status_code, content=content)


def flag_error(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def request_validation_exception_handler(
        request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Unparsable JSON or wrongly typed fields: 400 in the endpoint's own shape."""
    path = request.url.path
    logger.error(f"❌ Invalid JSON body on {path}: {exc.errors()}")

    if path in FLAG_STYLE_PATHS:
        return flag_error(status.HTTP_400_BAD_REQUEST, DATOS_INVALIDOS)
    return status_error(status.HTTP_400_BAD_REQUEST, MALFORMED_MESSAGES.get(path, DATOS_INVALIDOS))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
