# qrtix/app/api/endpoints/usuarios.py
"""
User CRUD endpoints.

- POST   /registro           - register a new user
- POST   /obtener-usuario    - fetch a user by cédula
- PUT    /actualizar-usuario - replace a user's data
- DELETE /eliminar-usuario   - delete a user by cédula

Every write goes to the primary store first; the local mirror is updated
afterwards on a best-effort basis and never affects the response.
"""
import logging

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from qrtix.app.api import deps
from qrtix.app.api.errors import DATOS_INVALIDOS, status_error
from qrtix.app.core.config import Settings
from qrtix.app.db.repositories import (
    DuplicateKeyError,
    StoreError,
    StoreTimeoutError,
    UsuarioRepository,
)
from qrtix.app.schemas.common import StatusResponse
from qrtix.app.schemas.usuario import (
    CedulaIn,
    UsuarioDataResponse,
    UsuarioIn,
    UsuarioOut,
)
from qrtix.app.security import hashing
from qrtix.app.security.validation import validate_usuario

logger = logging.getLogger(__name__)

router = APIRouter()


async def _user_values(usuario_in: UsuarioIn) -> dict:
    # bcrypt is CPU-bound; hash in a worker thread
    contrasena = await run_in_threadpool(hashing.get_password_hash, usuario_in.contrasena)
    return {
        "nombres": usuario_in.nombres.strip(),
        "apellidos": usuario_in.apellidos.strip(),
        "correo": usuario_in.correo.strip(),
        "telefono": usuario_in.telefono.strip(),
        "contrasena": contrasena,
        "foto": usuario_in.foto,
    }


@router.post("/registro", response_model=StatusResponse)
async def registrar_usuario(
        usuario_in: UsuarioIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
):
    errores = validate_usuario(usuario_in)
    if errores:
        logger.error(f"❌ Validation failed: {errores}")
        return status_error(status.HTTP_400_BAD_REQUEST, DATOS_INVALIDOS, errores)

    cedula = usuario_in.cedula.strip()
    correo = usuario_in.correo.strip()

    try:
        existente = await usuarios.find_by_cedula(cedula)
    except StoreError as e:
        logger.error(f"❌ Could not check existing cedula: {e}")
        return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al verificar usuario existente")
    if existente:
        logger.error(f"❌ A user with cedula {cedula} already exists")
        return status_error(status.HTTP_409_CONFLICT, "Ya existe un usuario con esta cédula")

    try:
        existente = await usuarios.find_by_correo(correo)
    except StoreError as e:
        logger.error(f"❌ Could not check existing correo: {e}")
        return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al verificar correo existente")
    if existente:
        logger.error(f"❌ A user with correo {correo} already exists")
        return status_error(status.HTTP_409_CONFLICT, "Ya existe un usuario con este correo electrónico")

    values = await _user_values(usuario_in)
    values["cedula"] = cedula

    try:
        await usuarios.insert(values)
    except DuplicateKeyError:
        # Lost a race with a concurrent registration
        return status_error(status.HTTP_409_CONFLICT, "Ya existe un usuario con esta cédula o correo")
    except StoreError as e:
        logger.error(f"❌ Could not insert user in primary store: {e}")
        return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al registrar usuario")

    logger.info(f"✅ User registered: {cedula}")
    return StatusResponse(status="success", mensaje="Usuario registrado con éxito")


@router.post("/obtener-usuario", response_model=UsuarioDataResponse)
async def obtener_usuario(
        datos: CedulaIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
        settings: Settings = Depends(deps.get_app_settings),
):
    cedula = datos.cedula.strip()
    if not cedula:
        logger.error("❌ Empty cedula")
        return status_error(status.HTTP_400_BAD_REQUEST, "La cédula no puede estar vacía")

    logger.info(f"Looking up user {cedula}")
    try:
        usuario = await usuarios.find_by_cedula(cedula, timeout=settings.STORE_LOOKUP_TIMEOUT_SECONDS)
    except StoreTimeoutError as e:
        logger.error(f"❌ Timed out looking up user: {e}")
        return status_error(
            status.HTTP_504_GATEWAY_TIMEOUT,
            "El servidor tardó demasiado en responder. Por favor, intente nuevamente",
        )
    except StoreError as e:
        logger.error(f"❌ Could not look up user: {e}")
        return status_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Error interno al buscar usuario. Por favor, intente más tarde",
        )

    if usuario is None:
        logger.info(f"No user found for cedula {cedula}")
        return status_error(status.HTTP_404_NOT_FOUND, "No se encontró ningún usuario con esa cédula")

    return UsuarioDataResponse(status="success", data=UsuarioOut.model_validate(usuario))


@router.put("/actualizar-usuario", response_model=StatusResponse)
async def actualizar_usuario(
        usuario_in: UsuarioIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
):
    errores = validate_usuario(usuario_in)
    if errores:
        logger.error(f"❌ Validation failed: {errores}")
        return status_error(status.HTTP_400_BAD_REQUEST, DATOS_INVALIDOS, errores)

    cedula = usuario_in.cedula.strip()
    correo = usuario_in.correo.strip()

    try:
        existente = await usuarios.find_by_cedula(cedula)
    except StoreError as e:
        logger.error(f"❌ Could not look up user: {e}")
        return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al buscar usuario")
    if existente is None:
        logger.error(f"❌ No user with cedula {cedula}")
        return status_error(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")

    # Only an email change can collide with another user
    if correo != existente.correo:
        try:
            otro = await usuarios.find_by_correo(correo)
        except StoreError as e:
            logger.error(f"❌ Could not check existing correo: {e}")
            return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al verificar correo existente")
        if otro is not None and otro.cedula != cedula:
            logger.error(f"❌ Correo {correo} already belongs to another user")
            return status_error(
                status.HTTP_409_CONFLICT, "El correo electrónico ya está en uso por otro usuario"
            )

    try:
        actualizado = await usuarios.update(cedula, await _user_values(usuario_in))
    except DuplicateKeyError:
        return status_error(status.HTTP_409_CONFLICT, "El correo electrónico ya está en uso por otro usuario")
    except StoreError as e:
        logger.error(f"❌ Could not update user in primary store: {e}")
        return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al actualizar usuario")

    if not actualizado:
        return status_error(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")

    logger.info(f"✅ User updated: {cedula}")
    return StatusResponse(status="success", mensaje="Usuario actualizado con éxito")


@router.delete("/eliminar-usuario", response_model=StatusResponse)
async def eliminar_usuario(
        datos: CedulaIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
):
    cedula = datos.cedula.strip()

    try:
        eliminado = await usuarios.delete(cedula)
    except StoreError as e:
        logger.error(f"❌ Could not delete user in primary store: {e}")
        return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al eliminar usuario")

    if not eliminado:
        return status_error(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")

    logger.info(f"✅ User deleted: {cedula}")
    return StatusResponse(status="success", mensaje="Usuario eliminado con éxito")
