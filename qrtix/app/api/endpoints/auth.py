# qrtix/app/api/endpoints/auth.py
"""
Login and identity checks.

- POST /login                    - cédula + password + face photo
- POST /verificar-correo         - resolve an email to its cédula
- POST /verificar-rostro         - face-only verification
- PUT  /actualizar-ultima-sesion - store the client's last-session timestamp

Login runs its checks in order and stops at the first failure. A missing
user and a wrong password get the same message so callers cannot tell
which one failed. Failed attempts never modify stored data.
"""
import logging

from fastapi import APIRouter, Depends, status
from starlette.concurrency import run_in_threadpool

from qrtix.app.api import deps
from qrtix.app.api.errors import flag_error
from qrtix.app.db.repositories import LoginLogRepository, StoreError, UsuarioRepository
from qrtix.app.schemas.auth import (
    CorreoVerificadoResponse,
    LoginIn,
    SuccessResponse,
    UltimaSesionIn,
    VerificarCorreoIn,
    VerificarRostroIn,
)
from qrtix.app.security import hashing
from qrtix.app.services.face_match import FaceMatchClient

logger = logging.getLogger(__name__)

router = APIRouter()

CREDENCIALES_INVALIDAS = "Cédula o contraseña incorrecta"
ROSTRO_NO_COINCIDE = "Verificación facial fallida"


@router.post("/login", response_model=SuccessResponse)
async def iniciar_sesion(
        login_in: LoginIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
        login_logs: LoginLogRepository = Depends(deps.get_login_logs),
        face_matcher: FaceMatchClient = Depends(deps.get_face_matcher),
):
    cedula = login_in.cedula.strip()

    try:
        usuario = await usuarios.find_by_cedula(cedula)
    except StoreError as e:
        logger.error(f"❌ Could not look up user {cedula}: {e}")
        usuario = None

    if usuario is None:
        logger.error(f"❌ No user for cedula {cedula}")
        return flag_error(status.HTTP_401_UNAUTHORIZED, CREDENCIALES_INVALIDAS)

    if not await run_in_threadpool(hashing.verify_password, login_in.contrasena, usuario.contrasena):
        logger.error(f"❌ Wrong password for cedula {cedula}")
        return flag_error(status.HTTP_401_UNAUTHORIZED, CREDENCIALES_INVALIDAS)

    if not await face_matcher.compare(usuario.foto, login_in.foto):
        logger.error(f"❌ Face verification failed for cedula {cedula}")
        return flag_error(status.HTTP_401_UNAUTHORIZED, ROSTRO_NO_COINCIDE)

    await login_logs.record(cedula)

    logger.info(f"✅ Login successful for cedula {cedula}")
    return SuccessResponse(success=True, mensaje="Inicio de sesión exitoso")


@router.post("/verificar-correo", response_model=CorreoVerificadoResponse)
async def verificar_correo(
        datos: VerificarCorreoIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
):
    email = datos.email.strip()
    if not email:
        logger.error("❌ Empty email")
        return flag_error(status.HTTP_400_BAD_REQUEST, "El email no puede estar vacío")

    try:
        usuario = await usuarios.find_by_correo(email)
    except StoreError as e:
        logger.error(f"❌ Could not look up email: {e}")
        return flag_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno al buscar usuario")

    if usuario is None:
        logger.info(f"No user for email {email}")
        return flag_error(status.HTTP_404_NOT_FOUND, "No se encontró ningún usuario con ese correo")

    return CorreoVerificadoResponse(success=True, cedula=usuario.cedula)


@router.post("/verificar-rostro", response_model=SuccessResponse)
async def verificar_rostro(
        datos: VerificarRostroIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
        face_matcher: FaceMatchClient = Depends(deps.get_face_matcher),
):
    cedula = datos.cedula.strip()
    if not cedula or not datos.foto.strip():
        logger.error("❌ Empty cedula or photo")
        return flag_error(status.HTTP_400_BAD_REQUEST, "La cédula y la foto no pueden estar vacías")

    try:
        usuario = await usuarios.find_by_cedula(cedula)
    except StoreError as e:
        logger.error(f"❌ Could not look up user {cedula}: {e}")
        return flag_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno al buscar usuario")

    if usuario is None:
        logger.info(f"No user for cedula {cedula}")
        return flag_error(status.HTTP_404_NOT_FOUND, "No se encontró ningún usuario con esa cédula")

    if not await face_matcher.compare(usuario.foto, datos.foto):
        logger.error(f"❌ Face verification failed for cedula {cedula}")
        return flag_error(status.HTTP_401_UNAUTHORIZED, ROSTRO_NO_COINCIDE)

    logger.info(f"✅ Face verified for cedula {cedula}")
    return SuccessResponse(success=True, mensaje="Verificación facial exitosa")


@router.put("/actualizar-ultima-sesion", response_model=SuccessResponse)
async def actualizar_ultima_sesion(
        datos: UltimaSesionIn,
        usuarios: UsuarioRepository = Depends(deps.get_usuarios),
):
    cedula = datos.cedula.strip()
    ultima_sesion = datos.ultima_sesion.strip()
    if not cedula or not ultima_sesion:
        logger.error("❌ Empty cedula or last-session date")
        return flag_error(
            status.HTTP_400_BAD_REQUEST,
            "La cédula y la fecha de última sesión no pueden estar vacías",
        )

    try:
        actualizado = await usuarios.touch_ultima_sesion(cedula, ultima_sesion)
    except StoreError as e:
        logger.error(f"❌ Could not update last session in primary store: {e}")
        return flag_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al actualizar última sesión")

    if not actualizado:
        return flag_error(status.HTTP_404_NOT_FOUND, "Usuario no encontrado")

    logger.info(f"✅ Last session updated for cedula {cedula}")
    return SuccessResponse(success=True, mensaje="Última sesión actualizada con éxito")
