# qrtix/app/api/deps.py
"""
Dependencies shared by the endpoints.

Long-lived resources (stores, Face++ client, settings) are created in the
application lifespan and kept on ``app.state``; handlers receive them
through ``Depends`` so tests can override any of them.
"""
from fastapi import Depends, Request

from qrtix.app.core.config import Settings
from qrtix.app.db.repositories import LoginLogRepository, UsuarioRepository, VentaRepository
from qrtix.app.db.session import Stores
from qrtix.app.services.face_match import FaceMatchClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_stores(request: Request) -> Stores:
    return request.app.state.stores


def get_face_matcher(request: Request) -> FaceMatchClient:
    return request.app.state.face_matcher


def get_usuarios(
        stores: Stores = Depends(get_stores),
        settings: Settings = Depends(get_app_settings),
) -> UsuarioRepository:
    return UsuarioRepository(stores, settings)


def get_ventas(
        stores: Stores = Depends(get_stores),
        settings: Settings = Depends(get_app_settings),
) -> VentaRepository:
    return VentaRepository(stores, settings)


def get_login_logs(
        stores: Stores = Depends(get_stores),
        settings: Settings = Depends(get_app_settings),
) -> LoginLogRepository:
    return LoginLogRepository(stores, settings)
