# qrtix/app/api/router.py
from fastapi import APIRouter

from qrtix.app.api.endpoints import auth, usuarios, ventas

api_router = APIRouter()
api_router.include_router(usuarios.router, tags=["usuarios"])
api_router.include_router(auth.router, tags=["auth"])
api_router.include_router(ventas.router, tags=["ventas"])
