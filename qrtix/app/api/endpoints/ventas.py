# qrtix/app/api/endpoints/ventas.py
import logging

from fastapi import APIRouter, Depends, status

from qrtix.app.api import deps
from qrtix.app.api.errors import status_error
from qrtix.app.db.repositories import StoreError, VentaRepository
from qrtix.app.schemas.common import StatusResponse
from qrtix.app.schemas.venta import VentaIn

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/ventas", response_model=StatusResponse)
async def registrar_venta(
        venta_in: VentaIn,
        ventas: VentaRepository = Depends(deps.get_ventas),
):
    if venta_in.faltan_campos():
        return status_error(status.HTTP_400_BAD_REQUEST, "Todos los campos son obligatorios")

    try:
        await ventas.insert(venta_in.model_dump())
    except StoreError as e:
        logger.error(f"❌ Could not insert sale in primary store: {e}")
        return status_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error al registrar la venta")

    logger.info(f"✅ Sale registered for cedula {venta_in.cedula}")
    return StatusResponse(status="success", mensaje="Venta registrada exitosamente")
