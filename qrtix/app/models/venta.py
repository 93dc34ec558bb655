# qrtix/app/models/venta.py
from sqlalchemy import Column, DateTime, Float, Integer, String

from qrtix.app.db.base import Base

ESTADO_COMPLETADO = "completado"


class Venta(Base):
    __tablename__ = "ventas"

    id = Column(Integer, primary_key=True, autoincrement=True)

    nombre = Column(String(200), nullable=False)
    cedula = Column(String(12), index=True, nullable=False)
    telefono = Column(String(15), nullable=False)
    direccion = Column(String(255), nullable=False, default="")
    correo = Column(String(255), nullable=False)
    zona = Column(String(100), nullable=False)

    cantidad = Column(Integer, nullable=False)
    total = Column(Float, nullable=False)

    # Assigned by the server at insert time, same value in both stores
    fecha = Column(DateTime(timezone=True), nullable=False)

    # Sales are created already settled; there is no state machine
    estado = Column(String(20), nullable=False, default=ESTADO_COMPLETADO)
