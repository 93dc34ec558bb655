# qrtix/app/models/login_log.py
from sqlalchemy import Column, Integer, String

from qrtix.app.db.base import Base


class LoginLog(Base):
    """Append-only record of a successful login."""
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cedula = Column(String(12), index=True, nullable=False)

    # "YYYY-MM-DD HH:MM:SS" in the configured login time zone
    fecha_hora = Column(String(19), nullable=False)
