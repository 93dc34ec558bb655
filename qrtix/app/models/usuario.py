# qrtix/app/models/usuario.py
from sqlalchemy import Column, String, Text

from qrtix.app.db.base import Base


class Usuario(Base):
    __tablename__ = "usuarios"

    # Cédula is the identity of a user in both stores
    cedula = Column(String(12), primary_key=True)

    nombres = Column(String(100), nullable=False)
    apellidos = Column(String(100), nullable=False)
    correo = Column(String(255), unique=True, index=True, nullable=False)
    telefono = Column(String(15), nullable=False)

    # bcrypt hash, never the raw password
    contrasena = Column(String(255), nullable=False)

    # Reference photo for facial verification (base64 payload)
    foto = Column(Text, nullable=False)

    # Stored exactly as the client sends it
    ultima_sesion = Column("ultimaSesion", String(64), nullable=True)
