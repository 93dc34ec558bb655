# qrtix/app/db/base.py
"""
SQLAlchemy declarative base.

Both the primary store and the local mirror are created from this
metadata, so the two always share the same schema.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Usage:
        class Usuario(Base):
            __tablename__ = "usuarios"
            cedula = Column(String(12), primary_key=True)
            ...
    """
    pass
