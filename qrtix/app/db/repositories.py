# qrtix/app/db/repositories.py
"""
Data access for users, sales and login logs.

Every call against the primary store is bounded by a timeout and its
failures are translated into the ``StoreError`` hierarchy:

- nothing found          → ``None`` / ``False`` (not a fault)
- timeout                → ``StoreTimeoutError``
- unique key violated    → ``DuplicateKeyError``
- anything else          → ``StoreError``

Mutations that succeed on the primary are then replicated to the mirror
(see ``replication.replicate``), whose failures are only logged.
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from qrtix.app.core.config import Settings
from qrtix.app.db.replication import RetryPolicy, SessionOperation, replicate
from qrtix.app.db.session import Stores
from qrtix.app.models.login_log import LoginLog
from qrtix.app.models.usuario import Usuario
from qrtix.app.models.venta import ESTADO_COMPLETADO, Venta

logger = logging.getLogger(__name__)

LOGIN_LOG_FORMAT = "%Y-%m-%d %H:%M:%S"


class StoreError(Exception):
    """The primary store failed to complete an operation."""


class StoreTimeoutError(StoreError):
    """The primary store did not answer within the allowed time."""


class DuplicateKeyError(StoreError):
    """A unique key (cédula or correo) is already taken."""


class _Repository:
    def __init__(self, stores: Stores, settings: Settings):
        self.stores = stores
        self.settings = settings

    async def _primary(self, operation: SessionOperation, timeout: Optional[float] = None) -> Any:
        if timeout is None:
            timeout = self.settings.STORE_TIMEOUT_SECONDS
        try:
            async with self.stores.primary.session() as session:
                return await asyncio.wait_for(operation(session), timeout)
        except asyncio.TimeoutError as e:
            raise StoreTimeoutError(f"primary store timed out after {timeout}s") from e
        except IntegrityError as e:
            raise DuplicateKeyError(str(e.orig)) from e
        except (SQLAlchemyError, OSError) as e:
            raise StoreError(str(e)) from e

    async def _mirror(self, operation: SessionOperation, policy: RetryPolicy, description: str) -> bool:
        return await replicate(self.stores.secondary, operation, policy, description)

    @property
    def single_shot(self) -> RetryPolicy:
        return RetryPolicy.single_shot(self.settings)

    @property
    def with_retries(self) -> RetryPolicy:
        return RetryPolicy.for_updates(self.settings)


def _insert(model, values: Dict[str, Any]) -> SessionOperation:
    # A fresh ORM instance per session: the same row goes to both stores
    async def operation(session: AsyncSession) -> None:
        session.add(model(**values))
        await session.commit()
    return operation


def _update_usuario(cedula: str, values: Dict[Any, Any]) -> SessionOperation:
    async def operation(session: AsyncSession) -> int:
        result = await session.execute(
            update(Usuario).where(Usuario.cedula == cedula).values(values)
        )
        await session.commit()
        return result.rowcount
    return operation


def _delete_usuario(cedula: str) -> SessionOperation:
    async def operation(session: AsyncSession) -> int:
        result = await session.execute(delete(Usuario).where(Usuario.cedula == cedula))
        await session.commit()
        return result.rowcount
    return operation


class UsuarioRepository(_Repository):

    async def find_by_cedula(self, cedula: str, timeout: Optional[float] = None) -> Optional[Usuario]:
        async def operation(session: AsyncSession) -> Optional[Usuario]:
            result = await session.execute(select(Usuario).where(Usuario.cedula == cedula))
            return result.scalars().first()
        return await self._primary(operation, timeout)

    async def find_by_correo(self, correo: str) -> Optional[Usuario]:
        async def operation(session: AsyncSession) -> Optional[Usuario]:
            result = await session.execute(select(Usuario).where(Usuario.correo == correo))
            return result.scalars().first()
        return await self._primary(operation)

    async def insert(self, values: Dict[str, Any]) -> None:
        await self._primary(_insert(Usuario, values))
        await self._mirror(_insert(Usuario, values), self.single_shot, f"insert usuario {values['cedula']}")

    async def update(self, cedula: str, values: Dict[str, Any]) -> bool:
        """Returns False when no user has this cédula; nothing is created."""
        matched = await self._primary(_update_usuario(cedula, values))
        if not matched:
            return False
        await self._mirror(_update_usuario(cedula, values), self.with_retries, f"update usuario {cedula}")
        return True

    async def delete(self, cedula: str) -> bool:
        deleted = await self._primary(_delete_usuario(cedula))
        if not deleted:
            return False
        await self._mirror(_delete_usuario(cedula), self.single_shot, f"delete usuario {cedula}")
        return True

    async def touch_ultima_sesion(self, cedula: str, ultima_sesion: str) -> bool:
        values = {Usuario.ultima_sesion: ultima_sesion}
        matched = await self._primary(_update_usuario(cedula, values))
        if not matched:
            return False
        await self._mirror(
            _update_usuario(cedula, values), self.with_retries, f"ultima sesion {cedula}"
        )
        return True


class VentaRepository(_Repository):

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        row = dict(values)
        row["fecha"] = datetime.now(timezone.utc)
        row["estado"] = ESTADO_COMPLETADO

        await self._primary(_insert(Venta, row))
        await self._mirror(_insert(Venta, row), self.single_shot, f"venta {row['cedula']}")
        return row


class LoginLogRepository(_Repository):

    def now(self) -> str:
        return datetime.now(ZoneInfo(self.settings.LOGIN_LOG_TIMEZONE)).strftime(LOGIN_LOG_FORMAT)

    async def record(self, cedula: str) -> None:
        """
        Append a login entry to both stores.

        Best-effort everywhere: a failing primary is logged and the mirror
        is still attempted. Nothing is raised to the caller.
        """
        row = {"cedula": cedula, "fecha_hora": self.now()}

        try:
            await self._primary(_insert(LoginLog, row))
        except StoreError as e:
            logger.warning(f"⚠️ Could not write login log for {cedula} to primary store: {e}")

        await self._mirror(_insert(LoginLog, row), self.single_shot, f"login log {cedula}")
