# qrtix/app/db/session.py
"""
Async database stores for SQLAlchemy.

The service writes to two databases:
- the primary store (authoritative, usually PostgreSQL via asyncpg)
- an optional local mirror (best-effort, PostgreSQL or SQLite via aiosqlite)

Each one is wrapped in a ``Store`` holding its own engine and session
factory. Both are opened once in the application lifespan and disposed
on shutdown; handlers receive them through dependencies.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, AsyncAdaptedQueuePool

from qrtix.app.core.config import Settings
from qrtix.app.db.base import Base

logger = logging.getLogger(__name__)


def _create_async_engine(url: str, echo: bool = False) -> AsyncEngine:
    """
    Create and configure an async SQLAlchemy engine.

    SQLite:
    - Uses NullPool (SQLite doesn't support connection pooling well)
    - check_same_thread=False for async compatibility

    PostgreSQL:
    - AsyncAdaptedQueuePool, pool_size=5, max_overflow=10
    - pool_pre_ping=True: validate connections before use
    - pool_recycle=300: hosted databases close idle connections
    """
    if "sqlite" in url.lower():
        return create_async_engine(
            url,
            echo=echo,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        url,
        echo=echo,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
    )


class Store:
    """One database: engine, session factory and a liveness probe."""

    def __init__(self, name: str, url: str, echo: bool = False):
        self.name = name
        self.engine: AsyncEngine = _create_async_engine(url, echo)
        # expire_on_commit=False: rows stay readable after the session closes
        self.sessionmaker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def _select_one(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def ping(self, timeout: float) -> bool:
        """
        Liveness probe.

        Returns False instead of raising; callers decide whether an
        unreachable store is fatal (primary) or merely skipped (mirror).
        """
        try:
            await asyncio.wait_for(self._select_one(), timeout)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.info(f"Store '{self.name}' not reachable: {e!r}")
            return False
        return True

    async def create_all(self) -> None:
        """Create every table registered on Base.metadata (models must be imported)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


@dataclass
class Stores:
    """The authoritative primary store and the optional mirror."""
    primary: Store
    secondary: Optional[Store] = None

    async def close(self) -> None:
        await self.primary.dispose()
        if self.secondary is not None:
            await self.secondary.dispose()


async def open_stores(settings: Settings) -> Stores:
    """
    Open both stores and create their tables.

    The primary must answer a ping and accept its tables or startup fails.
    The mirror is optional: when it is not configured, cannot be reached
    or cannot create its tables it is disabled for the lifetime of the
    process.
    """
    primary = Store("primary", settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
    if not await primary.ping(settings.STORE_LOOKUP_TIMEOUT_SECONDS):
        await primary.dispose()
        raise RuntimeError("Primary store is not reachable")
    await primary.create_all()
    logger.info("✅ Connected to primary store")

    if not settings.has_mirror:
        logger.warning("LOCAL_DATABASE_URL is not set, running with the primary store only")
        return Stores(primary=primary)

    secondary = Store("mirror", settings.LOCAL_DATABASE_URL, echo=settings.DATABASE_ECHO)
    if not await secondary.ping(settings.MIRROR_TIMEOUT_SECONDS):
        await secondary.dispose()
        logger.info("Local mirror not available, replication disabled")
        return Stores(primary=primary)

    try:
        await asyncio.wait_for(secondary.create_all(), settings.MIRROR_TIMEOUT_SECONDS)
    except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
        await secondary.dispose()
        logger.info(f"Local mirror could not create its tables, replication disabled: {e!r}")
        return Stores(primary=primary)

    logger.info("✅ Connected to local mirror")
    return Stores(primary=primary, secondary=secondary)
