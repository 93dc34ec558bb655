# qrtix/app/db/replication.py
"""
Best-effort replication to the local mirror.

Writes reach the primary store first; once it has succeeded the same
operation is attempted against the mirror. Mirror outcomes go to the log
only, they never change the response sent to the caller.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from qrtix.app.core.config import Settings
from qrtix.app.db.session import Store

logger = logging.getLogger(__name__)

SessionOperation = Callable[[AsyncSession], Awaitable[object]]


@dataclass(frozen=True)
class RetryPolicy:
    """
    How hard to try a mirror write.

    The store is probed before every attempt; a failed probe consumes the
    attempt without running the operation. Delays are fixed, not exponential.
    """
    max_attempts: int = 1
    delay: float = 0.0
    probe_timeout: float = 5.0
    timeout: float = 5.0

    @classmethod
    def single_shot(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=1,
            probe_timeout=settings.MIRROR_PROBE_TIMEOUT_SECONDS,
            timeout=settings.MIRROR_TIMEOUT_SECONDS,
        )

    @classmethod
    def for_updates(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.MIRROR_UPDATE_ATTEMPTS,
            delay=settings.MIRROR_RETRY_DELAY_SECONDS,
            probe_timeout=settings.MIRROR_PROBE_TIMEOUT_SECONDS,
            timeout=settings.MIRROR_TIMEOUT_SECONDS,
        )


async def replicate(
        store: Optional[Store],
        operation: SessionOperation,
        policy: RetryPolicy,
        description: str,
) -> bool:
    """
    Run ``operation`` against the mirror following ``policy``.

    Returns True when one attempt succeeded. Never raises for store
    faults: unreachable mirrors, timeouts and write errors are logged.
    """
    if store is None:
        return False

    for attempt in range(1, policy.max_attempts + 1):
        if attempt > 1 and policy.delay > 0:
            await asyncio.sleep(policy.delay)

        if not await store.ping(policy.probe_timeout):
            logger.info(
                f"Mirror not responding, skipped {description} "
                f"(attempt {attempt} of {policy.max_attempts})"
            )
            continue

        try:
            async with store.session() as session:
                await asyncio.wait_for(operation(session), policy.timeout)
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            logger.warning(
                f"Mirror write failed for {description} "
                f"(attempt {attempt} of {policy.max_attempts}): {e!r}"
            )
            continue

        logger.info(f"✅ Mirror updated: {description}")
        return True

    if policy.max_attempts > 1:
        logger.info(f"Could not replicate {description} after {policy.max_attempts} attempts")
    return False
