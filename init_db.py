import argparse
import asyncio
import logging
import sys

from qrtix.app.core.config import settings
from qrtix.app.db.session import open_stores
# Import models so the engine sees their metadata
from qrtix.app.models import LoginLog, Usuario, Venta  # noqa: F401

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_models(reset: bool = False) -> None:
    stores = await open_stores(settings)
    try:
        targets = [stores.primary]
        if stores.secondary is not None:
            targets.append(stores.secondary)

        # open_stores has already created the tables
        for store in targets:
            if reset:
                # DEV MODE ONLY: wipes every table
                await store.drop_all()
                await store.create_all()
            logger.info(f"✅ Tables ready in store '{store.name}'")
    finally:
        await stores.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the QRTix tables in both stores.")
    parser.add_argument("--reset", action="store_true", help="drop existing tables first")
    args = parser.parse_args()

    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(init_models(reset=args.reset))
