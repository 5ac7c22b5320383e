#!/usr/bin/env python3
"""
Initialize database tables.

Creates every table known to the models (checkfirst), for local setups
that do not run Alembic. Production schemas are managed with
`alembic upgrade head`.
"""

import argparse
import asyncio

from loguru import logger

from app.config.database import create_engine
from app.config.settings import settings
from app.models import Base
from app.utils.logging import setup_logging


async def init_database(drop_existing: bool = False) -> None:
    """
    Create all database tables.

    Args:
        drop_existing: Drop all tables first
    """
    logger.info(f"Connecting to database ({settings.environment})...")
    engine = create_engine()

    try:
        async with engine.begin() as conn:
            if drop_existing:
                logger.warning("Dropping existing tables...")
                await conn.run_sync(Base.metadata.drop_all)

            logger.info("Creating tables (checkfirst=True)...")
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    finally:
        await engine.dispose()

    logger.success(
        f"Database tables created: {', '.join(sorted(Base.metadata.tables))}"
    )


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument(
        "--drop",
        action="store_true",
        help="Drop existing tables before creating them",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(init_database(drop_existing=args.drop))
