from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from loguru import logger

from academy.core import config as settings
from academy.core.db import Base
from academy.core.db import session as db_session


async def create_tables() -> None:
    """
    Create the registrations table when it does not exist yet.
    Production databases are expected to be migrated ahead of time.
    """
    if db_session.engine is None:
        logger.warning("Skipping table creation: no database configured")
        return
    # Make sure the models are registered on Base.metadata
    import academy.api.models.registration  # noqa: F401

    async with db_session.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables are in place")


async def dispose_engine() -> None:
    if db_session.engine is not None:
        await db_session.engine.dispose()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.CREATE_TABLES:
        await create_tables()
    yield
    await dispose_engine()
