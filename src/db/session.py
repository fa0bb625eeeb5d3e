"""
Database engine and session management
"""
import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.core.config import settings


logger = logging.getLogger(__name__)


def _engine_options() -> dict:
    options: dict = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if not settings.DATABASE_URI.startswith("sqlite"):
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_MAX_OVERFLOW
    return options


engine = create_async_engine(settings.DATABASE_URI, **_engine_options())

async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session per request, committing on success

    The request's writes, including any row locks taken by the usage gate,
    live in this one transaction.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            logger.debug("Rolling back request transaction")
            await session.rollback()
            raise
