# python
"""Database engine and session utilities.

One async engine is built per process from the configured URL. Requests get
their own ``AsyncSession`` through :func:`get_db`; ORM classes share the
``Base`` declared in ``models``.
"""
import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings
from models import Base

logger = logging.getLogger(__name__)


def resolve_database_url() -> str:
    url = settings.active_database_url
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not configured. Set it in the environment or .env file "
            "(e.g., DATABASE_URL=sqlite+aiosqlite:///./fiber_tracker.db)."
        )
    return url


DB_URL = resolve_database_url()

# aiosqlite connections are handed between threads by the driver
_connect_args = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}

engine = create_async_engine(DB_URL, echo=settings.db_echo, connect_args=_connect_args)

AsyncSessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, Any]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created/verified")


async def close_db() -> None:
    await engine.dispose()
