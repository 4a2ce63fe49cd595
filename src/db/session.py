import logging
from typing import Any, AsyncGenerator, Dict

from sqlalchemy import NullPool
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

import src.model  # noqa: F401  registers all models on Base.metadata
from src.config import Settings, get_settings
from src.model.base import Base

logger = logging.getLogger(__name__)

# Only a local database gets its tables created on startup; elsewhere the schema is managed outside the app
SCHEMA_AUTO_CREATE_ENVIRONMENTS = ("development",)


def engine_options(settings: Settings) -> Dict[str, Any]:
    """SQL echo is opt-in and never enabled in production"""
    return {
        "echo": settings.database_echo and settings.environment != "production",
        "poolclass": NullPool,
    }


def should_create_schema(settings: Settings) -> bool:
    return settings.environment in SCHEMA_AUTO_CREATE_ENVIRONMENTS


settings = get_settings()
engine = create_async_engine(settings.database_url, **engine_options(settings))
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    if not should_create_schema(settings):
        logger.info(f"Skipping schema creation in '{settings.environment}' environment")
        return
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema created")


async def close_db():
    await engine.dispose()
