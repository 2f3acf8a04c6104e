# app/core/database.py
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from fastapi import Request
from .config import Settings
import logging
from typing import AsyncGenerator, Any, Dict

logger = logging.getLogger(__name__)

# Base class for all models
Base = declarative_base()


def build_engine_kwargs(settings: Settings) -> Dict[str, Any]:
    engine_kwargs: Dict[str, Any] = {
        "echo": settings.DB_ECHO,
        "future": True,
        "pool_pre_ping": True,    # Check connection before using
    }
    if not settings.is_sqlite:
        # Keep the pool small but responsive
        engine_kwargs.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_timeout": settings.DB_POOL_TIMEOUT,
            "pool_recycle": 300,
        })
    if settings.DATABASE_URL.startswith("postgresql+asyncpg"):
        # Fail fast instead of hanging on connect
        engine_kwargs["connect_args"] = {"timeout": settings.STORE_TIMEOUT_SECONDS}
    return engine_kwargs


class Database:
    """Owns the engine and session factory for the lifetime of the process.

    Created when the application starts and disposed when it stops; request
    handlers reach it through ``app.state.db`` instead of a module global.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: AsyncEngine = create_async_engine(
            settings.DATABASE_URL,
            **build_engine_kwargs(settings)
        )
        self.sessionmaker = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
        )

    async def create_all(self) -> None:
        # Import models so they register on Base.metadata
        from app.models import user, session, income, expense, category  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")


# Dependency to get DB session with proper exception handling
async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    db: Database = request.app.state.db
    session = db.sessionmaker()
    try:
        yield session
    except Exception as e:
        logger.error(f"Database session error: {str(e)}")
        await session.rollback()
        raise
    finally:
        await session.close()
        logger.debug("Database session closed")
