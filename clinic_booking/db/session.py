from sqlalchemy.ext.asyncio import AsyncSession
from typing import AsyncGenerator, Callable, Optional
from contextlib import asynccontextmanager
import logging

from clinic_booking.config.settings import settings
from clinic_booking.db.base import get_engine, get_session_factory

logger = logging.getLogger(__name__)

# Global variable to hold the session factory
_global_session_factory: Optional[Callable[[], AsyncSession]] = None

def set_global_session_factory(factory):
    """Sets the globally accessible session factory. Called once at startup."""
    global _global_session_factory
    _global_session_factory = factory
    logger.info("Global SQLAlchemy session factory has been set.")


async def init_database(database_url: Optional[str] = None):
    """
    Build the engine for ``database_url`` (default: settings) and register its
    session factory globally. Returns the engine so the caller can dispose it.
    """
    engine = await get_engine(
        database_url or settings.database_url, echo=settings.database_echo
    )
    set_global_session_factory(await get_session_factory(engine))
    return engine


# Context manager for scripts that need database access
@asynccontextmanager
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a DB session using the globally set factory.
    """
    if _global_session_factory is None:
        logger.error("Global session factory accessed before being set.")
        raise RuntimeError("Database session factory not initialized globally.")

    async with _global_session_factory() as session:
        try:
            yield session
        except Exception:
            logger.exception("Error occurred within db_session context")
            await session.rollback()
            raise
