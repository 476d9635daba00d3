"""SQLAlchemy declarative base and async engine/session factories."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from report_extractor.config import DatabaseSettings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def create_engine(db_settings: DatabaseSettings) -> AsyncEngine:
    """Create an async engine from database settings.

    Args:
        db_settings: Connection URL and pool settings

    Returns:
        AsyncEngine: Configured engine
    """
    url = db_settings.connection_url
    engine_kwargs = {"echo": db_settings.echo, "future": True}
    if url.startswith("postgresql"):
        engine_kwargs.update(
            pool_size=db_settings.pool_size,
            max_overflow=db_settings.max_overflow,
        )
    return create_async_engine(url, **engine_kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create the async session factory bound to ``engine``."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
