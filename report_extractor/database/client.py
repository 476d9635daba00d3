"""Connection checks and schema creation for the report store."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from report_extractor.database.base import Base
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)


class DatabaseClient:
    """Owns an async engine for the lifetime of one process or command."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def connect(self) -> bool:
        """Round-trip ``SELECT 1`` to verify the database is reachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            LOGGER.error("Database is not reachable", exc_info=True)
            raise
        LOGGER.info("Database is reachable", extra={"dialect": self.engine.dialect.name})
        return True

    async def create_tables(self) -> None:
        """Create documents, company_profiles and financial_metrics if missing."""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception:
            LOGGER.error("Failed to create tables", exc_info=True)
            raise
        LOGGER.info("Tables ready", extra={"tables": sorted(Base.metadata.tables)})

    async def disconnect(self) -> None:
        """Dispose the engine's connection pool."""
        await self.engine.dispose()
        LOGGER.info("Database engine disposed")
