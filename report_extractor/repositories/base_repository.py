from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from report_extractor.core.exceptions import ConfigurationError
from report_extractor.utils.logging import get_logger

ModelType = TypeVar("ModelType")

LOGGER = get_logger(__name__)

# Dialects whose insert() supports ON CONFLICT ... DO UPDATE / DO NOTHING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BaseRepository(Generic[ModelType]):
    """Shared reads and upsert plumbing for one mapped model.

    Writes go through single ``INSERT ... ON CONFLICT`` statements keyed on a
    unique constraint, so repeated or concurrent upserts of the same business
    identity cannot create duplicate rows.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session
            model: Mapped class managed by this repository
        """
        self.session = session
        self.model = model

    @property
    def _model_name(self) -> str:
        return self.model.__name__

    def _where(self, query: Select, filters: Optional[Dict[str, Any]]) -> Select:
        """Apply equality filters on known columns; unknown keys are ignored."""
        for column, value in (filters or {}).items():
            if hasattr(self.model, column):
                query = query.where(getattr(self.model, column) == value)
        return query

    async def _execute(self, query: Select, action: str) -> Any:
        try:
            result = await self.session.execute(query)
        except SQLAlchemyError as e:
            LOGGER.error(f"Failed to {action} {self._model_name}: {e}", exc_info=True)
            raise
        return result

    async def get_by_id(self, id: UUID) -> Optional[ModelType]:
        """Return the row with primary key ``id``, if any."""
        result = await self._execute(select(self.model).where(self.model.id == id), "load")
        return result.scalar_one_or_none()

    async def get_all(
        self,
        skip: int = 0,
        limit: int = 200,
        filters: Optional[Dict[str, Any]] = None,
    ) -> List[ModelType]:
        """Page through rows matching ``filters`` (column name -> value)."""
        query = self._where(select(self.model), filters).offset(skip).limit(limit)
        result = await self._execute(query, "list")
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Number of rows matching ``filters``."""
        query = self._where(select(func.count()).select_from(self.model), filters)
        result = await self._execute(query, "count")
        return result.scalar_one()

    def _insert(self):
        """Dialect-specific insert() construct for the managed model."""
        dialect = self.session.bind.dialect.name
        insert = _UPSERT_INSERTS.get(dialect)
        if insert is None:
            raise ConfigurationError(
                f"Upserts are not supported on the '{dialect}' dialect"
            )
        return insert(self.model)

    async def _upsert(
        self,
        identity: Dict[str, Any],
        fields: Dict[str, Any],
    ) -> UUID:
        """Insert a row or overwrite the row sharing its business identity.

        Fields whose value is None are written on insert but never overwrite
        an existing value.

        Args:
            identity: Column values forming the unique business key
            fields: Mutable column values

        Returns:
            ID of the inserted or updated row
        """
        stmt = self._insert().values(**identity, **fields)
        overwrite = {
            key: stmt.excluded[key] for key, value in fields.items() if value is not None
        }
        if hasattr(self.model, "updated_at"):
            overwrite["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            index_elements=list(identity),
            set_=overwrite,
        ).returning(self.model.id)

        try:
            result = await self.session.execute(stmt)
            row_id = result.scalar_one()
            await self.session.commit()
            return row_id
        except SQLAlchemyError as e:
            await self.session.rollback()
            LOGGER.error(
                f"Failed to upsert {self._model_name}: {e}",
                exc_info=True,
                extra={"identity": {k: str(v) for k, v in identity.items()}},
            )
            raise
