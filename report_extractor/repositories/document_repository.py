from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from report_extractor.core.exceptions import DatabaseError
from report_extractor.database.models import Document
from report_extractor.repositories.base_repository import BaseRepository
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)


class DocumentRepository(BaseRepository[Document]):
    """Repository for managing Document records.

    A document's business identity is the hash of its content.
    """

    def __init__(self, session: AsyncSession):
        """Initialize document repository.

        Args:
            session: SQLAlchemy async session
        """
        super().__init__(session, Document)

    async def get_by_content_hash(self, content_hash: str) -> Optional[Document]:
        """Fetch the document with the given content hash, if any."""
        result = await self.session.execute(
            select(Document).where(Document.content_hash == content_hash)
        )
        return result.scalar_one_or_none()

    async def upsert_document(
        self,
        content_hash: str,
        filename: str,
        page_count: int,
    ) -> UUID:
        """Return the document for ``content_hash``, creating it if needed.

        The first stored filename and page count are authoritative; an
        existing row is returned unmodified.

        Args:
            content_hash: SHA-256 hex digest of the document bytes
            filename: Display filename
            page_count: Number of pages

        Returns:
            Document ID
        """
        stmt = (
            self._insert()
            .values(content_hash=content_hash, filename=filename, page_count=page_count)
            .on_conflict_do_nothing(index_elements=["content_hash"])
        )
        try:
            await self.session.execute(stmt)
            await self.session.commit()
            document = await self.get_by_content_hash(content_hash)
        except SQLAlchemyError as e:
            await self.session.rollback()
            LOGGER.error(
                f"Error upserting document: {str(e)}",
                exc_info=True,
                extra={"content_hash": content_hash},
            )
            raise

        if document is None:
            raise DatabaseError(f"Document {content_hash} vanished after upsert")

        LOGGER.info(
            f"Resolved document {document.id}",
            extra={"content_hash": content_hash, "document_filename": document.filename},
        )
        return document.id
