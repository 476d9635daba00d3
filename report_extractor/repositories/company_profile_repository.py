from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from report_extractor.database.models import CompanyProfile
from report_extractor.repositories.base_repository import BaseRepository
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)


class CompanyProfileRepository(BaseRepository[CompanyProfile]):
    """Repository for CompanyProfile records keyed by (document, name)."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, CompanyProfile)

    async def get_by_identity(self, document_id: UUID, name: str) -> Optional[CompanyProfile]:
        """Fetch the profile with the given document and company name."""
        result = await self.session.execute(
            select(CompanyProfile).where(
                CompanyProfile.document_id == document_id,
                CompanyProfile.name == name,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_company_profile(
        self,
        document_id: UUID,
        name: str,
        description: Optional[str] = None,
        geography: Optional[str] = None,
        fund_role: Optional[str] = None,
        first_investment_date: Optional[date] = None,
        investment_type: Optional[str] = None,
        source_page: Optional[int] = None,
        source_quote: Optional[str] = None,
    ) -> UUID:
        """Insert a company profile or overwrite the one with the same name.

        Args:
            document_id: Owning document
            name: Company name as extracted
            description: Business description
            geography: Headquarters / market geography
            fund_role: Role of the fund in the investment
            first_investment_date: Date of first investment
            investment_type: Investment type
            source_page: Page the profile was read from
            source_quote: Supporting snippet

        Returns:
            CompanyProfile ID
        """
        profile_id = await self._upsert(
            identity={"document_id": document_id, "name": name},
            fields={
                "description": description,
                "geography": geography,
                "fund_role": fund_role,
                "first_investment_date": first_investment_date,
                "investment_type": investment_type,
                "source_page": source_page,
                "source_quote": source_quote,
            },
        )
        LOGGER.info(
            f"Upserted company profile {profile_id}",
            extra={"document_id": str(document_id), "company_name": name},
        )
        return profile_id
