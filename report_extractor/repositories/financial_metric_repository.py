from decimal import Decimal
from typing import List, Optional, Union
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from report_extractor.database.models import FinancialMetric
from report_extractor.repositories.base_repository import BaseRepository
from report_extractor.schemas.extraction import PeriodKind, ValueKind
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)


class FinancialMetricRepository(BaseRepository[FinancialMetric]):
    """Repository for FinancialMetric records.

    The business identity is (company profile, metric name, column label,
    value kind): one metric appears under several period columns and as
    both an actual and a variance percentage.
    """

    def __init__(self, session: AsyncSession):
        super().__init__(session, FinancialMetric)

    async def get_by_identity(
        self,
        company_profile_id: UUID,
        metric_name: str,
        column_label: str,
        value_kind: Optional[Union[ValueKind, str]] = None,
    ) -> Optional[FinancialMetric]:
        """Fetch a metric by its business identity."""
        result = await self.session.execute(
            select(FinancialMetric).where(
                FinancialMetric.company_profile_id == company_profile_id,
                FinancialMetric.metric_name == metric_name,
                FinancialMetric.column_label == column_label,
                FinancialMetric.value_kind == _value_kind(value_kind),
            )
        )
        return result.scalar_one_or_none()

    async def list_by_company_profile(self, company_profile_id: UUID) -> List[FinancialMetric]:
        """Every metric stored for a company profile, unpaginated."""
        query = (
            select(FinancialMetric)
            .where(FinancialMetric.company_profile_id == company_profile_id)
            .order_by(FinancialMetric.metric_name, FinancialMetric.column_label, FinancialMetric.value_kind)
        )
        result = await self._execute(query, "list")
        return list(result.scalars().all())

    async def upsert_financial_metric(
        self,
        company_profile_id: UUID,
        metric_name: str,
        column_label: str,
        value: Union[Decimal, float],
        source_label: str,
        value_kind: Optional[Union[ValueKind, str]] = None,
        currency: Optional[str] = None,
        unit: Optional[str] = None,
        fiscal_year: Optional[int] = None,
        period_kind: Optional[PeriodKind] = None,
        period_label: Optional[str] = None,
        source_page: Optional[int] = None,
        source_quote: Optional[str] = None,
    ) -> UUID:
        """Insert a metric or overwrite the one with the same identity.

        Args:
            company_profile_id: Owning company profile
            metric_name: Canonical snake_case metric name
            column_label: Column header the value was printed under
            value: Resolved numeric value
            source_label: Row label as printed in the report
            value_kind: actual or variance_pct; defaults to actual

        Returns:
            FinancialMetric ID
        """
        kind = _value_kind(value_kind)
        metric_id = await self._upsert(
            identity={
                "company_profile_id": company_profile_id,
                "metric_name": metric_name,
                "column_label": column_label,
                "value_kind": kind,
            },
            fields={
                "value": Decimal(str(value)),
                "source_label": source_label,
                "currency": currency,
                "unit": unit,
                "fiscal_year": fiscal_year,
                "period_kind": period_kind,
                "period_label": period_label,
                "source_page": source_page,
                "source_quote": source_quote,
            },
        )
        LOGGER.debug(
            f"Upserted financial metric {metric_id}",
            extra={
                "company_profile_id": str(company_profile_id),
                "metric_name": metric_name,
                "column_label": column_label,
                "value_kind": kind,
            },
        )
        return metric_id


def _value_kind(value_kind: Optional[Union[ValueKind, str]]) -> str:
    if value_kind is None:
        return ValueKind.ACTUAL.value
    return ValueKind(value_kind).value
