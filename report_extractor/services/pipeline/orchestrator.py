"""End-to-end extraction pipeline for a single report.

Steps run strictly in sequence and every write is an idempotent upsert, so a
failed run keeps what it already committed and re-running reconciles the rest.
"""

from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Union
from uuid import UUID

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from report_extractor.config import Settings
from report_extractor.core.llm_client import create_llm_client
from report_extractor.database import DatabaseClient, create_engine, create_session_maker
from report_extractor.repositories import (
    CompanyProfileRepository,
    DocumentRepository,
    FinancialMetricRepository,
)
from report_extractor.services.extraction import (
    CompanyProfileExtractor,
    FinancialHighlightsExtractor,
)
from report_extractor.services.extraction.base_extractor import parse_iso_date
from report_extractor.services.normalization import normalize_records
from report_extractor.services.normalization.parsers import DEFAULT_CENTURY_PIVOT
from report_extractor.services.pdf import DocumentReader
from report_extractor.services.pipeline.section_locator import (
    company_profile_text,
    locate_financial_section,
)
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)

PROFILE_PAGE_HINT = 1


@dataclass
class ExtractionSummary:
    """Outcome of one pipeline run."""
    document_id: UUID
    company_profile_id: UUID
    metrics_inserted: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["document_id"] = str(self.document_id)
        data["company_profile_id"] = str(self.company_profile_id)
        return data


class ExtractionPipeline:
    """Runs read → profile → highlights → normalize → persist for one document.

    Errors are logged with the failing step and its identity keys, then
    re-raised unchanged.
    """

    def __init__(
        self,
        session: AsyncSession,
        reader: DocumentReader,
        company_extractor: CompanyProfileExtractor,
        financial_extractor: FinancialHighlightsExtractor,
        century_pivot: int = DEFAULT_CENTURY_PIVOT,
    ):
        self.reader = reader
        self.company_extractor = company_extractor
        self.financial_extractor = financial_extractor
        self.century_pivot = century_pivot
        self.documents = DocumentRepository(session)
        self.company_profiles = CompanyProfileRepository(session)
        self.financial_metrics = FinancialMetricRepository(session)

    @contextmanager
    def _step(self, name: str, **keys: Any) -> Iterator[None]:
        context = {"step": name, **{k: str(v) for k, v in keys.items()}}
        LOGGER.info(f"Pipeline step '{name}' started", extra=context)
        try:
            yield
        except Exception:
            LOGGER.error(f"Pipeline step '{name}' failed", exc_info=True, extra=context)
            raise

    async def run(self, path: Union[str, Path]) -> ExtractionSummary:
        """Extract and persist the company profile and metrics of one report.

        Args:
            path: Local path to the PDF

        Returns:
            ExtractionSummary with the document and profile IDs and the number
            of metrics written
        """
        with self._step("read_document", path=path):
            content = await self.reader.read(path)

        with self._step("upsert_document", content_hash=content.content_hash):
            document_id = await self.documents.upsert_document(
                content_hash=content.content_hash,
                filename=content.filename or Path(path).name,
                page_count=content.page_count,
            )

        with self._step("extract_company_profile", document_id=document_id):
            company = await self.company_extractor.extract(
                company_profile_text(content.pages), page_hint=PROFILE_PAGE_HINT
            )

        with self._step("upsert_company_profile", document_id=document_id, company_name=company.name):
            company_profile_id = await self.company_profiles.upsert_company_profile(
                document_id=document_id,
                name=company.name,
                description=company.description,
                geography=company.geography,
                fund_role=company.fund_role,
                first_investment_date=parse_iso_date(company.first_investment_date),
                investment_type=company.investment_type,
                source_page=company.source.page if company.source else None,
                source_quote=company.source.quote if company.source else None,
            )

        section = locate_financial_section(content.pages)
        with self._step("extract_financial_highlights", company_profile_id=company_profile_id, start_page=section.start_page):
            raw_records = await self.financial_extractor.extract(section.text)

        records = normalize_records(raw_records, section.header_line, self.century_pivot)

        inserted = 0
        for record in records:
            if not record.is_resolved:
                LOGGER.debug(
                    "Dropping unresolved financial record",
                    extra={"metric_name": record.metric_name, "column_label": record.column_label},
                )
                continue
            with self._step(
                "upsert_financial_metric",
                company_profile_id=company_profile_id,
                metric_name=record.metric_name,
                column_label=record.column_label,
                value_kind=record.value_kind.value,
            ):
                await self.financial_metrics.upsert_financial_metric(
                    company_profile_id=company_profile_id,
                    metric_name=record.metric_name,
                    column_label=record.column_label,
                    value=record.value,
                    source_label=record.source_label,
                    value_kind=record.value_kind,
                    currency=record.currency,
                    unit=record.unit,
                    fiscal_year=record.fiscal_year,
                    period_kind=record.period_kind,
                    period_label=record.period_label,
                    source_page=record.source_page if record.source_page is not None else section.start_page,
                    source_quote=record.source_quote,
                )
            inserted += 1

        summary = ExtractionSummary(
            document_id=document_id,
            company_profile_id=company_profile_id,
            metrics_inserted=inserted,
        )
        LOGGER.info("Extraction complete", extra=summary.to_dict())
        return summary


async def run_extraction(
    path: Union[str, Path],
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ExtractionSummary:
    """Build the collaborators from settings and run the pipeline once.

    Args:
        path: Local path to the PDF
        settings: Loaded application settings
        transport: Optional httpx transport for the LLM client

    Returns:
        ExtractionSummary
    """
    llm = create_llm_client(settings.llm, transport=transport)
    engine = create_engine(settings.db)
    db_client = DatabaseClient(engine)
    try:
        await db_client.create_tables()
        session_maker = create_session_maker(engine)
        async with session_maker() as session:
            pipeline = ExtractionPipeline(
                session=session,
                reader=DocumentReader(),
                company_extractor=CompanyProfileExtractor(llm),
                financial_extractor=FinancialHighlightsExtractor(llm),
                century_pivot=settings.extraction.century_pivot,
            )
            return await pipeline.run(path)
    finally:
        await db_client.disconnect()
