"""Pytest configuration and shared fixtures."""

from typing import Any, Dict, List, Type

import pytest
import pytest_asyncio
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from report_extractor.database import Base, create_session_maker
from report_extractor.schemas.extraction import (
    CompanyProfileExtraction,
    FinancialHighlights,
    FinancialRecord,
    SourceRef,
)
from report_extractor.services.pdf import DocumentContent


class FakeLLM:
    """Stands in for StructuredLLMClient, answering by requested schema."""

    def __init__(self, responses: Dict[Type[BaseModel], Any]):
        self.responses = responses
        self.calls: List[Dict[str, Any]] = []

    async def generate_structured(self, system_prompt, user_prompt, schema):
        self.calls.append(
            {"system_prompt": system_prompt, "user_prompt": user_prompt, "schema": schema}
        )
        response = self.responses[schema]
        if isinstance(response, Exception):
            raise response
        return response


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite engine with all tables created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'report_extractor.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncSession:
    """Async session bound to the test engine."""
    async with create_session_maker(engine)() as session:
        yield session


@pytest.fixture
def report_pages() -> List[str]:
    """Page texts of a small portfolio report."""
    return [
        "Acme Robotics Co., Ltd.\nIndustrial automation company headquartered in Seoul.",
        "Investment overview\nFirst investment: 2019-05-01, Series B preferred shares.",
        "Financial Highlights (in KRW bn)\nRevenue (45.2) 12.7%\nEBITDA Margin n/a",
        "Notes to the highlights\nFigures are unaudited.",
    ]


@pytest.fixture
def document_content(report_pages) -> DocumentContent:
    """DocumentContent for ``report_pages``."""
    return DocumentContent(
        content_hash="a" * 64,
        page_count=len(report_pages),
        pages=report_pages,
        filename="acme_q4.pdf",
    )


@pytest.fixture
def company_profile() -> CompanyProfileExtraction:
    """Company profile as the model would return it."""
    return CompanyProfileExtraction(
        name="Acme Robotics",
        description="Industrial automation",
        geography="South Korea",
        fund_role="Lead investor",
        first_investment_date="2019-05-01",
        investment_type="Series B preferred",
        source=SourceRef(quote="Acme Robotics Co., Ltd."),
    )


@pytest.fixture
def financial_records() -> List[FinancialRecord]:
    """Raw highlights records: two resolvable, one unrecoverable."""
    return [
        FinancialRecord(
            source_label="Revenue",
            column_label="Dec-24 YTD Actual",
            value=None,
            source=SourceRef(quote="(45.2)"),
        ),
        FinancialRecord(
            source_label="EBITDA Margin",
            column_label="Variance",
            value=None,
            source=SourceRef(quote="garbage"),
        ),
        FinancialRecord(
            source_label="Net Income",
            column_label="FY2023 Actual",
            value=12.0,
            source=SourceRef(page=4, quote="12.0"),
        ),
    ]


@pytest.fixture
def fake_llm(company_profile, financial_records) -> FakeLLM:
    """FakeLLM answering both extraction schemas."""
    return FakeLLM(
        {
            CompanyProfileExtraction: company_profile,
            FinancialHighlights: FinancialHighlights(records=financial_records),
        }
    )


@pytest.fixture
def make_llm():
    """Factory for FakeLLM instances with custom responses."""
    return FakeLLM
