"""Unit tests for the idempotent upsert repositories against SQLite."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from report_extractor.core.exceptions import ConfigurationError
from report_extractor.database.models import Document
from report_extractor.repositories import (
    CompanyProfileRepository,
    DocumentRepository,
    FinancialMetricRepository,
)
from report_extractor.schemas.extraction import PeriodKind, ValueKind


async def _document_id(session):
    return await DocumentRepository(session).upsert_document(
        content_hash="b" * 64, filename="report.pdf", page_count=3
    )


async def _profile_id(session):
    document_id = await _document_id(session)
    return await CompanyProfileRepository(session).upsert_company_profile(
        document_id=document_id, name="Acme Robotics"
    )


class TestDocumentRepository:
    """Tests for DocumentRepository.upsert_document."""

    @pytest.mark.asyncio
    async def test_same_hash_resolves_to_same_document(self, session):
        repo = DocumentRepository(session)

        first = await repo.upsert_document(content_hash="c" * 64, filename="a.pdf", page_count=3)
        second = await repo.upsert_document(content_hash="c" * 64, filename="b.pdf", page_count=9)

        assert first == second
        assert await repo.count() == 1

    @pytest.mark.asyncio
    async def test_existing_metadata_is_not_overwritten(self, session):
        repo = DocumentRepository(session)

        document_id = await repo.upsert_document(content_hash="d" * 64, filename="a.pdf", page_count=3)
        await repo.upsert_document(content_hash="d" * 64, filename="b.pdf", page_count=9)
        session.expire_all()

        document = await repo.get_by_id(document_id)
        assert document.filename == "a.pdf"
        assert document.page_count == 3

    @pytest.mark.asyncio
    async def test_different_hashes_create_documents(self, session):
        repo = DocumentRepository(session)

        await repo.upsert_document(content_hash="e" * 64, filename="a.pdf", page_count=1)
        await repo.upsert_document(content_hash="f" * 64, filename="a.pdf", page_count=1)

        assert await repo.count() == 2


class TestCompanyProfileRepository:
    """Tests for CompanyProfileRepository.upsert_company_profile."""

    @pytest.mark.asyncio
    async def test_upsert_overwrites_fields(self, session):
        document_id = await _document_id(session)
        repo = CompanyProfileRepository(session)

        first = await repo.upsert_company_profile(
            document_id=document_id,
            name="Acme Robotics",
            description="Old description",
            geography="Korea",
        )
        second = await repo.upsert_company_profile(
            document_id=document_id,
            name="Acme Robotics",
            description="New description",
            first_investment_date=date(2019, 5, 1),
        )
        session.expire_all()

        assert first == second
        assert await repo.count() == 1
        profile = await repo.get_by_identity(document_id, "Acme Robotics")
        assert profile.description == "New description"
        assert profile.geography == "Korea"
        assert profile.first_investment_date == date(2019, 5, 1)

    @pytest.mark.asyncio
    async def test_name_is_part_of_identity(self, session):
        document_id = await _document_id(session)
        repo = CompanyProfileRepository(session)

        first = await repo.upsert_company_profile(document_id=document_id, name="Acme")
        second = await repo.upsert_company_profile(document_id=document_id, name="Beta")

        assert first != second
        assert await repo.count({"document_id": document_id}) == 2


class TestFinancialMetricRepository:
    """Tests for FinancialMetricRepository.upsert_financial_metric."""

    @pytest.mark.asyncio
    async def test_upsert_overwrites_value(self, session):
        profile_id = await _profile_id(session)
        repo = FinancialMetricRepository(session)

        first = await repo.upsert_financial_metric(
            company_profile_id=profile_id,
            metric_name="revenue",
            column_label="Dec-24 YTD Actual",
            value=10.5,
            source_label="Revenue",
            currency="KRW",
            unit="bn",
            fiscal_year=2024,
            period_kind=PeriodKind.YTD,
            period_label="Dec-24",
            source_page=3,
        )
        second = await repo.upsert_financial_metric(
            company_profile_id=profile_id,
            metric_name="revenue",
            column_label="Dec-24 YTD Actual",
            value=-45.2,
            source_label="Revenue",
        )
        session.expire_all()

        assert first == second
        metrics = await repo.list_by_company_profile(profile_id)
        assert len(metrics) == 1
        metric = metrics[0]
        assert float(metric.value) == pytest.approx(-45.2)
        assert metric.value_kind == ValueKind.ACTUAL.value
        assert metric.currency == "KRW"
        assert metric.period_kind == PeriodKind.YTD
        assert metric.source_page == 3

    @pytest.mark.asyncio
    async def test_value_kind_is_part_of_identity(self, session):
        profile_id = await _profile_id(session)
        repo = FinancialMetricRepository(session)

        for kind in (ValueKind.ACTUAL, ValueKind.VARIANCE_PCT):
            await repo.upsert_financial_metric(
                company_profile_id=profile_id,
                metric_name="ebitda_margin",
                column_label="Variance",
                value=1.0,
                source_label="EBITDA Margin",
                value_kind=kind,
            )

        assert await repo.count({"company_profile_id": profile_id}) == 2

    @pytest.mark.asyncio
    async def test_get_by_identity_defaults_to_actual(self, session):
        profile_id = await _profile_id(session)
        repo = FinancialMetricRepository(session)
        await repo.upsert_financial_metric(
            company_profile_id=profile_id,
            metric_name="net_income",
            column_label="FY2023 Actual",
            value=12,
            source_label="Net Income",
        )

        metric = await repo.get_by_identity(profile_id, "net_income", "FY2023 Actual")

        assert metric is not None
        assert metric.value_kind == "actual"

    @pytest.mark.asyncio
    async def test_list_by_company_profile_returns_every_metric(self, session):
        profile_id = await _profile_id(session)
        repo = FinancialMetricRepository(session)
        labels = [f"Month {n:03d}" for n in range(250)]
        for label in labels:
            await repo.upsert_financial_metric(
                company_profile_id=profile_id,
                metric_name="revenue",
                column_label=label,
                value=1,
                source_label="Revenue",
            )

        with patch.object(session, "execute", wraps=session.execute) as execute:
            metrics = await repo.list_by_company_profile(profile_id)

        assert [metric.column_label for metric in metrics] == labels
        statement = str(execute.await_args.args[0])
        assert "LIMIT" not in statement.upper()


@pytest.mark.asyncio
async def test_unsupported_dialect_raises_configuration_error():
    session = AsyncMock(spec=AsyncSession)
    session.bind = MagicMock()
    session.bind.dialect.name = "mysql"
    repo = DocumentRepository(session)

    with pytest.raises(ConfigurationError):
        await repo.upsert_document(content_hash="0" * 64, filename="x.pdf", page_count=1)

    session.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_upsert_rolls_back_on_database_error(session):
    await DocumentRepository(session).upsert_document(
        content_hash="1" * 64, filename="x.pdf", page_count=1
    )
    repo = CompanyProfileRepository(session)

    with pytest.raises(IntegrityError):
        await repo._upsert(identity={"document_id": None, "name": "Acme"}, fields={})

    assert await repo.count() == 0
    assert isinstance(await DocumentRepository(session).get_by_content_hash("1" * 64), Document)
