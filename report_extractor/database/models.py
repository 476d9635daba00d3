"""SQLAlchemy models for all database tables."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Date,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    TIMESTAMP,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from report_extractor.database.base import Base
from report_extractor.schemas.extraction import PeriodKind, ValueKind


class Document(Base):
    """Source report, identified by the SHA-256 of its bytes."""

    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    filename: Mapped[str] = mapped_column(String, nullable=False)
    content_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    page_count: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    company_profiles: Mapped[list["CompanyProfile"]] = relationship(
        "CompanyProfile", back_populates="document", cascade="all, delete-orphan"
    )


class CompanyProfile(Base):
    """Portfolio company profile extracted from a document's opening pages."""

    __tablename__ = "company_profiles"
    __table_args__ = (
        UniqueConstraint("document_id", "name", name="uq_company_profiles_document_name"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    geography: Mapped[str | None] = mapped_column(String, nullable=True)
    fund_role: Mapped[str | None] = mapped_column(String, nullable=True)
    first_investment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    investment_type: Mapped[str | None] = mapped_column(String, nullable=True)
    source_page: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source_quote: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    document: Mapped["Document"] = relationship("Document", back_populates="company_profiles")
    financial_metrics: Mapped[list["FinancialMetric"]] = relationship(
        "FinancialMetric", back_populates="company_profile", cascade="all, delete-orphan"
    )


class FinancialMetric(Base):
    """One financial highlights cell: a metric under one column header."""

    __tablename__ = "financial_metrics"
    __table_args__ = (
        UniqueConstraint(
            "company_profile_id",
            "metric_name",
            "column_label",
            "value_kind",
            name="uq_financial_metrics_identity",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    company_profile_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("company_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    currency: Mapped[str | None] = mapped_column(String, nullable=True)
    unit: Mapped[str | None] = mapped_column(String, nullable=True)  # bn | mn | pct
    source_label: Mapped[str] = mapped_column(String, nullable=False)
    metric_name: Mapped[str] = mapped_column(String, nullable=False)
    column_label: Mapped[str] = mapped_column(String, nullable=False)
    fiscal_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    period_kind: Mapped[PeriodKind | None] = mapped_column(
        Enum(PeriodKind, name="period_kind"), nullable=True
    )
    period_label: Mapped[str | None] = mapped_column(String, nullable=True)
    value: Mapped[Decimal] = mapped_column(Numeric, nullable=False)
    value_kind: Mapped[str] = mapped_column(
        String, nullable=False, default=ValueKind.ACTUAL.value
    )  # actual | variance_pct
    source_page: Mapped[int | None] = mapped_column(Integer, nullable=True)
    source_quote: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    company_profile: Mapped["CompanyProfile"] = relationship(
        "CompanyProfile", back_populates="financial_metrics"
    )
