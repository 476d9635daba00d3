"""Pydantic schemas for model-extracted report data.

The model is asked to answer in camelCase JSON; the aliases below keep the
Python side snake_case while validating that wire shape.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PeriodKind(str, Enum):
    """Reporting window of a financial figure."""

    YTD = "YTD"
    FY = "FY"


class ValueKind(str, Enum):
    """Whether a figure is a plain value or a variance percentage."""

    ACTUAL = "actual"
    VARIANCE_PCT = "variance_pct"


class ExtractedBaseModel(BaseModel):
    """Base model for all extracted entities with shared config."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )


class SourceRef(ExtractedBaseModel):
    """Page number and quoted snippet backing an extracted fact."""
    page: Optional[int] = None
    quote: Optional[str] = None


class CompanyProfileExtraction(ExtractedBaseModel):
    """Schema for the single company profile found on the opening pages."""
    name: str
    description: Optional[str] = None
    geography: Optional[str] = None
    fund_role: Optional[str] = None
    first_investment_date: Optional[str] = Field(
        default=None, description="ISO date string preferred"
    )
    investment_type: Optional[str] = None
    source: Optional[SourceRef] = None


class FinancialRecord(ExtractedBaseModel):
    """One row/column cell of a financial highlights table."""
    source_label: str
    metric_name: Optional[str] = None
    column_label: str
    value: Optional[float] = None
    unit: Optional[str] = None
    currency: Optional[str] = None
    fiscal_year: Optional[int] = None
    period_kind: Optional[PeriodKind] = None
    period_label: Optional[str] = None
    value_kind: Optional[ValueKind] = None
    source: Optional[SourceRef] = None


class FinancialHighlights(ExtractedBaseModel):
    """Schema for the list of cells extracted from the highlights tables."""
    records: List[FinancialRecord] = Field(default_factory=list)


class NormalizedFinancialRecord(BaseModel):
    """A financial record with name, value, period and unit resolved.

    ``value`` stays ``None`` when nothing could be recovered; such records
    are never persisted.
    """

    source_label: str
    metric_name: str
    column_label: str
    value: Optional[float] = None
    unit: Optional[str] = None
    currency: Optional[str] = None
    fiscal_year: Optional[int] = None
    period_kind: Optional[PeriodKind] = None
    period_label: Optional[str] = None
    value_kind: ValueKind = ValueKind.ACTUAL
    source_page: Optional[int] = None
    source_quote: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.value is not None
