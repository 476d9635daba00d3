"""Pydantic schemas shared across the pipeline."""

from report_extractor.schemas.extraction import (
    CompanyProfileExtraction,
    FinancialHighlights,
    FinancialRecord,
    NormalizedFinancialRecord,
    PeriodKind,
    SourceRef,
    ValueKind,
)

__all__ = [
    "CompanyProfileExtraction",
    "FinancialHighlights",
    "FinancialRecord",
    "NormalizedFinancialRecord",
    "PeriodKind",
    "SourceRef",
    "ValueKind",
]
