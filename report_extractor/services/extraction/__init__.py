"""LLM-backed extractors."""

from report_extractor.services.extraction.company_extractor import CompanyProfileExtractor
from report_extractor.services.extraction.financial_extractor import FinancialHighlightsExtractor

__all__ = ["CompanyProfileExtractor", "FinancialHighlightsExtractor"]
