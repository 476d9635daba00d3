"""Idempotent persistence gateway for documents, profiles and metrics."""

from report_extractor.repositories.base_repository import BaseRepository
from report_extractor.repositories.company_profile_repository import CompanyProfileRepository
from report_extractor.repositories.document_repository import DocumentRepository
from report_extractor.repositories.financial_metric_repository import FinancialMetricRepository

__all__ = [
    "BaseRepository",
    "CompanyProfileRepository",
    "DocumentRepository",
    "FinancialMetricRepository",
]
