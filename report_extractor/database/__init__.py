"""Database module for SQLAlchemy models and session management."""

from report_extractor.database.base import Base, create_engine, create_session_maker
from report_extractor.database.client import DatabaseClient
from report_extractor.database.models import CompanyProfile, Document, FinancialMetric

__all__ = [
    "Base",
    "create_engine",
    "create_session_maker",
    "DatabaseClient",
    "Document",
    "CompanyProfile",
    "FinancialMetric",
]
