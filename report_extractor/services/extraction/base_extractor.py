"""Base extractor shared by the company-profile and financial extractors."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Optional

from report_extractor.core.llm_client import StructuredLLMClient
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)

_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m", "%Y/%m/%d", "%Y")


class BaseExtractor(ABC):
    """Abstract base class for LLM-backed extractors.

    Attributes:
        llm: Structured LLM client used for every call
    """

    def __init__(self, llm: StructuredLLMClient):
        self.llm = llm
        LOGGER.debug(f"Initialized {self.__class__.__name__}")

    @abstractmethod
    async def extract(self, text: str) -> Any:
        """Extract structured data from ``text``."""
        pass


def parse_iso_date(date_str: Optional[str]) -> Optional[date]:
    """Parse an ISO-like date string, tolerating month or year precision.

    Args:
        date_str: Date string such as ``2021-03-15``, ``2021-03`` or ``2021``

    Returns:
        date object or None if parsing fails
    """
    if not date_str:
        return None
    candidate = date_str.strip()[:10]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).date()
        except ValueError:
            continue
    LOGGER.warning(f"Failed to parse date '{date_str}'")
    return None
