"""Financial highlights extraction."""

from typing import List

from report_extractor.schemas.extraction import FinancialHighlights, FinancialRecord
from report_extractor.services.extraction.base_extractor import BaseExtractor
from report_extractor.services.extraction.prompts import (
    FINANCIAL_SYSTEM_PROMPT,
    FINANCIAL_USER_PROMPT,
    build_user_prompt,
)
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)


class FinancialHighlightsExtractor(BaseExtractor):
    """Extracts every visible cell of the financial highlights tables."""

    async def extract(self, text: str) -> List[FinancialRecord]:
        """Return the raw, un-normalized records the model found in ``text``."""
        highlights = await self.llm.generate_structured(
            system_prompt=FINANCIAL_SYSTEM_PROMPT,
            user_prompt=build_user_prompt(FINANCIAL_USER_PROMPT, text),
            schema=FinancialHighlights,
        )
        LOGGER.info(f"Extracted {len(highlights.records)} financial records")
        return highlights.records
