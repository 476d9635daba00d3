"""Company profile extraction from a report's opening pages."""

from typing import Optional

from report_extractor.schemas.extraction import CompanyProfileExtraction, SourceRef
from report_extractor.services.extraction.base_extractor import BaseExtractor
from report_extractor.services.extraction.prompts import (
    COMPANY_SYSTEM_PROMPT,
    COMPANY_USER_PROMPT,
    build_user_prompt,
)
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)


class CompanyProfileExtractor(BaseExtractor):
    """Extracts a single company profile."""

    async def extract(self, text: str, page_hint: Optional[int] = None) -> CompanyProfileExtraction:
        """Ask the model for the company profile found in ``text``.

        Args:
            text: Text of the opening pages
            page_hint: Page to attribute the profile to when the model gives none

        Returns:
            CompanyProfileExtraction
        """
        profile = await self.llm.generate_structured(
            system_prompt=COMPANY_SYSTEM_PROMPT,
            user_prompt=build_user_prompt(COMPANY_USER_PROMPT, text),
            schema=CompanyProfileExtraction,
        )
        if page_hint is not None and (profile.source is None or profile.source.page is None):
            source = (
                profile.source.model_copy(update={"page": page_hint})
                if profile.source
                else SourceRef(page=page_hint)
            )
            profile = profile.model_copy(update={"source": source})

        LOGGER.info(f"Extracted company profile '{profile.name}'")
        return profile
