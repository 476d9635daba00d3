"""Section location and end-to-end orchestration."""

from report_extractor.services.pipeline.orchestrator import (
    ExtractionPipeline,
    ExtractionSummary,
    run_extraction,
)
from report_extractor.services.pipeline.section_locator import (
    FinancialSection,
    company_profile_text,
    locate_financial_section,
)

__all__ = [
    "ExtractionPipeline",
    "ExtractionSummary",
    "run_extraction",
    "FinancialSection",
    "company_profile_text",
    "locate_financial_section",
]
