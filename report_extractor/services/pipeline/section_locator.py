"""Locates the text to send to the model for each extraction.

Financial tables are usually followed by continuation pages, and reports
without a literal "Financial highlights" heading tend to carry the figures
near the end, so the locator falls back to the document's tail.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

PAGE_SEPARATOR = "\n\n"
HIGHLIGHTS_PATTERN = re.compile(r"financial\s+highlights", re.IGNORECASE)
CONTINUATION_PAGES = 2
TAIL_PAGES = 2
PROFILE_PAGES = 2


@dataclass(frozen=True)
class FinancialSection:
    """Candidate section text and the 1-based page it starts on."""
    text: str
    start_page: int

    @property
    def header_line(self) -> str:
        """First line of the section, where table headers carry currency/unit."""
        return self.text.split("\n", 1)[0]


def _join(pages: Sequence[Optional[str]]) -> str:
    return PAGE_SEPARATOR.join(page for page in pages if page)


def locate_financial_section(pages: Sequence[str]) -> FinancialSection:
    """Find the financial highlights section in page-ordered text.

    Args:
        pages: Page texts in document order

    Returns:
        The first matching page plus up to two following pages, or the last
        two pages when no page mentions financial highlights
    """
    for index, page in enumerate(pages):
        if page and HIGHLIGHTS_PATTERN.search(page):
            window = pages[index : index + 1 + CONTINUATION_PAGES]
            return FinancialSection(text=_join(window), start_page=index + 1)

    start = max(0, len(pages) - TAIL_PAGES)
    return FinancialSection(text=_join(pages[start:]), start_page=start + 1)


def company_profile_text(pages: Sequence[str]) -> str:
    """Text of the opening pages, where the company profile is printed."""
    return _join(pages[:PROFILE_PAGES])
