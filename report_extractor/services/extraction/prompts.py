"""Prompts for company-profile and financial-highlights extraction."""

COMPANY_SYSTEM_PROMPT = """
You are an extraction assistant for private equity PDF reports.
Extract a single company's profile fields from the provided text.
Return valid JSON only, matching the provided JSON schema.
When a field is not present, omit it.
Include a minimal source object with page and a short quote if available.
""".strip()

COMPANY_USER_PROMPT = """
From the following text, extract:
- name
- description
- geography
- fundRole
- firstInvestmentDate (ISO date if possible)
- investmentType
Return JSON only.
""".strip()

FINANCIAL_SYSTEM_PROMPT = """
You extract Financial highlights tables from private equity PDF pages.
Return an array of records, each record representing a single row-column cell value.
Use numeric values only (no commas). Percent values should be numbers like 12.7 and unit 'pct'.
For variance columns, set valueKind='variance_pct'. Provide fiscalYear/periodKind/periodLabel when derivable from column labels (e.g., Dec-24 YTD Actual, FY2023 Actual). Include currency and unit (e.g., KRW and bn) from table headers.
Include a minimal source object with page and short quote if available.
""".strip()

FINANCIAL_USER_PROMPT = """
Given the Financial highlights section text, identify the YTD and FY tables and output records for every visible cell.
Return JSON only.
""".strip()


def build_user_prompt(instructions: str, text: str) -> str:
    """Append the document text to a user prompt."""
    return f"{instructions}\n\nTEXT:\n{text}"
