"""Deterministic parsers for financial highlights cells.

Regex-based helpers that repair values the model left empty and infer
period and unit metadata from column and table headers. Every multi-pattern
decision is an ordered rule tuple; the first rule that matches wins.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Tuple

from report_extractor.schemas.extraction import PeriodKind

DEFAULT_CENTURY_PIVOT = 70

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")

# A minus only counts as a sign when it is not glued to a word ("Dec-24").
_SIGNED_NUMBER = (
    r"(?:(?<![A-Za-z0-9.])(?P<minus>-))?\s*"
    r"(?P<paren>\()?\s*"
    r"(?P<number>\d+(?:\.\d+)?)"
)
_PERCENT_PATTERN = re.compile(_SIGNED_NUMBER + r"\s*%\s*\)?")
_NUMERIC_PATTERN = re.compile(_SIGNED_NUMBER + r"\s*\)?")

_HEADER_PATTERN = re.compile(r"\bin\s+([A-Z]{3})\s+(\w+)", re.IGNORECASE)


@dataclass(frozen=True)
class PeriodInfo:
    """Fiscal period inferred from a column label."""
    year: Optional[int] = None
    kind: Optional[PeriodKind] = None
    period_label: Optional[str] = None


@dataclass(frozen=True)
class HeaderInfo:
    """Currency and scale inferred from a table header line."""
    currency: Optional[str] = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class ParsedValue:
    """A value recovered from free text, remembering which rule produced it."""
    value: float
    is_percentage: bool


def to_canonical_key(label: Optional[str]) -> str:
    """Turn a printed label into a snake_case metric identifier.

    >>> to_canonical_key("Net Revenue (USD)")
    'net_revenue_usd'
    """
    if not label:
        return ""
    spaced = _NON_ALNUM.sub(" ", label.lower()).strip()
    return _WHITESPACE.sub("_", spaced)


def _signed(match: "re.Match[str]") -> float:
    number = float(match.group("number"))
    if match.group("paren") or match.group("minus"):
        return -number
    return number


def parse_percentage(text: Optional[str]) -> Optional[float]:
    """Extract a percentage such as ``12.7%`` or ``(12.7%)``.

    Parenthesized values are negative. Returns None when no number is
    directly followed by a percent sign.
    """
    if not text:
        return None
    match = _PERCENT_PATTERN.search(text.replace(",", ""))
    if not match:
        return None
    return _signed(match)


def parse_numeric(text: Optional[str]) -> Optional[float]:
    """Extract the first number in ``text``; ``(1,234)`` reads as -1234."""
    if not text:
        return None
    match = _NUMERIC_PATTERN.search(text.replace(",", ""))
    if not match:
        return None
    return _signed(match)


# Percent first: a percentage string also contains a bare number.
VALUE_RULES: Tuple[Tuple[bool, Callable[[Optional[str]], Optional[float]]], ...] = (
    (True, parse_percentage),
    (False, parse_numeric),
)


def parse_value(text: Optional[str]) -> Optional[ParsedValue]:
    """Run the value rules in order and return the first hit."""
    for is_percentage, parser in VALUE_RULES:
        value = parser(text)
        if value is not None:
            return ParsedValue(value=value, is_percentage=is_percentage)
    return None


def _expand_two_digit_year(yy: int, century_pivot: int) -> int:
    return 1900 + yy if yy >= century_pivot else 2000 + yy


def _ytd_period(match: "re.Match[str]", century_pivot: int) -> PeriodInfo:
    yy = match.group(1)
    return PeriodInfo(
        year=_expand_two_digit_year(int(yy), century_pivot),
        kind=PeriodKind.YTD,
        period_label=f"Dec-{yy}",
    )


def _fiscal_year_period(match: "re.Match[str]", century_pivot: int) -> PeriodInfo:
    year = int(match.group(1))
    return PeriodInfo(year=year, kind=PeriodKind.FY, period_label=f"FY{year}")


PERIOD_RULES: Tuple[Tuple[Pattern[str], Callable[["re.Match[str]", int], PeriodInfo]], ...] = (
    (re.compile(r"Dec-?(\d{2})\s*YTD", re.IGNORECASE), _ytd_period),
    (re.compile(r"FY\s*(\d{4})", re.IGNORECASE), _fiscal_year_period),
)


def infer_period(
    column_label: Optional[str],
    century_pivot: int = DEFAULT_CENTURY_PIVOT,
) -> PeriodInfo:
    """Infer fiscal year, period kind and label from a column header.

    Args:
        column_label: Header text such as ``"Dec-24 YTD Actual"`` or ``"FY2023"``
        century_pivot: Two-digit years at or above this map to the 1900s

    Returns:
        PeriodInfo with every field None when no rule matches
    """
    if not column_label:
        return PeriodInfo()
    for pattern, build in PERIOD_RULES:
        match = pattern.search(column_label)
        if match:
            return build(match, century_pivot)
    return PeriodInfo()


def infer_header(first_line: Optional[str]) -> HeaderInfo:
    """Read ``in KRW bn`` style currency/scale hints from a table header."""
    if not first_line:
        return HeaderInfo()
    match = _HEADER_PATTERN.search(first_line)
    if not match:
        return HeaderInfo()
    return HeaderInfo(currency=match.group(1).upper(), unit=match.group(2).lower())
