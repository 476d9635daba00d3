"""Unit tests for RecordNormalizer."""

import pytest

from report_extractor.schemas.extraction import (
    FinancialRecord,
    PeriodKind,
    SourceRef,
    ValueKind,
)
from report_extractor.services.normalization import (
    HeaderInfo,
    RecordNormalizer,
    normalize_records,
)


def _record(**overrides) -> FinancialRecord:
    data = {"source_label": "Revenue", "column_label": "Dec-24 YTD Actual"}
    data.update(overrides)
    return FinancialRecord(**data)


def test_recovers_negative_value_from_quote():
    """Parenthesized quote fills a missing value along with the period."""
    record = _record(value=None, source=SourceRef(quote="(45.2)"))

    result = RecordNormalizer().normalize(record)

    assert result.metric_name == "revenue"
    assert result.value == pytest.approx(-45.2)
    assert result.fiscal_year == 2024
    assert result.period_kind == PeriodKind.YTD
    assert result.period_label == "Dec-24"
    assert result.value_kind == ValueKind.ACTUAL
    assert result.is_resolved


def test_unrecoverable_value_stays_unresolved():
    record = _record(
        source_label="EBITDA Margin",
        column_label="Variance",
        value=None,
        source=SourceRef(quote="garbage"),
    )

    result = RecordNormalizer().normalize(record)

    assert result.value is None
    assert not result.is_resolved


def test_metric_name_prefers_model_value():
    record = _record(metric_name="Total Sales", value=1.0)

    assert RecordNormalizer().normalize(record).metric_name == "total_sales"


def test_model_fields_win_over_inferred_ones():
    record = _record(
        value=10.0,
        fiscal_year=2023,
        period_kind=PeriodKind.FY,
        period_label="FY2023",
        currency="USD",
        unit="mn",
    )
    normalizer = RecordNormalizer(header=HeaderInfo(currency="KRW", unit="bn"))

    result = normalizer.normalize(record)

    assert result.fiscal_year == 2023
    assert result.period_kind == PeriodKind.FY
    assert result.period_label == "FY2023"
    assert result.currency == "USD"
    assert result.unit == "mn"


def test_header_fills_missing_currency_and_unit():
    record = _record(value=10.0)
    normalizer = RecordNormalizer(header=HeaderInfo(currency="KRW", unit="bn"))

    result = normalizer.normalize(record)

    assert result.currency == "KRW"
    assert result.unit == "bn"


def test_percent_quote_sets_pct_unit():
    record = _record(value=None, source=SourceRef(quote="12.7%"))
    normalizer = RecordNormalizer(header=HeaderInfo(currency="KRW", unit="bn"))

    result = normalizer.normalize(record)

    assert result.value == pytest.approx(12.7)
    assert result.unit == "pct"
    assert result.value_kind == ValueKind.ACTUAL


def test_variance_column_overrides_value_kind():
    record = _record(
        column_label="Variance vs budget",
        value=3.0,
        value_kind=ValueKind.ACTUAL,
    )

    result = RecordNormalizer().normalize(record)

    assert result.value_kind == ValueKind.VARIANCE_PCT
    assert result.unit == "pct"


def test_variance_column_keeps_explicit_unit():
    record = _record(column_label="Variance", value=3.0, unit="bn")

    result = RecordNormalizer().normalize(record)

    assert result.value_kind == ValueKind.VARIANCE_PCT
    assert result.unit == "bn"


def test_variance_percent_quote():
    record = _record(column_label="Variance", value=None, source=SourceRef(quote="(1.5%)"))

    result = RecordNormalizer().normalize(record)

    assert result.value == pytest.approx(-1.5)
    assert result.value_kind == ValueKind.VARIANCE_PCT
    assert result.unit == "pct"


def test_keeps_source_attribution():
    record = _record(value=5.0, source=SourceRef(page=7, quote="5.0"))

    result = RecordNormalizer().normalize(record)

    assert result.source_page == 7
    assert result.source_quote == "5.0"


def test_normalize_records_reads_header_line():
    records = [_record(value=1.0), _record(source_label="EBITDA", value=2.0)]

    results = normalize_records(records, "Financial Highlights (in USD mn)")

    assert [r.metric_name for r in results] == ["revenue", "ebitda"]
    assert all(r.currency == "USD" and r.unit == "mn" for r in results)


def test_normalize_records_honours_century_pivot():
    records = [_record(column_label="Dec-75 YTD", value=1.0)]

    assert normalize_records(records, century_pivot=80)[0].fiscal_year == 2075
    assert normalize_records(records)[0].fiscal_year == 1975
