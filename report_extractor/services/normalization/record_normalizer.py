"""Turns raw model-extracted financial records into resolved, typed records.

Model-supplied fields always win; inferred values only fill gaps. A column
header that mentions "variance" is the strongest signal for the value kind
and is applied last.
"""

from typing import Iterable, List, Optional

from report_extractor.schemas.extraction import (
    FinancialRecord,
    NormalizedFinancialRecord,
    ValueKind,
)
from report_extractor.services.normalization.parsers import (
    DEFAULT_CENTURY_PIVOT,
    HeaderInfo,
    infer_header,
    infer_period,
    parse_value,
    to_canonical_key,
)
from report_extractor.utils.logging import get_logger

LOGGER = get_logger(__name__)

PERCENT_UNIT = "pct"


def _mentions_variance(column_label: str) -> bool:
    return "variance" in column_label.lower()


class RecordNormalizer:
    """Normalizer for one extraction batch.

    Attributes:
        header: Currency/unit read from the batch's table header line
        century_pivot: Pivot for two-digit years in column labels
    """

    def __init__(
        self,
        header: Optional[HeaderInfo] = None,
        century_pivot: int = DEFAULT_CENTURY_PIVOT,
    ):
        self.header = header or HeaderInfo()
        self.century_pivot = century_pivot

    def normalize(self, record: FinancialRecord) -> NormalizedFinancialRecord:
        """Resolve name, value, period, currency and unit for one record.

        Args:
            record: Raw record as returned by the model

        Returns:
            NormalizedFinancialRecord; ``value`` is None when unrecoverable
        """
        metric_name = (
            to_canonical_key(record.metric_name)
            if record.metric_name
            else to_canonical_key(record.source_label)
        )
        value = record.value
        unit = record.unit
        value_kind = record.value_kind
        quote = record.source.quote if record.source else None

        if value is None and quote:
            parsed = parse_value(quote)
            if parsed is not None:
                value = parsed.value
                if parsed.is_percentage:
                    unit = PERCENT_UNIT
                    if _mentions_variance(record.column_label):
                        value_kind = ValueKind.VARIANCE_PCT
                    else:
                        value_kind = value_kind or ValueKind.ACTUAL
            else:
                LOGGER.debug(
                    "Could not recover value from source quote",
                    extra={"metric_name": metric_name, "column_label": record.column_label},
                )

        period = infer_period(record.column_label, self.century_pivot)
        fiscal_year = record.fiscal_year if record.fiscal_year is not None else period.year
        period_kind = record.period_kind or period.kind
        period_label = record.period_label or period.period_label

        currency = record.currency or self.header.currency
        unit = unit or self.header.unit

        if _mentions_variance(record.column_label):
            value_kind = ValueKind.VARIANCE_PCT
            unit = unit or PERCENT_UNIT

        return NormalizedFinancialRecord(
            source_label=record.source_label,
            metric_name=metric_name,
            column_label=record.column_label,
            value=value,
            unit=unit,
            currency=currency,
            fiscal_year=fiscal_year,
            period_kind=period_kind,
            period_label=period_label,
            value_kind=value_kind or ValueKind.ACTUAL,
            source_page=record.source.page if record.source else None,
            source_quote=quote,
        )


def normalize_records(
    records: Iterable[FinancialRecord],
    header_line: str = "",
    century_pivot: int = DEFAULT_CENTURY_PIVOT,
) -> List[NormalizedFinancialRecord]:
    """Normalize a batch of records sharing one table header line."""
    normalizer = RecordNormalizer(infer_header(header_line), century_pivot)
    normalized = [normalizer.normalize(record) for record in records]
    LOGGER.info(
        f"Normalized {len(normalized)} financial records",
        extra={
            "resolved": sum(1 for r in normalized if r.is_resolved),
            "currency": normalizer.header.currency,
            "unit": normalizer.header.unit,
        },
    )
    return normalized
