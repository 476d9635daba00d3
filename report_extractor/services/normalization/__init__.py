"""Value, period and header normalization for extracted financial records."""

from report_extractor.services.normalization.parsers import (
    HeaderInfo,
    PeriodInfo,
    infer_header,
    infer_period,
    parse_numeric,
    parse_percentage,
    parse_value,
    to_canonical_key,
)
from report_extractor.services.normalization.record_normalizer import (
    RecordNormalizer,
    normalize_records,
)

__all__ = [
    "HeaderInfo",
    "PeriodInfo",
    "infer_header",
    "infer_period",
    "parse_numeric",
    "parse_percentage",
    "parse_value",
    "to_canonical_key",
    "RecordNormalizer",
    "normalize_records",
]
