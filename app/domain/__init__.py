"""
app/domain package marker.
"""

from app.domain.errors import (
    ArchiveBuildError,
    ArchiveFormatError,
    EncodingError,
    HeaderFormatError,
    PriceArchiveError,
    RowDecodeError,
    TransportError,
)
from app.domain.price_record import (
    ImportSummary,
    PriceRecord,
    RowValidationError,
    StoreAggregate,
    UpsertOutcome,
)

__all__ = [
    "ArchiveBuildError",
    "ArchiveFormatError",
    "EncodingError",
    "HeaderFormatError",
    "ImportSummary",
    "PriceArchiveError",
    "PriceRecord",
    "RowDecodeError",
    "RowValidationError",
    "StoreAggregate",
    "TransportError",
    "UpsertOutcome",
]
