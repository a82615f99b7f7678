"""
app/mappers package marker.
"""

from app.mappers.price_archive import ARCHIVE_ENTRY_NAME, EXPORT_FILE_NAME, build_archive, read_entry
from app.mappers.price_record_codec import EXPECTED_HEADER, PriceRecordCodec, quantize_price

__all__ = [
    "ARCHIVE_ENTRY_NAME",
    "EXPECTED_HEADER",
    "EXPORT_FILE_NAME",
    "PriceRecordCodec",
    "build_archive",
    "quantize_price",
    "read_entry",
]
