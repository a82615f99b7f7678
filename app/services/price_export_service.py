"""
app/services/price_export_service.py

Export the full price store as a ZIP archive holding one ``data.csv`` entry.

Records are read inside one store transaction so the export reflects a single
committed state. Row order follows the store and is not part of the contract.
The archive is built fully in memory; on any failure no bytes are returned.
"""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Sequence
from functools import lru_cache

from app.domain.errors import EncodingError
from app.domain.price_record import PriceRecord
from app.mappers.price_archive import ARCHIVE_ENTRY_NAME, build_archive
from app.mappers.price_record_codec import PriceRecordCodec
from app.repositories.price_repository import PriceStore, get_price_store

logger = logging.getLogger(__name__)


class PriceExportService:
    """
    Serialize stored price records into the upload archive format.
    """

    def __init__(
        self,
        *,
        store: PriceStore,
        codec: PriceRecordCodec | None = None,
        entry_name: str = ARCHIVE_ENTRY_NAME,
    ) -> None:
        self._store = store
        self._codec = codec or PriceRecordCodec()
        self._entry_name = entry_name

    def export_archive(self) -> bytes:
        """
        Return ZIP bytes containing every stored record.

        Raises:
            StoreError:        records could not be read.
            EncodingError:     records could not be written as CSV.
            ArchiveBuildError: the ZIP container could not be written.
        """

        with self._store.begin() as transaction:
            records = transaction.query_all()

        archive = build_archive(self.encode_csv(records), self._entry_name)
        logger.info(
            "Price archive exported records=%d archive_bytes=%d",
            len(records),
            len(archive),
        )
        return archive

    def encode_csv(self, records: Sequence[PriceRecord]) -> bytes:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        try:
            writer.writerow(self._codec.encode_header())
            for record in records:
                writer.writerow(self._codec.encode(record))
            return buffer.getvalue().encode("utf-8")
        except (csv.Error, UnicodeEncodeError) as exc:
            raise EncodingError(f"Failed to write CSV: {exc}") from exc


@lru_cache(maxsize=1)
def get_price_export_service() -> PriceExportService:
    return PriceExportService(store=get_price_store())
