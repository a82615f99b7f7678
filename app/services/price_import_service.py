"""
app/services/price_import_service.py

Service layer for importing a price archive into the store.

Flow for one upload:

    1. Open the ZIP archive and pick the ``data.csv`` entry (exact base name).
    2. Validate the header; a mismatch aborts before the store is touched.
    3. Decode every data row; rejected rows are logged and skipped.
    4. In one store transaction: upsert each record (insert-or-ignore on id),
       read the store-wide aggregate, commit.

``total_items`` counts rows inserted by this upload only; duplicates already
present in the store (or repeated within the archive) are ignored and not
counted. Category and price totals describe the whole store after commit.
"""

from __future__ import annotations

import csv
import io
import logging
from functools import lru_cache

from app.config import get_price_import_settings
from app.domain.errors import HeaderFormatError, RowDecodeError
from app.domain.price_record import ImportSummary, PriceRecord, RowValidationError, UpsertOutcome
from app.mappers.price_archive import ARCHIVE_ENTRY_NAME, read_entry
from app.mappers.price_record_codec import PriceRecordCodec
from app.repositories.errors import StoreWriteError
from app.repositories.price_repository import PriceStore, get_price_store

logger = logging.getLogger(__name__)


class PriceImportService:
    """
    Coordinates archive extraction, row decoding, and transactional upserts.
    """

    def __init__(
        self,
        *,
        store: PriceStore,
        max_validation_errors: int = 500,
        log_validation_errors: bool = True,
        codec: PriceRecordCodec | None = None,
        entry_name: str = ARCHIVE_ENTRY_NAME,
    ) -> None:
        self._store = store
        self._max_validation_errors = max(1, max_validation_errors)
        self._log_validation_errors = log_validation_errors
        self._codec = codec or PriceRecordCodec()
        self._entry_name = entry_name

    def import_archive(self, payload: bytes) -> ImportSummary:
        """
        Import one ZIP archive and return the post-commit summary.

        Raises:
            ArchiveFormatError:    payload is not a readable ZIP archive.
            HeaderFormatError:     CSV header mismatch or non UTF-8 content.
            StoreTransactionError: aggregate or commit failed; nothing persisted.
        """

        captured_errors: list[RowValidationError] = []
        entry = read_entry(payload, self._entry_name)

        batch: list[tuple[int, PriceRecord]] = []
        rows_failed = 0
        if entry is not None:
            batch, rows_failed = self._decode_entry(entry, captured_errors)

        inserted = 0
        ignored = 0
        with self._store.begin() as transaction:
            for row_number, record in batch:
                try:
                    outcome = transaction.upsert(record)
                except StoreWriteError as exc:
                    rows_failed += 1
                    self._record_error(
                        captured_errors,
                        RowValidationError(
                            row_number=row_number,
                            column="id",
                            message=str(exc),
                            value=record.id,
                        ),
                    )
                    continue

                if outcome is UpsertOutcome.INSERTED:
                    inserted += 1
                else:
                    ignored += 1

            aggregate = transaction.aggregate()
            transaction.commit()

        logger.info(
            "Price archive imported inserted=%d ignored=%d failed=%d "
            "total_categories=%d total_price=%s",
            inserted,
            ignored,
            rows_failed,
            aggregate.distinct_categories,
            aggregate.total_price,
        )
        return ImportSummary(
            total_items=inserted,
            total_categories=aggregate.distinct_categories,
            total_price=aggregate.total_price,
            rows_ignored=ignored,
            rows_failed=rows_failed,
            validation_errors=captured_errors,
        )

    # ------------------------------------------------------------------
    # Import internals
    # ------------------------------------------------------------------

    def _decode_entry(
        self,
        entry: bytes,
        captured_errors: list[RowValidationError],
    ) -> tuple[list[tuple[int, PriceRecord]], int]:
        try:
            text = entry.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise HeaderFormatError("CSV must be UTF-8 encoded.") from exc

        reader = csv.reader(io.StringIO(text, newline=""))
        try:
            header = next(reader, None)
        except csv.Error as exc:
            raise HeaderFormatError(f"Invalid CSV format: {exc}") from exc

        if header is None:
            logger.warning("CSV entry %r is empty; nothing to import", self._entry_name)
            return [], 0
        self._codec.validate_header(header)

        batch: list[tuple[int, PriceRecord]] = []
        rows_failed = 0
        while True:
            try:
                row = next(reader)
            except StopIteration:
                break
            except csv.Error as exc:
                rows_failed += 1
                self._record_error(
                    captured_errors,
                    RowValidationError(row_number=reader.line_num, message=f"Unreadable CSV row: {exc}"),
                )
                continue

            # csv.reader yields [] for blank lines.
            if not row:
                continue

            try:
                record = self._codec.decode(row)
            except RowDecodeError as exc:
                rows_failed += 1
                self._record_error(
                    captured_errors,
                    RowValidationError(
                        row_number=reader.line_num,
                        column=exc.column,
                        message=exc.message,
                        value=exc.value,
                    ),
                )
                continue

            batch.append((reader.line_num, record))

        return batch, rows_failed

    def _record_error(
        self,
        captured_errors: list[RowValidationError],
        error: RowValidationError,
    ) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Price row rejected row=%s column=%s message=%s value=%r",
                error.row_number,
                error.column,
                error.message,
                error.value,
            )

        if len(captured_errors) < self._max_validation_errors:
            captured_errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_price_import_service() -> PriceImportService:
    """
    Build and cache the import service with env-driven settings.
    """
    settings = get_price_import_settings()
    return PriceImportService(
        store=get_price_store(),
        max_validation_errors=settings.max_validation_errors,
        log_validation_errors=settings.log_validation_errors,
    )
