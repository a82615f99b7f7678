"""
app/mappers/price_record_codec.py

Bidirectional mapping between one CSV row and one PriceRecord.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.domain.errors import HeaderFormatError, RowDecodeError
from app.domain.price_record import PriceRecord

EXPECTED_HEADER: tuple[str, ...] = ("id", "name", "category", "price", "create_date")

DATE_FORMAT = "%Y-%m-%d"
PRICE_QUANTUM = Decimal("0.01")

# NUMERIC(10, 2) upper bound.
MAX_PRICE = Decimal("99999999.99")

_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")
# Plain decimal literal: no whitespace, digit separators or special values.
_PRICE_PATTERN = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?$")


def quantize_price(value: Decimal) -> Decimal:
    """
    Round a decimal amount half-up to two places.
    """

    return value.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


class PriceRecordCodec:
    """
    Validates, parses, and formats price CSV rows.
    """

    def validate_header(self, header: Sequence[str]) -> None:
        """
        Require the header to match EXPECTED_HEADER exactly, in order and count.
        """

        if tuple(header) != EXPECTED_HEADER:
            raise HeaderFormatError(
                f"Invalid CSV header {list(header)!r}; expected {list(EXPECTED_HEADER)!r}."
            )

    def encode_header(self) -> list[str]:
        return list(EXPECTED_HEADER)

    def decode(self, row: Sequence[str]) -> PriceRecord:
        """
        Parse one data row into a PriceRecord.

        Raises RowDecodeError when the row cannot be used; the caller decides
        whether that is fatal.
        """

        if len(row) != len(EXPECTED_HEADER):
            raise RowDecodeError(
                f"Expected {len(EXPECTED_HEADER)} fields, got {len(row)}.",
                value=",".join(row),
            )

        record_id, name, category, raw_price, raw_date = row
        if not record_id.strip():
            raise RowDecodeError("Required value is missing.", column="id", value=record_id)

        return PriceRecord(
            id=record_id,
            name=name,
            category=category,
            price=self._parse_price(raw_price),
            created_at=self._parse_date(raw_date),
        )

    def encode(self, record: PriceRecord) -> list[str]:
        return [
            record.id,
            record.name,
            record.category,
            f"{quantize_price(record.price):.2f}",
            record.created_at.strftime(DATE_FORMAT),
        ]

    def _parse_price(self, raw: str) -> Decimal:
        if not _PRICE_PATTERN.fullmatch(raw):
            raise RowDecodeError("Invalid price format.", column="price", value=raw)
        try:
            value = Decimal(raw)
        except InvalidOperation as exc:
            raise RowDecodeError("Invalid price format.", column="price", value=raw) from exc

        if value < 0:
            raise RowDecodeError("Price must not be negative.", column="price", value=raw)

        try:
            normalized = quantize_price(value)
        except InvalidOperation as exc:
            # quantize overflows the context precision for huge exponents
            raise RowDecodeError("Price exceeds the storable range.", column="price", value=raw) from exc
        if normalized > MAX_PRICE:
            raise RowDecodeError("Price exceeds the storable range.", column="price", value=raw)
        return normalized

    def _parse_date(self, raw: str) -> date:
        if not _DATE_PATTERN.fullmatch(raw):
            raise RowDecodeError("Invalid date format.", column="create_date", value=raw)
        try:
            return datetime.strptime(raw, DATE_FORMAT).date()
        except ValueError as exc:
            raise RowDecodeError("Invalid date format.", column="create_date", value=raw) from exc
