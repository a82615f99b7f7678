from __future__ import annotations

import unittest
from datetime import date
from decimal import Decimal

from app.domain.errors import HeaderFormatError, RowDecodeError
from app.domain.price_record import PriceRecord
from app.mappers.price_record_codec import EXPECTED_HEADER, PriceRecordCodec


class TestPriceRecordCodec(unittest.TestCase):
    def setUp(self) -> None:
        self.codec = PriceRecordCodec()

    def test_accepts_expected_header(self) -> None:
        self.codec.validate_header(["id", "name", "category", "price", "create_date"])

    def test_rejects_reordered_header(self) -> None:
        with self.assertRaises(HeaderFormatError):
            self.codec.validate_header(["id", "name", "price", "category", "create_date"])

    def test_rejects_header_with_extra_or_missing_columns(self) -> None:
        with self.assertRaises(HeaderFormatError):
            self.codec.validate_header([*EXPECTED_HEADER, "extra"])
        with self.assertRaises(HeaderFormatError):
            self.codec.validate_header(["id", "name", "category", "price"])

    def test_header_match_is_case_sensitive(self) -> None:
        with self.assertRaises(HeaderFormatError):
            self.codec.validate_header(["ID", "name", "category", "price", "create_date"])

    def test_decodes_row_with_two_decimal_price(self) -> None:
        record = self.codec.decode(["7", "Widget", "Tools", "12.5", "2024-01-15"])

        self.assertEqual(record.id, "7")
        self.assertEqual(record.name, "Widget")
        self.assertEqual(record.category, "Tools")
        self.assertEqual(str(record.price), "12.50")
        self.assertEqual(record.created_at, date(2024, 1, 15))

    def test_rounds_price_half_up(self) -> None:
        record = self.codec.decode(["1", "A", "B", "0.125", "2024-01-15"])
        self.assertEqual(record.price, Decimal("0.13"))

    def test_keeps_non_numeric_id_as_opaque_string(self) -> None:
        record = self.codec.decode(["sku-0042", "A", "B", "1", "2024-01-15"])
        self.assertEqual(record.id, "sku-0042")

    def test_rejects_short_row(self) -> None:
        with self.assertRaises(RowDecodeError):
            self.codec.decode(["1", "A", "B", "1.00"])

    def test_rejects_long_row(self) -> None:
        with self.assertRaises(RowDecodeError):
            self.codec.decode(["1", "A", "B", "1.00", "2024-01-15", "surplus"])

    def test_rejects_blank_id(self) -> None:
        with self.assertRaises(RowDecodeError) as ctx:
            self.codec.decode(["  ", "A", "B", "1.00", "2024-01-15"])
        self.assertEqual(ctx.exception.column, "id")

    def test_rejects_malformed_price(self) -> None:
        for raw in ("abc", "", "NaN", "Infinity", "-1.00", "100000000.00"):
            with self.subTest(price=raw):
                with self.assertRaises(RowDecodeError) as ctx:
                    self.codec.decode(["1", "A", "B", raw, "2024-01-15"])
                self.assertEqual(ctx.exception.column, "price")
                self.assertEqual(ctx.exception.value, raw)

    def test_rejects_price_that_is_not_a_plain_decimal(self) -> None:
        for raw in ("1_000", " 5.00", "5.00 ", "5.00\n", "１２.00", "0x10", "1,00"):
            with self.subTest(price=raw):
                with self.assertRaises(RowDecodeError) as ctx:
                    self.codec.decode(["1", "A", "B", raw, "2024-01-15"])
                self.assertEqual(ctx.exception.message, "Invalid price format.")

    def test_accepts_plain_decimal_price_forms(self) -> None:
        for raw, expected in (("+3", "3.00"), (".5", "0.50"), ("7.", "7.00"), ("1.5e2", "150.00")):
            with self.subTest(price=raw):
                record = self.codec.decode(["1", "A", "B", raw, "2024-01-15"])
                self.assertEqual(record.price, Decimal(expected))

    def test_rejects_non_ascii_date_digits(self) -> None:
        with self.assertRaises(RowDecodeError) as ctx:
            self.codec.decode(["1", "A", "B", "1.00", "２０２４-01-15"])
        self.assertEqual(ctx.exception.column, "create_date")

    def test_rejects_malformed_date(self) -> None:
        for raw in ("2024/01/15", "15-01-2024", "2024-1-5", "2024-02-30", "2024-01-15T10:00:00", " 2024-01-15", ""):
            with self.subTest(date=raw):
                with self.assertRaises(RowDecodeError) as ctx:
                    self.codec.decode(["1", "A", "B", "1.00", raw])
                self.assertEqual(ctx.exception.column, "create_date")

    def test_encodes_fixed_field_order_and_formats(self) -> None:
        record = PriceRecord(
            id="7",
            name="Widget",
            category="Tools",
            price=Decimal("12.5"),
            created_at=date(2024, 1, 5),
        )

        self.assertEqual(
            self.codec.encode(record),
            ["7", "Widget", "Tools", "12.50", "2024-01-05"],
        )

    def test_decode_of_encoded_record_round_trips(self) -> None:
        records = [
            PriceRecord(id="1", name="Widget", category="Tools", price=Decimal("0.00"), created_at=date(2024, 1, 1)),
            PriceRecord(id="abc", name="Gadget, large", category="Toys", price=Decimal("99999999.99"), created_at=date(1999, 12, 31)),
            PriceRecord(id="3", name='Quoted "name"', category="", price=Decimal("19.90"), created_at=date(2024, 2, 29)),
        ]

        for record in records:
            with self.subTest(record=record):
                self.assertEqual(self.codec.decode(self.codec.encode(record)), record)


if __name__ == "__main__":
    unittest.main()
