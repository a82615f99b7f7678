"""
app/domain/price_record.py

Domain models shared by the price archive import and export flows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


@dataclass(frozen=True)
class PriceRecord:
    """
    One priced item, normalized and ready for persistence.
    """

    id: str
    name: str
    category: str
    price: Decimal
    created_at: date


class UpsertOutcome(str, Enum):
    INSERTED = "inserted"
    IGNORED = "ignored"


@dataclass(frozen=True)
class StoreAggregate:
    """
    Store-wide totals computed over every persisted price record.
    """

    distinct_categories: int
    total_price: Decimal


@dataclass(frozen=True)
class RowValidationError:
    """
    One rejected row detail.
    """

    row_number: int
    message: str
    column: str | None = None
    value: str | None = None


@dataclass(frozen=True)
class ImportSummary:
    """
    End-of-run import summary.

    ``total_items`` is scoped to this import; ``total_categories`` and
    ``total_price`` describe the whole store after commit.
    """

    total_items: int
    total_categories: int
    total_price: Decimal
    rows_ignored: int = 0
    rows_failed: int = 0
    validation_errors: list[RowValidationError] = field(default_factory=list)
