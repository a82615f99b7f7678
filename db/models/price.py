"""
db/models/price.py

Persisted price record keyed by its external identifier.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class Price(Base):
    __tablename__ = "prices"

    id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        comment="External identifier supplied by the uploaded CSV",
    )
    created_at: Mapped[date] = mapped_column(Date, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        Index("ix_prices_category", "category"),
    )
