"""
app/repositories package marker.
"""

from app.repositories.errors import StoreError, StoreReadError, StoreTransactionError, StoreWriteError
from app.repositories.price_repository import (
    PriceRepository,
    PriceStore,
    PriceStoreTransaction,
    SQLAlchemyPriceStore,
    get_price_store,
)

__all__ = [
    "PriceRepository",
    "PriceStore",
    "PriceStoreTransaction",
    "SQLAlchemyPriceStore",
    "StoreError",
    "StoreReadError",
    "StoreTransactionError",
    "StoreWriteError",
    "get_price_store",
]
