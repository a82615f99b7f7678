"""
Repository-layer exceptions for the price store.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base exception for price store failures."""


class StoreWriteError(StoreError):
    """Raised when one record cannot be written; the transaction stays usable."""


class StoreReadError(StoreError):
    """Raised when stored records cannot be queried."""


class StoreTransactionError(StoreError):
    """Raised when the aggregate query or the commit fails."""
