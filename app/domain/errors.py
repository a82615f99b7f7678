"""
Domain exceptions for price archive import and export.
"""

from __future__ import annotations


class PriceArchiveError(Exception):
    """Base exception for price archive processing failures."""


class TransportError(PriceArchiveError):
    """Raised when the uploaded byte stream cannot be read."""


class ArchiveFormatError(PriceArchiveError):
    """Raised when the upload is not a readable ZIP archive."""


class HeaderFormatError(PriceArchiveError, ValueError):
    """Raised when the CSV header does not match the expected columns."""


class RowDecodeError(PriceArchiveError, ValueError):
    """
    Raised when one CSV data row cannot be decoded into a price record.
    """

    def __init__(
        self,
        message: str,
        *,
        column: str | None = None,
        value: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.column = column
        self.value = value


class EncodingError(PriceArchiveError):
    """Raised when stored records cannot be serialized to CSV."""


class ArchiveBuildError(PriceArchiveError):
    """Raised when the export ZIP archive cannot be written."""
