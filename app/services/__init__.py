"""
app/services package marker.
"""

from app.services.price_export_service import PriceExportService, get_price_export_service
from app.services.price_import_service import PriceImportService, get_price_import_service

__all__ = [
    "PriceExportService",
    "PriceImportService",
    "get_price_export_service",
    "get_price_import_service",
]
