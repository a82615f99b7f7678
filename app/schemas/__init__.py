"""
app/schemas package marker.
"""

from app.schemas.prices import HealthResponse, PriceImportSummaryResponse

__all__ = [
    "HealthResponse",
    "PriceImportSummaryResponse",
]
