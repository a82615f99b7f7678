"""
app/schemas/prices.py

Response schemas for price archive endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class PriceImportSummaryResponse(BaseModel):
    """
    API response model for one price archive import.
    """

    total_items: int = Field(..., ge=0, description="Rows inserted by this upload")
    total_categories: int = Field(..., ge=0, description="Distinct categories in the store")
    total_price: float = Field(..., ge=0, description="Sum of all stored prices, 2 decimals")


class HealthResponse(BaseModel):
    status: str = "ok"
