"""
Pydantic models for receipt scanning.
"""

from pydantic import BaseModel, Field, field_serializer
from typing import Optional
from decimal import Decimal


class ScanRequest(BaseModel):
    """Body of a scan request: base64 image, optionally as a data URL."""
    image: Optional[str] = None


class ScanResult(BaseModel):
    """Fields extracted from one receipt's OCR text."""
    amount: Optional[Decimal] = None
    date: Optional[str] = None  # YYYY-MM-DD
    merchant: Optional[str] = None
    confidence: int = Field(default=0, ge=0, le=100)
    raw_text: str = Field(default="", alias="rawText")

    class Config:
        populate_by_name = True

    @field_serializer('amount', when_used='json')
    def _amount_as_number(self, amount: Optional[Decimal]) -> Optional[float]:
        return float(amount) if amount is not None else None


class ErrorResponse(BaseModel):
    """Error envelope returned by the scan endpoint."""
    error: str
    code: str
