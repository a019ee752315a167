"""
Marketing lead schemas.
"""
from typing import Optional
from pydantic import BaseModel


class MarketingLeadCreate(BaseModel):
    """Early access form on the marketing site."""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[str] = "hero-cta"


class MarketingLeadResponse(BaseModel):
    success: bool = True
    lead_id: str
