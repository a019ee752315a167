"""
Lead schemas for API validation.
"""
from datetime import datetime
from typing import Any, Optional, List
from pydantic import BaseModel


class LeadSubmission(BaseModel):
    """Public landing page form. Field rules are checked by the intake service."""
    campaign_id: Optional[str] = None
    name: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None


class LeadSubmissionResponse(BaseModel):
    success: bool = True
    message: str
    lead_id: str


class LeadStatusUpdate(BaseModel):
    """Schema for updating lead status; omitted fields stay unchanged."""
    job_status: Optional[str] = None
    notes: Optional[str] = None


class ContactAttemptUpdate(BaseModel):
    """Dashboard contact tracking. Types are checked by the lifecycle service."""
    contact_attempt: Any = None
    is_cold_lead: Any = None
    inspector: Optional[str] = None
    internal_notes: Optional[str] = None


class TentativeDateUpdate(BaseModel):
    tentative_date: Optional[str] = None


class GeocodedLocation(BaseModel):
    lat: float
    lng: float
    address: str
    geocodedAt: Optional[str] = None


class LeadResponse(BaseModel):
    """Schema for Lead API response."""
    id: str
    campaign_id: str
    name: str
    address: Optional[str] = None
    email: str
    phone: str
    notes: Optional[str] = None
    submitted_at: datetime
    job_status: str = "new"
    contractor_notes: Optional[str] = None
    tentative_date: Optional[datetime] = None
    contact_attempt: int = 0
    is_cold_lead: bool = False
    inspector: Optional[str] = None
    internal_notes: Optional[str] = None
    is_promoted: bool = False
    geocoded_location: Optional[GeocodedLocation] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DashboardLeadResponse(LeadResponse):
    """Lead row with its campaign name, as listed on the dashboard."""
    campaign_name: Optional[str] = None


class LeadListResponse(BaseModel):
    leads: List[DashboardLeadResponse]
