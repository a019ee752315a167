"""
Campaign schemas for API validation.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class CampaignCreate(BaseModel):
    """Schema for creating a new Campaign."""
    campaign_name: str
    showcase_address: Optional[str] = None
    neighborhood_name: Optional[str] = None


class CampaignCreateResponse(BaseModel):
    success: bool = True
    campaign_id: str
    slug: str


class CampaignSettingsUpdate(BaseModel):
    """Contractor-editable settings; omitted fields stay unchanged."""
    service_radius_miles: Optional[int] = None
    campaign_status: Optional[str] = None


class QRCodeUpdate(BaseModel):
    qr_code_url: str


class CampaignResponse(BaseModel):
    """Schema for Campaign API response."""
    id: str
    contractor_id: str
    campaign_name: str
    neighborhood_name: Optional[str] = None
    showcase_address: Optional[str] = None
    page_slug: str
    campaign_status: str
    service_radius_miles: int
    qr_code_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PublicCampaignResponse(BaseModel):
    """What the public landing page needs; no owner details."""
    id: str
    campaign_name: str
    neighborhood_name: Optional[str] = None
    showcase_address: Optional[str] = None
    page_slug: str
    service_radius_miles: int
    qr_code_url: Optional[str] = None

    class Config:
        from_attributes = True


class DashboardCampaign(BaseModel):
    """Campaign row on the contractor dashboard."""
    id: str
    campaign_name: str
    showcase_address: Optional[str] = None
    campaign_status: str
    created_at: datetime
    lead_count: int = 0
    page_slug: str


class DashboardCampaignList(BaseModel):
    campaigns: List[DashboardCampaign]


class CampaignLeadSummary(BaseModel):
    """Contact details of a lead as shown under its campaign."""
    id: str
    name: str
    email: str
    phone: str
    address: Optional[str] = None
    notes: Optional[str] = None
    submitted_at: datetime

    class Config:
        from_attributes = True


class CampaignDetailsResponse(BaseModel):
    campaign: CampaignResponse
    leads: List[CampaignLeadSummary]
