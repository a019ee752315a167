"""
Campaigns router: creation, settings, public lookup and map data.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_contractor_id
from ..schemas.campaign import (
    CampaignCreate, CampaignCreateResponse, CampaignResponse,
    CampaignSettingsUpdate, PublicCampaignResponse, QRCodeUpdate,
)
from ..schemas.map import MapLeadsResponse
from ..services import campaign_service
from ..services.geocode_cache import GeocodeCache, get_geocode_cache
from ..services.map_service import get_map_leads
from ..services.slug_service import SlugAllocator, get_slug_allocator

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


@router.post("", response_model=CampaignCreateResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(
    data: CampaignCreate,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
    allocator: SlugAllocator = Depends(get_slug_allocator),
):
    """Create a new campaign (assigned to current contractor)."""
    campaign = campaign_service.create_campaign(db, contractor_id, data, allocator)
    return CampaignCreateResponse(campaign_id=campaign.id, slug=campaign.page_slug)


@router.get("/slug/{slug}", response_model=PublicCampaignResponse)
def get_campaign_by_slug(slug: str, db: Session = Depends(get_db)):
    """Public landing page data for an active campaign."""
    return campaign_service.get_active_campaign_by_slug(db, slug)


@router.patch("/{campaign_id}/settings", response_model=CampaignResponse)
def update_campaign_settings(
    campaign_id: str,
    update: CampaignSettingsUpdate,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Update service radius and/or status (must belong to current contractor)."""
    return campaign_service.update_campaign_settings(
        db, campaign_id, contractor_id,
        service_radius_miles=update.service_radius_miles,
        campaign_status=update.campaign_status,
    )


@router.put("/{campaign_id}/qr-code", response_model=CampaignResponse)
def set_qr_code(
    campaign_id: str,
    update: QRCodeUpdate,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Store the location of the campaign's generated QR image."""
    return campaign_service.set_qr_code(db, campaign_id, contractor_id, update.qr_code_url)


@router.get("/{campaign_id}/map-leads", response_model=MapLeadsResponse)
async def map_leads(
    campaign_id: str,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
    cache: GeocodeCache = Depends(get_geocode_cache),
):
    """Geocoded, classified leads for the campaign map."""
    return await get_map_leads(db, campaign_id, contractor_id, cache)
