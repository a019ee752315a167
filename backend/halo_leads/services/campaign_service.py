"""
Campaign creation and settings.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..exceptions import NotFoundError, ValidationError
from ..models import Campaign, CampaignStatus, Contractor
from ..models.campaign import SERVICE_RADII
from ..schemas.campaign import CampaignCreate
from .lead_lifecycle import get_owned_campaign
from .slug_service import SlugAllocator

logger = logging.getLogger(__name__)
settings = get_settings()


def ensure_contractor(db: Session, contractor_id: str, email: Optional[str] = None) -> Contractor:
    """Return the contractor row for a uid, creating a bare one on first use."""
    contractor = db.query(Contractor).filter(Contractor.id == contractor_id).first()
    if contractor is None:
        contractor = Contractor(id=contractor_id, email=email)
        db.add(contractor)
        db.commit()
        db.refresh(contractor)
    return contractor


def create_campaign(
    db: Session,
    contractor_id: str,
    data: CampaignCreate,
    allocator: SlugAllocator,
) -> Campaign:
    """
    Create an active campaign with a freshly allocated slug.

    If another request takes the same slug between probe and insert, the unique
    index rejects this insert and a new slug is allocated.
    """
    name = (data.campaign_name or "").strip()
    if not name:
        raise ValidationError("Campaign name is required", field="campaign_name")

    ensure_contractor(db, contractor_id)
    address = (data.showcase_address or "").strip() or None
    neighborhood = (data.neighborhood_name or "").strip() or address or name

    attempts = max(1, settings.slug_insert_retries)
    for attempt in range(1, attempts + 1):
        slug = allocator.allocate(db, name)
        campaign = Campaign(
            contractor_id=contractor_id,
            campaign_name=name,
            showcase_address=address,
            neighborhood_name=neighborhood,
            page_slug=slug,
            campaign_status=CampaignStatus.ACTIVE.value,
            qr_code_url=None,
        )
        db.add(campaign)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Slug {slug} taken concurrently (attempt {attempt}/{attempts})")
            if attempt == attempts:
                raise
            continue

        db.refresh(campaign)
        logger.info(f"Campaign {campaign.id} created with slug {slug}")
        return campaign


def get_active_campaign_by_slug(db: Session, slug: str) -> Campaign:
    """Public lookup used by the landing page."""
    campaign = db.query(Campaign).filter(Campaign.page_slug == slug).first()
    if not campaign or not campaign.is_active:
        raise NotFoundError("Campaign not found")
    return campaign


def update_campaign_settings(
    db: Session,
    campaign_id: str,
    contractor_id: str,
    service_radius_miles: Optional[int] = None,
    campaign_status: Optional[str] = None,
) -> Campaign:
    """Change service radius and/or status. The slug is never touched."""
    if service_radius_miles is not None and service_radius_miles not in SERVICE_RADII:
        raise ValidationError("Invalid service radius", field="service_radius_miles")
    if campaign_status is not None and campaign_status not in (s.value for s in CampaignStatus):
        raise ValidationError("Invalid campaign status", field="campaign_status")

    campaign = get_owned_campaign(db, campaign_id, contractor_id)

    if service_radius_miles is not None:
        campaign.service_radius_miles = service_radius_miles
    if campaign_status is not None:
        campaign.campaign_status = campaign_status

    db.commit()
    db.refresh(campaign)
    return campaign


def set_qr_code(db: Session, campaign_id: str, contractor_id: str, qr_code_url: str) -> Campaign:
    """Record where the generated QR image lives."""
    if not qr_code_url or not qr_code_url.strip():
        raise ValidationError("qr_code_url is required", field="qr_code_url")

    campaign = get_owned_campaign(db, campaign_id, contractor_id)
    campaign.qr_code_url = qr_code_url.strip()
    db.commit()
    db.refresh(campaign)
    return campaign
