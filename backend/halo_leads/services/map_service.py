"""
Per-campaign map data: geocoded, classified leads plus coverage counts.
"""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..database import utcnow
from ..models import Lead, LeadStatus
from ..schemas.map import MapLead, MapLeadsResponse, MapLocation, MapMetadata
from .geocode_cache import GeocodeCache
from .lead_lifecycle import get_owned_campaign
from .lead_status import classify

logger = logging.getLogger(__name__)


async def get_map_leads(
    db: Session,
    campaign_id: str,
    contractor_id: str,
    cache: GeocodeCache,
    now: Optional[datetime] = None,
) -> MapLeadsResponse:
    """Build map markers for every lead of the campaign that is not a completed job."""
    get_owned_campaign(db, campaign_id, contractor_id)
    now = now or utcnow()

    leads = (
        db.query(Lead)
        .filter(
            Lead.campaign_id == campaign_id,
            Lead.job_status != LeadStatus.COMPLETED.value,
        )
        .order_by(desc(Lead.submitted_at))
        .all()
    )

    with_address = [lead for lead in leads if lead.address]
    locations = await cache.resolve_many(db, with_address)

    map_leads = []
    for lead in leads:
        location = locations.get(lead.id)
        map_leads.append(MapLead(
            id=lead.id,
            name=lead.name,
            address=lead.address,
            location=MapLocation(lat=location.lat, lng=location.lng) if location else None,
            status=classify(lead, now).value,
            submitted_at=lead.submitted_at,
            job_status=lead.job_status,
        ))

    mapped = sum(1 for m in map_leads if m.location is not None)
    without_address = len(leads) - len(with_address)
    failed = len(with_address) - mapped

    if failed:
        logger.warning(f"{failed} lead(s) in campaign {campaign_id} could not be geocoded")

    return MapLeadsResponse(
        leads=map_leads,
        metadata=MapMetadata(
            total_leads=len(leads),
            mapped_leads=mapped,
            leads_without_address=without_address,
            leads_with_failed_geocode=failed,
        ),
    )
