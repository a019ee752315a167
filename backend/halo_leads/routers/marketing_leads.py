"""
Marketing leads router: early access requests from the marketing site.
"""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.marketing_lead import MarketingLeadCreate, MarketingLeadResponse
from ..services.dedup_service import DedupGuard, get_dedup_guard
from ..services.lead_intake import submit_marketing_lead
from ..services.notification_service import NotificationService, get_notification_service

router = APIRouter(prefix="/api/marketing-leads", tags=["marketing"])


@router.post("", response_model=MarketingLeadResponse)
def create_marketing_lead(
    payload: MarketingLeadCreate,
    background_tasks: BackgroundTasks,
    utm_source: Optional[str] = Query(None),
    utm_campaign: Optional[str] = Query(None),
    user_agent: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    guard: DedupGuard = Depends(get_dedup_guard),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Store an early access request; the notification email never blocks the reply."""
    lead = submit_marketing_lead(
        db, payload, guard,
        utm_source=utm_source,
        utm_campaign=utm_campaign,
        user_agent=user_agent,
    )

    background_tasks.add_task(notifier.send_marketing_notification, {
        "id": lead.id,
        "name": lead.name,
        "email": lead.email,
        "phone": lead.phone,
        "source": lead.source,
    })

    return MarketingLeadResponse(lead_id=lead.id)
