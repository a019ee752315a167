"""
Read-side queries for the contractor dashboard.
"""
from datetime import timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from ..database import utcnow
from ..exceptions import ValidationError
from ..models import Campaign, CampaignStatus, Lead, JobState
from .lead_lifecycle import LEAD_STATUSES, get_owned_campaign

RECENT_LEADS_WINDOW = timedelta(days=7)


def list_leads(
    db: Session,
    contractor_id: str,
    campaign_id: Optional[str] = None,
    job_status: Optional[str] = None,
    include_promoted: bool = False,
) -> List[Lead]:
    """
    Leads across the contractor's campaigns, newest first.

    Promoted leads are listed as jobs and skipped unless a job_status filter
    or include_promoted asks for them.
    """
    if job_status and job_status not in LEAD_STATUSES:
        raise ValidationError("Invalid job status", field="job_status")

    query = (
        db.query(Lead)
        .join(Campaign, Lead.campaign_id == Campaign.id)
        .filter(Campaign.contractor_id == contractor_id)
    )
    if campaign_id:
        query = query.filter(Lead.campaign_id == campaign_id)
    if job_status:
        query = query.filter(Lead.job_status == job_status)
    elif not include_promoted:
        query = query.filter(Lead.is_promoted.is_(False))

    return query.order_by(desc(Lead.submitted_at)).all()


def get_jobs_by_status(db: Session, contractor_id: str) -> Dict[str, List[Lead]]:
    """Promoted leads grouped by job state."""
    jobs = (
        db.query(Lead)
        .join(Campaign, Lead.campaign_id == Campaign.id)
        .filter(Campaign.contractor_id == contractor_id, Lead.is_promoted.is_(True))
        .order_by(Lead.scheduled_inspection_date.asc(), desc(Lead.promoted_at))
        .all()
    )

    grouped: Dict[str, List[Lead]] = {state.value: [] for state in JobState}
    for job in jobs:
        grouped.setdefault(job.job_state, []).append(job)
    return grouped


def get_summary(db: Session, contractor_id: str) -> dict:
    """Campaign and lead counts plus the five most recent leads."""
    campaigns = db.query(Campaign).filter(Campaign.contractor_id == contractor_id).all()
    campaign_ids = [c.id for c in campaigns]
    active = sum(1 for c in campaigns if c.campaign_status == CampaignStatus.ACTIVE.value)

    total_leads = 0
    recent_count = 0
    recent: List[Lead] = []
    if campaign_ids:
        total_leads = (
            db.query(func.count(Lead.id)).filter(Lead.campaign_id.in_(campaign_ids)).scalar() or 0
        )
        recent_count = (
            db.query(func.count(Lead.id))
            .filter(
                Lead.campaign_id.in_(campaign_ids),
                Lead.submitted_at > utcnow() - RECENT_LEADS_WINDOW,
            )
            .scalar() or 0
        )
        recent = (
            db.query(Lead)
            .filter(Lead.campaign_id.in_(campaign_ids))
            .order_by(desc(Lead.submitted_at))
            .limit(5)
            .all()
        )

    return {
        "stats": {
            "total_campaigns": len(campaigns),
            "active_campaigns": active,
            "total_leads": total_leads,
            "recent_leads": recent_count,
        },
        "recent_leads": [
            {
                "id": lead.id,
                "campaign_id": lead.campaign_id,
                "campaign_name": lead.campaign.campaign_name,
                "name": lead.name,
                "email": lead.email,
                "phone": lead.phone,
                "submitted_at": lead.submitted_at,
            }
            for lead in recent
        ],
    }


def list_campaigns(db: Session, contractor_id: str) -> List[Tuple[Campaign, int]]:
    """The contractor's campaigns, newest first, each with its lead count."""
    return (
        db.query(Campaign, func.count(Lead.id))
        .outerjoin(Lead, Lead.campaign_id == Campaign.id)
        .filter(Campaign.contractor_id == contractor_id)
        .group_by(Campaign.id)
        .order_by(desc(Campaign.created_at))
        .all()
    )


def get_campaign_details(db: Session, campaign_id: str, contractor_id: str) -> Tuple[Campaign, List[Lead]]:
    """An owned campaign and all of its leads, newest first."""
    campaign = get_owned_campaign(db, campaign_id, contractor_id)
    leads = campaign.leads.order_by(desc(Lead.submitted_at)).all()
    return campaign, leads
