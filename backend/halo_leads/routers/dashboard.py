"""
Dashboard router: contractor views and lead/job lifecycle actions.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_contractor_id
from ..schemas.campaign import (
    CampaignDetailsResponse, CampaignLeadSummary, CampaignResponse, DashboardCampaign, DashboardCampaignList,
)
from ..schemas.job import JobPromote, JobResponse, JobUpdate, JobsByStatus, JobsResponse
from ..schemas.lead import (
    ContactAttemptUpdate, DashboardLeadResponse, LeadListResponse, LeadResponse, TentativeDateUpdate,
)
from ..services import dashboard_service, lead_lifecycle

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _lead_row(lead) -> DashboardLeadResponse:
    row = DashboardLeadResponse.model_validate(lead)
    row.campaign_name = lead.campaign.campaign_name if lead.campaign else None
    return row


@router.get("/summary")
def get_summary(
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Campaign and lead counts for the dashboard header."""
    return dashboard_service.get_summary(db, contractor_id)


@router.get("/campaigns", response_model=DashboardCampaignList)
def list_campaigns(
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Campaigns with lead counts, newest first."""
    rows = dashboard_service.list_campaigns(db, contractor_id)
    return DashboardCampaignList(campaigns=[
        DashboardCampaign(
            id=campaign.id,
            campaign_name=campaign.campaign_name,
            showcase_address=campaign.showcase_address,
            campaign_status=campaign.campaign_status,
            created_at=campaign.created_at,
            lead_count=lead_count,
            page_slug=campaign.page_slug,
        )
        for campaign, lead_count in rows
    ])


@router.get("/campaigns/{campaign_id}", response_model=CampaignDetailsResponse)
def get_campaign_details(
    campaign_id: str,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """One owned campaign and its leads."""
    campaign, leads = dashboard_service.get_campaign_details(db, campaign_id, contractor_id)
    return CampaignDetailsResponse(
        campaign=CampaignResponse.model_validate(campaign),
        leads=[CampaignLeadSummary.model_validate(lead) for lead in leads],
    )


@router.get("/leads", response_model=LeadListResponse)
def list_leads(
    campaign_id: Optional[str] = Query(None),
    job_status: Optional[str] = Query(None),
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """List leads across the contractor's campaigns."""
    leads = dashboard_service.list_leads(db, contractor_id, campaign_id=campaign_id, job_status=job_status)
    return LeadListResponse(leads=[_lead_row(lead) for lead in leads])


@router.patch("/leads/{lead_id}/contact-attempt", response_model=LeadResponse)
def record_contact_attempt(
    lead_id: str,
    update: ContactAttemptUpdate,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Store the contact attempt counter and cold flag."""
    extra = update.model_dump(exclude_unset=True, include={"inspector", "internal_notes"})
    return lead_lifecycle.record_contact_attempt(
        db, lead_id, contractor_id,
        contact_attempt=update.contact_attempt,
        is_cold_lead=update.is_cold_lead,
        **extra,
    )


@router.patch("/leads/{lead_id}/tentative-date", response_model=LeadResponse)
def set_tentative_date(
    lead_id: str,
    update: TentativeDateUpdate,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Pencil a lead onto the calendar (null clears it)."""
    return lead_lifecycle.set_tentative_date(db, lead_id, contractor_id, update.tentative_date)


@router.delete("/leads/{lead_id}/tentative-date", response_model=LeadResponse)
def clear_tentative_date(
    lead_id: str,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Take a lead off the calendar."""
    return lead_lifecycle.set_tentative_date(db, lead_id, contractor_id, None)


@router.patch("/leads/{lead_id}/restore", response_model=LeadResponse)
def restore_cold_lead(
    lead_id: str,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Move a lead out of the cold bucket."""
    return lead_lifecycle.restore_cold_lead(db, lead_id, contractor_id)


@router.get("/jobs", response_model=JobsResponse)
def list_jobs(
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Jobs grouped by status."""
    grouped = dashboard_service.get_jobs_by_status(db, contractor_id)
    return JobsResponse(jobs=JobsByStatus(**{
        state: [JobResponse.from_lead(job) for job in jobs]
        for state, jobs in grouped.items()
    }))


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def promote_lead(
    payload: JobPromote,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Promote a lead to a job."""
    fields = payload.model_dump(exclude_unset=True, exclude={"lead_id"})
    lead = lead_lifecycle.promote_lead_to_job(db, payload.lead_id, contractor_id, **fields)
    return JobResponse.from_lead(lead)


@router.patch("/jobs/{lead_id}", response_model=JobResponse)
def update_job(
    lead_id: str,
    update: JobUpdate,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Update a job's status, date, inspector or notes."""
    lead = lead_lifecycle.update_job(db, lead_id, contractor_id, **update.model_dump(exclude_unset=True))
    return JobResponse.from_lead(lead)


@router.post("/jobs/{lead_id}/unschedule", response_model=LeadResponse)
def unschedule_job(
    lead_id: str,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Turn a job back into an active lead."""
    return lead_lifecycle.unschedule_job(db, lead_id, contractor_id)


@router.post("/jobs/{lead_id}/cold", response_model=LeadResponse)
def mark_job_as_cold(
    lead_id: str,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Park a lead or job in the cold bucket."""
    return lead_lifecycle.mark_job_as_cold(db, lead_id, contractor_id)
