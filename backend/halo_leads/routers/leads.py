"""
Leads router: public submission plus contractor read/update of a single lead.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_current_contractor_id
from ..schemas.lead import LeadSubmission, LeadSubmissionResponse, LeadResponse, LeadStatusUpdate
from ..services import lead_lifecycle
from ..services.dedup_service import DedupGuard, get_dedup_guard
from ..services.lead_intake import build_lead_notification, submit_lead
from ..services.notification_service import NotificationService, get_notification_service

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.post("", response_model=LeadSubmissionResponse, status_code=status.HTTP_201_CREATED)
def create_lead(
    submission: LeadSubmission,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    guard: DedupGuard = Depends(get_dedup_guard),
    notifier: NotificationService = Depends(get_notification_service),
):
    """Accept a homeowner submission from a campaign landing page."""
    lead = submit_lead(db, submission, guard)

    notification = build_lead_notification(lead)
    if notification:
        background_tasks.add_task(notifier.send_lead_notification, **notification)

    return LeadSubmissionResponse(
        message="Thank you! We'll contact you within 24 hours.",
        lead_id=lead.id,
    )


@router.get("/{lead_id}", response_model=LeadResponse)
def get_lead(
    lead_id: str,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Get a single lead owned by the current contractor."""
    return lead_lifecycle.get_owned_lead(db, lead_id, contractor_id)


@router.patch("/{lead_id}", response_model=LeadResponse)
def update_lead_status(
    lead_id: str,
    update: LeadStatusUpdate,
    contractor_id: str = Depends(get_current_contractor_id),
    db: Session = Depends(get_db),
):
    """Update a lead's status and/or contractor notes."""
    return lead_lifecycle.update_lead_status(
        db, lead_id, contractor_id, **update.model_dump(exclude_unset=True)
    )
