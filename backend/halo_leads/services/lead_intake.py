"""
Public intake for homeowner leads and marketing early access requests.
"""
import logging
import re
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..exceptions import DuplicateError, NotFoundError, ValidationError
from ..models import AnalyticsEvent, Campaign, Lead, LeadStatus, MarketingLead
from ..schemas.lead import LeadSubmission
from ..schemas.marketing_lead import MarketingLeadCreate
from .dedup_service import DedupGuard, normalize_email

logger = logging.getLogger(__name__)
settings = get_settings()

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _validate_submission(submission: LeadSubmission) -> None:
    if not all([submission.campaign_id, submission.name, submission.address,
                submission.email, submission.phone]):
        raise ValidationError("All required fields must be provided")

    if not EMAIL_RE.match(submission.email.strip()):
        raise ValidationError("Invalid email format", field="email")

    if len(re.sub(r"\D", "", submission.phone)) != 10:
        raise ValidationError("Phone number must be 10 digits", field="phone")

    if len(submission.name.strip()) < 2:
        raise ValidationError("Name must be at least 2 characters", field="name")

    if len(submission.address.strip()) < 10:
        raise ValidationError("Please provide a complete address", field="address")


def submit_lead(db: Session, submission: LeadSubmission, guard: DedupGuard) -> Lead:
    """
    Validate and store a landing page submission as a new lead.

    Raises:
        ValidationError: bad fields, or the campaign is inactive
        NotFoundError: unknown campaign
        DuplicateError: same email hit this campaign inside the dedup window
    """
    _validate_submission(submission)

    campaign = db.query(Campaign).filter(Campaign.id == submission.campaign_id).first()
    if not campaign:
        raise NotFoundError("Campaign not found")
    if not campaign.is_active:
        raise ValidationError("This campaign is no longer accepting submissions")

    email = normalize_email(submission.email)
    if guard.is_duplicate(db, campaign.id, email):
        logger.info(f"Duplicate lead suppressed for campaign {campaign.id}")
        raise DuplicateError(
            "You have already submitted a request recently. We'll be in touch soon!"
        )

    lead = Lead(
        campaign_id=campaign.id,
        name=submission.name.strip(),
        address=submission.address.strip(),
        email=email,
        phone=submission.phone,
        notes=(submission.notes or "").strip() or None,
        job_status=LeadStatus.NEW.value,
    )
    db.add(lead)
    db.commit()
    db.refresh(lead)

    logger.info(f"New lead {lead.id} submitted for campaign {campaign.id}")
    return lead


def build_lead_notification(lead: Lead) -> Optional[Dict[str, Any]]:
    """Arguments for NotificationService.send_lead_notification, or None without a contractor email."""
    campaign = lead.campaign
    contractor = campaign.contractor if campaign else None
    if not contractor or not contractor.email:
        logger.error(f"Could not resolve contractor email for lead {lead.id}")
        return None

    return {
        "contractor_email": contractor.email,
        "contractor_name": contractor.name or "",
        "lead_data": {
            "name": lead.name,
            "email": lead.email,
            "phone": lead.phone,
            "address": lead.address,
            "notes": lead.notes,
            "submittedAt": lead.submitted_at.isoformat(),
        },
        "campaign_name": campaign.campaign_name or campaign.neighborhood_name or "Halo Campaign",
        "landing_page_url": f"{settings.public_base_url}/c/{campaign.page_slug}",
    }


def submit_marketing_lead(
    db: Session,
    payload: MarketingLeadCreate,
    guard: DedupGuard,
    utm_source: Optional[str] = None,
    utm_campaign: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> MarketingLead:
    """
    Store an early access request and log an analytics event.

    Raises:
        ValidationError: missing name/email or malformed email
        DuplicateError: same email inside the marketing window (reported as 429)
    """
    if not payload.name or not payload.email:
        raise ValidationError("Name and email are required")
    if not EMAIL_RE.match(payload.email.strip()):
        raise ValidationError("Invalid email format", field="email")

    email = normalize_email(payload.email)
    if guard.is_duplicate_marketing(db, email):
        raise DuplicateError("You have already submitted a request recently", status_code=429)

    lead = MarketingLead(
        name=payload.name.strip(),
        email=email,
        phone=payload.phone or None,
        source=payload.source or "hero-cta",
        utm_source=utm_source,
        utm_campaign=utm_campaign,
    )
    db.add(lead)
    db.commit()
    db.refresh(lead)

    try:
        db.add(AnalyticsEvent(
            event_type="form_submission",
            source=lead.source,
            lead_id=lead.id,
            user_agent=user_agent or "unknown",
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to log analytics for marketing lead {lead.id}: {e}")

    return lead
