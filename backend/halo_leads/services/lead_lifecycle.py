"""
Lead and job lifecycle.

A lead moves new -> contacted -> scheduled -> completed. Promotion attaches a
job record (scheduled | in_progress | completed) whose state is mirrored into
job_status by _apply_job_state, the only place either field changes for a
promoted lead. The cold bucket is a flag that parks a lead without touching
the rest of its data.

Every mutation starts with get_owned_lead, so a contractor can only ever touch
leads captured by their own campaigns.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..database import utcnow
from ..exceptions import NotFoundError, UnauthorizedError, ValidationError
from ..models import Campaign, Lead, LeadStatus, JobState
from ..models.lead import JOB_STATE_TO_LEAD_STATUS

logger = logging.getLogger(__name__)


class _Unset:
    """Marks an argument the caller did not supply."""

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET: Any = _Unset()

LEAD_STATUSES = tuple(s.value for s in LeadStatus)
PROMOTION_STATES = (JobState.SCHEDULED.value, JobState.IN_PROGRESS.value)
JOB_UPDATE_STATES = (JobState.SCHEDULED.value, JobState.COMPLETED.value)

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Lead fields promotion may overwrite; unscheduling puts them back
_SNAPSHOT_FIELDS = ("job_status", "inspector", "internal_notes", "scheduled_inspection_date")


# ===== AUTHORIZATION =====

def get_owned_campaign(db: Session, campaign_id: str, contractor_id: str) -> Campaign:
    """Load a campaign, failing unless contractor_id owns it."""
    campaign = db.query(Campaign).filter(Campaign.id == campaign_id).first()
    if not campaign:
        raise NotFoundError("Campaign not found")
    if campaign.contractor_id != contractor_id:
        logger.warning(f"Contractor {contractor_id} denied access to campaign {campaign_id}")
        raise UnauthorizedError("Campaign not found", status_code=404)
    return campaign


def get_owned_lead(db: Session, lead_id: str, contractor_id: str) -> Lead:
    """
    Load a lead, failing unless its campaign belongs to contractor_id.

    Raises:
        NotFoundError: the lead does not exist
        UnauthorizedError: the lead belongs to another contractor, reported
            with a 404 so callers cannot probe for existence
    """
    lead = db.query(Lead).filter(Lead.id == lead_id).first()
    if not lead:
        raise NotFoundError("Lead not found")

    campaign = lead.campaign
    if campaign is None or campaign.contractor_id != contractor_id:
        logger.warning(f"Contractor {contractor_id} denied access to lead {lead_id}")
        raise UnauthorizedError("Lead not found", status_code=404)

    return lead


# ===== INPUT PARSING =====

def parse_job_date(value: Any, field: str = "scheduled_inspection_date") -> Any:
    """
    Parse a date argument.

    None clears the field, an empty string or UNSET leaves it unchanged,
    YYYY-MM-DD lands on local noon so no timezone shift can move it to a
    neighbouring day, and anything else must be an ISO datetime.
    """
    if value is UNSET or value is None:
        return value
    if isinstance(value, datetime):
        return _naive_utc(value)
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a date string or null", field=field)

    text = value.strip()
    if not text:
        return UNSET

    try:
        if _DATE_ONLY.match(text):
            year, month, day = (int(part) for part in text.split("-"))
            return datetime(year, month, day, 12, 0, 0)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid {field}", field=field)

    return _naive_utc(parsed)


def _naive_utc(value: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive values are taken as UTC already."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _clean_text(value: Any) -> Any:
    if value is UNSET or value is None:
        return value
    return str(value).strip() or None


def _touch(lead: Lead) -> None:
    lead.updated_at = utcnow()


def _apply_job_state(lead: Lead, state: str) -> None:
    """Set the job state and mirror it into job_status."""
    lead.job_state = state
    lead.job_status = JOB_STATE_TO_LEAD_STATUS[JobState(state)].value
    if state == JobState.COMPLETED.value:
        lead.completed_at = utcnow()
    else:
        lead.completed_at = None


def _snapshot(lead: Lead) -> dict:
    snapshot = {}
    for field in _SNAPSHOT_FIELDS:
        value = getattr(lead, field)
        snapshot[field] = value.isoformat() if isinstance(value, datetime) else value
    return snapshot


def _restore_snapshot(lead: Lead, snapshot: Optional[dict]) -> None:
    snapshot = snapshot or {}
    lead.job_status = snapshot.get("job_status") or LeadStatus.NEW.value
    lead.inspector = snapshot.get("inspector")
    lead.internal_notes = snapshot.get("internal_notes")
    scheduled = snapshot.get("scheduled_inspection_date")
    lead.scheduled_inspection_date = datetime.fromisoformat(scheduled) if scheduled else None


# ===== OPERATIONS =====

def update_lead_status(
    db: Session,
    lead_id: str,
    contractor_id: str,
    job_status: Any = UNSET,
    notes: Any = UNSET,
) -> Lead:
    """Partially update a lead's status and contractor notes."""
    if job_status is not UNSET and job_status is not None and job_status not in LEAD_STATUSES:
        raise ValidationError("Invalid job status", field="job_status")

    lead = get_owned_lead(db, lead_id, contractor_id)

    if job_status:
        if lead.is_promoted:
            if job_status == LeadStatus.COMPLETED.value:
                _apply_job_state(lead, JobState.COMPLETED.value)
            elif job_status == LeadStatus.SCHEDULED.value:
                if lead.job_state == JobState.COMPLETED.value:
                    _apply_job_state(lead, JobState.SCHEDULED.value)
            else:
                raise ValidationError(
                    "Lead is scheduled as a job; unschedule it first",
                    field="job_status"
                )
        else:
            lead.job_status = job_status

    if notes is not UNSET:
        lead.contractor_notes = _clean_text(notes)

    _touch(lead)
    db.commit()
    db.refresh(lead)
    logger.info(f"Lead {lead_id} status now {lead.job_status}")
    return lead


def promote_lead_to_job(
    db: Session,
    lead_id: str,
    contractor_id: str,
    status: Optional[str] = JobState.SCHEDULED.value,
    scheduled_inspection_date: Any = UNSET,
    inspector: Any = UNSET,
    internal_notes: Any = UNSET,
) -> Lead:
    """Attach a job record to a lead; completed is only reachable through update_job."""
    state = status or JobState.SCHEDULED.value
    if state not in PROMOTION_STATES:
        raise ValidationError("Invalid job status", field="status")
    scheduled = parse_job_date(scheduled_inspection_date)

    lead = get_owned_lead(db, lead_id, contractor_id)

    if lead.is_promoted:
        raise ValidationError("Lead is already scheduled as a job")
    if lead.is_cold_lead:
        raise ValidationError("Lead is in the cold bucket; restore it first")
    if lead.job_status == LeadStatus.COMPLETED.value:
        raise ValidationError("Completed leads cannot be scheduled")

    lead.pre_job_snapshot = _snapshot(lead)
    lead.is_promoted = True
    lead.promoted_at = utcnow()
    _apply_job_state(lead, state)

    if scheduled is not UNSET:
        lead.scheduled_inspection_date = scheduled
    if inspector is not UNSET:
        lead.inspector = _clean_text(inspector)
    if internal_notes is not UNSET:
        lead.internal_notes = _clean_text(internal_notes)

    _touch(lead)
    db.commit()
    db.refresh(lead)
    logger.info(f"Lead {lead_id} promoted to job ({state})")
    return lead


def update_job(
    db: Session,
    lead_id: str,
    contractor_id: str,
    status: Any = UNSET,
    scheduled_inspection_date: Any = UNSET,
    inspector: Any = UNSET,
    internal_notes: Any = UNSET,
) -> Lead:
    """Change fields of an existing job."""
    if status is not UNSET and status not in JOB_UPDATE_STATES:
        raise ValidationError("Invalid job status", field="status")
    scheduled = parse_job_date(scheduled_inspection_date)

    lead = get_owned_lead(db, lead_id, contractor_id)
    if not lead.is_promoted:
        raise NotFoundError("Job not found")

    if status is not UNSET and status != lead.job_state:
        _apply_job_state(lead, status)
    if scheduled is not UNSET:
        lead.scheduled_inspection_date = scheduled
    if inspector is not UNSET:
        lead.inspector = _clean_text(inspector)
    if internal_notes is not UNSET:
        lead.internal_notes = _clean_text(internal_notes)

    _touch(lead)
    db.commit()
    db.refresh(lead)
    return lead


def unschedule_job(db: Session, lead_id: str, contractor_id: str) -> Lead:
    """Undo a promotion, returning the lead to its pre-job state."""
    lead = get_owned_lead(db, lead_id, contractor_id)
    if not lead.is_promoted:
        raise NotFoundError("Job not found")

    _restore_snapshot(lead, lead.pre_job_snapshot)
    lead.is_promoted = False
    lead.job_state = None
    lead.promoted_at = None
    lead.completed_at = None
    lead.pre_job_snapshot = None

    _touch(lead)
    db.commit()
    db.refresh(lead)
    logger.info(f"Job for lead {lead_id} unscheduled")
    return lead


def mark_job_as_cold(db: Session, lead_id: str, contractor_id: str) -> Lead:
    """Park a lead or job in the cold bucket; nothing else changes."""
    lead = get_owned_lead(db, lead_id, contractor_id)
    if lead.job_status == LeadStatus.COMPLETED.value:
        raise ValidationError("Completed jobs cannot be marked cold")
    if lead.is_cold_lead:
        raise ValidationError("Lead is already in the cold bucket")

    lead.is_cold_lead = True
    lead.cold_at = utcnow()

    _touch(lead)
    db.commit()
    db.refresh(lead)
    logger.info(f"Lead {lead_id} moved to cold bucket")
    return lead


def restore_cold_lead(db: Session, lead_id: str, contractor_id: str) -> Lead:
    """Take a lead out of the cold bucket; its status and job are as they were."""
    lead = get_owned_lead(db, lead_id, contractor_id)
    if not lead.is_cold_lead:
        raise ValidationError("Lead is not in the cold bucket")

    lead.is_cold_lead = False
    lead.cold_at = None

    _touch(lead)
    db.commit()
    db.refresh(lead)
    logger.info(f"Lead {lead_id} restored from cold bucket")
    return lead


def record_contact_attempt(
    db: Session,
    lead_id: str,
    contractor_id: str,
    contact_attempt: Any,
    is_cold_lead: Any,
    inspector: Any = UNSET,
    internal_notes: Any = UNSET,
) -> Lead:
    """Store the contact attempt counter and cold flag in one write."""
    if isinstance(contact_attempt, bool) or not isinstance(contact_attempt, int) or contact_attempt < 0:
        raise ValidationError("contact_attempt must be a non-negative number", field="contact_attempt")
    if not isinstance(is_cold_lead, bool):
        raise ValidationError("is_cold_lead must be a boolean", field="is_cold_lead")

    lead = get_owned_lead(db, lead_id, contractor_id)
    if is_cold_lead and lead.job_status == LeadStatus.COMPLETED.value:
        raise ValidationError("Completed jobs cannot be marked cold")

    lead.contact_attempt = contact_attempt
    if is_cold_lead and not lead.is_cold_lead:
        lead.cold_at = utcnow()
    elif not is_cold_lead:
        lead.cold_at = None
    lead.is_cold_lead = is_cold_lead

    if inspector is not UNSET:
        lead.inspector = _clean_text(inspector)
    if internal_notes is not UNSET:
        lead.internal_notes = _clean_text(internal_notes)

    _touch(lead)
    db.commit()
    db.refresh(lead)
    return lead


def set_tentative_date(db: Session, lead_id: str, contractor_id: str, tentative_date: Any) -> Lead:
    """Pencil a lead onto the calendar, or clear it with None."""
    if tentative_date is UNSET:
        raise ValidationError("tentative_date is required", field="tentative_date")
    parsed = parse_job_date(tentative_date, field="tentative_date")
    if parsed is UNSET:
        raise ValidationError("tentative_date must be a valid ISO date string or null", field="tentative_date")

    lead = get_owned_lead(db, lead_id, contractor_id)
    lead.tentative_date = parsed

    _touch(lead)
    db.commit()
    db.refresh(lead)
    return lead
