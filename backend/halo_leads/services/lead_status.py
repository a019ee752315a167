"""
Display status for map markers and dashboard badges.
"""
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from ..database import utcnow
from ..models import Lead, LeadStatus

UNCONTACTED_AFTER = timedelta(hours=24)


class MapLeadStatus(str, Enum):
    """Three-level urgency derived from a lead, never stored."""
    SCHEDULED = "scheduled"
    TENTATIVE = "tentative"
    UNCONTACTED = "uncontacted"


MAP_STATUS_CONFIG = {
    MapLeadStatus.SCHEDULED: {"label": "Scheduled", "color": "green", "order": 1},
    MapLeadStatus.TENTATIVE: {"label": "Tentative", "color": "yellow", "order": 2},
    MapLeadStatus.UNCONTACTED: {"label": "Uncontacted", "color": "red", "order": 3},
}


def classify(lead: Lead, now: Optional[datetime] = None) -> MapLeadStatus:
    """
    Classify a lead; the first matching rule wins.

    1. job_status scheduled or completed -> scheduled
    2. a tentative date, or job_status contacted -> tentative
    3. untouched for more than 24 hours -> uncontacted, else tentative
    """
    if lead.job_status in (LeadStatus.SCHEDULED.value, LeadStatus.COMPLETED.value):
        return MapLeadStatus.SCHEDULED

    if lead.tentative_date is not None or lead.job_status == LeadStatus.CONTACTED.value:
        return MapLeadStatus.TENTATIVE

    elapsed = (now or utcnow()) - lead.submitted_at
    if elapsed > UNCONTACTED_AFTER and not lead.contact_attempt:
        return MapLeadStatus.UNCONTACTED

    return MapLeadStatus.TENTATIVE
