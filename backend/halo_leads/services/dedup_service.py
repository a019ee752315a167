"""
Duplicate submission suppression for campaign leads and marketing leads.

Both checks are plain reads; the caller inserts after a negative answer. Two
submissions racing through the check can both be accepted.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import utcnow
from ..models import Lead, MarketingLead

logger = logging.getLogger(__name__)


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an email address."""
    return (email or "").strip().lower()


class DedupGuard:
    """Answers whether a submission repeats a recent one from the same address."""

    def __init__(
        self,
        lead_window: Optional[timedelta] = None,
        marketing_window: Optional[timedelta] = None,
    ):
        settings = get_settings()
        self.lead_window = lead_window or timedelta(minutes=settings.lead_dedup_window_minutes)
        self.marketing_window = marketing_window or timedelta(hours=settings.marketing_dedup_window_hours)

    def is_duplicate(
        self,
        db: Session,
        campaign_id: str,
        email: str,
        now: Optional[datetime] = None,
    ) -> bool:
        """True if the campaign already has a lead from this email inside the window."""
        cutoff = (now or utcnow()) - self.lead_window
        match = (
            db.query(Lead.id)
            .filter(
                Lead.campaign_id == campaign_id,
                Lead.email == normalize_email(email),
                Lead.submitted_at > cutoff,
            )
            .limit(1)
            .first()
        )
        return match is not None

    def is_duplicate_marketing(
        self,
        db: Session,
        email: str,
        now: Optional[datetime] = None,
    ) -> bool:
        """True if a marketing lead from this email arrived inside the window."""
        cutoff = (now or utcnow()) - self.marketing_window
        match = (
            db.query(MarketingLead.id)
            .filter(
                MarketingLead.email == normalize_email(email),
                MarketingLead.submitted_at > cutoff,
            )
            .limit(1)
            .first()
        )
        return match is not None


def get_dedup_guard() -> DedupGuard:
    return DedupGuard()
