"""
Lead model - a homeowner's submission against a campaign, and the job promoted from it.
"""
import uuid
from enum import Enum
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship

from ..database import Base, utcnow


class LeadStatus(str, Enum):
    """Pipeline status stored in Lead.job_status."""
    NEW = "new"              # Submitted, nobody has called yet
    CONTACTED = "contacted"  # Contractor reached the homeowner
    SCHEDULED = "scheduled"  # Inspection on the calendar
    COMPLETED = "completed"  # Inspection done


class JobState(str, Enum):
    """Status of the job record once a lead is promoted."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# Lead status each job state is mirrored to
JOB_STATE_TO_LEAD_STATUS = {
    JobState.SCHEDULED: LeadStatus.SCHEDULED,
    JobState.IN_PROGRESS: LeadStatus.SCHEDULED,
    JobState.COMPLETED: LeadStatus.COMPLETED,
}


class Lead(Base):
    """Lead model - homeowner contact captured by a campaign landing page."""

    __tablename__ = "leads"
    __table_args__ = (
        Index("ix_leads_campaign_email_submitted", "campaign_id", "email", "submitted_at"),
    )

    # Primary key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Campaign relationship
    campaign_id = Column(String(36), ForeignKey("campaigns.id"), nullable=False, index=True)
    campaign = relationship("Campaign", back_populates="leads")

    # Contact info (email stored trimmed and lowercased)
    name = Column(String(200), nullable=False)
    address = Column(String(500), nullable=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=utcnow, nullable=False)

    # Pipeline
    job_status = Column(String(20), default=LeadStatus.NEW.value, nullable=False)
    contractor_notes = Column(Text, nullable=True)
    tentative_date = Column(DateTime, nullable=True)
    contact_attempt = Column(Integer, default=0, nullable=False)
    is_cold_lead = Column(Boolean, default=False, nullable=False)
    cold_at = Column(DateTime, nullable=True)
    inspector = Column(String(200), nullable=True)
    internal_notes = Column(Text, nullable=True)

    # Job record
    is_promoted = Column(Boolean, default=False, nullable=False)
    job_state = Column(String(20), nullable=True)
    scheduled_inspection_date = Column(DateTime, nullable=True)
    promoted_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    pre_job_snapshot = Column(JSON, nullable=True)  # Fields promotion overwrote

    # Geocode cache: {"lat", "lng", "address", "geocodedAt"}
    geocoded_location = Column(JSON, nullable=True)

    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Lead {self.name} - {self.job_status}>"
