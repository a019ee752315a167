"""
Job schemas - leads promoted into scheduled work.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel


class JobPromote(BaseModel):
    """Schema for promoting a lead; dates are parsed by the lifecycle service."""
    lead_id: str
    status: Optional[str] = None
    scheduled_inspection_date: Optional[str] = None
    inspector: Optional[str] = None
    internal_notes: Optional[str] = None


class JobUpdate(BaseModel):
    """Schema for updating a job; omitted fields stay unchanged, null clears."""
    status: Optional[str] = None
    scheduled_inspection_date: Optional[str] = None
    inspector: Optional[str] = None
    internal_notes: Optional[str] = None


class JobResponse(BaseModel):
    id: str
    campaign_id: str
    campaign_name: Optional[str] = None
    customer_name: str
    email: str
    phone: str
    address: Optional[str] = None
    notes: Optional[str] = None
    status: str
    scheduled_inspection_date: Optional[datetime] = None
    inspector: Optional[str] = None
    internal_notes: Optional[str] = None
    is_cold_lead: bool = False
    promoted_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def from_lead(cls, lead) -> "JobResponse":
        return cls(
            id=lead.id,
            campaign_id=lead.campaign_id,
            campaign_name=lead.campaign.campaign_name if lead.campaign else None,
            customer_name=lead.name,
            email=lead.email,
            phone=lead.phone,
            address=lead.address,
            notes=lead.notes,
            status=lead.job_state,
            scheduled_inspection_date=lead.scheduled_inspection_date,
            inspector=lead.inspector,
            internal_notes=lead.internal_notes,
            is_cold_lead=lead.is_cold_lead,
            promoted_at=lead.promoted_at,
            completed_at=lead.completed_at,
        )


class JobsByStatus(BaseModel):
    scheduled: List[JobResponse] = []
    in_progress: List[JobResponse] = []
    completed: List[JobResponse] = []


class JobsResponse(BaseModel):
    jobs: JobsByStatus
