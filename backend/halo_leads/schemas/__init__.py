"""
Pydantic schemas for request/response validation.
"""
from .lead import LeadSubmission, LeadResponse, LeadStatusUpdate
from .campaign import CampaignCreate, CampaignResponse
from .job import JobPromote, JobUpdate, JobResponse
from .map import MapLeadsResponse

__all__ = [
    "LeadSubmission", "LeadResponse", "LeadStatusUpdate",
    "CampaignCreate", "CampaignResponse",
    "JobPromote", "JobUpdate", "JobResponse",
    "MapLeadsResponse",
]
