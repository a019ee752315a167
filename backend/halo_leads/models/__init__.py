"""
SQLAlchemy models for the Halo Leads application.
"""
from .contractor import Contractor
from .campaign import Campaign, CampaignStatus
from .lead import Lead, LeadStatus, JobState
from .marketing_lead import MarketingLead, AnalyticsEvent

__all__ = [
    "Contractor",
    "Campaign",
    "CampaignStatus",
    "Lead",
    "LeadStatus",
    "JobState",
    "MarketingLead",
    "AnalyticsEvent",
]
