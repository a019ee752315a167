"""
Marketing lead and analytics models - top-of-funnel early access requests.
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text

from ..database import Base, utcnow


class MarketingLead(Base):
    """Early access request from the marketing site, unrelated to campaigns."""

    __tablename__ = "marketing_leads"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    source = Column(String(100), default="hero-cta")

    # Attribution
    utm_source = Column(String(255), nullable=True)
    utm_campaign = Column(String(255), nullable=True)

    submitted_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<MarketingLead {self.email}>"


class AnalyticsEvent(Base):
    """Append-only event log written alongside marketing submissions."""

    __tablename__ = "analytics_events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_type = Column(String(50), nullable=False)
    source = Column(String(100), nullable=True)
    lead_id = Column(String(36), nullable=True)
    user_agent = Column(Text, nullable=True)
    timestamp = Column(DateTime, default=utcnow)
