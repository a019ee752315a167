"""
Campaign model - a contractor's neighborhood landing page.
"""
import uuid
from enum import Enum
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base, utcnow


class CampaignStatus(str, Enum):
    """Whether the landing page accepts submissions."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"


# Allowed service radius values, in miles
SERVICE_RADII = (3, 5, 10, 15)
DEFAULT_SERVICE_RADIUS = 5


class Campaign(Base):
    """Campaign model - groups the leads captured by one landing page."""

    __tablename__ = "campaigns"

    # Primary key
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Owner
    contractor_id = Column(String(128), ForeignKey("contractors.id"), nullable=False, index=True)
    contractor = relationship("Contractor", back_populates="campaigns")

    # Campaign info
    campaign_name = Column(String(255), nullable=False)
    neighborhood_name = Column(String(255), nullable=True)
    showcase_address = Column(String(500), nullable=True)

    # Public URL segment, never reassigned
    page_slug = Column(String(255), nullable=False, unique=True, index=True)

    # Settings
    campaign_status = Column(String(20), default=CampaignStatus.ACTIVE.value, nullable=False)
    service_radius_miles = Column(Integer, default=DEFAULT_SERVICE_RADIUS, nullable=False)
    qr_code_url = Column(String(1000), nullable=True)

    # Leads relationship
    leads = relationship("Lead", back_populates="campaign", lazy="dynamic")

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Campaign {self.page_slug}>"

    @property
    def is_active(self) -> bool:
        return self.campaign_status == CampaignStatus.ACTIVE.value
