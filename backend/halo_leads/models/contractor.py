"""
Contractor model - the account that owns campaigns.
"""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from ..database import Base, utcnow


class Contractor(Base):
    """Contractor profile, keyed by the uid carried in the bearer token."""

    __tablename__ = "contractors"

    id = Column(String(128), primary_key=True)

    # Profile info
    name = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    campaigns = relationship("Campaign", back_populates="contractor")

    def __repr__(self):
        return f"<Contractor {self.email or self.id}>"
