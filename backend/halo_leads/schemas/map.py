"""
Map data schemas.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel


class MapLocation(BaseModel):
    lat: float
    lng: float


class MapLead(BaseModel):
    id: str
    name: str
    address: Optional[str] = None
    location: Optional[MapLocation] = None
    status: str
    submitted_at: datetime
    job_status: str


class MapMetadata(BaseModel):
    total_leads: int
    mapped_leads: int
    leads_without_address: int
    leads_with_failed_geocode: int


class MapLeadsResponse(BaseModel):
    leads: List[MapLead]
    metadata: MapMetadata
