import os
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

# Settings are read once at import time, so point them at a throwaway database first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("GOOGLE_MAPS_API_KEY", "test-key")
os.environ.setdefault("GEOCODE_REQUEST_DELAY_SECONDS", "0")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-the-halo-leads-suite")

from fastapi.testclient import TestClient  # noqa: E402

from halo_leads.database import Base, SessionLocal, engine, get_db, utcnow  # noqa: E402
from halo_leads.main import app  # noqa: E402
from halo_leads.models import Campaign, Contractor, Lead  # noqa: E402
from halo_leads.services.auth_service import get_auth_service  # noqa: E402
from halo_leads.services.geocode_cache import GeocodeCache, get_geocode_cache  # noqa: E402
from halo_leads.services.geocoding_service import GeocodeResult, Location  # noqa: E402
from halo_leads.services.notification_service import get_notification_service  # noqa: E402


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_campaign(db):
    counter = {"n": 0}

    def _make(contractor_id="contractor-1", slug=None, status="Active", name="Oak Street Storm Damage"):
        if db.query(Contractor).filter(Contractor.id == contractor_id).first() is None:
            db.add(Contractor(id=contractor_id, email=f"{contractor_id}@example.com", name="Owner"))
        counter["n"] += 1
        campaign = Campaign(
            contractor_id=contractor_id,
            campaign_name=name,
            page_slug=slug or f"campaign-{counter['n']}",
            campaign_status=status,
        )
        db.add(campaign)
        db.commit()
        db.refresh(campaign)
        return campaign
    return _make


@pytest.fixture
def make_lead(db):
    def _make(campaign, email="home@example.com", address="123 Main St, Springfield", age=timedelta(0), **fields):
        lead = Lead(
            campaign_id=campaign.id,
            name=fields.pop("name", "Hank Homeowner"),
            address=address,
            email=email,
            phone="5551234567",
            submitted_at=utcnow() - age,
            **fields,
        )
        db.add(lead)
        db.commit()
        db.refresh(lead)
        return lead
    return _make


@pytest.fixture
def geocoder():
    provider = AsyncMock()
    provider.geocode.return_value = GeocodeResult(
        location=Location(lat=39.78, lng=-89.65),
        formatted_address="123 Main St, Springfield, IL",
    )
    return provider


@pytest.fixture
def notifier():
    service = AsyncMock()
    service.send_lead_notification.return_value = {"success": True}
    service.send_marketing_notification.return_value = {"success": True}
    return service


@pytest.fixture
def client(db, geocoder, notifier):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_geocode_cache] = lambda: GeocodeCache(provider=geocoder, request_delay=0)
    app.dependency_overrides[get_notification_service] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(contractor_id="contractor-1"):
        token = get_auth_service().create_access_token(contractor_id)
        return {"Authorization": f"Bearer {token}"}
    return _headers
