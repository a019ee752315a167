import asyncio

import pytest

from halo_leads.config import get_settings
from halo_leads.exceptions import UpstreamError
from halo_leads.services import geocode_cache
from halo_leads.services.geocode_cache import GeocodeCache, get_geocode_cache
from halo_leads.services.geocoding_service import GeocodeResult, GeocodingService, Location


def _cached(address, lat=40.0, lng=-75.0):
    return {"lat": lat, "lng": lng, "address": address, "geocodedAt": "2024-01-01T00:00:00"}


@pytest.mark.asyncio
async def test_cache_hit_skips_provider(db, make_campaign, make_lead, geocoder):
    lead = make_lead(make_campaign(), address="123 Main St, Springfield")
    lead.geocoded_location = _cached("123 Main St, Springfield")
    db.commit()
    cache = GeocodeCache(provider=geocoder, request_delay=0)

    location = await cache.resolve(db, lead)

    assert location == Location(lat=40.0, lng=-75.0)
    geocoder.geocode.assert_not_called()


@pytest.mark.asyncio
async def test_address_change_invalidates_cache(db, make_campaign, make_lead, geocoder):
    lead = make_lead(make_campaign(), address="123 Main St, Springfield")
    lead.geocoded_location = _cached("123 Main St, Springfield")
    lead.address = "456 Elm St, Springfield"
    db.commit()
    cache = GeocodeCache(provider=geocoder, request_delay=0)

    location = await cache.resolve(db, lead)

    assert location == Location(lat=39.78, lng=-89.65)
    geocoder.geocode.assert_called_once_with("456 Elm St, Springfield")
    db.refresh(lead)
    assert lead.geocoded_location["address"] == "456 Elm St, Springfield"
    assert lead.geocoded_location["lat"] == 39.78
    assert "geocodedAt" in lead.geocoded_location


@pytest.mark.asyncio
async def test_failure_leaves_cache_untouched(db, make_campaign, make_lead, geocoder):
    lead = make_lead(make_campaign(), address="456 Elm St, Springfield")
    stale = _cached("123 Main St, Springfield")
    lead.geocoded_location = stale
    db.commit()
    geocoder.geocode.side_effect = UpstreamError("Geocoding failed: ZERO_RESULTS")
    cache = GeocodeCache(provider=geocoder, request_delay=0)

    assert await cache.resolve(db, lead) is None

    db.refresh(lead)
    assert lead.geocoded_location == stale


@pytest.mark.asyncio
async def test_failures_are_not_cached(db, make_campaign, make_lead, geocoder):
    lead = make_lead(make_campaign(), address="456 Elm St, Springfield")
    geocoder.geocode.side_effect = UpstreamError("Geocoding request timed out")
    cache = GeocodeCache(provider=geocoder, request_delay=0)

    assert await cache.resolve(db, lead) is None
    assert await cache.resolve(db, lead) is None

    assert geocoder.geocode.call_count == 2
    db.refresh(lead)
    assert lead.geocoded_location is None


@pytest.mark.asyncio
async def test_missing_address_is_not_looked_up(db, make_campaign, make_lead, geocoder):
    lead = make_lead(make_campaign(), address=None)
    cache = GeocodeCache(provider=geocoder, request_delay=0)

    assert await cache.resolve(db, lead) is None
    geocoder.geocode.assert_not_called()


class SlowProvider:
    """Records how many lookups run at once."""

    def __init__(self):
        self.active = 0
        self.peak = 0

    async def geocode(self, address):
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        if "Nowhere" in address:
            raise UpstreamError("Geocoding failed: ZERO_RESULTS")
        return GeocodeResult(location=Location(lat=1.0, lng=2.0), formatted_address=address)


@pytest.mark.asyncio
async def test_resolve_many_bounds_concurrency(db, make_campaign, make_lead):
    campaign = make_campaign()
    leads = [
        make_lead(campaign, email=f"h{i}@example.com", address=f"{i} Long Street, Springfield")
        for i in range(6)
    ]
    leads.append(make_lead(campaign, email="x@example.com", address="1 Nowhere Road, Springfield"))
    provider = SlowProvider()
    cache = GeocodeCache(provider=provider, concurrency=2, request_delay=0)

    locations = await cache.resolve_many(db, leads)

    assert provider.peak <= 2
    assert sum(1 for loc in locations.values() if loc is not None) == 6
    assert locations[leads[-1].id] is None


@pytest.mark.asyncio
async def test_parallel_requests_share_provider_limit(db, make_campaign, make_lead, monkeypatch):
    provider = SlowProvider()
    monkeypatch.setattr(geocode_cache, "GeocodingService", lambda: provider)
    campaign = make_campaign()
    leads = [
        make_lead(campaign, email=f"p{i}@example.com", address=f"{i} Parallel Avenue, Springfield")
        for i in range(8)
    ]
    first, second = get_geocode_cache(), get_geocode_cache()
    first.request_delay = second.request_delay = 0

    results = await asyncio.gather(first.resolve_many(db, leads[:4]), second.resolve_many(db, leads[4:]))

    assert provider.peak <= get_settings().geocode_concurrency
    assert all(loc is not None for found in results for loc in found.values())


@pytest.mark.asyncio
async def test_provider_rejects_blank_address_and_missing_key():
    with pytest.raises(UpstreamError):
        await GeocodingService(api_key="key").geocode("   ")
    with pytest.raises(UpstreamError):
        await GeocodingService(api_key="").geocode("123 Main St, Springfield")
