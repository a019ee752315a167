"""
Per-lead geocode cache.

Each lead stores the coordinates of the address they were computed from. A
cached value is only trusted while lead.address still equals that string; any
edit to the address makes it stale. Failures are never cached, so a transient
provider outage heals on the next request.
"""
import asyncio
import logging
from typing import Dict, Iterable, List, Optional

import anyio
from sqlalchemy.orm import Session

from ..config import get_settings
from ..database import utcnow
from ..exceptions import UpstreamError
from ..models import Lead
from .geocoding_service import GeocodingService, Location

logger = logging.getLogger(__name__)

# One provider limit for every cache instance, across concurrent requests
_provider_sem = anyio.Semaphore(get_settings().geocode_concurrency)


class GeocodeCache:
    """
    Resolves lead addresses to coordinates, reading and writing Lead.geocoded_location.

    All provider calls go through the process-wide semaphore with a fixed delay
    held inside it, so bulk callers and parallel requests stay under the
    provider rate limit. Passing concurrency gives the instance its own limit.
    """

    def __init__(
        self,
        provider: Optional[GeocodingService] = None,
        concurrency: Optional[int] = None,
        request_delay: Optional[float] = None,
    ):
        settings = get_settings()
        self.provider = provider or GeocodingService()
        if concurrency is None:
            self.concurrency = settings.geocode_concurrency
            self._semaphore = _provider_sem
        else:
            self.concurrency = concurrency
            self._semaphore = anyio.Semaphore(concurrency)
        self.request_delay = (
            settings.geocode_request_delay_seconds if request_delay is None else request_delay
        )

    @staticmethod
    def cached_location(lead: Lead, address: Optional[str] = None) -> Optional[Location]:
        """Return the cached point if it was computed from the current address."""
        current = lead.address if address is None else address
        cached = lead.geocoded_location
        if not cached or cached.get("address") != current:
            return None
        try:
            return Location(lat=float(cached["lat"]), lng=float(cached["lng"]))
        except (KeyError, TypeError, ValueError):
            return None

    async def _lookup(self, address: str):
        async with self._semaphore:
            try:
                return await self.provider.geocode(address)
            finally:
                if self.request_delay:
                    await asyncio.sleep(self.request_delay)

    async def resolve(self, db: Session, lead: Lead, address: Optional[str] = None) -> Optional[Location]:
        """
        Return coordinates for the lead's address, or None.

        A hit returns without a provider call or a write. A miss calls the
        provider and overwrites the cache on success; on failure the cache is
        left as it was.
        """
        current = lead.address if address is None else address
        if not current:
            return None

        hit = self.cached_location(lead, current)
        if hit is not None:
            return hit

        try:
            result = await self._lookup(current)
        except UpstreamError as e:
            logger.warning(f"Geocode miss for lead {lead.id}: {e.message}")
            return None

        lead.geocoded_location = {
            "lat": result.location.lat,
            "lng": result.location.lng,
            "address": current,
            "geocodedAt": utcnow().isoformat(),
        }
        db.commit()
        logger.info(f"Cached geocode for lead {lead.id}")
        return result.location

    async def resolve_many(self, db: Session, leads: Iterable[Lead]) -> Dict[str, Optional[Location]]:
        """Resolve several leads concurrently; one failure does not affect the others."""
        lead_list: List[Lead] = list(leads)
        locations = await asyncio.gather(*(self.resolve(db, lead) for lead in lead_list))
        return {lead.id: location for lead, location in zip(lead_list, locations)}


def get_geocode_cache() -> GeocodeCache:
    """Dependency returning a cache bound to the configured provider."""
    return GeocodeCache()
