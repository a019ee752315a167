"""
Google Geocoding API client.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import get_settings
from ..exceptions import UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    """A point on the map."""
    lat: float
    lng: float

    def to_dict(self) -> dict:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class GeocodeResult:
    """Provider answer for one address."""
    location: Location
    formatted_address: str


class GeocodingService:
    """Service for turning free-text addresses into coordinates."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.google_maps_api_key
        self.base_url = base_url or settings.geocode_api_url
        self.timeout = settings.geocode_timeout_seconds

    async def geocode(self, address: str) -> GeocodeResult:
        """
        Geocode a single address.

        Raises:
            UpstreamError: empty address, missing API key, transport failure,
                non-200 response, or no usable result
        """
        if not address or not address.strip():
            raise UpstreamError("Address is empty")

        if not self.api_key:
            logger.error("Google Maps API key not configured (GOOGLE_MAPS_API_KEY)")
            raise UpstreamError("Geocoding API key not configured")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    self.base_url,
                    params={"address": address.strip(), "key": self.api_key},
                    timeout=self.timeout
                )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout geocoding address: {address}")
            raise UpstreamError("Geocoding timeout") from e
        except httpx.HTTPError as e:
            logger.error(f"Error geocoding address {address}: {e}")
            raise UpstreamError(f"Geocoding request failed: {e}") from e

        if response.status_code != 200:
            logger.error(f"Geocoding API error: {response.status_code}")
            raise UpstreamError(f"Geocoding API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Geocoding API returned invalid JSON") from e

        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            logger.warning(f"Geocoding failed for address: {address} - Status: {data.get('status')}")
            raise UpstreamError(f"No geocoding result ({data.get('status')})")

        first = results[0]
        try:
            point = first["geometry"]["location"]
            location = Location(lat=float(point["lat"]), lng=float(point["lng"]))
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamError("Geocoding API returned an unexpected payload") from e

        return GeocodeResult(
            location=location,
            formatted_address=first.get("formatted_address", address)
        )
