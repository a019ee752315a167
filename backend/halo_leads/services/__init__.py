"""
Business logic services.
"""
from .slug_service import SlugAllocator
from .dedup_service import DedupGuard
from .geocoding_service import GeocodingService
from .geocode_cache import GeocodeCache
from .notification_service import NotificationService

__all__ = ["SlugAllocator", "DedupGuard", "GeocodingService", "GeocodeCache", "NotificationService"]
