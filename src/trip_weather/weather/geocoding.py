"""Geocoding service for trip destinations."""

import asyncio
import logging
from functools import lru_cache
from typing import Tuple

from geopy.exc import GeocoderServiceError, GeocoderTimedOut, GeocoderUnavailable
from geopy.geocoders import Nominatim

from trip_weather.config import GEOCODING_USER_AGENT, REQUEST_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when geocoding fails."""
    pass


class GeocodingService:
    """Resolves destination names to coordinates via Nominatim."""

    def __init__(self, user_agent: str = GEOCODING_USER_AGENT, timeout: float = REQUEST_TIMEOUT_SECONDS):
        """Initialize the geocoding service.

        Args:
            user_agent: User-Agent sent to Nominatim
            timeout: Per-request timeout in seconds
        """
        self.geolocator = Nominatim(user_agent=user_agent, timeout=timeout)
        logger.info("GeocodingService initialized with Nominatim")

    @lru_cache(maxsize=1000)
    def forward_geocode(self, destination: str) -> Tuple[float, float]:
        """Convert a destination name to coordinates.

        Args:
            destination: Destination to geocode, e.g. "Paris, France"

        Returns:
            Tuple of (latitude, longitude)

        Raises:
            GeocodingError: If geocoding fails
        """
        try:
            logger.info(f"Geocoding destination: {destination}")
            location = self.geolocator.geocode(destination)
        except (GeocoderUnavailable, GeocoderTimedOut) as e:
            logger.warning(f"Geocoding service unavailable for '{destination}': {e}")
            raise GeocodingError("Geocoding service temporarily unavailable")
        except GeocoderServiceError as e:
            logger.warning(f"Geocoding service error for '{destination}': {e}")
            raise GeocodingError(f"Failed to geocode destination: {e}")

        if not location:
            raise GeocodingError(f"Destination '{destination}' not found")

        lat, lon = location.latitude, location.longitude
        logger.info(f"Successfully geocoded '{destination}' to ({lat}, {lon})")
        return lat, lon

    async def geocode(self, destination: str) -> Tuple[float, float]:
        """Async wrapper running the blocking geocoder in a worker thread.

        Raises:
            GeocodingError: If geocoding fails
        """
        return await asyncio.to_thread(self.forward_geocode, destination)
