"""API endpoints for the trip weather service."""

import logging
from datetime import date

from fastapi import APIRouter, HTTPException, Query

from trip_weather.config import CACHE_DURATION_SECONDS, CACHE_MAX_ENTRIES
from trip_weather.weather.cache import weather_cache
from trip_weather.weather.models import TripWeather
from trip_weather.weather.service import TripWeatherService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/weather", tags=["weather"])


def get_weather_service() -> TripWeatherService:
    """Dependency to get a trip weather service bound to the shared cache."""
    return TripWeatherService(cache=weather_cache)


@router.get("/trip", response_model=TripWeather)
async def get_trip_weather(
    destination: str = Query(
        ...,
        min_length=1,
        description="Trip destination, e.g. 'Paris, France'"
    ),
    start_date: date = Query(..., description="First day of the trip (YYYY-MM-DD)"),
    end_date: date = Query(..., description="Last day of the trip (YYYY-MM-DD)")
) -> TripWeather:
    """Get the weather for every day of a trip.

    Args:
        destination: Trip destination
        start_date: First day of the trip
        end_date: Last day of the trip

    Returns:
        TripWeather with one forecast day per trip day

    Raises:
        HTTPException: If the date range is invalid
    """
    if start_date > end_date:
        raise HTTPException(
            status_code=400,
            detail="start_date must be on or before end_date."
        )

    weather_service = get_weather_service()
    async with weather_service:
        forecast = await weather_service.resolve_trip(destination, start_date, end_date)

    logger.info(f"Returning {len(forecast)} forecast days for '{destination}'")
    return TripWeather(
        destination=destination,
        start_date=start_date.isoformat(),
        end_date=end_date.isoformat(),
        forecast=forecast
    )


@router.get("/cache")
async def get_cache_stats() -> dict:
    """Get forecast cache statistics.

    Returns:
        Cache size and the age in seconds of each entry
    """
    return weather_cache.stats()


@router.delete("/cache")
async def clear_cache() -> dict:
    """Remove every cached trip forecast."""
    removed = len(weather_cache)
    weather_cache.clear()
    logger.info(f"Cleared forecast cache ({removed} entries)")
    return {"cleared": removed}


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint.

    Returns:
        Health status response
    """
    return {"status": "healthy", "service": "trip-weather"}


@router.get("/info")
async def get_service_info() -> dict:
    """Get service information.

    Returns:
        Service information including data sources and cache policy
    """
    return {
        "service": "Trip Weather Service",
        "version": "0.1.0",
        "cache": {
            "max_age_seconds": CACHE_DURATION_SECONDS,
            "max_entries": CACHE_MAX_ENTRIES
        },
        "data_sources": [
            "WeatherAPI.com (0-3 days)",
            "OpenWeather 5 day / 3 hour forecast (up to 10 days)",
            "Seasonal climate averages (fallback)"
        ]
    }
