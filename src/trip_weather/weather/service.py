"""Trip weather service: per-day source selection and trip caching."""

import asyncio
import logging
import random
from datetime import date, timedelta
from typing import Callable, Iterator, List, Optional, Sequence

from trip_weather.config import MAX_CONCURRENT_PROVIDER_REQUESTS
from trip_weather.weather.cache import WeatherCache, weather_cache
from trip_weather.weather.client import OpenWeatherClient, WeatherApiClient
from trip_weather.weather.climate import build_historic_day
from trip_weather.weather.geocoding import GeocodingService
from trip_weather.weather.models import ForecastDay
from trip_weather.weather.strategies import ForecastStrategy, default_strategies

logger = logging.getLogger(__name__)


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
    """Yield every calendar date from start_date to end_date inclusive."""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


class TripWeatherService:
    """Resolves the weather for every day of a trip."""

    def __init__(
        self,
        cache: Optional[WeatherCache] = None,
        strategies: Optional[Sequence[ForecastStrategy]] = None,
        today: Callable[[], date] = date.today,
        rng: Optional[random.Random] = None
    ):
        """Initialize the trip weather service.

        Args:
            cache: Forecast cache (uses the process-wide cache if None)
            strategies: Forecast sources in order of preference (creates the
                provider clients and geocoder if None)
            today: Returns the current local date
            rng: Random source for climate-based estimates
        """
        self.cache = cache if cache is not None else weather_cache
        self.today = today
        self.rng = rng or random.Random()
        self._owned_clients = []

        if strategies is None:
            semaphore = asyncio.Semaphore(MAX_CONCURRENT_PROVIDER_REQUESTS)
            near_term_client = WeatherApiClient(semaphore=semaphore)
            mid_range_client = OpenWeatherClient(semaphore=semaphore)
            self._owned_clients = [near_term_client, mid_range_client]
            strategies = default_strategies(
                near_term_client, mid_range_client, GeocodingService(), self.rng
            )
        self.strategies = list(strategies)

    async def resolve_trip(self, destination: str, start_date: date, end_date: date) -> List[ForecastDay]:
        """Get one forecast day per date of a trip, using the cache when fresh.

        Args:
            destination: Trip destination, e.g. "Paris, France"
            start_date: First day of the trip
            end_date: Last day of the trip

        Returns:
            Forecast days ordered by date, one per day of the trip

        Raises:
            ValueError: If start_date is after end_date
        """
        if start_date > end_date:
            raise ValueError(f"start_date {start_date} is after end_date {end_date}")

        start_key, end_key = start_date.isoformat(), end_date.isoformat()
        cached = self.cache.get(destination, start_key, end_key)
        if cached is not None:
            logger.info(f"Cache hit for '{destination}' {start_key}..{end_key}")
            return cached

        forecast = []
        for day in iter_dates(start_date, end_date):
            forecast.append(await self.resolve_day(destination, day))

        self.cache.set(destination, start_key, end_key, forecast)
        logger.info(f"Resolved {len(forecast)} forecast days for '{destination}'")
        return forecast

    async def resolve_day(self, destination: str, day: date) -> ForecastDay:
        """Get the best available forecast for one day. Never raises.

        Args:
            destination: Trip destination
            day: Date to forecast

        Returns:
            ForecastDay from the first strategy that covers and resolves the day
        """
        days_until = (day - self.today()).days

        for strategy in self.strategies:
            if not strategy.applies(days_until):
                continue
            try:
                result = await strategy.resolve(destination, day, days_until)
            except Exception as e:
                logger.error(f"Strategy '{strategy.name}' failed for '{destination}' on {day}: {e}")
                continue
            if result is not None:
                logger.debug(f"Resolved {day} for '{destination}' via {strategy.name}")
                return result

        logger.warning(f"No strategy resolved {day} for '{destination}', using climate averages")
        return build_historic_day(destination, day, days_until, self.rng)

    async def aclose(self):
        """Close provider clients created by this service."""
        for client in self._owned_clients:
            try:
                await client.aclose()
            except Exception as e:
                logger.error(f"Error closing provider client: {e}")

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()


async def get_weather_for_trip(
    destination: str,
    start_date: date,
    end_date: date,
    cache: Optional[WeatherCache] = None
) -> List[ForecastDay]:
    """Get the weather for each day of a trip.

    Args:
        destination: Trip destination
        start_date: First day of the trip
        end_date: Last day of the trip
        cache: Forecast cache (uses the process-wide cache if None)

    Returns:
        Forecast days ordered by date
    """
    async with TripWeatherService(cache=cache) as service:
        return await service.resolve_trip(destination, start_date, end_date)
