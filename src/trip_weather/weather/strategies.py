"""Forecast strategies, tried in order for each trip day.

Each strategy reports whether it covers a given distance from today and
returns either a ForecastDay or None when it cannot produce one. Provider,
credential and geocoding failures are logged and turned into None so that
the next strategy gets a chance; the climate strategy always succeeds.
"""

import logging
import random
from datetime import date, datetime, timedelta, timezone
from typing import List, Optional

import httpx

from trip_weather.config import (
    NEAR_TERM_MAX_DAYS, NEAR_TERM_WINDOW_DAYS, MID_RANGE_MAX_DAYS,
    HOURLY_MAX_DAYS, HOURLY_SAMPLE_COUNT
)
from trip_weather.weather.client import (
    MissingCredentialError, OpenWeatherClient, ProviderError, WeatherApiClient
)
from trip_weather.weather.climate import build_historic_day
from trip_weather.weather.conditions import map_openweather_code, map_weatherapi_code
from trip_weather.weather.geocoding import GeocodingError, GeocodingService
from trip_weather.weather.models import (
    ForecastDay, HourlyForecast, OpenWeatherSample, WeatherApiForecastDay,
    WeatherCondition
)

logger = logging.getLogger(__name__)

METRES_PER_MILE = 1609.344

# Hourly samples taken from a 24-hour day: 02:00, 05:00, ... 17:00
HOURLY_OFFSET = 2
HOURLY_STEP = 3

# Sample used for the near-term feels-like value
MIDDAY_HOUR = 12

SOFT_FAILURES = (
    MissingCredentialError,
    ProviderError,
    GeocodingError,
    httpx.HTTPError,
    ValueError,
)


def hour_label(moment: datetime) -> str:
    """Format a time as a short label, e.g. '2 PM'."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour} {suffix}"


def _local_time(epoch: int, utc_offset: int) -> datetime:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).astimezone(
        timezone(timedelta(seconds=utc_offset))
    )


def _clock_time(epoch: int, utc_offset: int) -> str:
    return _local_time(epoch, utc_offset).strftime("%I:%M %p")


class ForecastStrategy:
    """Base class for a single forecast source."""

    name = "strategy"

    def applies(self, days_until: int) -> bool:
        """Return True if this source covers a day ``days_until`` days away."""
        raise NotImplementedError

    async def resolve(self, destination: str, day: date, days_until: int) -> Optional[ForecastDay]:
        """Return a forecast for ``day``, or None if this source cannot provide one."""
        raise NotImplementedError


class NearTermStrategy(ForecastStrategy):
    """Daily forecast from the near-term provider for the next few days."""

    name = "near-term"

    def __init__(
        self,
        client: WeatherApiClient,
        max_days: int = NEAR_TERM_MAX_DAYS,
        window_days: int = NEAR_TERM_WINDOW_DAYS
    ):
        self.client = client
        self.max_days = max_days
        self.window_days = window_days

    def applies(self, days_until: int) -> bool:
        return 0 <= days_until <= self.max_days

    async def resolve(self, destination: str, day: date, days_until: int) -> Optional[ForecastDay]:
        try:
            response = await self.client.get_forecast(destination, self.window_days)
            target = day.isoformat()
            entry = next(
                (d for d in response.forecast.forecastday if d.date == target),
                None
            )
            if entry is None:
                logger.info(f"Near-term forecast for '{destination}' has no entry for {target}")
                return None
            return self._build_forecast_day(entry, days_until)

        except SOFT_FAILURES as e:
            logger.warning(f"Near-term forecast unavailable for '{destination}' on {day}: {e}")
            return None

    def _build_forecast_day(self, entry: WeatherApiForecastDay, days_until: int) -> ForecastDay:
        """Normalize one provider forecast day.

        Raises:
            ValueError: If an hourly timestamp cannot be parsed
        """
        day = entry.day

        hourly = [
            HourlyForecast(
                time=hour_label(datetime.strptime(sample.time, "%Y-%m-%d %H:%M")),
                temperature=round(sample.temp_f),
                condition=map_weatherapi_code(sample.condition.code),
                precipitation_chance=sample.chance_of_rain,
            )
            for sample in entry.hour[HOURLY_OFFSET::HOURLY_STEP][:HOURLY_SAMPLE_COUNT]
        ]

        feels_like = None
        if len(entry.hour) > MIDDAY_HOUR and entry.hour[MIDDAY_HOUR].feelslike_f is not None:
            feels_like = round(entry.hour[MIDDAY_HOUR].feelslike_f)

        return ForecastDay(
            date=entry.date,
            temperature_high=round(day.maxtemp_f),
            temperature_low=round(day.mintemp_f),
            feels_like=feels_like,
            condition=map_weatherapi_code(day.condition.code),
            precipitation_chance=day.daily_chance_of_rain,
            humidity=round(day.avghumidity),
            wind_speed=round(day.maxwind_mph),
            is_historic_average=False,
            days_until=days_until,
            hourly_forecast=hourly,
            uv_index=day.uv,
            visibility=day.avgvis_miles,
            sunrise=entry.astro.sunrise,
            sunset=entry.astro.sunset,
        )


class MidRangeStrategy(ForecastStrategy):
    """Daily summary built from the mid-range provider's 3-hourly samples."""

    name = "mid-range"

    def __init__(
        self,
        client: OpenWeatherClient,
        geocoder: GeocodingService,
        max_days: int = MID_RANGE_MAX_DAYS,
        hourly_max_days: int = HOURLY_MAX_DAYS,
        sun_times_max_days: int = NEAR_TERM_MAX_DAYS
    ):
        self.client = client
        self.geocoder = geocoder
        self.max_days = max_days
        self.hourly_max_days = hourly_max_days
        self.sun_times_max_days = sun_times_max_days

    def applies(self, days_until: int) -> bool:
        return 0 <= days_until <= self.max_days

    async def resolve(self, destination: str, day: date, days_until: int) -> Optional[ForecastDay]:
        try:
            lat, lon = await self.geocoder.geocode(destination)
            response = await self.client.get_forecast(lat, lon)
        except SOFT_FAILURES as e:
            logger.warning(f"Mid-range forecast unavailable for '{destination}' on {day}: {e}")
            return None

        utc_offset = response.city.timezone
        samples = [
            sample for sample in response.samples
            if _local_time(sample.dt, utc_offset).date() == day
        ]
        if not samples:
            logger.info(f"Mid-range forecast for '{destination}' has no samples for {day}")
            return None

        temperatures = [sample.main.temp for sample in samples]
        middle = samples[len(samples) // 2]

        hourly = None
        if 0 <= days_until <= self.hourly_max_days:
            hourly = [
                HourlyForecast(
                    time=hour_label(_local_time(sample.dt, utc_offset)),
                    temperature=round(sample.main.temp),
                    condition=self._condition(sample),
                    precipitation_chance=round(sample.pop * 100),
                )
                for sample in samples[:HOURLY_SAMPLE_COUNT]
            ]

        sunrise = sunset = None
        if 0 <= days_until <= self.sun_times_max_days:
            try:
                current = await self.client.get_current(lat, lon)
                sunrise = _clock_time(current.sys.sunrise, current.timezone)
                sunset = _clock_time(current.sys.sunset, current.timezone)
            except SOFT_FAILURES as e:
                logger.warning(f"Sunrise/sunset unavailable for '{destination}': {e}")

        return ForecastDay(
            date=day.isoformat(),
            temperature_high=round(max(temperatures)),
            temperature_low=round(min(temperatures)),
            feels_like=round(middle.main.feels_like) if middle.main.feels_like is not None else None,
            condition=self._condition(middle),
            precipitation_chance=round(max(sample.pop for sample in samples) * 100),
            humidity=round(middle.main.humidity),
            wind_speed=round(middle.wind.speed),
            is_historic_average=False,
            days_until=days_until,
            hourly_forecast=hourly,
            visibility=round(middle.visibility / METRES_PER_MILE, 1) if middle.visibility is not None else None,
            sunrise=sunrise,
            sunset=sunset,
        )

    @staticmethod
    def _condition(sample: OpenWeatherSample) -> WeatherCondition:
        if not sample.weather:
            return WeatherCondition.PARTLY_CLOUDY
        return map_openweather_code(sample.weather[0].id, sample.weather[0].description)


class ClimateStrategy(ForecastStrategy):
    """Seasonal climate averages; covers every day and never fails."""

    name = "climate"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def applies(self, days_until: int) -> bool:
        return True

    async def resolve(self, destination: str, day: date, days_until: int) -> ForecastDay:
        return build_historic_day(destination, day, days_until, self.rng)


def default_strategies(
    near_term_client: WeatherApiClient,
    mid_range_client: OpenWeatherClient,
    geocoder: GeocodingService,
    rng: Optional[random.Random] = None
) -> List[ForecastStrategy]:
    """Return the strategies in order of decreasing accuracy."""
    return [
        NearTermStrategy(near_term_client),
        MidRangeStrategy(mid_range_client, geocoder),
        ClimateStrategy(rng),
    ]
