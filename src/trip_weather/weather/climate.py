"""Seasonal climate statistics used when no live forecast is available."""

import logging
import random
from datetime import date
from typing import Dict

from trip_weather.weather.models import (
    ClimateProfile, ForecastDay, SeasonClimate, WeatherCondition
)

logger = logging.getLogger(__name__)


def _profile(summer, winter, spring, fall) -> ClimateProfile:
    """Build a profile from (high, low, rain) tuples per season."""
    def season(values):
        high, low, rain = values
        return SeasonClimate(high=high, low=low, rain=rain)

    return ClimateProfile(
        summer=season(summer),
        winter=season(winter),
        spring=season(spring),
        fall=season(fall),
    )


DEFAULT_DESTINATION = "Paris, France"

# Seasonal (high °F, low °F, rain %) per destination
CLIMATE_TABLE: Dict[str, ClimateProfile] = {
    "Paris, France": _profile((77, 59, 20), (45, 37, 50), (59, 46, 40), (63, 50, 45)),
    "Tokyo, Japan": _profile((86, 75, 40), (50, 39, 30), (64, 52, 50), (70, 59, 45)),
    "New York, USA": _profile((84, 70, 35), (39, 28, 40), (61, 48, 45), (64, 52, 40)),
    "London, UK": _profile((73, 59, 35), (46, 39, 55), (57, 45, 45), (59, 48, 50)),
    "Barcelona, Spain": _profile((82, 70, 15), (57, 45, 30), (66, 54, 25), (72, 61, 35)),
    "Dubai, UAE": _profile((106, 86, 5), (75, 61, 10), (91, 73, 8), (93, 75, 7)),
    "Sydney, Australia": _profile((79, 66, 30), (61, 48, 40), (72, 59, 35), (72, 61, 40)),
    "Rome, Italy": _profile((88, 66, 15), (55, 41, 40), (68, 52, 30), (73, 57, 35)),
}

TEMPERATURE_VARIATION_PERCENT = 5
RAIN_VARIATION_PERCENT = 30
BASE_HUMIDITY, HUMIDITY_VARIATION_PERCENT = 60, 20
BASE_WIND_SPEED, WIND_VARIATION_PERCENT = 8, 50


def get_climate_profile(destination: str) -> ClimateProfile:
    """Look up a destination's climate, falling back to the baseline profile."""
    profile = CLIMATE_TABLE.get(destination)
    if profile is None:
        logger.debug(f"No climate data for '{destination}', using {DEFAULT_DESTINATION}")
        return CLIMATE_TABLE[DEFAULT_DESTINATION]
    return profile


def season_for(day: date) -> str:
    """Return the northern-hemisphere season name for a date."""
    if day.month in (6, 7, 8):
        return "summer"
    if day.month in (12, 1, 2):
        return "winter"
    if day.month in (3, 4, 5):
        return "spring"
    return "fall"


def add_variation(base: float, variation_percent: float, rng: random.Random) -> int:
    """Return ``base`` randomly shifted by up to ``variation_percent`` either way."""
    variation = base * (variation_percent / 100)
    return round(base + (rng.random() - 0.5) * 2 * variation)


def classify_climate_condition(mean_temperature: float, rain: float, season: str) -> WeatherCondition:
    """Derive a condition from rain chance and mean temperature.

    Thresholds are checked in order: rain above 60 is rainy, above 40 cloudy,
    a cold wet winter day (mean below 35 and rain above 30) snowy, rain above
    25 partly cloudy, anything else sunny.
    """
    if rain > 60:
        return WeatherCondition.RAINY
    if rain > 40:
        return WeatherCondition.CLOUDY
    if season == "winter" and mean_temperature < 35 and rain > 30:
        return WeatherCondition.SNOWY
    if rain > 25:
        return WeatherCondition.PARTLY_CLOUDY
    return WeatherCondition.SUNNY


def build_historic_day(
    destination: str,
    day: date,
    days_until: int,
    rng: random.Random
) -> ForecastDay:
    """Synthesize a forecast day from seasonal averages.

    Args:
        destination: Destination string, looked up exactly in the climate table
        day: Date to synthesize
        days_until: Days from today to ``day``
        rng: Random source for the daily variation

    Returns:
        ForecastDay flagged as a historic average
    """
    season = season_for(day)
    averages = getattr(get_climate_profile(destination), season)

    high = add_variation(averages.high, TEMPERATURE_VARIATION_PERCENT, rng)
    low = add_variation(averages.low, TEMPERATURE_VARIATION_PERCENT, rng)
    rain = max(0, min(100, add_variation(averages.rain, RAIN_VARIATION_PERCENT, rng)))

    return ForecastDay(
        date=day.isoformat(),
        temperature_high=high,
        temperature_low=low,
        condition=classify_climate_condition((high + low) / 2, rain, season),
        precipitation_chance=rain,
        humidity=add_variation(BASE_HUMIDITY, HUMIDITY_VARIATION_PERCENT, rng),
        wind_speed=add_variation(BASE_WIND_SPEED, WIND_VARIATION_PERCENT, rng),
        is_historic_average=True,
        days_until=days_until,
    )
