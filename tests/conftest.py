"""Shared test fixtures."""

import random
from datetime import date, datetime, timedelta, timezone
from typing import List

import pytest

from trip_weather.weather.cache import WeatherCache
from trip_weather.weather.client import OpenWeatherClient, WeatherApiClient
from trip_weather.weather.geocoding import GeocodingError

TODAY = date(2026, 7, 10)

WEATHERAPI_URL = "https://weatherapi.test/v1"
OPENWEATHER_URL = "https://openweather.test/data/2.5"

PARIS = (48.8566, 2.3522)


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGeocoder:
    """Geocoder returning fixed coordinates, or failing for unknown places."""

    def __init__(self, known=None):
        self.known = known if known is not None else {"Paris, France": PARIS}
        self.calls: List[str] = []

    async def geocode(self, destination: str):
        self.calls.append(destination)
        if destination not in self.known:
            raise GeocodingError(f"Destination '{destination}' not found")
        return self.known[destination]


def epoch(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> int:
    return int(datetime(year, month, day, hour, minute, tzinfo=timezone.utc).timestamp())


def weatherapi_payload(start: date, days: int = 3) -> dict:
    """Build a WeatherAPI.com forecast.json body starting at ``start``."""
    forecast_days = []
    for offset in range(days):
        current = (start + timedelta(days=offset)).isoformat()
        forecast_days.append({
            "date": current,
            "day": {
                "maxtemp_f": 80.4,
                "mintemp_f": 62.6,
                "avgtemp_f": 71.0,
                "condition": {"code": 1000, "text": "Sunny"},
                "daily_chance_of_rain": 10,
                "avghumidity": 55,
                "maxwind_mph": 9.8,
                "uv": 7.0,
                "avgvis_miles": 6.0,
            },
            "astro": {"sunrise": "06:01 AM", "sunset": "09:55 PM"},
            "hour": [
                {
                    "time": f"{current} {hour:02d}:00",
                    "temp_f": 60.0 + hour,
                    "feelslike_f": 61.0 + hour,
                    "condition": {"code": 1003 if hour < 12 else 1183, "text": ""},
                    "chance_of_rain": hour,
                }
                for hour in range(24)
            ],
        })
    return {"location": {"name": "Paris"}, "forecast": {"forecastday": forecast_days}}


def openweather_sample(day: date, k: int) -> dict:
    """Build the k-th 3-hourly sample (k = 0..7) of a UTC day."""
    rain = k == 4
    return {
        "dt": epoch(day.year, day.month, day.day, 3 * k),
        "main": {"temp": 50.0 + 2 * k, "feels_like": 49.0 + 2 * k, "humidity": 40 + k},
        "weather": [{"id": 500 if rain else 801, "description": "light rain" if rain else "few clouds"}],
        "wind": {"speed": 3.0 + k},
        "pop": k / 10,
        "visibility": 10000,
    }


def openweather_payload(start: date, days: int = 6) -> dict:
    """Build an OpenWeather forecast body with 8 samples per day."""
    samples = [
        openweather_sample(start + timedelta(days=offset), k)
        for offset in range(days)
        for k in range(8)
    ]
    return {"cod": "200", "list": samples, "city": {"name": "Paris", "timezone": 0}}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> WeatherCache:
    return WeatherCache(clock=clock)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder()


@pytest.fixture
def weatherapi_client() -> WeatherApiClient:
    return WeatherApiClient(base_url=WEATHERAPI_URL, api_key="test-weatherapi-key")


@pytest.fixture
def openweather_client() -> OpenWeatherClient:
    return OpenWeatherClient(base_url=OPENWEATHER_URL, api_key="test-openweather-key")
