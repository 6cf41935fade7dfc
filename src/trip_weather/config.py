"""Configuration settings for the trip weather service."""

import os
from typing import Final, Optional
from dotenv import load_dotenv

load_dotenv()

# Near-term forecast provider (WeatherAPI.com)
WEATHERAPI_BASE_URL: Final[str] = "https://api.weatherapi.com/v1"
WEATHERAPI_KEY: Optional[str] = os.getenv("WEATHERAPI_KEY") or None

# Mid-range forecast provider (OpenWeather 5 day / 3 hour)
OPENWEATHER_BASE_URL: Final[str] = "https://api.openweathermap.org/data/2.5"
OPENWEATHER_API_KEY: Optional[str] = os.getenv("OPENWEATHER_API_KEY") or None
OPENWEATHER_UNITS: Final[str] = "imperial"

# Geocoding
GEOCODING_USER_AGENT: str = os.getenv("GEOCODING_USER_AGENT", "trip-weather/0.1")

# Provider request limits
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
MAX_CONCURRENT_PROVIDER_REQUESTS: int = int(os.getenv("MAX_CONCURRENT_PROVIDER_REQUESTS", "4"))

# Forecast cache
CACHE_DURATION_SECONDS: Final[int] = 60 * 60
CACHE_MAX_ENTRIES: Final[int] = 50

# Tier boundaries, in days from today
NEAR_TERM_MAX_DAYS: Final[int] = 3
NEAR_TERM_WINDOW_DAYS: Final[int] = 3
MID_RANGE_MAX_DAYS: Final[int] = 10
HOURLY_MAX_DAYS: Final[int] = 5
HOURLY_SAMPLE_COUNT: Final[int] = 6

# Server configuration
HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8000"))
DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
