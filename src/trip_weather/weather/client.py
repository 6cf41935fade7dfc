"""HTTP clients for the forecast providers."""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from trip_weather.config import (
    WEATHERAPI_BASE_URL, WEATHERAPI_KEY,
    OPENWEATHER_BASE_URL, OPENWEATHER_API_KEY, OPENWEATHER_UNITS,
    REQUEST_TIMEOUT_SECONDS, MAX_CONCURRENT_PROVIDER_REQUESTS
)
from trip_weather.weather.models import (
    OpenWeatherCurrentResponse, OpenWeatherForecastResponse,
    WeatherApiForecastResponse
)

logger = logging.getLogger(__name__)


class MissingCredentialError(Exception):
    """Raised when a provider API key is not configured."""
    pass


class ProviderError(Exception):
    """Raised when a provider returns an unusable response."""
    pass


class ProviderClient:
    """Base async client shared by the forecast providers.

    Requests go through a semaphore so that at most a fixed number are in
    flight at once, and each request is bounded by a timeout.
    """

    provider_name = "provider"

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        semaphore: Optional[asyncio.Semaphore] = None
    ):
        """Initialize the provider client.

        Args:
            base_url: Base URL for the provider API
            api_key: Provider credential, None when not configured
            timeout: Per-request timeout in seconds
            semaphore: Limits concurrent requests (creates one if None)
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.semaphore = semaphore or asyncio.Semaphore(MAX_CONCURRENT_PROVIDER_REQUESTS)
        self.client = httpx.AsyncClient(timeout=timeout)

    def _require_api_key(self) -> str:
        if not self.api_key:
            raise MissingCredentialError(f"No API key configured for {self.provider_name}")
        return self.api_key

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Issue a GET request and return the decoded JSON body.

        Raises:
            httpx.HTTPError: If the request fails, times out or is not OK
            ProviderError: If the body is not a JSON object
        """
        url = f"{self.base_url}/{path}"
        async with self.semaphore:
            try:
                response = await self.client.get(url, params=params)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.warning(f"HTTP error from {self.provider_name}: {e.response.status_code}")
                raise
            except httpx.RequestError as e:
                logger.warning(f"Request error to {self.provider_name}: {e!r}")
                raise

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {self.provider_name}: {e}")

        if not isinstance(data, dict):
            raise ProviderError(f"Unexpected payload from {self.provider_name}")
        return data

    async def aclose(self):
        """Close the async HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.aclose()


class WeatherApiClient(ProviderClient):
    """Near-term forecast provider (WeatherAPI.com)."""

    provider_name = "WeatherAPI"

    def __init__(
        self,
        base_url: str = WEATHERAPI_BASE_URL,
        api_key: Optional[str] = WEATHERAPI_KEY,
        **kwargs
    ):
        super().__init__(base_url, api_key, **kwargs)

    async def get_forecast(self, destination: str, days: int) -> WeatherApiForecastResponse:
        """Fetch a daily forecast with hourly samples for a destination.

        Args:
            destination: Free-form destination, resolved by the provider
            days: Forecast window in days, starting today

        Returns:
            Validated forecast response

        Raises:
            MissingCredentialError: If no API key is configured
            httpx.HTTPError: If the request fails
            ProviderError: If the response format is invalid
        """
        params = {
            "key": self._require_api_key(),
            "q": destination,
            "days": days,
            "aqi": "no",
            "alerts": "no",
        }
        logger.info(f"Fetching {days}-day near-term forecast for '{destination}'")
        data = await self._get_json("forecast.json", params)

        try:
            return WeatherApiForecastResponse.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f"Invalid {self.provider_name} response format: {e}")


class OpenWeatherClient(ProviderClient):
    """Mid-range forecast provider (OpenWeather 5 day / 3 hour)."""

    provider_name = "OpenWeather"

    def __init__(
        self,
        base_url: str = OPENWEATHER_BASE_URL,
        api_key: Optional[str] = OPENWEATHER_API_KEY,
        units: str = OPENWEATHER_UNITS,
        **kwargs
    ):
        super().__init__(base_url, api_key, **kwargs)
        self.units = units

    def _params(self, lat: float, lon: float) -> Dict[str, Any]:
        return {
            "lat": round(lat, 4),
            "lon": round(lon, 4),
            "units": self.units,
            "appid": self._require_api_key(),
        }

    async def get_forecast(self, lat: float, lon: float) -> OpenWeatherForecastResponse:
        """Fetch 3-hourly forecast samples for coordinates.

        Raises:
            MissingCredentialError: If no API key is configured
            httpx.HTTPError: If the request fails
            ProviderError: If the response format is invalid
        """
        params = self._params(lat, lon)
        logger.info(f"Fetching mid-range forecast for lat={lat}, lon={lon}")
        data = await self._get_json("forecast", params)

        try:
            return OpenWeatherForecastResponse.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f"Invalid {self.provider_name} forecast format: {e}")

    async def get_current(self, lat: float, lon: float) -> OpenWeatherCurrentResponse:
        """Fetch current conditions, used for sunrise and sunset.

        Raises:
            MissingCredentialError: If no API key is configured
            httpx.HTTPError: If the request fails
            ProviderError: If the response format is invalid
        """
        params = self._params(lat, lon)
        data = await self._get_json("weather", params)

        try:
            return OpenWeatherCurrentResponse.model_validate(data)
        except ValidationError as e:
            raise ProviderError(f"Invalid {self.provider_name} current conditions format: {e}")
