"""Tests for trip weather resolution and caching."""

from datetime import date, timedelta

import httpx
import pytest
import respx

from trip_weather.weather.cache import WeatherCache
from trip_weather.weather.client import OpenWeatherClient, WeatherApiClient
from trip_weather.weather.models import ForecastDay
from trip_weather.weather.service import TripWeatherService, get_weather_for_trip, iter_dates
from trip_weather.weather.strategies import ClimateStrategy, ForecastStrategy, default_strategies

from conftest import (
    OPENWEATHER_URL, TODAY, WEATHERAPI_URL, epoch, openweather_payload,
    weatherapi_payload
)


class CountingStrategy(ForecastStrategy):
    """Wraps a strategy and counts resolve calls."""

    name = "counting"

    def __init__(self, inner: ForecastStrategy):
        self.inner = inner
        self.calls = 0

    def applies(self, days_until: int) -> bool:
        return self.inner.applies(days_until)

    async def resolve(self, destination, day, days_until):
        self.calls += 1
        return await self.inner.resolve(destination, day, days_until)


class ExplodingStrategy(ForecastStrategy):
    name = "exploding"

    def applies(self, days_until: int) -> bool:
        return True

    async def resolve(self, destination, day, days_until):
        raise RuntimeError("provider exploded")


@pytest.fixture
def climate_service(cache, rng) -> TripWeatherService:
    return TripWeatherService(
        cache=cache,
        strategies=[ClimateStrategy(rng)],
        today=lambda: TODAY,
        rng=rng
    )


@pytest.fixture
def live_service(cache, rng, weatherapi_client, openweather_client, geocoder) -> TripWeatherService:
    return TripWeatherService(
        cache=cache,
        strategies=default_strategies(weatherapi_client, openweather_client, geocoder, rng),
        today=lambda: TODAY,
        rng=rng
    )


def mock_providers(router, weatherapi_status=200):
    return {
        "near_term": router.get(url__startswith=f"{WEATHERAPI_URL}/forecast.json").mock(
            return_value=httpx.Response(weatherapi_status, json=weatherapi_payload(TODAY))
        ),
        "mid_range": router.get(url__startswith=f"{OPENWEATHER_URL}/forecast").mock(
            return_value=httpx.Response(200, json=openweather_payload(TODAY))
        ),
        "current": router.get(url__startswith=f"{OPENWEATHER_URL}/weather").mock(
            return_value=httpx.Response(200, json={
                "sys": {"sunrise": epoch(2026, 7, 10, 3, 50), "sunset": epoch(2026, 7, 10, 19, 57)},
                "timezone": 7200,
            })
        ),
    }


class TestIterDates:
    def test_inclusive_across_year_end(self):
        assert list(iter_dates(date(2026, 12, 30), date(2027, 1, 2))) == [
            date(2026, 12, 30), date(2026, 12, 31), date(2027, 1, 1), date(2027, 1, 2)
        ]


class TestResolveTrip:
    async def test_one_day_per_date_in_order(self, climate_service: TripWeatherService):
        start, end = date(2026, 8, 28), date(2026, 9, 3)

        forecast = await climate_service.resolve_trip("Rome, Italy", start, end)

        assert len(forecast) == (end - start).days + 1
        assert [d.date for d in forecast] == [d.isoformat() for d in iter_dates(start, end)]
        assert [d.days_until for d in forecast] == list(range(49, 56))

    async def test_single_day_trip(self, climate_service: TripWeatherService):
        forecast = await climate_service.resolve_trip("Rome, Italy", TODAY, TODAY)

        assert len(forecast) == 1
        assert forecast[0].date == "2026-07-10"

    async def test_start_after_end_rejected(self, climate_service: TripWeatherService):
        with pytest.raises(ValueError):
            await climate_service.resolve_trip("Rome, Italy", date(2026, 7, 12), date(2026, 7, 11))

    async def test_unknown_destination(self, climate_service: TripWeatherService):
        forecast = await climate_service.resolve_trip("Atlantis", TODAY, TODAY + timedelta(days=2))

        assert len(forecast) == 3
        assert all(d.is_historic_average for d in forecast)

    async def test_result_is_cached(self, climate_service: TripWeatherService, cache: WeatherCache):
        forecast = await climate_service.resolve_trip("Rome, Italy", TODAY, TODAY + timedelta(days=2))

        assert cache.get("Rome, Italy", "2026-07-10", "2026-07-12") == forecast


class TestCaching:
    @respx.mock
    async def test_second_call_makes_no_network_requests(self, live_service: TripWeatherService):
        mock_providers(respx.mock)
        start, end = TODAY, TODAY + timedelta(days=15)

        first = await live_service.resolve_trip("Paris, France", start, end)
        calls_after_first = respx.calls.call_count
        second = await live_service.resolve_trip("Paris, France", start, end)

        assert calls_after_first > 0
        assert respx.calls.call_count == calls_after_first
        assert second == first

    async def test_climate_values_not_rerolled_on_hit(self, climate_service: TripWeatherService):
        start, end = date(2027, 1, 1), date(2027, 1, 20)

        first = await climate_service.resolve_trip("London, UK", start, end)
        second = await climate_service.resolve_trip("London, UK", start, end)

        assert second == first

    async def test_expired_entry_is_resolved_again(self, cache, clock, rng):
        counting = CountingStrategy(ClimateStrategy(rng))
        service = TripWeatherService(cache=cache, strategies=[counting], today=lambda: TODAY)
        end = TODAY + timedelta(days=1)

        await service.resolve_trip("Paris, France", TODAY, end)
        clock.advance(1800)
        await service.resolve_trip("Paris, France", TODAY, end)
        assert counting.calls == 2

        clock.advance(1801)
        await service.resolve_trip("Paris, France", TODAY, end)
        assert counting.calls == 4

    async def test_entry_point_uses_given_cache(self, cache: WeatherCache, climate_service):
        cached = await climate_service.resolve_trip("Paris, France", TODAY, TODAY + timedelta(days=1))

        result = await get_weather_for_trip("Paris, France", TODAY, TODAY + timedelta(days=1), cache=cache)

        assert result == cached


class TestResolveDay:
    async def test_near_term_day(self, live_service: TripWeatherService):
        with respx.mock(assert_all_called=False) as router:
            routes = mock_providers(router)
            day = await live_service.resolve_day("Paris, France", TODAY)

        assert day.is_historic_average is False
        assert day.days_until == 0
        assert len(day.hourly_forecast) == 6
        assert day.uv_index == 7.0
        assert day.sunrise == "06:01 AM"
        assert day.sunset == "09:55 PM"
        assert not routes["mid_range"].called

    async def test_near_term_failure_falls_through_to_mid_range(self, live_service: TripWeatherService):
        with respx.mock(assert_all_called=False) as router:
            routes = mock_providers(router, weatherapi_status=503)
            day = await live_service.resolve_day("Paris, France", TODAY + timedelta(days=1))

        assert routes["near_term"].called
        assert day.is_historic_average is False
        assert day.hourly_forecast[0].time == "12 AM"
        assert day.sunrise == "05:50 AM"

    async def test_mid_range_day(self, live_service: TripWeatherService):
        with respx.mock(assert_all_called=False) as router:
            routes = mock_providers(router)
            day = await live_service.resolve_day("Paris, France", TODAY + timedelta(days=4))

        assert not routes["near_term"].called
        assert not routes["current"].called
        assert day.is_historic_average is False
        assert day.date == "2026-07-14"

    async def test_mid_range_without_samples_falls_back_to_climate(self, live_service):
        with respx.mock(assert_all_called=False) as router:
            mock_providers(router)
            day = await live_service.resolve_day("Paris, France", TODAY + timedelta(days=8))

        assert day.is_historic_average is True
        assert day.days_until == 8

    @pytest.mark.parametrize("days_until", [11, 30, 365])
    async def test_far_future_is_always_historic(self, live_service, days_until):
        with respx.mock(assert_all_called=False) as router:
            mock_providers(router)
            day = await live_service.resolve_day("Paris, France", TODAY + timedelta(days=days_until))

        assert day.is_historic_average is True
        assert day.days_until == days_until
        assert router.calls.call_count == 0

    async def test_past_date_is_historic(self, live_service):
        with respx.mock(assert_all_called=False) as router:
            mock_providers(router)
            day = await live_service.resolve_day("Paris, France", TODAY - timedelta(days=2))

        assert day.is_historic_average is True
        assert day.days_until == -2
        assert router.calls.call_count == 0

    async def test_missing_credentials_fall_back(self, cache, rng, geocoder):
        async with WeatherApiClient(base_url=WEATHERAPI_URL, api_key=None) as near_term, \
                OpenWeatherClient(base_url=OPENWEATHER_URL, api_key=None) as mid_range:
            service = TripWeatherService(
                cache=cache,
                strategies=default_strategies(near_term, mid_range, geocoder, rng),
                today=lambda: TODAY
            )
            forecast = await service.resolve_trip("Paris, France", TODAY, TODAY + timedelta(days=10))

        assert len(forecast) == 11
        assert all(d.is_historic_average for d in forecast)

    async def test_raising_strategy_is_skipped(self, cache, rng):
        service = TripWeatherService(
            cache=cache,
            strategies=[ExplodingStrategy(), ClimateStrategy(rng)],
            today=lambda: TODAY
        )

        day = await service.resolve_day("Paris, France", TODAY)

        assert isinstance(day, ForecastDay)
        assert day.is_historic_average is True

    async def test_no_strategy_resolves(self, cache, rng):
        service = TripWeatherService(
            cache=cache, strategies=[ExplodingStrategy()], today=lambda: TODAY, rng=rng
        )

        day = await service.resolve_day("Paris, France", TODAY + timedelta(days=2))

        assert day.is_historic_average is True
        assert day.days_until == 2
