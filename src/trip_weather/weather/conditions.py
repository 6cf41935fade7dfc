"""Mapping of provider weather codes to condition tags."""

from typing import Dict, FrozenSet

from trip_weather.weather.models import WeatherCondition


def _codes(*items) -> FrozenSet[int]:
    """Expand ints and inclusive (low, high) ranges into a set of codes."""
    codes = set()
    for item in items:
        if isinstance(item, tuple):
            low, high = item
            codes.update(range(low, high + 1))
        else:
            codes.add(item)
    return frozenset(codes)


# WeatherAPI.com condition codes, checked in this order
WEATHERAPI_CODE_TABLE: Dict[WeatherCondition, FrozenSet[int]] = {
    WeatherCondition.SUNNY: _codes(1000),
    WeatherCondition.PARTLY_CLOUDY: _codes(1003),
    WeatherCondition.CLOUDY: _codes(1006, 1009, 1030, 1135, 1147),
    WeatherCondition.STORMY: _codes(1087, 1273, 1276, 1279, 1282),
    WeatherCondition.SNOWY: _codes(
        1066, 1069, 1114, 1117, 1204, 1207, (1210, 1225), 1237, (1249, 1264)
    ),
    WeatherCondition.RAINY: _codes(1063, 1072, (1150, 1201), (1240, 1246)),
}


def map_weatherapi_code(code: int) -> WeatherCondition:
    """Map a WeatherAPI.com condition code to a condition tag.

    Unknown codes map to partly-cloudy.
    """
    for condition, codes in WEATHERAPI_CODE_TABLE.items():
        if code in codes:
            return condition
    return WeatherCondition.PARTLY_CLOUDY


def map_openweather_code(code: int, description: str = "") -> WeatherCondition:
    """Map an OpenWeather condition id to a condition tag.

    Args:
        code: OpenWeather weather id (2xx thunderstorm, 3xx drizzle, 5xx rain,
            6xx snow, 7xx atmosphere, 800 clear, 80x clouds)
        description: Provider description, used to tell few clouds apart

    Returns:
        Condition tag
    """
    if 200 <= code <= 299:
        return WeatherCondition.STORMY
    if 300 <= code <= 599:
        return WeatherCondition.RAINY
    if 600 <= code <= 699:
        return WeatherCondition.SNOWY
    if code == 800:
        return WeatherCondition.SUNNY
    if 801 <= code <= 804:
        if "few clouds" in description.lower():
            return WeatherCondition.PARTLY_CLOUDY
        return WeatherCondition.CLOUDY
    return WeatherCondition.PARTLY_CLOUDY
