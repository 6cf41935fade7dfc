"""Data models for the trip weather service."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WeatherCondition(str, Enum):
    """Condition tag shown for a forecast day."""
    SUNNY = "sunny"
    PARTLY_CLOUDY = "partly-cloudy"
    CLOUDY = "cloudy"
    RAINY = "rainy"
    STORMY = "stormy"
    SNOWY = "snowy"


class CamelModel(BaseModel):
    """Frozen model serialized with camelCase field names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class HourlyForecast(CamelModel):
    """One hourly sample attached to a near-term forecast day."""
    time: str = Field(..., description="Display label, e.g. '2 PM'")
    temperature: int = Field(..., description="Temperature in Fahrenheit")
    condition: WeatherCondition = Field(..., description="Condition tag")
    precipitation_chance: int = Field(..., ge=0, le=100, description="Chance of rain in percent")


class ForecastDay(CamelModel):
    """Weather for one calendar day of a trip."""
    date: str = Field(..., description="Date in YYYY-MM-DD format")
    temperature_high: int = Field(..., description="Daily high in Fahrenheit")
    temperature_low: int = Field(..., description="Daily low in Fahrenheit")
    feels_like: Optional[int] = Field(None, description="Feels-like temperature in Fahrenheit")
    condition: WeatherCondition = Field(..., description="Condition tag")
    precipitation_chance: int = Field(..., ge=0, le=100, description="Chance of rain in percent")
    humidity: int = Field(..., ge=0, le=100, description="Relative humidity in percent")
    wind_speed: int = Field(..., ge=0, description="Wind speed in mph")
    is_historic_average: bool = Field(..., description="True when synthesized from climate statistics")
    days_until: int = Field(..., description="Days from today to date, negative for past dates")
    hourly_forecast: Optional[List[HourlyForecast]] = Field(None, description="Hourly samples for near-term days")
    uv_index: Optional[float] = Field(None, description="UV index")
    visibility: Optional[float] = Field(None, description="Visibility in miles")
    sunrise: Optional[str] = Field(None, description="Local sunrise time, e.g. '07:12 AM'")
    sunset: Optional[str] = Field(None, description="Local sunset time, e.g. '06:48 PM'")


class TripWeather(CamelModel):
    """Trip weather response model."""
    destination: str = Field(..., description="Destination as requested")
    start_date: str = Field(..., description="First trip day in YYYY-MM-DD format")
    end_date: str = Field(..., description="Last trip day in YYYY-MM-DD format")
    forecast: List[ForecastDay] = Field(..., description="One entry per trip day, ascending")


class SeasonClimate(BaseModel):
    """Seasonal averages for one destination."""
    model_config = ConfigDict(frozen=True)

    high: int = Field(..., description="Average high in Fahrenheit")
    low: int = Field(..., description="Average low in Fahrenheit")
    rain: int = Field(..., ge=0, le=100, description="Average chance of rain in percent")


class ClimateProfile(BaseModel):
    """Seasonal climate table entry."""
    model_config = ConfigDict(frozen=True)

    summer: SeasonClimate
    winter: SeasonClimate
    spring: SeasonClimate
    fall: SeasonClimate


# WeatherAPI.com forecast.json payload

class WeatherApiCondition(BaseModel):
    code: int
    text: str = ""


class WeatherApiHour(BaseModel):
    time: str = Field(..., description="Local time, 'YYYY-MM-DD HH:MM'")
    temp_f: float
    feelslike_f: Optional[float] = None
    condition: WeatherApiCondition
    chance_of_rain: int = 0


class WeatherApiDay(BaseModel):
    maxtemp_f: float
    mintemp_f: float
    avgtemp_f: Optional[float] = None
    condition: WeatherApiCondition
    daily_chance_of_rain: int = 0
    avghumidity: float
    maxwind_mph: float
    uv: Optional[float] = None
    avgvis_miles: Optional[float] = None


class WeatherApiAstro(BaseModel):
    sunrise: Optional[str] = None
    sunset: Optional[str] = None


class WeatherApiForecastDay(BaseModel):
    date: str
    day: WeatherApiDay
    astro: WeatherApiAstro = WeatherApiAstro()
    hour: List[WeatherApiHour] = []


class WeatherApiForecast(BaseModel):
    forecastday: List[WeatherApiForecastDay]


class WeatherApiForecastResponse(BaseModel):
    """Raw response from WeatherAPI.com forecast endpoint."""
    forecast: WeatherApiForecast


# OpenWeather 5 day / 3 hour forecast payload

class OpenWeatherMain(BaseModel):
    temp: float
    feels_like: Optional[float] = None
    humidity: float


class OpenWeatherDescription(BaseModel):
    id: int
    description: str = ""


class OpenWeatherWind(BaseModel):
    speed: float = 0.0


class OpenWeatherSample(BaseModel):
    dt: int = Field(..., description="Sample time, unix epoch seconds (UTC)")
    main: OpenWeatherMain
    weather: List[OpenWeatherDescription]
    wind: OpenWeatherWind = OpenWeatherWind()
    pop: float = Field(0.0, ge=0, le=1, description="Probability of precipitation")
    visibility: Optional[float] = Field(None, description="Visibility in metres")


class OpenWeatherCity(BaseModel):
    timezone: int = Field(0, description="UTC offset in seconds")


class OpenWeatherForecastResponse(BaseModel):
    """Raw response from OpenWeather forecast endpoint."""
    samples: List[OpenWeatherSample] = Field(..., alias="list")
    city: OpenWeatherCity = OpenWeatherCity()


class OpenWeatherSys(BaseModel):
    sunrise: int
    sunset: int


class OpenWeatherCurrentResponse(BaseModel):
    """Raw response from OpenWeather current conditions endpoint."""
    sys: OpenWeatherSys
    timezone: int = 0
