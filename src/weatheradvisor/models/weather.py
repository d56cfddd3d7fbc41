"""Weather snapshot models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from weatheradvisor.models.location import Location


class CurrentConditions(BaseModel):
    """Conditions at fetch time (imperial units)."""

    model_config = ConfigDict(frozen=True)

    temp: float
    feels_like: float
    condition: str
    description: str
    humidity: float
    wind_speed: float
    wind_deg: float = 0
    pressure: float | None = None
    visibility: float | None = None  # metres
    uvi: float | None = None
    dew_point: float | None = None
    clouds: float | None = None
    sunrise: datetime | None = None
    sunset: datetime | None = None
    rain_1h: float = 0
    snow_1h: float = 0


class DailyForecast(BaseModel):
    """One day of forecast."""

    model_config = ConfigDict(frozen=True)

    dt: datetime
    temp_max: float
    temp_min: float
    condition: str
    description: str
    pop: float = 0
    humidity: float | None = None
    wind_speed: float | None = None
    wind_deg: float | None = None
    uvi: float | None = None
    sunrise: datetime | None = None
    sunset: datetime | None = None
    moon_phase: float | None = None


class HourlyForecast(BaseModel):
    """One hour of forecast."""

    model_config = ConfigDict(frozen=True)

    dt: datetime
    temp: float
    condition: str
    description: str
    pop: float = 0
    feels_like: float | None = None
    humidity: float | None = None
    wind_speed: float | None = None
    wind_deg: float | None = None
    uvi: float | None = None
    clouds: float | None = None


class WeatherAlert(BaseModel):
    """An active weather alert."""

    model_config = ConfigDict(frozen=True)

    event: str
    description: str = ""
    start: datetime | None = None
    end: datetime | None = None


class YesterdayConditions(BaseModel):
    """Conditions at the same time on the previous day."""

    model_config = ConfigDict(frozen=True)

    temp: float
    humidity: float | None = None
    wind_speed: float | None = None
    condition: str = ""


class WeatherSnapshot(BaseModel):
    """Aggregated current, forecast and alert data for one location."""

    model_config = ConfigDict(frozen=True)

    location: Location
    fetched_at: datetime
    timezone_offset: int = 0
    current: CurrentConditions
    daily: list[DailyForecast] = Field(default_factory=list)
    hourly: list[HourlyForecast] = Field(default_factory=list)
    alerts: list[WeatherAlert] = Field(default_factory=list)
    air_quality: int | None = None
    yesterday: YesterdayConditions | None = None
