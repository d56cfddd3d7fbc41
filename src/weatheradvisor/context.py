"""Intent-specific extraction and prompt formatting of weather data."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from weatheradvisor.intent import Intent
from weatheradvisor.models.weather import WeatherSnapshot

WIND_DIRECTIONS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)
AQI_LEVELS = ("Good", "Fair", "Moderate", "Poor", "Very Poor")
METRES_PER_MILE = 1609
ALERT_DESCRIPTION_CHARS = 200

FORECAST_HOURS = 24
ACTIVITY_HOURS = 12
CLOTHING_HOURS = 6
COMPARISON_DAYS = 3
PROMPT_FORECAST_HOURS = 12
PROMPT_UPCOMING_HOURS = 6

AQI_SCALE = (
    "AQI Scale: 0-50 (Good), 51-100 (Moderate), 101-150 (Unhealthy for Sensitive Groups), "
    "151-200 (Unhealthy), 201-300 (Very Unhealthy), 301+ (Hazardous)"
)
UV_SCALE = "UV Index Scale: 0-2 (Low), 3-5 (Moderate), 6-7 (High), 8-10 (Very High), 11+ (Extreme)"


# ── Formatting helpers ──────────────────────────────────────────────────────


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_temp(value: float) -> str:
    return f"{round_half_up(value)}°F"


def format_percent(value: float) -> str:
    return f"{round_half_up(value)}%"


def format_uv(value: float) -> str:
    return f"{value:.1f}"


def wind_direction(degrees: float) -> str:
    """Map degrees to one of 16 compass labels; 0 and 360 are both 'N'."""
    return WIND_DIRECTIONS[round_half_up(degrees / 22.5) % 16]


def moon_phase_name(phase: float | None) -> str:
    """Name the provider's 0..1 moon phase fraction."""
    if phase is None:
        return "Unknown"
    if phase in (0, 1):
        return "New Moon"
    if phase < 0.25:
        return "Waxing Crescent"
    if phase == 0.25:
        return "First Quarter"
    if phase < 0.5:
        return "Waxing Gibbous"
    if phase == 0.5:
        return "Full Moon"
    if phase < 0.75:
        return "Waning Gibbous"
    if phase == 0.75:
        return "Last Quarter"
    if phase < 1:
        return "Waning Crescent"
    return "Unknown"


def aqi_description(aqi: int | None) -> str:
    """Describe a 1-5 provider index, or a US AQI value above that range."""
    if aqi is None:
        return "Not available"
    if 1 <= aqi <= 5:
        return AQI_LEVELS[aqi - 1]
    if aqi <= 50:
        return "Good"
    if aqi <= 100:
        return "Moderate"
    if aqi <= 150:
        return "Unhealthy for Sensitive Groups"
    if aqi <= 200:
        return "Unhealthy"
    if aqi <= 300:
        return "Very Unhealthy"
    return "Hazardous"


def _local(value: datetime, offset: int) -> datetime:
    return value.astimezone(timezone.utc) + timedelta(seconds=offset)


def format_date(value: datetime, offset: int = 0) -> str:
    return _local(value, offset).strftime("%a, %b %d")


def format_hour(value: datetime, offset: int = 0) -> str:
    return _local(value, offset).strftime("%I:%M %p").lstrip("0")


def format_datetime(value: datetime | None, offset: int = 0) -> str:
    if value is None:
        return "N/A"
    return f"{format_date(value, offset)} {format_hour(value, offset)}"


# ── Structured context ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class CurrentSummary:
    temperature: float
    conditions: str
    feels_like: float
    humidity: float
    wind_speed: float
    wind_deg: float


@dataclass(frozen=True)
class DaySummary:
    date: str
    temp_high: float
    temp_low: float
    conditions: str
    precipitation: float
    humidity: float | None = None
    wind_speed: float | None = None


@dataclass(frozen=True)
class HourSummary:
    time: str
    temp: float
    conditions: str
    precipitation: float


@dataclass(frozen=True)
class AlertSummary:
    event: str
    description: str
    start: str
    end: str


@dataclass(frozen=True)
class AstronomySummary:
    sunrise: str
    sunset: str
    moon_phase: float | None


@dataclass(frozen=True)
class YesterdaySummary:
    temperature: float
    conditions: str
    temp_difference: float
    was_warmer: bool
    was_drier: bool | None
    was_windier: bool | None


@dataclass(frozen=True)
class WeatherContext:
    """The slice of a snapshot relevant to one question."""

    location: str
    current: CurrentSummary
    details: dict[str, str] = field(default_factory=dict)
    uv_index: float | None = None
    daily: tuple[DaySummary, ...] = ()
    hourly: tuple[HourSummary, ...] = ()
    alerts: tuple[AlertSummary, ...] | None = None
    astronomy: AstronomySummary | None = None
    air_quality: str | None = None
    yesterday: YesterdaySummary | None = None


def extract_context(snapshot: WeatherSnapshot, intent: Intent) -> WeatherContext:
    """Select the fields of ``snapshot`` that matter for ``intent``."""
    now = snapshot.current
    offset = snapshot.timezone_offset
    details: dict[str, str] = {}
    if now.uvi is not None:
        details["UV Index"] = format_uv(now.uvi)

    def days(limit: int | None = None) -> tuple[DaySummary, ...]:
        return tuple(
            DaySummary(
                date=format_date(day.dt, offset),
                temp_high=day.temp_max,
                temp_low=day.temp_min,
                conditions=day.description,
                precipitation=day.pop * 100,
                humidity=day.humidity,
                wind_speed=day.wind_speed,
            )
            for day in snapshot.daily[:limit]
        )

    def hours(limit: int) -> tuple[HourSummary, ...]:
        return tuple(
            HourSummary(
                time=format_hour(hour.dt, offset),
                temp=hour.temp,
                conditions=hour.description,
                precipitation=hour.pop * 100,
            )
            for hour in snapshot.hourly[:limit]
        )

    def alerts() -> tuple[AlertSummary, ...]:
        return tuple(
            AlertSummary(
                event=alert.event,
                description=alert.description,
                start=format_datetime(alert.start, offset),
                end=format_datetime(alert.end, offset),
            )
            for alert in snapshot.alerts
        )

    def near_term_conditions() -> None:
        if now.clouds is not None:
            details["Cloud Cover"] = format_percent(now.clouds)
        if snapshot.hourly:
            details["Rain Chance"] = format_percent(snapshot.hourly[0].pop * 100)

    extra: dict[str, object] = {}
    if intent is Intent.FORECAST:
        extra["daily"] = days()
        extra["hourly"] = hours(FORECAST_HOURS)
    elif intent is Intent.CURRENT_CONDITIONS:
        if now.visibility is not None:
            details["Visibility"] = f"{now.visibility / METRES_PER_MILE:.1f} mi"
        if now.pressure is not None:
            details["Pressure"] = f"{round_half_up(now.pressure)} hPa"
        if now.dew_point is not None:
            details["Dew Point"] = format_temp(now.dew_point)
        if now.clouds is not None:
            details["Cloud Cover"] = format_percent(now.clouds)
    elif intent is Intent.CLOTHING:
        near_term_conditions()
        extra["hourly"] = hours(CLOTHING_HOURS)
    elif intent is Intent.ACTIVITY:
        near_term_conditions()
        extra["hourly"] = hours(ACTIVITY_HOURS)
    elif intent in (Intent.SAFETY, Intent.ALERTS):
        extra["alerts"] = alerts()
    elif intent is Intent.TRAVEL:
        if now.visibility is not None:
            details["Visibility"] = f"{now.visibility / METRES_PER_MILE:.1f} mi"
        details["Wind"] = f"{round_half_up(now.wind_speed)} mph"
        extra["alerts"] = alerts()
    elif intent is Intent.ASTRONOMY:
        today = snapshot.daily[0] if snapshot.daily else None
        sunrise = (today.sunrise if today else None) or now.sunrise
        sunset = (today.sunset if today else None) or now.sunset
        extra["astronomy"] = AstronomySummary(
            sunrise=format_hour(sunrise, offset) if sunrise else "N/A",
            sunset=format_hour(sunset, offset) if sunset else "N/A",
            moon_phase=today.moon_phase if today else None,
        )
    elif intent is Intent.COMPARISON:
        extra["daily"] = days(COMPARISON_DAYS)
        past = snapshot.yesterday
        if past is not None:
            extra["yesterday"] = YesterdaySummary(
                temperature=past.temp,
                conditions=past.condition,
                temp_difference=now.temp - past.temp,
                was_warmer=now.temp > past.temp,
                was_drier=None if past.humidity is None else now.humidity < past.humidity,
                was_windier=None if past.wind_speed is None else now.wind_speed > past.wind_speed,
            )
    elif intent is Intent.EXPLANATION:
        air_quality = aqi_description(snapshot.air_quality)
        details["Air Quality"] = air_quality
        extra["air_quality"] = air_quality

    return WeatherContext(
        location=snapshot.location.label,
        current=CurrentSummary(
            temperature=now.temp,
            conditions=now.description,
            feels_like=now.feels_like,
            humidity=now.humidity,
            wind_speed=now.wind_speed,
            wind_deg=now.wind_deg,
        ),
        details=details,
        uv_index=now.uvi,
        **extra,  # type: ignore[arg-type]
    )


# ── Text rendering ──────────────────────────────────────────────────────────


def _hour_line(hour: HourSummary) -> str:
    return (
        f"{hour.time}: {format_temp(hour.temp)}, {hour.conditions}, "
        f"{format_percent(hour.precipitation)} chance of precipitation"
    )


def _day_line(day: DaySummary, with_humidity_and_wind: bool = False) -> str:
    line = (
        f"{day.date}: High {format_temp(day.temp_high)}, Low {format_temp(day.temp_low)}, "
        f"{day.conditions}, {format_percent(day.precipitation)} chance of precipitation"
    )
    if with_humidity_and_wind:
        if day.humidity is not None:
            line += f", humidity {format_percent(day.humidity)}"
        if day.wind_speed is not None:
            line += f", wind {round_half_up(day.wind_speed)} mph"
    return line


def _truncate(text: str, limit: int = ALERT_DESCRIPTION_CHARS) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def format_context(context: WeatherContext, intent: Intent) -> str:
    """Render ``context`` as the plain-text weather block of a prompt."""
    current = context.current
    lines = [
        "CURRENT WEATHER:",
        f"Temperature: {format_temp(current.temperature)}",
        f"Conditions: {current.conditions}",
        f"Feels Like: {format_temp(current.feels_like)}",
        f"Humidity: {format_percent(current.humidity)}",
        f"Wind: {round_half_up(current.wind_speed)} mph from {wind_direction(current.wind_deg)}",
    ]
    lines += [f"{label}: {value}" for label, value in context.details.items()]

    if intent in (Intent.FORECAST, Intent.COMPARISON) and context.daily:
        lines += ["", "DAILY FORECAST:"]
        lines += [_day_line(day, intent is Intent.COMPARISON) for day in context.daily]

    if intent is Intent.FORECAST and context.hourly:
        lines += ["", f"HOURLY FORECAST (next {PROMPT_FORECAST_HOURS} hours):"]
        lines += [_hour_line(hour) for hour in context.hourly[:PROMPT_FORECAST_HOURS]]

    if intent in (Intent.ACTIVITY, Intent.CLOTHING) and context.hourly:
        lines += ["", "UPCOMING HOURS:"]
        lines += [_hour_line(hour) for hour in context.hourly[:PROMPT_UPCOMING_HOURS]]

    if intent is Intent.COMPARISON and context.yesterday is not None:
        past = context.yesterday
        change = "warmer" if past.temp_difference >= 0 else "cooler"
        lines += [
            "",
            "COMPARED TO YESTERDAY:",
            f"Yesterday: {format_temp(past.temperature)}, {past.conditions}",
            f"Today is {abs(round_half_up(past.temp_difference))}°F {change} than yesterday",
        ]
        if past.was_drier is not None:
            lines.append(f"Drier than yesterday: {'yes' if past.was_drier else 'no'}")
        if past.was_windier is not None:
            lines.append(f"Windier than yesterday: {'yes' if past.was_windier else 'no'}")

    if intent in (Intent.SAFETY, Intent.ALERTS, Intent.TRAVEL):
        if context.alerts:
            lines += ["", "WEATHER ALERTS:"]
            for alert in context.alerts:
                lines.append(f"{alert.event}: {_truncate(alert.description)}")
                lines.append(f"Valid: {alert.start} to {alert.end}")
        else:
            lines += ["", "No weather alerts currently in effect."]

    if intent is Intent.ASTRONOMY and context.astronomy is not None:
        lines += [
            "",
            "ASTRONOMY INFO:",
            f"Sunrise: {context.astronomy.sunrise}",
            f"Sunset: {context.astronomy.sunset}",
            f"Moon Phase: {moon_phase_name(context.astronomy.moon_phase)}",
        ]

    if intent is Intent.EXPLANATION:
        lines += ["", "REFERENCE DATA FOR EXPLANATIONS:"]
        if context.air_quality:
            lines.append(f"Current Air Quality: {context.air_quality}")
        if context.uv_index is not None:
            lines.append(f"Current UV Index: {format_uv(context.uv_index)}")
        lines += [AQI_SCALE, UV_SCALE]

    return "\n".join(lines) + "\n"
