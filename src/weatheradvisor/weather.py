"""OpenWeatherMap client and the cached weather fetcher."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable

from weatheradvisor._http import DEFAULT_TIMEOUT, SyncTransport
from weatheradvisor.api_logging import log_api_call
from weatheradvisor.cache import HISTORICAL_TTL_SECONDS, WeatherCache
from weatheradvisor.exceptions import (
    ConfigurationError,
    UpstreamServiceError,
    WeatherUnavailableError,
)
from weatheradvisor.models.location import Location
from weatheradvisor.models.weather import (
    CurrentConditions,
    DailyForecast,
    HourlyForecast,
    WeatherAlert,
    WeatherSnapshot,
    YesterdayConditions,
)

logger = logging.getLogger(__name__)

OPENWEATHER_BASE_URL = "https://api.openweathermap.org"
HOURS_KEPT = 24
SECONDS_PER_DAY = 24 * 60 * 60


def _ts(value: int | float | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _weather_main(entry: dict[str, Any]) -> tuple[str, str]:
    """Return (condition, description) from a provider ``weather`` list."""
    weather = (entry.get("weather") or [{}])[0]
    return weather.get("main", "Unknown"), weather.get("description", "unknown")


def parse_current(data: dict[str, Any]) -> CurrentConditions:
    condition, description = _weather_main(data)
    return CurrentConditions(
        temp=data["temp"],
        feels_like=data.get("feels_like", data["temp"]),
        condition=condition,
        description=description,
        humidity=data.get("humidity", 0),
        wind_speed=data.get("wind_speed", 0),
        wind_deg=data.get("wind_deg", 0),
        pressure=data.get("pressure"),
        visibility=data.get("visibility"),
        uvi=data.get("uvi"),
        dew_point=data.get("dew_point"),
        clouds=data.get("clouds"),
        sunrise=_ts(data.get("sunrise")),
        sunset=_ts(data.get("sunset")),
        rain_1h=(data.get("rain") or {}).get("1h", 0),
        snow_1h=(data.get("snow") or {}).get("1h", 0),
    )


def parse_daily(data: dict[str, Any]) -> DailyForecast:
    condition, description = _weather_main(data)
    temps = data.get("temp") or {}
    return DailyForecast(
        dt=_ts(data["dt"]),
        temp_max=temps.get("max", 0),
        temp_min=temps.get("min", 0),
        condition=condition,
        description=description,
        pop=data.get("pop", 0),
        humidity=data.get("humidity"),
        wind_speed=data.get("wind_speed"),
        wind_deg=data.get("wind_deg"),
        uvi=data.get("uvi"),
        sunrise=_ts(data.get("sunrise")),
        sunset=_ts(data.get("sunset")),
        moon_phase=data.get("moon_phase"),
    )


def parse_hourly(data: dict[str, Any]) -> HourlyForecast:
    condition, description = _weather_main(data)
    return HourlyForecast(
        dt=_ts(data["dt"]),
        temp=data["temp"],
        condition=condition,
        description=description,
        pop=data.get("pop", 0),
        feels_like=data.get("feels_like"),
        humidity=data.get("humidity"),
        wind_speed=data.get("wind_speed"),
        wind_deg=data.get("wind_deg"),
        uvi=data.get("uvi"),
        clouds=data.get("clouds"),
    )


def parse_alert(data: dict[str, Any]) -> WeatherAlert:
    return WeatherAlert(
        event=data.get("event", "Weather alert"),
        description=data.get("description", ""),
        start=_ts(data.get("start")),
        end=_ts(data.get("end")),
    )


def parse_yesterday(data: dict[str, Any] | None) -> YesterdayConditions | None:
    points = (data or {}).get("data") or []
    if not points:
        return None
    point = points[0]
    condition, _ = _weather_main(point)
    return YesterdayConditions(
        temp=point["temp"],
        humidity=point.get("humidity"),
        wind_speed=point.get("wind_speed"),
        condition=condition,
    )


def parse_air_quality(data: dict[str, Any]) -> int | None:
    entries = data.get("list") or []
    if not entries:
        return None
    return (entries[0].get("main") or {}).get("aqi")


def build_snapshot(
    location: Location,
    one_call: dict[str, Any],
    air_pollution: dict[str, Any] | None = None,
    historical: dict[str, Any] | None = None,
    fetched_at: datetime | None = None,
) -> WeatherSnapshot:
    """Assemble a WeatherSnapshot from raw provider payloads."""
    return WeatherSnapshot(
        location=location,
        fetched_at=fetched_at or datetime.now(timezone.utc),
        timezone_offset=one_call.get("timezone_offset", 0),
        current=parse_current(one_call["current"]),
        daily=[parse_daily(day) for day in one_call.get("daily") or []],
        hourly=[parse_hourly(hour) for hour in (one_call.get("hourly") or [])[:HOURS_KEPT]],
        alerts=[parse_alert(alert) for alert in one_call.get("alerts") or []],
        air_quality=parse_air_quality(air_pollution or {}),
        yesterday=parse_yesterday(historical),
    )


class OpenWeatherClient:
    """Synchronous client for the OpenWeatherMap endpoints the advisor uses.

    Usage:
        with OpenWeatherClient(api_key="...") as owm:
            data = owm.one_call(51.5, -0.12)
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = OPENWEATHER_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key
        self._transport = SyncTransport(base_url=base_url, service="openweather", timeout=timeout)

    def __enter__(self) -> OpenWeatherClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection."""
        self._transport.close()

    def _get(self, endpoint: str, **params: Any) -> Any:
        if not self._api_key:
            raise ConfigurationError("OPENWEATHER_API_KEY is missing")
        return self._transport.get(endpoint, {**params, "appid": self._api_key})

    # ── Endpoints ──────────────────────────────────────────────

    @log_api_call
    def geocode(self, city: str, country: str, limit: int = 1) -> list[dict[str, Any]]:
        """Direct geocoding of ``city,country`` to coordinates."""
        return self._get("/geo/1.0/direct", q=f"{city},{country}", limit=limit)

    @log_api_call
    def one_call(self, lat: float, lon: float) -> dict[str, Any]:
        """Current conditions, hourly and daily forecast and alerts."""
        return self._get(
            "/data/3.0/onecall", lat=lat, lon=lon, units="imperial", exclude="minutely",
        )

    @log_api_call
    def air_pollution(self, lat: float, lon: float) -> dict[str, Any]:
        """Current air quality index."""
        return self._get("/data/2.5/air_pollution", lat=lat, lon=lon)

    @log_api_call
    def historical(self, lat: float, lon: float, dt: int) -> dict[str, Any]:
        """Conditions at the unix time ``dt``."""
        return self._get(
            "/data/3.0/onecall/timemachine", lat=lat, lon=lon, dt=dt, units="imperial",
        )


class WeatherService:
    """Cached weather fetcher: Location -> WeatherSnapshot."""

    def __init__(
        self,
        client: OpenWeatherClient,
        cache: WeatherCache[WeatherSnapshot] | None = None,
        historical_cache: WeatherCache[dict[str, Any]] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self.cache: WeatherCache[WeatherSnapshot] = cache if cache is not None else WeatherCache()
        self.historical_cache: WeatherCache[dict[str, Any]] = (
            historical_cache if historical_cache is not None
            else WeatherCache(ttl=HISTORICAL_TTL_SECONDS)
        )
        self._clock = clock

    def close(self) -> None:
        self._client.close()

    def get_snapshot(self, location: Location) -> WeatherSnapshot:
        """Return fresh or cached weather for ``location``.

        Raises:
            ConfigurationError: the OpenWeather key is missing.
            WeatherUnavailableError: every fetch failed and nothing is cached.
        """
        key = location.cache_key
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Using cached weather data for %s", location.label)
            return cached

        try:
            snapshot = self._fetch(location)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.error("Error fetching weather data for %s: %s", location.label, exc)
            stale = self.cache.get_stale(key)
            if stale is not None:
                logger.warning("Using expired cached data for %s as fallback", location.label)
                return stale
            status = exc.status_code if isinstance(exc, UpstreamServiceError) else 502
            raise WeatherUnavailableError(
                status, f"Failed to fetch weather data: {exc}", service="openweather",
            ) from exc

        self.cache.set(key, snapshot)
        logger.info(
            "Fetched weather for %s: %s, %.0f°F, %d daily, %d hourly, %d alerts",
            location.label, snapshot.current.condition, snapshot.current.temp,
            len(snapshot.daily), len(snapshot.hourly), len(snapshot.alerts),
        )
        return snapshot

    def _resolve(self, location: Location) -> Location:
        if location.has_coordinates:
            return location
        matches = self._client.geocode(location.city, location.country)
        if not matches:
            raise UpstreamServiceError(
                404, f"Could not find coordinates for {location.label}", service="openweather",
            )
        return location.model_copy(update={"lat": matches[0]["lat"], "lng": matches[0]["lon"]})

    def _fetch(self, location: Location) -> WeatherSnapshot:
        resolved = self._resolve(location)
        lat, lng = resolved.lat, resolved.lng
        one_call = self._client.one_call(lat, lng)
        air = self._client.air_pollution(lat, lng)
        historical = self._fetch_historical(resolved)
        return build_snapshot(resolved, one_call, air, historical)

    def _fetch_historical(self, location: Location) -> dict[str, Any] | None:
        """Best-effort data for the same time yesterday."""
        yesterday = int(self._clock()) - SECONDS_PER_DAY
        key = f"{location.cache_key}|{yesterday // SECONDS_PER_DAY}"
        cached = self.historical_cache.get(key)
        if cached is not None:
            return cached
        try:
            data = self._client.historical(location.lat, location.lng, yesterday)
        except Exception as exc:
            logger.warning("Could not fetch historical data for %s: %s", location.label, exc)
            return None
        self.historical_cache.set(key, data)
        return data
