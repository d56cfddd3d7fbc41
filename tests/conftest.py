"""Shared test fixtures and sample provider responses."""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timezone
from typing import Any

import pytest

import weatheradvisor.api_logging as api_logging
from weatheradvisor.llm import InvokeOptions, LLMResult
from weatheradvisor.models.location import Location
from weatheradvisor.models.weather import WeatherSnapshot
from weatheradvisor.weather import build_snapshot

OPENCAGE_URL = "https://api.opencagedata.com/geocode/v1/json"
OPENWEATHER_URL = "https://api.openweathermap.org"
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"

NOW = 1700000000  # Tue, Nov 14 2023 22:13:20 UTC


SAMPLE_ONE_CALL: dict[str, Any] = {
    "lat": 51.5074,
    "lon": -0.1278,
    "timezone": "Europe/London",
    "timezone_offset": 0,
    "current": {
        "dt": NOW,
        "sunrise": 1699945200,
        "sunset": 1699977600,
        "temp": 52.3,
        "feels_like": 49.8,
        "pressure": 1012,
        "humidity": 81,
        "dew_point": 46.6,
        "uvi": 0.4,
        "clouds": 75,
        "visibility": 10000,
        "wind_speed": 11.5,
        "wind_deg": 230,
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10n"}],
        "rain": {"1h": 0.3},
    },
    "hourly": [
        {
            "dt": 1700002800,
            "temp": 51.9,
            "feels_like": 49.1,
            "humidity": 83,
            "clouds": 80,
            "wind_speed": 12.1,
            "wind_deg": 235,
            "uvi": 0,
            "pop": 0.64,
            "weather": [{"id": 500, "main": "Rain", "description": "light rain"}],
        },
        {
            "dt": 1700006400,
            "temp": 51.2,
            "feels_like": 48.6,
            "humidity": 85,
            "clouds": 90,
            "wind_speed": 12.8,
            "wind_deg": 240,
            "uvi": 0,
            "pop": 0.72,
            "weather": [{"id": 501, "main": "Rain", "description": "moderate rain"}],
        },
        {
            "dt": 1700010000,
            "temp": 50.4,
            "feels_like": 47.7,
            "humidity": 86,
            "clouds": 100,
            "wind_speed": 13.0,
            "wind_deg": 245,
            "uvi": 0,
            "pop": 0.5,
            "weather": [{"id": 804, "main": "Clouds", "description": "overcast clouds"}],
        },
    ],
    "daily": [
        {
            "dt": 1700049600,
            "sunrise": 1700031600,
            "sunset": 1700064000,
            "moon_phase": 0.06,
            "temp": {"day": 54.0, "min": 45.2, "max": 55.6},
            "humidity": 78,
            "wind_speed": 14.2,
            "wind_deg": 240,
            "weather": [{"id": 501, "main": "Rain", "description": "moderate rain"}],
            "pop": 0.86,
            "uvi": 0.9,
        },
        {
            "dt": 1700136000,
            "sunrise": 1700118120,
            "sunset": 1700150340,
            "moon_phase": 0.1,
            "temp": {"day": 48.0, "min": 41.0, "max": 50.4},
            "humidity": 70,
            "wind_speed": 9.4,
            "wind_deg": 270,
            "weather": [{"id": 802, "main": "Clouds", "description": "scattered clouds"}],
            "pop": 0.2,
            "uvi": 1.1,
        },
    ],
}

SAMPLE_ALERT: dict[str, Any] = {
    "sender_name": "Met Office",
    "event": "Yellow wind warning",
    "start": 1700038800,
    "end": 1700082000,
    "description": "Strong winds may cause some disruption to travel.",
    "tags": ["Wind"],
}

SAMPLE_AIR_POLLUTION: dict[str, Any] = {
    "coord": {"lon": -0.1278, "lat": 51.5074},
    "list": [{"main": {"aqi": 2}, "components": {"pm2_5": 6.1}, "dt": NOW}],
}

SAMPLE_HISTORICAL: dict[str, Any] = {
    "lat": 51.5074,
    "lon": -0.1278,
    "timezone_offset": 0,
    "data": [
        {
            "dt": NOW - 86400,
            "temp": 48.1,
            "humidity": 70,
            "wind_speed": 8.0,
            "weather": [{"id": 804, "main": "Clouds", "description": "overcast clouds"}],
        }
    ],
}

SAMPLE_OWM_GEOCODE: list[dict[str, Any]] = [
    {"name": "London", "lat": 51.5073219, "lon": -0.1276474, "country": "GB"},
]

SAMPLE_OPENCAGE: dict[str, Any] = {
    "results": [
        {
            "formatted": "London, Greater London, England, United Kingdom",
            "geometry": {"lat": 51.5073219, "lng": -0.1276474},
            "components": {"city": "London", "state": "England", "country": "United Kingdom"},
        },
        {
            "formatted": "London, Ontario, Canada",
            "geometry": {"lat": 42.9832406, "lng": -81.243372},
            "components": {"city": "London", "state": "Ontario", "country": "Canada"},
        },
    ],
    "status": {"code": 200, "message": "OK"},
    "total_results": 2,
}

SAMPLE_COMPLETION: dict[str, Any] = {
    "id": "gen-123",
    "model": "google/gemini-2.0-flash-exp:free",
    "choices": [
        {
            "index": 0,
            "message": {
                "role": "assistant",
                "content": "Yes, take an umbrella. Rain is likely tomorrow with a high of 56°F.",
            },
        }
    ],
}


def make_one_call(
    current: dict[str, Any] | None = None,
    daily: list[dict[str, Any]] | None = None,
    hourly: list[dict[str, Any]] | None = None,
    alerts: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a copy of SAMPLE_ONE_CALL with the given parts replaced."""
    data = copy.deepcopy(SAMPLE_ONE_CALL)
    if current:
        data["current"].update(current)
    if daily is not None:
        data["daily"] = daily
    if hourly is not None:
        data["hourly"] = hourly
    if alerts is not None:
        data["alerts"] = alerts
    return data


class FakeWeather:
    """WeatherService stand-in returning a fixed snapshot or raising."""

    def __init__(self, snapshot: WeatherSnapshot | None = None, error: Exception | None = None) -> None:
        self.snapshot = snapshot
        self.error = error
        self.locations: list[Location] = []

    def get_snapshot(self, location: Location) -> WeatherSnapshot:
        self.locations.append(location)
        if self.error is not None:
            raise self.error
        return self.snapshot

    def close(self) -> None:
        pass


class FakeLLM:
    """LLMClient stand-in returning a fixed result and recording prompts."""

    def __init__(self, result: LLMResult) -> None:
        self.result = result
        self.calls: list[tuple[str, str, InvokeOptions | None]] = []

    def invoke(self, system_prompt: str, user_prompt: str, options: InvokeOptions | None = None) -> LLMResult:
        self.calls.append((system_prompt, user_prompt, options))
        return self.result

    def close(self) -> None:
        pass


class FakeTransport:
    """SyncTransport stand-in returning a payload or raising."""

    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def get(self, endpoint: str, params: dict[str, Any]) -> Any:
        self.calls.append((endpoint, params))
        if self.error is not None:
            raise self.error
        return self.payload

    def close(self) -> None:
        pass


class FakeClock:
    """Settable stand-in for ``time.time``."""

    def __init__(self, now: float = NOW) -> None:
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ── Fixtures ────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def _api_log_in_tmp(tmp_path):
    """Point the call log at tmp_path and reset the cached file logger."""
    named_logger = logging.getLogger("weatheradvisor.api")
    old = (api_logging._logger, api_logging._LOG_DIR, api_logging._LOG_FILE)

    for handler in named_logger.handlers[:]:
        handler.close()
        named_logger.removeHandler(handler)
    api_logging._logger = None
    api_logging._LOG_DIR = str(tmp_path / "logs")
    api_logging._LOG_FILE = str(tmp_path / "logs" / "api_calls.log")

    yield tmp_path / "logs"

    for handler in named_logger.handlers[:]:
        handler.close()
        named_logger.removeHandler(handler)
    api_logging._logger, api_logging._LOG_DIR, api_logging._LOG_FILE = old


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def london() -> Location:
    return Location(city="London", country="United Kingdom", lat=51.5074, lng=-0.1278)


@pytest.fixture
def make_snapshot(london):
    """Factory fixture building a WeatherSnapshot from sample payloads."""

    def _make(
        one_call: dict[str, Any] | None = None,
        air_pollution: dict[str, Any] | None = SAMPLE_AIR_POLLUTION,
        historical: dict[str, Any] | None = SAMPLE_HISTORICAL,
        location: Location | None = None,
    ) -> WeatherSnapshot:
        return build_snapshot(
            location or london,
            one_call if one_call is not None else make_one_call(),
            air_pollution,
            historical,
            fetched_at=datetime.fromtimestamp(NOW, tz=timezone.utc),
        )

    return _make


@pytest.fixture
def snapshot(make_snapshot) -> WeatherSnapshot:
    return make_snapshot()
