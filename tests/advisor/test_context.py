"""Tests for context extraction and formatting."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from tests.conftest import SAMPLE_ALERT, make_one_call
from weatheradvisor.context import (
    AQI_SCALE,
    UV_SCALE,
    WIND_DIRECTIONS,
    aqi_description,
    extract_context,
    format_context,
    format_date,
    format_hour,
    moon_phase_name,
    round_half_up,
    wind_direction,
)
from weatheradvisor.intent import Intent


class TestHelpers:
    @pytest.mark.parametrize(
        ("value", "expected"), [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (52.3, 52), (55.6, 56)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected

    def test_wind_direction_cardinal_points(self) -> None:
        assert wind_direction(0) == "N"
        assert wind_direction(360) == "N"
        assert wind_direction(90) == "E"
        assert wind_direction(180) == "S"
        assert wind_direction(230) == "SW"
        assert wind_direction(348.75) == "N"

    def test_wind_direction_is_total(self) -> None:
        for tenth in range(3600):
            assert wind_direction(tenth / 10) in WIND_DIRECTIONS

    def test_wind_direction_is_stable(self) -> None:
        assert all(wind_direction(d) == wind_direction(d) for d in range(360))

    @pytest.mark.parametrize(
        ("phase", "name"),
        [
            (0, "New Moon"), (1, "New Moon"), (0.1, "Waxing Crescent"), (0.25, "First Quarter"),
            (0.4, "Waxing Gibbous"), (0.5, "Full Moon"), (0.6, "Waning Gibbous"),
            (0.75, "Last Quarter"), (0.9, "Waning Crescent"), (None, "Unknown"),
        ],
    )
    def test_moon_phase_name(self, phase, name: str) -> None:
        assert moon_phase_name(phase) == name

    @pytest.mark.parametrize(
        ("aqi", "label"),
        [
            (1, "Good"), (2, "Fair"), (3, "Moderate"), (4, "Poor"), (5, "Very Poor"),
            (42, "Good"), (75, "Moderate"), (120, "Unhealthy for Sensitive Groups"),
            (180, "Unhealthy"), (250, "Very Unhealthy"), (400, "Hazardous"), (None, "Not available"),
        ],
    )
    def test_aqi_description(self, aqi, label: str) -> None:
        assert aqi_description(aqi) == label

    def test_local_time_formatting(self) -> None:
        moment = datetime(2023, 11, 15, 12, 0, tzinfo=timezone.utc)
        assert format_date(moment) == "Wed, Nov 15"
        assert format_hour(moment) == "12:00 PM"
        assert format_hour(moment, offset=19800) == "5:30 PM"


class TestExtractContext:
    def test_common_fields(self, snapshot) -> None:
        ctx = extract_context(snapshot, Intent.CURRENT_CONDITIONS)
        assert ctx.location == "London, United Kingdom"
        assert ctx.current.temperature == 52.3
        assert ctx.current.conditions == "light rain"
        assert ctx.uv_index == 0.4
        assert ctx.details["UV Index"] == "0.4"

    def test_current_conditions_details(self, snapshot) -> None:
        ctx = extract_context(snapshot, Intent.CURRENT_CONDITIONS)
        assert ctx.details["Visibility"] == "6.2 mi"
        assert ctx.details["Pressure"] == "1012 hPa"
        assert ctx.details["Dew Point"] == "47°F"
        assert ctx.details["Cloud Cover"] == "75%"
        assert ctx.daily == ()
        assert ctx.alerts is None

    def test_forecast(self, snapshot) -> None:
        ctx = extract_context(snapshot, Intent.FORECAST)
        assert len(ctx.daily) == 2
        assert ctx.daily[0].date == "Wed, Nov 15"
        assert ctx.daily[0].precipitation == pytest.approx(86)
        assert len(ctx.hourly) == 3

    def test_clothing_takes_six_hours(self, make_snapshot) -> None:
        hour = make_one_call()["hourly"][0]
        hours = [dict(hour, dt=1700002800 + i * 3600) for i in range(20)]
        ctx = extract_context(make_snapshot(make_one_call(hourly=hours)), Intent.CLOTHING)
        assert len(ctx.hourly) == 6
        assert ctx.details["Rain Chance"] == "64%"
        assert ctx.details["Cloud Cover"] == "75%"

    def test_activity_takes_twelve_hours(self, make_snapshot) -> None:
        hour = make_one_call()["hourly"][0]
        hours = [dict(hour, dt=1700002800 + i * 3600) for i in range(20)]
        ctx = extract_context(make_snapshot(make_one_call(hourly=hours)), Intent.ACTIVITY)
        assert len(ctx.hourly) == 12

    def test_safety_without_alerts(self, snapshot) -> None:
        assert extract_context(snapshot, Intent.SAFETY).alerts == ()

    def test_alerts(self, make_snapshot) -> None:
        ctx = extract_context(make_snapshot(make_one_call(alerts=[SAMPLE_ALERT])), Intent.ALERTS)
        assert ctx.alerts[0].event == "Yellow wind warning"
        assert ctx.alerts[0].start == "Wed, Nov 15 9:00 AM"

    def test_travel(self, snapshot) -> None:
        ctx = extract_context(snapshot, Intent.TRAVEL)
        assert ctx.details["Wind"] == "12 mph"
        assert ctx.details["Visibility"] == "6.2 mi"
        assert ctx.alerts == ()

    def test_astronomy_uses_today(self, snapshot) -> None:
        ctx = extract_context(snapshot, Intent.ASTRONOMY)
        assert ctx.astronomy.sunrise == "7:00 AM"
        assert ctx.astronomy.sunset == "4:00 PM"
        assert ctx.astronomy.moon_phase == 0.06

    def test_astronomy_without_daily(self, make_snapshot) -> None:
        ctx = extract_context(make_snapshot(make_one_call(daily=[])), Intent.ASTRONOMY)
        assert ctx.astronomy.sunrise == "7:00 AM"
        assert ctx.astronomy.moon_phase is None

    def test_comparison(self, snapshot) -> None:
        ctx = extract_context(snapshot, Intent.COMPARISON)
        assert len(ctx.daily) == 2
        past = ctx.yesterday
        assert past.temperature == 48.1
        assert past.temp_difference == pytest.approx(4.2)
        assert past.was_warmer
        assert past.was_drier is False
        assert past.was_windier is True

    def test_explanation(self, snapshot) -> None:
        ctx = extract_context(snapshot, Intent.EXPLANATION)
        assert ctx.air_quality == "Fair"
        assert ctx.details["Air Quality"] == "Fair"

    def test_empty_arrays(self, make_snapshot) -> None:
        snap = make_snapshot(make_one_call(daily=[], hourly=[], alerts=[]), air_pollution=None, historical=None)
        for intent in Intent:
            ctx = extract_context(snap, intent)
            assert ctx.daily == ()
            assert ctx.hourly == ()


class TestFormatContext:
    def test_current_block(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.CURRENT_CONDITIONS), Intent.CURRENT_CONDITIONS)
        lines = text.splitlines()
        assert lines[:6] == [
            "CURRENT WEATHER:",
            "Temperature: 52°F",
            "Conditions: light rain",
            "Feels Like: 50°F",
            "Humidity: 81%",
            "Wind: 12 mph from SW",
        ]
        assert "Visibility: 6.2 mi" in lines
        assert "DAILY FORECAST:" not in text
        assert text.endswith("\n")

    def test_forecast_sections(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.FORECAST), Intent.FORECAST)
        assert "DAILY FORECAST:" in text
        assert (
            "Wed, Nov 15: High 56°F, Low 45°F, moderate rain, 86% chance of precipitation" in text
        )
        assert "HOURLY FORECAST (next 12 hours):" in text
        assert "11:00 PM: 52°F, light rain, 64% chance of precipitation" in text

    def test_hourly_limited_to_twelve(self, make_snapshot) -> None:
        hour = make_one_call()["hourly"][0]
        hours = [dict(hour, dt=1700002800 + i * 3600) for i in range(24)]
        text = format_context(
            extract_context(make_snapshot(make_one_call(hourly=hours)), Intent.FORECAST), Intent.FORECAST,
        )
        assert text.count("chance of precipitation") == 2 + 12

    def test_upcoming_hours_for_clothing(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.CLOTHING), Intent.CLOTHING)
        assert "UPCOMING HOURS:" in text
        assert "Rain Chance: 64%" in text

    def test_comparison_sections(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.COMPARISON), Intent.COMPARISON)
        assert "humidity 78%, wind 14 mph" in text
        assert "COMPARED TO YESTERDAY:" in text
        assert "Yesterday: 48°F, Clouds" in text
        assert "Today is 4°F warmer than yesterday" in text

    def test_no_alerts_message(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.SAFETY), Intent.SAFETY)
        assert "No weather alerts currently in effect." in text

    def test_alert_description_truncated(self, make_snapshot) -> None:
        alert = dict(SAMPLE_ALERT, description="x" * 250)
        snap = make_snapshot(make_one_call(alerts=[alert]))
        text = format_context(extract_context(snap, Intent.ALERTS), Intent.ALERTS)
        assert "WEATHER ALERTS:" in text
        assert f"Yellow wind warning: {'x' * 200}..." in text
        assert "Valid: Wed, Nov 15 9:00 AM to Wed, Nov 15 9:00 PM" in text

    def test_astronomy_section(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.ASTRONOMY), Intent.ASTRONOMY)
        assert "ASTRONOMY INFO:\nSunrise: 7:00 AM\nSunset: 4:00 PM\nMoon Phase: Waxing Crescent" in text

    def test_explanation_reference_data(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.EXPLANATION), Intent.EXPLANATION)
        assert "REFERENCE DATA FOR EXPLANATIONS:" in text
        assert "Current Air Quality: Fair" in text
        assert "Current UV Index: 0.4" in text
        assert AQI_SCALE in text and UV_SCALE in text

    def test_london_umbrella_forecast(self, snapshot) -> None:
        text = format_context(extract_context(snapshot, Intent.FORECAST), Intent.FORECAST)
        assert "DAILY FORECAST:" in text
