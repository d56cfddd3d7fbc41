"""Weather advisor data models."""

from weatheradvisor.models.conversation import ConversationTurn
from weatheradvisor.models.location import Location, LocationCandidate
from weatheradvisor.models.weather import (
    CurrentConditions,
    DailyForecast,
    HourlyForecast,
    WeatherAlert,
    WeatherSnapshot,
    YesterdayConditions,
)

__all__ = [
    "ConversationTurn",
    "CurrentConditions",
    "DailyForecast",
    "HourlyForecast",
    "Location",
    "LocationCandidate",
    "WeatherAlert",
    "WeatherSnapshot",
    "YesterdayConditions",
]
