"""Keyword-based classification of weather questions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Intent(str, Enum):
    """What a weather question is asking about."""

    FORECAST = "forecast"
    CURRENT_CONDITIONS = "current_conditions"
    CLOTHING = "clothing"
    ACTIVITY = "activity"
    SAFETY = "safety"
    ASTRONOMY = "astronomy"
    TRAVEL = "travel"
    COMPARISON = "comparison"
    ALERTS = "alerts"
    EXPLANATION = "explanation"


DEFAULT_INTENT = Intent.CURRENT_CONDITIONS


@dataclass(frozen=True)
class IntentRule:
    """Match when any keyword occurs and no excluded phrase does."""

    intent: Intent
    keywords: tuple[str, ...]
    unless: tuple[str, ...] = ()

    def matches(self, text: str) -> bool:
        if any(phrase in text for phrase in self.unless):
            return False
        return any(keyword in text for keyword in self.keywords)


# Evaluated in order; the first matching rule wins.
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(Intent.EXPLANATION, ("uv index", "ultraviolet")),
    IntentRule(Intent.EXPLANATION, ("sunscreen",), unless=("need sunscreen",)),
    IntentRule(Intent.EXPLANATION, ("air quality", "aqi", "pollution")),
    IntentRule(
        Intent.FORECAST,
        ("forecast", "tomorrow", "next week", "this week", "upcoming", "future", "later", "tonight"),
    ),
    IntentRule(
        Intent.CURRENT_CONDITIONS,
        (
            "current", "now", "temperature", "hot", "cold", "warm", "cool",
            "humidity", "pressure", "wind", "feels like", "real feel",
        ),
    ),
    IntentRule(
        Intent.CLOTHING,
        (
            "wear", "dress", "clothes", "jacket", "coat", "layers",
            "sunscreen", "hat", "umbrella", "rain gear",
        ),
    ),
    IntentRule(
        Intent.ACTIVITY,
        (
            "activity", "exercise", "outdoor", "picnic", "hike", "run",
            "walk", "bike", "swimming", "beach",
        ),
    ),
    IntentRule(
        Intent.SAFETY,
        (
            "safe", "danger", "warning", "alert", "storm", "tornado",
            "hurricane", "flood", "lightning", "thunder",
        ),
    ),
    IntentRule(Intent.ASTRONOMY, ("sunrise", "sunset", "moon", "star", "night sky", "astronomy")),
    IntentRule(Intent.TRAVEL, ("travel", "trip", "drive", "fly", "flight", "road", "traffic")),
    IntentRule(Intent.COMPARISON, ("compare", "difference", "vs", "versus", "than", "compared to")),
    IntentRule(Intent.ALERTS, ("alert", "warning", "watch", "advisory")),
)


def classify_intent(question: str) -> Intent:
    """Return the intent of ``question``, defaulting to current conditions."""
    text = (question or "").lower()
    for rule in INTENT_RULES:
        if rule.matches(text):
            return rule.intent
    return DEFAULT_INTENT
