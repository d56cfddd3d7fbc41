"""Templated answers used when the language model is unavailable."""

from __future__ import annotations

from weatheradvisor.context import WeatherContext, format_percent, format_temp, round_half_up
from weatheradvisor.intent import Intent

HIGH_UV_THRESHOLD = 5


def clothing_suggestion(temperature: float) -> str:
    if temperature > 85:
        return "light, breathable clothing like shorts and t-shirts"
    if temperature > 70:
        return "comfortable clothing like light pants or shorts and a t-shirt"
    if temperature > 55:
        return "layers such as a light jacket or sweater"
    if temperature > 40:
        return "a warm jacket, gloves, and a hat"
    return "a heavy winter coat, layers, gloves, and a warm hat"


def fallback_answer(intent: Intent, context: WeatherContext) -> str:
    """Return a short non-LLM answer; never empty."""
    current = context.current
    temp = format_temp(current.temperature)
    conditions = current.conditions or "unknown conditions"
    location = context.location or "your area"

    if intent is Intent.CURRENT_CONDITIONS:
        return (
            f"Currently in {location}, it's {temp} with {conditions}. "
            f"It feels like {format_temp(current.feels_like)} with "
            f"{format_percent(current.humidity)} humidity and wind at "
            f"{round_half_up(current.wind_speed)} mph."
        )

    if intent is Intent.FORECAST:
        answer = f"The current temperature in {location} is {temp} with {conditions}."
        if context.daily:
            day = context.daily[0]
            answer += (
                f" The forecast shows: {day.date}: High {format_temp(day.temp_high)}, "
                f"Low {format_temp(day.temp_low)}, {day.conditions}."
            )
        return answer

    if intent is Intent.CLOTHING:
        clothing = clothing_suggestion(current.temperature)
        if "rain" in conditions.lower():
            clothing += " and bring an umbrella or raincoat"
        if context.uv_index is not None and context.uv_index > HIGH_UV_THRESHOLD:
            clothing += ". Don't forget sunscreen and sunglasses as the UV index is high"
        return f"Based on the current weather in {location} ({temp}, {conditions}), I recommend wearing {clothing}."

    return (
        f"Currently in {location}, it's {temp} with {conditions}. "
        "I'm sorry, but I couldn't provide more specific information about your question."
    )
