"""System and user prompt composition for each question intent."""

from __future__ import annotations

from weatheradvisor.context import WeatherContext, format_temp, format_uv, round_half_up
from weatheradvisor.intent import Intent
from weatheradvisor.models.conversation import ConversationTurn
from weatheradvisor.models.location import Location

UV_PROTECTION_TABLE = """\
- UV Index 0-2: No protection needed
- UV Index 3-5: Some protection recommended (hat, sunglasses)
- UV Index 6-7: Protection required (sunscreen SPF 30+, hat, sunglasses)
- UV Index 8-10: Extra protection needed (sunscreen SPF 50+, stay in shade during midday)
- UV Index 11+: Extreme protection required (minimize outdoor activities)"""

_SYSTEM_PROMPTS: dict[Intent, str] = {
    Intent.FORECAST: """\
You're providing weather forecast information.
Focus on the forecast data and highlight weather patterns over the requested time period.
Be concise yet thorough in explaining temperature trends, precipitation chances, and conditions.""",
    Intent.CURRENT_CONDITIONS: """\
You're providing current weather conditions information.
Focus on the current temperature, conditions, and how it feels outside right now.
Include relevant details like humidity, wind, and visibility if they're significant.""",
    Intent.COMPARISON: """\
You're comparing weather conditions.
Focus on effectively comparing the elements the user is asking about.
Highlight meaningful differences or similarities in the weather patterns.""",
    Intent.ACTIVITY: """\
You're providing recommendations about suitable outdoor activities based on the weather.
Consider the current conditions, forecast, and any potential weather hazards.
Suggest specific activities that would be enjoyable and safe in the current weather.""",
    Intent.SAFETY: """\
You're providing weather safety advice.
Focus on potential weather hazards and appropriate safety measures.
Be clear and direct about any precautions that should be taken.""",
    Intent.ASTRONOMY: """\
You're providing astronomy-related weather information.
Focus on conditions for skygazing, sunrise/sunset times, moon phases, or other celestial observations.
Consider cloud cover, visibility, and light pollution in your response.""",
    Intent.TRAVEL: """\
You're providing weather advice related to travel.
Focus on how weather might impact travel plans, road conditions, or transportation.
Offer practical advice for dealing with the weather while traveling.""",
    Intent.ALERTS: """\
You're providing information about weather alerts or warnings.
Focus on communicating any active weather alerts, their severity, and recommended precautions.
If no alerts are active, reassure the user about the current weather safety.""",
}

_CLOTHING_PROMPT = """\
You're currently focused on providing clothing recommendations based on the weather.
Consider these key factors:
- Temperature: {temperature} (feels like {feels_like})
- Conditions: {conditions}
- Humidity: {humidity}%
- Wind: {wind} mph
- UV Index: {uv_index}

For UV protection specifically:
{uv_table}

Provide practical clothing advice that keeps the person comfortable, protected, and appropriate for the weather conditions."""

_EXPLANATION_PROMPT = """\
You're providing a detailed explanation about weather concepts.
For UV Index explanation requests:
- Explain what the UV Index is (a measure of UV radiation strength)
- Describe the scale (0-11+) using this reference:
{uv_table}
- Describe health risks at different levels
- Connect the current UV Index value ({uv_index}) to what it means for the user
- Include time of day considerations (UV peaks at solar noon)
- Mention that UV can be present even on cloudy days

For AQI explanation requests:
- Explain what the Air Quality Index measures
- Describe the AQI scale and categories
- Explain health implications of different AQI levels
- Connect to current AQI level if available
- Suggest protective measures for poor air quality

For other weather concepts, provide clear, educational explanations that help the user understand the science behind the weather."""

_DEFAULT_PROMPT = """\
You are a helpful weather assistant providing information about the weather in {location}.
Based on the weather data provided, answer the user's question accurately and helpfully.
If you don't have certain information, acknowledge that limitation but provide what you do know."""

_MAX_TOKENS: dict[Intent, int] = {
    Intent.CURRENT_CONDITIONS: 300,
    Intent.FORECAST: 600,
    Intent.EXPLANATION: 800,
}
DEFAULT_MAX_TOKENS = 500


def max_tokens_for_intent(intent: Intent) -> int:
    return _MAX_TOKENS.get(intent, DEFAULT_MAX_TOKENS)


def _uv_label(context: WeatherContext) -> str:
    return format_uv(context.uv_index) if context.uv_index is not None else "Not available"


def system_prompt(intent: Intent, context: WeatherContext) -> str:
    """Return the instructional system prompt for ``intent``."""
    if intent is Intent.CLOTHING:
        current = context.current
        return _CLOTHING_PROMPT.format(
            temperature=format_temp(current.temperature),
            feels_like=format_temp(current.feels_like),
            conditions=current.conditions,
            humidity=round_half_up(current.humidity),
            wind=round_half_up(current.wind_speed),
            uv_index=_uv_label(context),
            uv_table=UV_PROTECTION_TABLE,
        )
    if intent is Intent.EXPLANATION:
        return _EXPLANATION_PROMPT.format(uv_index=_uv_label(context), uv_table=UV_PROTECTION_TABLE)
    template = _SYSTEM_PROMPTS.get(intent)
    if template is None:
        return _DEFAULT_PROMPT.format(location=context.location)
    return template


def format_history(history: list[ConversationTurn]) -> str:
    return "\n".join(
        f"{'Human' if turn.role == 'user' else 'Assistant'}: {turn.content}"
        for turn in history
    )


def user_prompt(
    location: Location,
    question: str,
    context_text: str,
    history: list[ConversationTurn] | None = None,
) -> str:
    """Return the user prompt: history, location, question and weather block."""
    parts = []
    if history:
        parts.append(format_history(history))
    parts.append(
        f'I need information about the weather in {location.label}. My question is: "{question}"'
    )
    parts.append(context_text)
    return "\n\n".join(parts)


def compose_prompts(
    intent: Intent,
    context: WeatherContext,
    context_text: str,
    location: Location,
    question: str,
    history: list[ConversationTurn] | None = None,
) -> tuple[str, str]:
    """Return ``(system_prompt, user_prompt)`` for one question."""
    return (
        system_prompt(intent, context),
        user_prompt(location, question, context_text, history),
    )
