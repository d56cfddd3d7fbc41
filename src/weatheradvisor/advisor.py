"""The question-answering pipeline: weather -> intent -> prompt -> LLM -> memory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from weatheradvisor.api_logging import log_service_call
from weatheradvisor.cache import WeatherCache
from weatheradvisor.config import Settings
from weatheradvisor.context import extract_context, format_context
from weatheradvisor.exceptions import LLMGatewayTimeoutError, LLMTimeoutError, ValidationError
from weatheradvisor.fallback import fallback_answer
from weatheradvisor.intent import Intent, classify_intent
from weatheradvisor.llm import InvokeOptions, LLMClient
from weatheradvisor.memory import InMemorySessionStore, SessionMemoryStore
from weatheradvisor.models.conversation import ConversationTurn
from weatheradvisor.models.location import Location
from weatheradvisor.prompts import compose_prompts, max_tokens_for_intent
from weatheradvisor.weather import OpenWeatherClient, WeatherService

logger = logging.getLogger(__name__)

TIMEOUT_ANSWER = "I apologize, but the request timed out. Please try again."
GATEWAY_TIMEOUT_ANSWER = "The server took too long to respond. Please try again."

AnswerSource = Literal["llm", "fallback", "timeout"]


@dataclass(frozen=True)
class AdvisorAnswer:
    answer: str
    intent: Intent
    source: AnswerSource


class WeatherAdvisor:
    """Answers weather questions for a location, remembering recent turns per session."""

    def __init__(
        self,
        weather: WeatherService,
        llm: LLMClient,
        memory: SessionMemoryStore | None = None,
    ) -> None:
        self.weather = weather
        self.llm = llm
        self.memory: SessionMemoryStore = memory if memory is not None else InMemorySessionStore()

    def close(self) -> None:
        self.weather.close()
        self.llm.close()

    @log_service_call
    def answer(self, question: str, location: Location, session_id: str | None = None) -> AdvisorAnswer:
        """Answer ``question`` about ``location``.

        Raises:
            ValidationError: the question is blank.
            WeatherUnavailableError: no weather data could be obtained.
        """
        question = (question or "").strip()
        if not question:
            raise ValidationError("question")

        snapshot = self.weather.get_snapshot(location)
        intent = classify_intent(question)
        logger.info("Identified intent %s for %r", intent.value, question[:100])

        context = extract_context(snapshot, intent)
        context_text = format_context(context, intent)
        history = self.memory.get_history(session_id) if session_id else []
        system, user = compose_prompts(intent, context, context_text, location, question, history)

        result = self.llm.invoke(system, user, InvokeOptions(max_tokens=max_tokens_for_intent(intent)))
        source: AnswerSource
        if result.ok:
            text, source = result.text or "", "llm"
        elif isinstance(result.error, LLMGatewayTimeoutError):
            text, source = GATEWAY_TIMEOUT_ANSWER, "timeout"
        elif isinstance(result.error, LLMTimeoutError):
            text, source = TIMEOUT_ANSWER, "timeout"
        else:
            logger.warning("LLM unavailable (%s); using fallback answer", result.error)
            text, source = fallback_answer(intent, context), "fallback"

        if session_id:
            self.memory.save_exchange(session_id, question, text)
        return AdvisorAnswer(answer=text, intent=intent, source=source)

    def get_chat_history(self, session_id: str) -> list[ConversationTurn]:
        return self.memory.get_history(session_id)

    def clear_memory(self, session_id: str) -> None:
        if not session_id:
            raise ValidationError("sessionId", "Session ID is required")
        self.memory.clear(session_id)


def build_advisor(settings: Settings, memory: SessionMemoryStore | None = None) -> WeatherAdvisor:
    """Wire the default provider clients and in-memory stores from settings."""
    weather = WeatherService(
        OpenWeatherClient(settings.openweather_api_key, timeout=settings.http_timeout_seconds),
        cache=WeatherCache(ttl=settings.weather_cache_ttl_seconds),
        historical_cache=WeatherCache(ttl=settings.historical_cache_ttl_seconds),
    )
    llm = LLMClient(
        api_key=settings.openrouter_api_key,
        app_url=settings.app_url,
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        timeout=settings.llm_timeout_seconds,
        max_retries=settings.llm_max_retries,
    )
    return WeatherAdvisor(weather, llm, memory)
