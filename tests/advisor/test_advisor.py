"""Tests for the question-answering pipeline."""

from __future__ import annotations

import pytest

from tests.conftest import FakeLLM, FakeWeather
from weatheradvisor.advisor import GATEWAY_TIMEOUT_ANSWER, TIMEOUT_ANSWER, WeatherAdvisor, build_advisor
from weatheradvisor.config import Settings
from weatheradvisor.exceptions import (
    LLMGatewayTimeoutError,
    LLMMalformedResponseError,
    LLMRequestError,
    LLMTimeoutError,
    ValidationError,
    WeatherUnavailableError,
)
from weatheradvisor.intent import Intent
from weatheradvisor.llm import LLMResult
from weatheradvisor.memory import InMemorySessionStore


@pytest.fixture
def memory() -> InMemorySessionStore:
    return InMemorySessionStore()


def _advisor(snapshot, result: LLMResult, memory) -> tuple[WeatherAdvisor, FakeLLM]:
    llm = FakeLLM(result)
    return WeatherAdvisor(FakeWeather(snapshot), llm, memory), llm


class TestWeatherAdvisor:
    def test_llm_answer(self, snapshot, london, memory) -> None:
        advisor, llm = _advisor(snapshot, LLMResult(text="Bring an umbrella.", attempts=1), memory)
        result = advisor.answer("Will I need an umbrella tomorrow?", london, "s1")
        assert result.answer == "Bring an umbrella."
        assert result.intent is Intent.FORECAST
        assert result.source == "llm"
        system, user, options = llm.calls[0]
        assert "forecast" in system
        assert "DAILY FORECAST:" in user
        assert options.max_tokens == 600

    def test_saves_exchange(self, snapshot, london, memory) -> None:
        advisor, _ = _advisor(snapshot, LLMResult(text="52°F and raining."), memory)
        advisor.answer("  How cold is it?  ", london, "s1")
        history = advisor.get_chat_history("s1")
        assert [(t.role, t.content) for t in history] == [
            ("user", "How cold is it?"),
            ("assistant", "52°F and raining."),
        ]

    def test_history_goes_into_prompt(self, snapshot, london, memory) -> None:
        memory.save_exchange("s1", "Is it cold?", "It's 52°F.")
        advisor, llm = _advisor(snapshot, LLMResult(text="ok"), memory)
        advisor.answer("And the wind?", london, "s1")
        assert llm.calls[0][1].startswith("Human: Is it cold?\nAssistant: It's 52°F.")

    def test_without_session(self, snapshot, london, memory) -> None:
        advisor, llm = _advisor(snapshot, LLMResult(text="ok"), memory)
        advisor.answer("Is it windy?", london)
        assert llm.calls[0][1].startswith("I need information about the weather in London")
        assert memory._sessions == {}

    def test_london_umbrella_fallback(self, snapshot, london, memory) -> None:
        advisor, _ = _advisor(snapshot, LLMResult(error=LLMRequestError("HTTP 500", 500)), memory)
        result = advisor.answer("Will I need an umbrella tomorrow?", london, "s1")
        assert result.source == "fallback"
        assert "52°F" in result.answer
        assert "High 56°F, Low 45°F" in result.answer
        assert memory.get_history("s1")[-1].content == result.answer

    def test_malformed_response_falls_back(self, snapshot, london, memory) -> None:
        advisor, _ = _advisor(snapshot, LLMResult(error=LLMMalformedResponseError("empty")), memory)
        assert advisor.answer("Is it hot?", london).source == "fallback"

    def test_timeout_message(self, snapshot, london, memory) -> None:
        advisor, _ = _advisor(snapshot, LLMResult(error=LLMTimeoutError("slow")), memory)
        result = advisor.answer("Is it hot?", london, "s1")
        assert result.answer == TIMEOUT_ANSWER
        assert result.source == "timeout"
        assert memory.get_history("s1")[-1].content == TIMEOUT_ANSWER

    def test_gateway_timeout_message(self, snapshot, london, memory) -> None:
        advisor, _ = _advisor(snapshot, LLMResult(error=LLMGatewayTimeoutError("504")), memory)
        result = advisor.answer("Is it hot?", london, "s1")
        assert result.answer == GATEWAY_TIMEOUT_ANSWER
        assert result.answer != TIMEOUT_ANSWER
        assert result.source == "timeout"

    def test_blank_question(self, snapshot, london, memory) -> None:
        advisor, llm = _advisor(snapshot, LLMResult(text="ok"), memory)
        with pytest.raises(ValidationError) as exc_info:
            advisor.answer("   ", london)
        assert exc_info.value.field == "question"
        assert llm.calls == []

    def test_weather_failure_propagates(self, london, memory) -> None:
        llm = FakeLLM(LLMResult(text="ok"))
        weather = FakeWeather(error=WeatherUnavailableError(500, "boom"))
        advisor = WeatherAdvisor(weather, llm, memory)
        with pytest.raises(WeatherUnavailableError):
            advisor.answer("Is it hot?", london, "s1")
        assert llm.calls == []
        assert memory.get_history("s1") == []

    def test_clear_memory(self, snapshot, london, memory) -> None:
        advisor, _ = _advisor(snapshot, LLMResult(text="ok"), memory)
        advisor.answer("Is it hot?", london, "session-abc")
        advisor.clear_memory("session-abc")
        assert advisor.get_chat_history("session-abc") == []

    def test_clear_memory_requires_session(self, memory) -> None:
        advisor = WeatherAdvisor(FakeWeather(), FakeLLM(LLMResult(text="ok")), memory)
        with pytest.raises(ValidationError) as exc_info:
            advisor.clear_memory("")
        assert exc_info.value.message == "Session ID is required"

    def test_logs_service_call(self, snapshot, london, memory, _api_log_in_tmp) -> None:
        advisor, _ = _advisor(snapshot, LLMResult(text="ok"), memory)
        advisor.answer("Is it hot?", london)
        content = (_api_log_in_tmp / "api_calls.log").read_text()
        assert "SERVICE CALL: WeatherAdvisor.answer(" in content
        assert "SERVICE OK: WeatherAdvisor.answer" in content
        assert "source=llm" in content


class TestBuildAdvisor:
    def test_wires_settings(self) -> None:
        settings = Settings(
            openrouter_api_key="k", llm_model="test/model", llm_max_retries=5,
            weather_cache_ttl_seconds=60,
        )
        advisor = build_advisor(settings)
        try:
            assert advisor.llm.model == "test/model"
            assert advisor.llm.max_retries == 5
            assert advisor.weather.cache.ttl == 60
            assert isinstance(advisor.memory, InMemorySessionStore)
        finally:
            advisor.close()
