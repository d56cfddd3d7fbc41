"""Weather advisor: answer weather questions with live provider data and an LLM."""

from weatheradvisor.advisor import AdvisorAnswer, WeatherAdvisor, build_advisor
from weatheradvisor.cache import WeatherCache
from weatheradvisor.config import Settings, load_settings
from weatheradvisor.exceptions import (
    ConfigurationError,
    LLMError,
    LLMGatewayTimeoutError,
    LLMMalformedResponseError,
    LLMRequestError,
    LLMTimeoutError,
    ProviderConnectionError,
    ProviderTimeoutError,
    UpstreamServiceError,
    ValidationError,
    WeatherAdvisorError,
    WeatherUnavailableError,
)
from weatheradvisor.geocoding import LocationResolver
from weatheradvisor.intent import Intent, classify_intent
from weatheradvisor.llm import InvokeOptions, LLMClient, LLMResult
from weatheradvisor.memory import InMemorySessionStore, SessionMemoryStore
from weatheradvisor.weather import OpenWeatherClient, WeatherService

__version__ = "0.1.0"

__all__ = [
    "AdvisorAnswer",
    "ConfigurationError",
    "InMemorySessionStore",
    "Intent",
    "InvokeOptions",
    "LLMClient",
    "LLMError",
    "LLMGatewayTimeoutError",
    "LLMMalformedResponseError",
    "LLMRequestError",
    "LLMResult",
    "LLMTimeoutError",
    "LocationResolver",
    "OpenWeatherClient",
    "ProviderConnectionError",
    "ProviderTimeoutError",
    "SessionMemoryStore",
    "Settings",
    "UpstreamServiceError",
    "ValidationError",
    "WeatherAdvisor",
    "WeatherAdvisorError",
    "WeatherCache",
    "WeatherService",
    "WeatherUnavailableError",
    "build_advisor",
    "classify_intent",
    "load_settings",
]
